"""Daily energy budget calculation.

Pure functions only: the caller supplies BMR, yesterday's active energy,
today's intake and the deficit settings, and gets a fresh BudgetResult
back on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BudgetResult:
    """Energy budget for the current day (all values in kcal)."""

    total_energy_expenditure: float
    daily_goal: float
    remaining_energy: float  # negative = over budget
    effective_deficit: float
    is_deficit_active: bool

    def to_dict(self) -> dict:
        """Convert to a plain dict for JSON output."""
        return {
            "total_energy_expenditure": self.total_energy_expenditure,
            "daily_goal": self.daily_goal,
            "remaining_energy": self.remaining_energy,
            "effective_deficit": self.effective_deficit,
            "is_deficit_active": self.is_deficit_active,
        }


def calculate_budget(
    bmr: Optional[float],
    active_energy_yesterday: float,
    dietary_energy_today: float,
    base_deficit: float,
    auto_deficit_enabled: bool,
    is_currently_in_deficit_mode: bool,
) -> BudgetResult:
    """
    Calculate today's energy budget.

    TDEE is BMR plus yesterday's active energy (today's total is still
    incomplete). With auto-deficit enabled, the deficit only applies while
    in deficit mode; otherwise it always applies.

    Args:
        bmr: Basal Metabolic Rate, None if unknown (treated as 0)
        active_energy_yesterday: Active energy burned yesterday
        dietary_energy_today: Energy consumed so far today
        base_deficit: Configured daily deficit
        auto_deficit_enabled: Whether the deficit follows the weight bounds
        is_currently_in_deficit_mode: Current auto-deficit mode

    Returns:
        BudgetResult. daily_goal is never negative; remaining_energy may be.

    Example:
        >>> r = calculate_budget(2000, 300, 500, 500, False, False)
        >>> r.daily_goal, r.remaining_energy
        (1800, 1300)
    """
    tdee = (bmr or 0) + active_energy_yesterday

    if auto_deficit_enabled:
        effective_deficit = base_deficit if is_currently_in_deficit_mode else 0
        is_deficit_active = is_currently_in_deficit_mode
    else:
        effective_deficit = base_deficit
        is_deficit_active = True

    daily_goal = max(tdee - effective_deficit, 0)
    remaining = daily_goal - dietary_energy_today

    return BudgetResult(
        total_energy_expenditure=tdee,
        daily_goal=daily_goal,
        remaining_energy=remaining,
        effective_deficit=effective_deficit,
        is_deficit_active=is_deficit_active,
    )


def update_deficit_mode(
    weight_today: Optional[float],
    upper_bound: Optional[float],
    lower_bound: Optional[float],
    current_mode: bool,
) -> bool:
    """
    Apply the auto-deficit hysteresis band to today's weight.

    Reaching the upper bound switches the deficit on; reaching the lower
    bound switches it off. In between the current mode is kept.

    Args:
        weight_today: Today's weight, None if not weighed in yet
        upper_bound: Weight at or above which the deficit starts
        lower_bound: Weight at or below which the deficit stops
        current_mode: Current deficit mode

    Returns:
        The new deficit mode. Unchanged if the weight is unknown or the
        bounds are not a valid band (upper > lower > 0).
    """
    if weight_today is None or upper_bound is None or lower_bound is None:
        return current_mode
    if not (upper_bound > lower_bound > 0):
        return current_mode

    if weight_today >= upper_bound:
        new_mode = True
    elif weight_today <= lower_bound:
        new_mode = False
    else:
        new_mode = current_mode

    if new_mode != current_mode:
        logger.info(
            "Deficit mode %s at %.1f kg (band %.1f-%.1f)",
            "enabled" if new_mode else "disabled",
            weight_today,
            lower_bound,
            upper_bound,
        )
    return new_mode


def filler_portion_grams(
    remaining_kcal: float,
    kcal_per_100g: float,
) -> Optional[float]:
    """Grams of a food that would use up the remaining budget.

    Returns None for foods without a positive energy density.
    """
    if kcal_per_100g <= 0:
        return None
    return remaining_kcal / (kcal_per_100g / 100.0)
