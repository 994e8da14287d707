"""Health compass: how today's intake compares to macro guidelines.

Shares of energy are computed against total intake with a floor of 1 kcal,
so an empty day yields zeros instead of a division error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Atwater factors (kcal per gram)
KCAL_PER_G_FAT = 9
KCAL_PER_G_CARB = 4

# Guidelines
PROTEIN_G_PER_KG = 0.8
DEFAULT_WEIGHT_KG = 70.0
FIBER_TARGET_G = 30.0
FAT_SHARE_RANGE = (30.0, 40.0)  # % of energy
SUGAR_SHARE_LIMIT = 10.0  # % of energy
SAT_FAT_SHARE_LIMIT = 10.0  # % of energy
SALT_LIMIT_G = 6.0
SALT_PER_G_SODIUM = 2.5


class LimitStatus(Enum):
    """Where a value sits relative to its guideline."""
    LOW = "low"
    OK = "ok"
    HIGH = "high"


@dataclass
class MacroSnapshot:
    """Macro totals for a day or a portion. Sodium is in grams."""

    kcal: float = 0.0
    protein: float = 0.0
    fiber: float = 0.0
    fat: float = 0.0
    sat_fat: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0

    def __add__(self, other: MacroSnapshot) -> MacroSnapshot:
        return MacroSnapshot(
            kcal=self.kcal + other.kcal,
            protein=self.protein + other.protein,
            fiber=self.fiber + other.fiber,
            fat=self.fat + other.fat,
            sat_fat=self.sat_fat + other.sat_fat,
            sugar=self.sugar + other.sugar,
            sodium=self.sodium + other.sodium,
        )

    def scaled(self, grams: float) -> MacroSnapshot:
        """Scale per-100g values to a portion of the given weight."""
        ratio = grams / 100.0
        return MacroSnapshot(
            kcal=self.kcal * ratio,
            protein=self.protein * ratio,
            fiber=self.fiber * ratio,
            fat=self.fat * ratio,
            sat_fat=self.sat_fat * ratio,
            sugar=self.sugar * ratio,
            sodium=self.sodium * ratio,
        )


@dataclass
class CompassReading:
    """A single compass gauge."""

    label: str
    value: float
    target: float
    unit: str
    status: LimitStatus

    @property
    def progress(self) -> float:
        """Fraction of target reached, capped at 1."""
        return min(self.value / max(self.target, 1), 1.0)


@dataclass
class HealthCompass:
    """All compass gauges for a day's intake."""

    protein: CompassReading
    fiber: CompassReading
    fat_share: CompassReading
    sugar_share: CompassReading
    sat_fat_share: CompassReading
    salt: CompassReading

    def readings(self) -> list[CompassReading]:
        return [
            self.protein,
            self.fiber,
            self.fat_share,
            self.sugar_share,
            self.sat_fat_share,
            self.salt,
        ]


def _share_of_energy(grams: float, kcal_per_gram: float, total_kcal: float) -> float:
    return (grams * kcal_per_gram) / max(total_kcal, 1) * 100


def _upper_limit_status(value: float, limit: float) -> LimitStatus:
    return LimitStatus.HIGH if value > limit else LimitStatus.OK


def _target_status(value: float, target: float) -> LimitStatus:
    return LimitStatus.OK if value >= target else LimitStatus.LOW


def calculate_compass(
    intake: MacroSnapshot,
    weight_kg: Optional[float] = None,
    preview: Optional[MacroSnapshot] = None,
) -> HealthCompass:
    """
    Evaluate a day's intake against protein, fiber, fat, sugar and salt guidelines.

    Args:
        intake: Totals logged so far today
        weight_kg: Current weight for the protein target (70 kg if unknown)
        preview: Optional portion being considered, added to the intake

    Returns:
        HealthCompass with one reading per gauge
    """
    total = intake + preview if preview is not None else intake
    weight = weight_kg if weight_kg is not None else DEFAULT_WEIGHT_KG

    protein_target = weight * PROTEIN_G_PER_KG
    fat_pct = _share_of_energy(total.fat, KCAL_PER_G_FAT, total.kcal)
    sugar_pct = _share_of_energy(total.sugar, KCAL_PER_G_CARB, total.kcal)
    sat_fat_pct = _share_of_energy(total.sat_fat, KCAL_PER_G_FAT, total.kcal)
    salt_g = total.sodium * SALT_PER_G_SODIUM

    fat_low, fat_high = FAT_SHARE_RANGE
    if fat_pct > fat_high:
        fat_status = LimitStatus.HIGH
    elif fat_pct < fat_low:
        fat_status = LimitStatus.LOW
    else:
        fat_status = LimitStatus.OK

    return HealthCompass(
        protein=CompassReading(
            "Protein", total.protein, protein_target, "g",
            _target_status(total.protein, protein_target),
        ),
        fiber=CompassReading(
            "Fiber", total.fiber, FIBER_TARGET_G, "g",
            _target_status(total.fiber, FIBER_TARGET_G),
        ),
        fat_share=CompassReading("Fats", fat_pct, fat_high, "%", fat_status),
        sugar_share=CompassReading(
            "Sugar", sugar_pct, SUGAR_SHARE_LIMIT, "%",
            _upper_limit_status(sugar_pct, SUGAR_SHARE_LIMIT),
        ),
        sat_fat_share=CompassReading(
            "Sat. Fat", sat_fat_pct, SAT_FAT_SHARE_LIMIT, "%",
            _upper_limit_status(sat_fat_pct, SAT_FAT_SHARE_LIMIT),
        ),
        salt=CompassReading(
            "Salt", salt_g, SALT_LIMIT_G, "g",
            _upper_limit_status(salt_g, SALT_LIMIT_G),
        ),
    )
