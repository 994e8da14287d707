"""Daily energy budget and intake guidance."""

from __future__ import annotations

from diettrend.planning.budget import BudgetResult, calculate_budget, update_deficit_mode

__all__ = ["BudgetResult", "calculate_budget", "update_deficit_mode"]
