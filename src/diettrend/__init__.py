"""diettrend: trend smoothing, energy budgets and nutrition-label parsing for diet tracking."""

__version__ = "0.1.0"
