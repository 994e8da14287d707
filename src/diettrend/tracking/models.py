"""Data models for trend tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class DailyTrendPoint:
    """A single day on the smoothed trend line."""

    date: date
    raw_value: Optional[float]  # None if interpolated, carried forward or projected
    trend_value: float
    imbalance: Optional[float]  # kcal/day implied by the 7-day trend delta
    is_projected: bool = False

    @property
    def is_interpolated(self) -> bool:
        """True for filled-in days that had no genuine measurement."""
        return self.raw_value is None and not self.is_projected

    def to_dict(self) -> dict:
        """Convert to a plain dict for JSON output."""
        return {
            "date": self.date.isoformat(),
            "raw_value": self.raw_value,
            "trend_value": self.trend_value,
            "imbalance": self.imbalance,
            "is_projected": self.is_projected,
            "is_interpolated": self.is_interpolated,
        }


@dataclass(frozen=True)
class TrendSummary:
    """Summary statistics taken from the last non-projected trend point."""

    current_trend: float
    weekly_change: float  # delta over 7 days (negative = losing)
    daily_imbalance: float  # kcal/day surplus (+) or deficit (-)


@dataclass(frozen=True)
class MetricTrend:
    """Current EWMA value and 7-day change for a single metric."""

    current: Optional[float] = None
    delta_7_day: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.current is not None
