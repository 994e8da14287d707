"""Trend tracking for daily health metrics.

This module implements Hacker's Diet-style exponentially smoothed moving
average (EWMA) trend lines over gap-filled daily series, plus the implied
energy imbalance and a short linear projection.

Key components:
- Gap filling (linear interpolation, carry-forward)
- Weight trend engine (10% smoothing, 7700 kcal/kg, 14-day projection)
- Scalar metric trends for body fat, VO2max and active energy
- Combined health report
"""

from __future__ import annotations

from diettrend.tracking.gaps import day_range, fill_gaps
from diettrend.tracking.metrics import compute_metric_trend
from diettrend.tracking.models import DailyTrendPoint, MetricTrend, TrendSummary
from diettrend.tracking.trend import TrendEngine, compute_trend, get_stats

__all__ = [
    "DailyTrendPoint",
    "MetricTrend",
    "TrendEngine",
    "TrendSummary",
    "compute_metric_trend",
    "compute_trend",
    "day_range",
    "fill_gaps",
    "get_stats",
]
