"""Scalar EWMA trend and 7-day change for arbitrary daily metrics.

Used for body fat, VO2max and active energy, where only the current
smoothed value and its weekly change matter, not a full point series.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Mapping

from diettrend.tracking.ema import (
    DEFAULT_SMOOTHING,
    DELTA_WINDOW_DAYS,
    calculate_trend_from_scratch,
)
from diettrend.tracking.gaps import day_range, fill_gaps
from diettrend.tracking.models import MetricTrend

logger = logging.getLogger(__name__)


def compute_metric_trend(
    history: Mapping[date, float],
    ignore_most_recent_day: bool = False,
    smoothing: float = DEFAULT_SMOOTHING,
) -> MetricTrend:
    """
    Compute the current EWMA value and its 7-day change.

    Args:
        history: Mapping of day -> value
        ignore_most_recent_day: Drop the latest day before smoothing. Use for
            cumulative metrics such as active energy, where today's partial
            total would drag the trend down.
        smoothing: EWMA smoothing factor

    Returns:
        MetricTrend; both fields are None for empty history. delta_7_day is
        None unless the filled series has more than 7 entries.
    """
    if not history:
        return MetricTrend()

    sorted_days = sorted(history)
    if ignore_most_recent_day:
        sorted_days = sorted_days[:-1]
    if not sorted_days:
        return MetricTrend()

    considered = {day: history[day] for day in sorted_days}
    days = day_range(sorted_days[0], sorted_days[-1])
    filled = fill_gaps(considered, days)
    series = calculate_trend_from_scratch(
        [filled[day] for day in days if day in filled],
        smoothing,
    )

    current = series[-1]
    delta = None
    if len(series) > DELTA_WINDOW_DAYS:
        delta = current - series[-(DELTA_WINDOW_DAYS + 1)]

    logger.debug("Metric trend over %d days: current=%.3f delta=%s", len(series), current, delta)
    return MetricTrend(current=current, delta_7_day=delta)
