"""Weight trend engine: EWMA trend line, implied energy imbalance and projection.

The engine turns a sparse day→weight mapping into a continuous daily
series running from the first measurement up to today, followed by a
short linear projection:

1. Missing days are filled (linear interpolation between measurements,
   carry-forward after the last one).
2. The filled series is smoothed with a 10% EWMA.
3. Once 7 days of trend exist, the 7-day trend delta is translated into an
   implied daily energy imbalance (7700 kcal per kg).
4. The last imbalance is held constant for 14 projected days.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping, Optional

from diettrend.tracking.ema import (
    DEFAULT_SMOOTHING,
    DELTA_WINDOW_DAYS,
    KCAL_PER_KG,
    imbalance_to_weekly_delta,
    update_trend,
    weekly_delta_to_imbalance,
)
from diettrend.tracking.gaps import day_range, fill_gaps
from diettrend.tracking.models import DailyTrendPoint, TrendSummary

logger = logging.getLogger(__name__)

DEFAULT_PROJECTION_DAYS = 14

# Minimum number of non-projected points before stats are reported
MIN_STATS_POINTS = 7


def compute_trend(
    history: Mapping[date, float],
    today: Optional[date] = None,
    smoothing: float = DEFAULT_SMOOTHING,
    kcal_per_kg: float = KCAL_PER_KG,
    projection_days: int = DEFAULT_PROJECTION_DAYS,
) -> list[DailyTrendPoint]:
    """
    Process raw daily measurements into a continuous trend line.

    Args:
        history: Mapping of day -> value (one value per day, kg for weight)
        today: Reference day; the real series is extended up to it.
               Defaults to date.today()
        smoothing: EWMA smoothing factor
        kcal_per_kg: Energy per kg used for the imbalance conversion
        projection_days: Number of projected days appended at the end

    Returns:
        Points sorted by date, real points first, then projected points.
        Empty list for empty history.
    """
    if not history:
        return []

    if today is None:
        today = date.today()

    sorted_days = sorted(history)
    end_day = max(sorted_days[-1], today)
    all_days = day_range(sorted_days[0], end_day)
    filled = fill_gaps(history, all_days)

    points: list[DailyTrendPoint] = []
    previous_trend: Optional[float] = None

    for day in all_days:
        daily_value = filled.get(day)
        if daily_value is None:
            continue

        if previous_trend is None:
            trend = daily_value
        else:
            trend = update_trend(previous_trend, daily_value, smoothing)

        imbalance: Optional[float] = None
        if len(points) >= DELTA_WINDOW_DAYS:
            weekly_delta = trend - points[-DELTA_WINDOW_DAYS].trend_value
            imbalance = weekly_delta_to_imbalance(weekly_delta, kcal_per_kg)

        points.append(
            DailyTrendPoint(
                date=day,
                raw_value=history.get(day),
                trend_value=trend,
                imbalance=imbalance,
                is_projected=False,
            )
        )
        previous_trend = trend

    points.extend(_project(points[-1], projection_days, kcal_per_kg))

    logger.debug(
        "Computed trend: %d real points (%s to %s), %d projected",
        len(points) - projection_days,
        sorted_days[0],
        end_day,
        projection_days,
    )
    return points


def _project(
    last: DailyTrendPoint,
    projection_days: int,
    kcal_per_kg: float,
) -> list[DailyTrendPoint]:
    # Imbalance = (delta_weekly * C) / 7  ->  daily delta = imbalance / C
    daily_rate = last.imbalance / kcal_per_kg if last.imbalance is not None else 0.0

    projected: list[DailyTrendPoint] = []
    projection_date = last.date
    projection_trend = last.trend_value
    for _ in range(projection_days):
        projection_date = projection_date + timedelta(days=1)
        projection_trend += daily_rate
        projected.append(
            DailyTrendPoint(
                date=projection_date,
                raw_value=None,
                trend_value=projection_trend,
                imbalance=last.imbalance,  # constant-rate assumption
                is_projected=True,
            )
        )
    return projected


def get_stats(
    points: list[DailyTrendPoint],
    kcal_per_kg: float = KCAL_PER_KG,
    min_points: int = MIN_STATS_POINTS,
) -> Optional[TrendSummary]:
    """
    Summarize the trend at the last non-projected point.

    Args:
        points: Output of compute_trend
        kcal_per_kg: Energy per kg used to convert imbalance back to a delta
        min_points: Minimum number of non-projected points required

    Returns:
        TrendSummary, or None if fewer than min_points real points exist
    """
    real_points = [p for p in points if not p.is_projected]
    if not real_points or len(real_points) < min_points:
        return None

    last_real = real_points[-1]
    imbalance = last_real.imbalance if last_real.imbalance is not None else 0.0

    return TrendSummary(
        current_trend=last_real.trend_value,
        weekly_change=imbalance_to_weekly_delta(imbalance, kcal_per_kg),
        daily_imbalance=imbalance,
    )


@dataclass(frozen=True)
class SeriesWindow:
    """Points of a trend series that fall inside a visible date window."""

    real: list[DailyTrendPoint]
    projected: list[DailyTrendPoint]
    raw: list[DailyTrendPoint]


def split_series(
    points: list[DailyTrendPoint],
    start: date,
    end: date,
) -> SeriesWindow:
    """Select real, projected and raw-measurement points between start and end."""
    visible = [p for p in points if start <= p.date <= end]
    return SeriesWindow(
        real=[p for p in visible if not p.is_projected],
        projected=[p for p in visible if p.is_projected],
        raw=[p for p in visible if p.raw_value is not None],
    )


@dataclass
class TrendEngine:
    """
    Trend engine bound to a fixed set of constants.

    Attributes:
        smoothing: EWMA smoothing factor (default 0.1)
        kcal_per_kg: Energy per kg of body mass (default 7700)
        projection_days: Days projected past the last real point (default 14)
    """

    smoothing: float = DEFAULT_SMOOTHING
    kcal_per_kg: float = KCAL_PER_KG
    projection_days: int = DEFAULT_PROJECTION_DAYS

    def compute_trend(
        self,
        history: Mapping[date, float],
        today: Optional[date] = None,
    ) -> list[DailyTrendPoint]:
        """Compute the trend series with this engine's constants."""
        return compute_trend(
            history,
            today=today,
            smoothing=self.smoothing,
            kcal_per_kg=self.kcal_per_kg,
            projection_days=self.projection_days,
        )

    def get_stats(self, points: list[DailyTrendPoint]) -> Optional[TrendSummary]:
        """Summarize a series produced by compute_trend."""
        return get_stats(points, kcal_per_kg=self.kcal_per_kg)
