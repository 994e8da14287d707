"""Exponentially weighted moving average for daily health metrics.

This implements the Hacker's Diet trend calculation:
    T_n = T_{n-1} + smoothing × (W_n - T_{n-1})

With smoothing=0.1 (10%), this behaves like a low-pass filter with a
roughly 10-day time constant. It removes day-to-day noise from water
retention, gut contents and scale error while tracking the underlying
trend.

Unlike a time-scaled EWMA, the series fed in here is always a complete
daily series: missing days are filled beforehand (see ``gaps``), so each
step corresponds to exactly one calendar day.

Reference: https://www.fourmilab.ch/hackdiet/
"""

from __future__ import annotations

# Default smoothing factor (10% = 0.1)
DEFAULT_SMOOTHING = 0.1

# Energy content of one kilogram of body mass (kcal)
KCAL_PER_KG = 7700.0

# Window used for rate-of-change statistics
DELTA_WINDOW_DAYS = 7


def update_trend(
    prev_trend: float,
    today_value: float,
    smoothing: float = DEFAULT_SMOOTHING,
) -> float:
    """
    Calculate the next trend value.

    Args:
        prev_trend: Previous trend value (T_{n-1})
        today_value: Today's (possibly filled) measurement (W_n)
        smoothing: Smoothing factor, default 0.1

    Returns:
        Today's trend value (T_n)

    Example:
        >>> update_trend(78.0, 77.0)
        77.9
    """
    return prev_trend + smoothing * (today_value - prev_trend)


def calculate_trend_from_scratch(
    values: list[float],
    smoothing: float = DEFAULT_SMOOTHING,
) -> list[float]:
    """
    Calculate trend values for a gap-free daily series.

    The first value is used as the initial trend value.

    Args:
        values: Daily measurements in chronological order
        smoothing: Smoothing factor, default 0.1

    Returns:
        List of trend values, same length as values

    Example:
        >>> calculate_trend_from_scratch([80.0, 79.0, 79.5])
        [80.0, 79.9, 79.86]
    """
    if not values:
        return []

    trends = [values[0]]
    for value in values[1:]:
        trends.append(update_trend(trends[-1], value, smoothing))
    return trends


def weekly_delta_to_imbalance(
    weekly_delta_kg: float,
    kcal_per_kg: float = KCAL_PER_KG,
) -> float:
    """
    Translate a 7-day trend change into an implied daily energy imbalance.

    Args:
        weekly_delta_kg: Trend change over 7 days in kg (negative = losing)
        kcal_per_kg: Energy per kg of body mass

    Returns:
        Daily imbalance in kcal (negative = deficit, positive = surplus)
    """
    return (weekly_delta_kg * kcal_per_kg) / DELTA_WINDOW_DAYS


def imbalance_to_weekly_delta(
    imbalance: float,
    kcal_per_kg: float = KCAL_PER_KG,
) -> float:
    """Inverse of weekly_delta_to_imbalance."""
    return (imbalance * DELTA_WINDOW_DAYS) / kcal_per_kg
