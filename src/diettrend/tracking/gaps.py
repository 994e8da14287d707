"""Fill missing days in a sparse daily series.

Gaps between two known days are linearly interpolated. A trailing gap
(no later measurement) carries the last value forward. A leading gap with
nothing before it stays unresolved.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


def day_range(start: date, end: date) -> list[date]:
    """Return every calendar day from start to end, inclusive."""
    if end < start:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def fill_gaps(values: Mapping[date, float], days: list[date]) -> dict[date, float]:
    """
    Produce a value for every day in ``days``.

    Args:
        values: Known measurements keyed by day
        days: Ordered list of days to cover

    Returns:
        Dict mapping each resolvable day to its known or filled value.
        Days in a leading gap (nothing known before them) are omitted.

    Example:
        >>> d = date(2025, 1, 1)
        >>> fill_gaps({d: 80.0, d + timedelta(days=3): 77.0}, day_range(d, d + timedelta(days=4)))
        {..., Jan 2: 79.0, Jan 3: 78.0, Jan 4: 77.0, Jan 5: 77.0}
    """
    filled: dict[date, float] = {}
    if not values:
        return filled

    i = 0
    interpolated = 0
    carried = 0
    while i < len(days):
        day = days[i]
        known = values.get(day)
        if known is not None:
            filled[day] = known
            i += 1
            continue

        next_index = _next_known_index(values, days, i + 1)
        start_value: Optional[float] = filled.get(days[i - 1]) if i > 0 else None

        if next_index is not None and start_value is not None:
            end_value = values[days[next_index]]
            steps = next_index - (i - 1)
            step_size = (end_value - start_value) / steps
            for offset in range(next_index - i):
                filled[days[i + offset]] = start_value + step_size * (offset + 1)
            interpolated += next_index - i
            i = next_index
        elif next_index is None and start_value is not None:
            filled[day] = start_value
            carried += 1
            i += 1
        else:
            i += 1

    logger.debug(
        "Filled %d days (%d interpolated, %d carried forward)",
        len(filled),
        interpolated,
        carried,
    )
    return filled


def _next_known_index(
    values: Mapping[date, float], days: list[date], start: int
) -> Optional[int]:
    for j in range(start, len(days)):
        if days[j] in values:
            return j
    return None
