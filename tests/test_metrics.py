"""Tests for the scalar metric trend calculator."""

from __future__ import annotations

from datetime import timedelta

import pytest

from diettrend.tracking.metrics import compute_metric_trend
from diettrend.tracking.models import MetricTrend


class TestComputeMetricTrend:
    """Tests for compute_metric_trend."""

    def test_empty_history(self) -> None:
        result = compute_metric_trend({})
        assert result == MetricTrend(current=None, delta_7_day=None)
        assert not result.has_data

    def test_single_value(self, start_day) -> None:
        result = compute_metric_trend({start_day: 0.22})
        assert result.current == 0.22
        assert result.delta_7_day is None

    def test_gap_is_interpolated_before_smoothing(self, start_day) -> None:
        history = {start_day: 100.0, start_day + timedelta(days=2): 200.0}
        result = compute_metric_trend(history)

        # Filled series 100, 150, 200 -> trend 100, 105, 114.5
        assert result.current == pytest.approx(114.5)

    def test_delta_requires_more_than_seven_entries(self, start_day) -> None:
        history = {start_day + timedelta(days=i): 40.0 + i for i in range(7)}
        assert compute_metric_trend(history).delta_7_day is None

    def test_delta_seven_entries_back(self, start_day) -> None:
        history = {start_day + timedelta(days=i): 40.0 + i for i in range(8)}
        result = compute_metric_trend(history)

        # Trend 40, 40.1, 40.29, ... the delta spans the whole 8-entry series
        trend = [40.0]
        for i in range(1, 8):
            trend.append(trend[-1] + 0.1 * (40.0 + i - trend[-1]))
        assert result.current == pytest.approx(trend[-1])
        assert result.delta_7_day == pytest.approx(trend[-1] - trend[0])

    def test_constant_series_has_zero_delta(self, start_day) -> None:
        history = {start_day + timedelta(days=i): 45.0 for i in range(10)}
        result = compute_metric_trend(history)
        assert result.current == pytest.approx(45.0)
        assert result.delta_7_day == pytest.approx(0.0)

    def test_ignore_most_recent_day(self, start_day) -> None:
        """A partial current day should not drag the trend down."""
        history = {start_day + timedelta(days=i): 600.0 for i in range(9)}
        with_partial = dict(history)
        with_partial[start_day + timedelta(days=9)] = 50.0

        ignored = compute_metric_trend(with_partial, ignore_most_recent_day=True)
        assert ignored == compute_metric_trend(history)
        assert ignored.current == pytest.approx(600.0)

        included = compute_metric_trend(with_partial)
        assert included.current < 600.0

    def test_ignore_only_day(self, start_day) -> None:
        result = compute_metric_trend({start_day: 500.0}, ignore_most_recent_day=True)
        assert result == MetricTrend()

    def test_unsorted_input(self, start_day) -> None:
        ordered = {start_day + timedelta(days=i): float(i) for i in range(10)}
        shuffled = {day: ordered[day] for day in reversed(list(ordered))}
        assert compute_metric_trend(shuffled) == compute_metric_trend(ordered)
