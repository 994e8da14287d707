"""Tests for EWMA primitives."""

from __future__ import annotations

import pytest

from diettrend.tracking.ema import (
    DEFAULT_SMOOTHING,
    KCAL_PER_KG,
    calculate_trend_from_scratch,
    imbalance_to_weekly_delta,
    update_trend,
    weekly_delta_to_imbalance,
)


class TestUpdateTrend:
    """Tests for update_trend function."""

    def test_default_smoothing(self) -> None:
        result = update_trend(78.0, 77.0)
        assert result == pytest.approx(78.0 + DEFAULT_SMOOTHING * (77.0 - 78.0))

    def test_equal_values_unchanged(self) -> None:
        assert update_trend(78.0, 78.0) == 78.0

    def test_custom_smoothing(self) -> None:
        assert update_trend(80.0, 70.0, smoothing=0.5) == pytest.approx(75.0)


class TestCalculateTrendFromScratch:
    """Tests for calculate_trend_from_scratch function."""

    def test_empty_list(self) -> None:
        """Empty list should return empty list."""
        assert calculate_trend_from_scratch([]) == []

    def test_single_value(self) -> None:
        assert calculate_trend_from_scratch([85.0]) == [85.0]

    def test_first_trend_is_first_value(self) -> None:
        values = [80.0, 79.0, 79.5]
        trends = calculate_trend_from_scratch(values)

        assert len(trends) == 3
        assert trends[0] == 80.0
        assert trends[1] == pytest.approx(79.9)
        assert trends[2] == pytest.approx(79.86)

    def test_trend_between_previous_and_value(self) -> None:
        """Each trend lies between the previous trend and the new value."""
        values = [80.0, 81.2, 79.4, 79.4, 80.6, 78.9, 80.0]
        trends = calculate_trend_from_scratch(values)

        for i in range(1, len(values)):
            low = min(trends[i - 1], values[i])
            high = max(trends[i - 1], values[i])
            assert low <= trends[i] <= high
            if values[i] != trends[i - 1]:
                assert low < trends[i] < high


class TestImbalanceConversion:
    """Tests for imbalance conversions."""

    def test_one_kg_per_week(self) -> None:
        assert weekly_delta_to_imbalance(-1.0) == pytest.approx(-KCAL_PER_KG / 7)

    def test_round_trip(self) -> None:
        assert imbalance_to_weekly_delta(weekly_delta_to_imbalance(0.35)) == pytest.approx(0.35)

    def test_custom_energy_density(self) -> None:
        assert weekly_delta_to_imbalance(0.7, kcal_per_kg=7000) == pytest.approx(700.0)
