"""Tests for the combined health report."""

from __future__ import annotations

from datetime import timedelta

import pytest

from diettrend.profiles.body_calc import Sex, calculate_bmr
from diettrend.tracking.diagnostics import build_health_report, format_health_report
from diettrend.tracking.trend import TrendEngine


@pytest.fixture
def full_report(daily_weights, start_day):
    today = max(daily_weights)
    body_fat = {start_day + timedelta(days=i): 0.2 for i in range(10)}
    active = {today - timedelta(days=i): 500.0 for i in range(1, 10)}
    active[today] = 50.0  # partial day
    return build_health_report(
        weight_history=daily_weights,
        body_fat_history=body_fat,
        active_energy_history=active,
        height_cm=180,
        age=30,
        sex=Sex.MALE,
        today=today,
    )


class TestBuildHealthReport:
    """Tests for build_health_report."""

    def test_weight_summary(self, full_report) -> None:
        assert full_report.weight is not None
        assert full_report.weight.weekly_change < 0

    def test_bmi_from_trend(self, full_report) -> None:
        trend = full_report.weight.current_trend
        assert full_report.bmi == pytest.approx(trend / 1.8**2)
        assert full_report.bmi_category == "normal"
        assert full_report.bmi_delta_7_day == pytest.approx(
            full_report.weight.weekly_change / 1.8**2
        )
        assert full_report.healthy_range_kg == (60, 81)

    def test_bmr_from_trend(self, full_report) -> None:
        trend = full_report.weight.current_trend
        assert full_report.bmr == pytest.approx(calculate_bmr(30, Sex.MALE, 180, trend))

    def test_pal_ignores_partial_day(self, full_report) -> None:
        assert full_report.active_energy.current == pytest.approx(500.0)
        assert full_report.pal == pytest.approx((full_report.bmr + 500.0) / full_report.bmr)
        assert full_report.pal_delta_7_day == pytest.approx(0.0)

    def test_metric_trends(self, full_report) -> None:
        assert full_report.body_fat.current == pytest.approx(0.2)
        assert not full_report.vo2_max.has_data

    def test_missing_profile(self, daily_weights) -> None:
        report = build_health_report(daily_weights, today=max(daily_weights))

        assert report.weight is not None
        assert report.bmi is None
        assert report.bmr is None
        assert report.pal is None
        assert report.healthy_range_kg is None

    def test_short_history(self, start_day) -> None:
        history = {start_day: 80.0, start_day + timedelta(days=1): 79.8}
        report = build_health_report(history, height_cm=180, age=30, today=start_day + timedelta(days=1))

        assert report.weight is None
        assert report.bmi is None

    def test_custom_engine(self, daily_weights) -> None:
        today = max(daily_weights)
        default = build_health_report(daily_weights, today=today)
        custom = build_health_report(daily_weights, today=today, engine=TrendEngine(kcal_per_kg=3500))

        assert custom.weight.current_trend == pytest.approx(default.weight.current_trend)
        assert custom.weight.weekly_change == pytest.approx(default.weight.weekly_change)


class TestFormatHealthReport:
    """Tests for format_health_report."""

    def test_full_report(self, full_report) -> None:
        text = format_health_report(full_report)

        assert "Health Report" in text
        assert "Weight trend:" in text
        assert "deficit" in text
        assert "BMI:" in text
        assert "Body fat:       20.0%" in text
        assert "Healthy range:  60-81 kg" in text
        assert "PA level:" in text
        assert "VO2 max" not in text

    def test_not_enough_data(self, start_day) -> None:
        report = build_health_report({start_day: 80.0}, today=start_day)
        assert "not enough data" in format_health_report(report)
