"""Combined health report: weight trend, body composition and activity level."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from diettrend.profiles.body_calc import (
    Sex,
    calculate_bmi,
    calculate_bmr,
    categorize_bmi,
    healthy_weight_range,
    physical_activity_level,
)
from diettrend.tracking.metrics import compute_metric_trend
from diettrend.tracking.models import MetricTrend, TrendSummary
from diettrend.tracking.trend import TrendEngine

logger = logging.getLogger(__name__)


@dataclass
class HealthReport:
    """Snapshot of all tracked metrics."""

    weight: Optional[TrendSummary]
    body_fat: MetricTrend  # fraction 0-1
    vo2_max: MetricTrend  # ml/kg/min
    active_energy: MetricTrend  # kcal/day, excluding the partial current day
    bmi: Optional[float]
    bmi_delta_7_day: Optional[float]
    bmi_category: Optional[str]
    healthy_range_kg: Optional[tuple[int, int]]
    bmr: Optional[float]
    pal: Optional[float]
    pal_delta_7_day: Optional[float]


def build_health_report(
    weight_history: Mapping[date, float],
    body_fat_history: Optional[Mapping[date, float]] = None,
    vo2_history: Optional[Mapping[date, float]] = None,
    active_energy_history: Optional[Mapping[date, float]] = None,
    height_cm: Optional[float] = None,
    age: Optional[int] = None,
    sex: Sex = Sex.UNSPECIFIED,
    today: Optional[date] = None,
    engine: Optional[TrendEngine] = None,
) -> HealthReport:
    """
    Build a health report from raw daily histories.

    BMI and BMR are derived from the smoothed weight trend rather than the
    latest scale reading. PAL uses the active energy EWMA, ignoring today's
    incomplete total.

    Args:
        weight_history: day -> weight (kg)
        body_fat_history: day -> body fat fraction (0-1)
        vo2_history: day -> VO2max (ml/kg/min)
        active_energy_history: day -> active energy burned (kcal)
        height_cm: Height in centimeters
        age: Age in years
        sex: Biological sex
        today: Reference day (default: date.today())
        engine: TrendEngine to use (default constants if None)

    Returns:
        HealthReport; fields are None where inputs are missing
    """
    if engine is None:
        engine = TrendEngine()

    points = engine.compute_trend(weight_history, today=today)
    weight = engine.get_stats(points)

    body_fat = compute_metric_trend(body_fat_history or {}, smoothing=engine.smoothing)
    vo2_max = compute_metric_trend(vo2_history or {}, smoothing=engine.smoothing)
    active_energy = compute_metric_trend(
        active_energy_history or {},
        ignore_most_recent_day=True,
        smoothing=engine.smoothing,
    )

    bmi = None
    bmi_delta = None
    bmi_category = None
    bmr = None
    if weight is not None:
        bmi = calculate_bmi(weight.current_trend, height_cm)
        if bmi is not None:
            bmi_category = categorize_bmi(bmi).value
            bmi_delta = calculate_bmi(weight.weekly_change, height_cm)
        if height_cm and age is not None:
            bmr = calculate_bmr(age, sex, height_cm, weight.current_trend)

    pal = physical_activity_level(bmr, active_energy.current)
    pal_delta = None
    if pal is not None and bmr is not None and active_energy.delta_7_day is not None:
        pal_delta = active_energy.delta_7_day / bmr

    logger.debug("Health report: weight=%s bmi=%s bmr=%s pal=%s", weight, bmi, bmr, pal)

    return HealthReport(
        weight=weight,
        body_fat=body_fat,
        vo2_max=vo2_max,
        active_energy=active_energy,
        bmi=bmi,
        bmi_delta_7_day=bmi_delta,
        bmi_category=bmi_category,
        healthy_range_kg=healthy_weight_range(height_cm),
        bmr=bmr,
        pal=pal,
        pal_delta_7_day=pal_delta,
    )


def _format_delta(delta: Optional[float], fmt: str = "+.2f") -> str:
    if delta is None:
        return ""
    return f" ({delta:{fmt}} / 7d)"


def format_health_report(report: HealthReport) -> str:
    """Format health report as text."""
    lines = [
        "Health Report",
        "=" * 45,
    ]

    if report.weight is not None:
        direction = "deficit" if report.weight.daily_imbalance < 0 else "surplus"
        lines.append(
            f"Weight trend:   {report.weight.current_trend:.1f} kg"
            f"{_format_delta(report.weight.weekly_change)}"
        )
        lines.append(
            f"Implied:        {abs(report.weight.daily_imbalance):.0f} kcal/day {direction}"
        )
    else:
        lines.append("Weight trend:   not enough data")

    if report.healthy_range_kg is not None:
        low, high = report.healthy_range_kg
        lines.append(f"Healthy range:  {low}-{high} kg")

    if report.bmi is not None:
        lines.append(
            f"BMI:            {report.bmi:.1f} ({report.bmi_category})"
            f"{_format_delta(report.bmi_delta_7_day)}"
        )

    if report.body_fat.current is not None:
        delta = (
            report.body_fat.delta_7_day * 100
            if report.body_fat.delta_7_day is not None
            else None
        )
        lines.append(
            f"Body fat:       {report.body_fat.current * 100:.1f}%{_format_delta(delta)}"
        )

    if report.vo2_max.current is not None:
        lines.append(
            f"VO2 max:        {report.vo2_max.current:.1f} ml/kg/min"
            f"{_format_delta(report.vo2_max.delta_7_day)}"
        )

    if report.bmr is not None:
        lines.append(f"BMR:            {report.bmr:.0f} kcal/day")

    if report.pal is not None:
        lines.append(f"PA level:       {report.pal:.2f}{_format_delta(report.pal_delta_7_day)}")

    return "\n".join(lines)
