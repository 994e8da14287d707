"""Body composition calculations in metric units.

Uses the Mifflin-St Jeor equation for BMR, as it's widely validated for
resting metabolic rate, plus BMI and Physical Activity Level (PAL).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"
    UNSPECIFIED = "unspecified"  # no sex-specific offset


class BMICategory(Enum):
    """Standard BMI categories."""
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


# Offsets applied to the Mifflin-St Jeor base term
SEX_OFFSETS = {
    Sex.MALE: 5.0,
    Sex.FEMALE: -161.0,
    Sex.UNSPECIFIED: 0.0,
}

# Healthy BMI band used for the target weight range
HEALTHY_BMI_LOWER = 18.5
HEALTHY_BMI_UPPER = 25.0
OBESE_BMI = 30.0


def calculate_bmr(
    age: int,
    sex: Sex,
    height_cm: float,
    weight_kg: float,
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        age: Age in years
        sex: Biological sex
        height_cm: Height in centimeters
        weight_kg: Weight in kilograms

    Returns:
        BMR in kcal per day
    """
    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    return base + SEX_OFFSETS[sex]


def calculate_bmi(weight_kg: float, height_cm: Optional[float]) -> Optional[float]:
    """Body Mass Index (kg/m²). None if height is unknown or not positive."""
    if height_cm is None or height_cm <= 0:
        return None
    height_m = height_cm / 100.0
    return weight_kg / (height_m * height_m)


def categorize_bmi(bmi: float) -> BMICategory:
    """Categorize BMI into standard categories."""
    if bmi < HEALTHY_BMI_LOWER:
        return BMICategory.UNDERWEIGHT
    elif bmi < HEALTHY_BMI_UPPER:
        return BMICategory.NORMAL
    elif bmi < OBESE_BMI:
        return BMICategory.OVERWEIGHT
    return BMICategory.OBESE


def healthy_weight_range(height_cm: Optional[float]) -> Optional[tuple[int, int]]:
    """Whole-kg weight range that keeps BMI between 18.5 and 25.

    Args:
        height_cm: Height in centimeters

    Returns:
        (lower_kg, upper_kg) rounded inward, or None for unknown height
    """
    if height_cm is None or height_cm <= 0:
        return None
    height_m = height_cm / 100.0
    lower = HEALTHY_BMI_LOWER * height_m * height_m
    upper = HEALTHY_BMI_UPPER * height_m * height_m
    return math.ceil(lower), math.floor(upper)


def physical_activity_level(
    bmr: Optional[float],
    active_energy_avg: Optional[float],
) -> Optional[float]:
    """Physical Activity Level: TDEE / BMR.

    Args:
        bmr: Basal Metabolic Rate (kcal/day)
        active_energy_avg: Average daily active energy (kcal/day)

    Returns:
        PAL (e.g. 1.4 for light activity), or None unless both inputs are positive
    """
    if bmr is None or bmr <= 0 or active_energy_avg is None or active_energy_avg <= 0:
        return None
    return (bmr + active_energy_avg) / bmr
