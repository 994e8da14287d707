"""Nutrition label parsing from OCR text."""

from __future__ import annotations

from diettrend.labels.nutrients import NutrientKind
from diettrend.labels.parser import (
    LabelParserConfig,
    NutrientExtractionResult,
    parse_label,
)

__all__ = [
    "LabelParserConfig",
    "NutrientExtractionResult",
    "NutrientKind",
    "parse_label",
]
