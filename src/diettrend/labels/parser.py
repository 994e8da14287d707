"""Heuristic nutrition-label parser for OCR text.

OCR of a nutrition table rarely preserves the row structure: keywords and
numbers often arrive as two separate columns. The parser therefore collects
nutrient keywords and numeric values independently, in reading order, and
pairs them position by position.

Energy is handled separately: a line mentioning kcal or kJ contributes its
first number, a later energy line overrides an earlier one, and kJ is only
converted to kcal when no kcal line exists.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from diettrend.labels.nutrients import (
    GERMAN_MARKERS,
    STANDARD_LABEL_ORDER,
    NutrientKind,
    match_nutrient,
)

logger = logging.getLogger(__name__)

# Unit tokens that OCR glues onto the preceding digit ("1625kJ", "4,1g")
_MERGED_UNIT_RE = re.compile(r"(\d)(kj|kcal|g|ml)(?![a-zäöüß])", re.IGNORECASE)
_STRIP_UNIT_RE = re.compile(r"(?<![a-zäöüß])(?:g|ml)(?![a-zäöüß])")
_NUMBER_RE = re.compile(r"[0-9]+[.]?[0-9]*")

_FIELD_BY_KIND = {
    NutrientKind.ENERGY: "kcal",
    NutrientKind.FAT: "fat",
    NutrientKind.SAT_FAT: "sat_fat",
    NutrientKind.CARBS: "carbs",
    NutrientKind.SUGAR: "sugar",
    NutrientKind.PROTEIN: "protein",
    NutrientKind.FIBER: "fiber",
    NutrientKind.SALT: "salt",
}


@dataclass
class LabelParserConfig:
    """
    Tunable thresholds for the label parser.

    Attributes:
        year_min: Lowest whole number treated as a calendar year (noise)
        year_max: Highest whole number treated as a calendar year (noise)
        max_value: Values above this are barcodes or codes (noise)
        kj_per_kcal: Conversion factor from kJ to kcal
        fallback_min_values: Values needed before the standard-order fallback runs
        standard_order_fallback: Enable the standard-order fallback
    """

    year_min: int = 2020
    year_max: int = 2030
    max_value: float = 2000.0
    kj_per_kcal: float = 4.184
    fallback_min_values: int = 5
    standard_order_fallback: bool = True

    def __post_init__(self) -> None:
        if self.year_min > self.year_max:
            raise ValueError(
                f"year_min must not exceed year_max, got {self.year_min} > {self.year_max}"
            )
        if self.kj_per_kcal <= 0:
            raise ValueError(f"kj_per_kcal must be positive, got {self.kj_per_kcal}")


@dataclass
class NutrientExtractionResult:
    """Nutrient values extracted from a label (per label column, usually per 100 g)."""

    kcal: Optional[float] = None
    fat: Optional[float] = None
    sat_fat: Optional[float] = None
    carbs: Optional[float] = None
    sugar: Optional[float] = None
    protein: Optional[float] = None
    fiber: Optional[float] = None
    salt: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return any(value is not None for value in self.as_dict().values())

    def get(self, kind: NutrientKind) -> Optional[float]:
        return getattr(self, _FIELD_BY_KIND[kind])

    def set_if_missing(self, kind: NutrientKind, value: float) -> None:
        """Assign a value unless the nutrient already has one."""
        if self.get(kind) is None:
            setattr(self, _FIELD_BY_KIND[kind], value)

    def as_dict(self) -> dict[str, Optional[float]]:
        return {field: getattr(self, field) for field in _FIELD_BY_KIND.values()}


def normalize_text(text: str) -> str:
    """Separate unit tokens merged with the preceding number ("1625kJ" -> "1625 kJ")."""
    return _MERGED_UNIT_RE.sub(r"\1 \2", text)


def is_german(text: str) -> bool:
    """Detect German labels, which use a comma as decimal separator."""
    lower = text.lower()
    return any(marker in lower for marker in GERMAN_MARKERS)


def extract_number(line: str, german: bool) -> Optional[float]:
    """
    Extract the first number on a line.

    Args:
        line: Lowercased OCR line
        german: Treat "," as decimal separator (else as thousands separator)

    Returns:
        The first number found, or None

    Example:
        >>> extract_number("4,1 g", german=True)
        4.1
        >>> extract_number("1,625 kj", german=False)
        1625.0
    """
    clean = _STRIP_UNIT_RE.sub("", line)
    if german:
        clean = clean.replace(",", ".")
    else:
        clean = clean.replace(",", "")

    match = _NUMBER_RE.search(clean)
    if match is None:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def is_likely_noise(value: float, config: LabelParserConfig) -> bool:
    """Filter calendar years and barcode-like numbers."""
    if config.year_min <= value <= config.year_max and value.is_integer():
        return True
    return value > config.max_value


def parse_label(
    text: str,
    config: Optional[LabelParserConfig] = None,
) -> NutrientExtractionResult:
    """
    Parse raw OCR text from a nutrition label.

    Args:
        text: Newline-delimited recognized text
        config: Parser thresholds (defaults if None)

    Returns:
        NutrientExtractionResult; all fields None if nothing was recognized.
    """
    if config is None:
        config = LabelParserConfig()

    result = NutrientExtractionResult()
    cleaned = normalize_text(text)
    lines = cleaned.splitlines()
    german = is_german(cleaned)

    # 1. Values in reading order, energy lines separately
    values: list[float] = []
    explicit_kcal: Optional[float] = None
    explicit_kj: Optional[float] = None

    for line in lines:
        lower = line.lower()
        value = extract_number(lower, german)
        # Energy lines take the first number; a later line overrides
        if "kcal" in lower:
            if value is not None:
                explicit_kcal = value
            continue
        if "kj" in lower:
            if value is not None:
                explicit_kj = value
            continue

        if value is None:
            continue
        if is_likely_noise(value, config):
            logger.debug("Discarding noise value %s", value)
            continue
        values.append(value)

    if explicit_kcal is not None:
        result.kcal = explicit_kcal
    elif explicit_kj is not None:
        result.kcal = explicit_kj / config.kj_per_kcal

    # 2. Nutrient keywords in reading order
    keywords = [kind for kind in map(match_nutrient, lines) if kind is not None]

    # 3. Pair keywords and values position by position
    for kind, value in zip(keywords, values):
        result.set_if_missing(kind, value)

    # 4. Nothing recognized at all: assume the standard label order
    if (
        config.standard_order_fallback
        and not result.has_data
        and len(values) >= config.fallback_min_values
    ):
        logger.debug("Nothing recognized; using standard label order")
        for kind, value in zip(STANDARD_LABEL_ORDER, values):
            result.set_if_missing(kind, value)

    logger.debug(
        "Parsed label: german=%s, %d keywords, %d values, kcal=%s",
        german,
        len(keywords),
        len(values),
        result.kcal,
    )
    return result
