"""Nutrient kinds and the label keywords that identify them.

Keywords are matched case-insensitively against lowercased OCR lines and
cover English and German labels.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class NutrientKind(Enum):
    """Nutrients found on a standard nutrition label."""
    ENERGY = "energy"
    FAT = "fat"
    SAT_FAT = "sat_fat"
    CARBS = "carbs"
    SUGAR = "sugar"
    PROTEIN = "protein"
    FIBER = "fiber"
    SALT = "salt"


# Ordered rules: the first rule with a matching keyword wins for a line.
# Specific nutrients come before the general ones that share a word
# ("gesättigte Fettsäuren" contains "fett", "sugars" sits under carbohydrates).
KEYWORD_RULES: list[tuple[NutrientKind, tuple[str, ...]]] = [
    (NutrientKind.SAT_FAT, ("gesätt", "saturate")),
    (NutrientKind.FAT, ("fett", "fat")),
    (NutrientKind.SUGAR, ("zucker", "sugar")),
    (NutrientKind.CARBS, ("kohlenhydrat", "carb")),
    (NutrientKind.PROTEIN, ("eiweiß", "eiweiss", "protein")),
    (NutrientKind.FIBER, ("ballast", "fiber", "fibre")),
    (NutrientKind.SALT, ("salz", "salt", "sodium")),
]

# EU label order (Regulation 1169/2011), used when no keywords were recognised
STANDARD_LABEL_ORDER: list[NutrientKind] = [
    NutrientKind.FAT,
    NutrientKind.SAT_FAT,
    NutrientKind.CARBS,
    NutrientKind.SUGAR,
    NutrientKind.FIBER,
    NutrientKind.PROTEIN,
    NutrientKind.SALT,
]

# Words that mark a German label (comma is the decimal separator)
GERMAN_MARKERS = ("davon", "gesätt")


def match_nutrient(line: str) -> Optional[NutrientKind]:
    """Return the nutrient named on a line, if any.

    Args:
        line: A single OCR line (any case)

    Returns:
        The first matching NutrientKind per KEYWORD_RULES, or None
    """
    lower = line.lower()
    for kind, keywords in KEYWORD_RULES:
        if any(keyword in lower for keyword in keywords):
            return kind
    return None
