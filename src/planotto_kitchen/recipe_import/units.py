"""
Unit and quantity normalization.

Turns free-form amount/unit text (English, Russian and Spanish spellings)
into a numeric amount and one of the closed Unit values. Every function
here is pure and total: any input yields a value, nothing raises.
"""

import math
import re
import unicodedata
from typing import Any

from .models import Unit

_UNIT_ALIASES: dict[Unit, tuple[str, ...]] = {
    Unit.G: (
        "g", "gr", "gram", "grams", "gramme", "grammes",
        "г", "гр", "грамм", "грамма", "граммов",
        "gramo", "gramos",
    ),
    Unit.KG: (
        "kg", "kgs", "kilo", "kilos", "kilogram", "kilograms",
        "кг", "килограмм", "килограмма", "килограммов",
        "kilogramo", "kilogramos",
    ),
    Unit.ML: (
        "ml", "milliliter", "milliliters", "millilitre", "millilitres",
        "мл", "миллилитр", "миллилитра", "миллилитров",
        "mililitro", "mililitros",
    ),
    Unit.L: (
        "l", "lt", "liter", "liters", "litre", "litres",
        "л", "литр", "литра", "литров",
        "litro", "litros",
    ),
    Unit.PCS: (
        "pcs", "pc", "piece", "pieces",
        "шт", "штук", "штука", "штуки",
        "ud", "uds", "unidad", "unidades",
    ),
    Unit.TSP: (
        "tsp", "teaspoon", "teaspoons",
        "ч л", "чл", "чайная ложка", "чайные ложки", "чайных ложек",
        "cdta", "cucharadita", "cucharaditas",
    ),
    Unit.TBSP: (
        "tbsp", "tbs", "tablespoon", "tablespoons",
        "ст л", "стл", "столовая ложка", "столовые ложки", "столовых ложек",
        "cda", "cucharada", "cucharadas",
    ),
    Unit.TO_TASTE: (
        "to taste", "to_taste",
        "по вкусу", "немного",
        "al gusto", "a gusto",
    ),
}

_TASTE_MARKERS = ("taste", "вкус", "gusto")


def _normalize_unit_text(value: str) -> str:
    text = unicodedata.normalize("NFD", value.strip().lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[.,/()\[\]{}%]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


_ALIAS_LOOKUP: dict[str, Unit] = {
    _normalize_unit_text(alias): unit
    for unit, aliases in _UNIT_ALIASES.items()
    for alias in (unit.value, *aliases)
}


def normalize_unit(raw: Any) -> Unit:
    """
    Map a unit token to the closed unit set.

    Examples:
        "grams" -> g, "ст.л." -> tbsp, "al gusto" -> to_taste, "cup" -> pcs
    """
    if isinstance(raw, Unit):
        return raw
    if not isinstance(raw, str):
        return Unit.PCS

    key = _normalize_unit_text(raw)
    if not key:
        return Unit.PCS
    if key in _ALIAS_LOOKUP:
        return _ALIAS_LOOKUP[key]
    if any(marker in key for marker in _TASTE_MARKERS):
        return Unit.TO_TASTE
    return Unit.PCS


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_NUMBER = r"\d+(?:\.\d+)?"
_NUMERIC_LITERAL = re.compile(r"[+-]?\d+(?:\.\d+)?(?:e[+-]?\d+)?")
_INTEGER_LITERAL = re.compile(r"[+-]?\d+")
_VULGAR_FRACTIONS = {
    "½": 1 / 2, "⅓": 1 / 3, "⅔": 2 / 3, "¼": 1 / 4, "¾": 3 / 4,
    "⅛": 1 / 8, "⅜": 3 / 8, "⅝": 5 / 8, "⅞": 7 / 8,
}
_VULGAR_CHARS = "".join(_VULGAR_FRACTIONS)
# One quantity: "1 1/2", "1/2", "1½", "½" or a decimal, tried in that order.
_QUANTITY = rf"\d+\s+\d+/\d+|\d+/\d+|\d*\s*[{_VULGAR_CHARS}]|{_NUMBER}"
_RANGE_RE = re.compile(
    rf"(?<![\d./])({_QUANTITY})\s*(?:-|–|—|\bto\b|\bдо\b|\ba\b)\s*({_QUANTITY})"
)
# "1-1/2" is the US spelling of 1½, not a range.
_HYPHEN_MIXED_RE = re.compile(r"(?<![\d./])(\d+)-(\d+)/(\d+)(?![\d/])")
_MIXED_FRACTION_RE = re.compile(r"(?<![\d.])(\d+)\s+(\d+)/(\d+)")
_FRACTION_RE = re.compile(r"(?<![\d.])(\d+)/(\d+)")
_VULGAR_RE = re.compile(rf"(\d+)?\s*([{_VULGAR_CHARS}])")
_SINGLE_RE = re.compile(_NUMBER)


def _normalize_amount_text(value: str) -> str:
    text = value.strip().lower()
    text = re.sub(r"(\d),(\d)", r"\1.\2", text)
    return re.sub(r"\s+", " ", text)


def _positive(value: float) -> float:
    return value if math.isfinite(value) and value > 0 else 0


def _quantity_value(text: str) -> float | None:
    """Value of one matched quantity, or None for a zero denominator."""
    text = text.strip()
    mixed = re.fullmatch(r"(\d+)\s+(\d+)/(\d+)", text)
    if mixed:
        whole, num, den = (int(part) for part in mixed.groups())
        return whole + num / den if den else None
    fraction = re.fullmatch(r"(\d+)/(\d+)", text)
    if fraction:
        num, den = int(fraction.group(1)), int(fraction.group(2))
        return num / den if den else None
    vulgar = re.fullmatch(rf"(\d*)\s*([{_VULGAR_CHARS}])", text)
    if vulgar:
        whole = int(vulgar.group(1)) if vulgar.group(1) else 0
        return whole + _VULGAR_FRACTIONS[vulgar.group(2)]
    return float(text)


def _hyphen_mixed(text: str) -> float | None:
    match = _HYPHEN_MIXED_RE.search(text)
    if not match:
        return None
    whole, num, den = (int(part) for part in match.groups())
    if not 0 < num < den:
        return None
    return whole + num / den


def _range_bounds(text: str) -> tuple[float, float] | None:
    if _hyphen_mixed(text) is not None:
        return None
    match = _RANGE_RE.search(text)
    if not match:
        return None
    low, high = _quantity_value(match.group(1)), _quantity_value(match.group(2))
    if low is None or high is None:
        return None
    return low, high


def parse_amount(raw: Any) -> float:
    """
    Extract a quantity from free text.

    Examples:
        "200 g" -> 200, "1,5 kg" -> 1.5, "3-5" -> 4, "2 to 3" -> 2.5,
        "1 1/2 cups" -> 1.5, "1-1/2 cups" -> 1.5, "1/2-1 cup" -> 0.75,
        "½ lemon" -> 0.5, "salt" -> 0
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return raw if math.isfinite(raw) and raw > 0 else 0
    if not isinstance(raw, str):
        return 0

    text = _normalize_amount_text(raw)
    if not text:
        return 0

    if _NUMERIC_LITERAL.fullmatch(text):
        return _positive(int(text) if _INTEGER_LITERAL.fullmatch(text) else float(text))

    hyphen_mixed = _hyphen_mixed(text)
    if hyphen_mixed is not None:
        return _positive(round(hyphen_mixed, 2))

    bounds = _range_bounds(text)
    if bounds:
        return _positive(round((bounds[0] + bounds[1]) / 2, 2))

    mixed = _MIXED_FRACTION_RE.search(text)
    if mixed and int(mixed.group(3)):
        whole, num, den = (int(part) for part in mixed.groups())
        return _positive(round(whole + num / den, 2))

    fraction = _FRACTION_RE.search(text)
    if fraction and int(fraction.group(2)):
        return _positive(round(int(fraction.group(1)) / int(fraction.group(2)), 2))

    vulgar = _VULGAR_RE.search(text)
    if vulgar:
        whole = int(vulgar.group(1)) if vulgar.group(1) else 0
        return _positive(round(whole + _VULGAR_FRACTIONS[vulgar.group(2)], 2))

    single = _SINGLE_RE.search(text)
    if not single:
        return 0
    return _positive(float(single.group(0)))


def is_range_amount(raw: Any) -> bool:
    """True when `parse_amount` would average a range (the amount needs review)."""
    if not isinstance(raw, str):
        return False
    return _range_bounds(_normalize_amount_text(raw)) is not None


# ---------------------------------------------------------------------------
# Unit inference from a whole line
# ---------------------------------------------------------------------------

# A unit abbreviation must not touch other letters, but may touch digits ("200g").
_LB = r"(?<![^\W\d_])"
_RB = r"(?![^\W\d_])"


def _words(*alternatives: str) -> re.Pattern:
    return re.compile("|".join(f"{_LB}{alt}{_RB}" for alt in alternatives))


# Order matters: spoon abbreviations contain a bare "л" in Russian.
_UNIT_PATTERNS: tuple[tuple[Unit, re.Pattern], ...] = (
    (Unit.TO_TASTE, re.compile(r"to taste|по вкусу|al gusto|a gusto")),
    (Unit.TSP, _words(r"tsp", r"teaspoons?", r"ч\.?\s?л\.?", r"чайн\w* ложк\w*", r"cdta", r"cucharaditas?")),
    (Unit.TBSP, _words(r"tbsp?", r"tablespoons?", r"ст\.?\s?л\.?", r"столов\w* ложк\w*", r"cda", r"cucharadas?")),
    (Unit.KG, _words(r"kgs?", r"kilograms?", r"kilos?", r"кг", r"килограмм\w*", r"kilogramos?")),
    (Unit.G, _words(r"g", r"gr", r"grams?", r"г", r"гр", r"грамм\w*", r"gramos?")),
    (Unit.ML, _words(r"ml", r"millilit\w*", r"мл", r"миллилитр\w*", r"mililitros?")),
    (Unit.L, _words(r"l", r"lt", r"liters?", r"litres?", r"л", r"литр\w*", r"litros?")),
    (Unit.PCS, _words(r"pcs?", r"pieces?", r"cloves?", r"leaf", r"leaves", r"шт", r"зубч\w*", r"луковиц\w*", r"горошин\w*", r"лист\w*")),
)


def detect_unit_from_text(line: Any) -> Unit:
    """
    Infer a unit from context words in an ingredient line.

    Examples:
        "salt to taste" -> to_taste, "2 tbsp oil" -> tbsp,
        "3 cloves garlic" -> pcs, "onion" -> pcs
    """
    if not isinstance(line, str):
        return Unit.PCS
    text = _normalize_amount_text(line)
    if not text:
        return Unit.PCS
    for unit, pattern in _UNIT_PATTERNS:
        if pattern.search(text):
            return unit
    return Unit.PCS
