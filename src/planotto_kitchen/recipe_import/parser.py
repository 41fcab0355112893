"""
Recipe draft parser.

Converts a provider's JSON-like `recipe` object into a validated
RecipeDraft. Unknown fields are dropped; malformed fields degrade to empty
values so that partial data survives.
"""

import re
from typing import Any

from .models import Ingredient, RecipeDraft, Unit
from .names import clean_name
from .normalizer import (
    extract_image,
    instructions_text,
    parse_duration,
    parse_servings,
    safe_string,
    safe_string_list,
)
from .units import detect_unit_from_text, is_range_amount, normalize_unit, parse_amount

# Seasonings that default to "to taste" when no amount is given
_SEASONING_RE = re.compile(
    r"(?<!\w)(?:salt|pepper|соль|соли|перец|перца|sal|pimienta)(?!\w)",
    re.IGNORECASE,
)


def _with_seasoning_rule(name: str, amount: float, unit: Unit) -> Unit:
    if amount == 0 and _SEASONING_RE.search(name):
        return Unit.TO_TASTE
    return unit


def _parse_line(line: str) -> Ingredient | None:
    """A bare string entry: everything comes from the line itself."""
    name = clean_name(line)
    if not name:
        return None
    amount = parse_amount(line)
    unit = _with_seasoning_rule(name, amount, detect_unit_from_text(line))
    return Ingredient(name=name, amount=amount, unit=unit, needs_review=True)


def _parse_entry(entry: dict[str, Any]) -> Ingredient | None:
    """
    A structured entry: trust amount/unit fields, re-derive from the name
    when the amount is missing or the unit is the pcs placeholder.
    """
    raw_name = safe_string(entry.get("name"))
    name = clean_name(raw_name) or raw_name
    if not name:
        return None

    raw_amount = entry.get("amount")
    amount = parse_amount(raw_amount)
    ranged = is_range_amount(raw_amount)
    if amount <= 0:
        amount = parse_amount(raw_name)
        ranged = is_range_amount(raw_name)

    unit = normalize_unit(entry.get("unit"))
    unit_from_name = detect_unit_from_text(raw_name)
    if unit == Unit.PCS and unit_from_name != Unit.PCS:
        unit = unit_from_name
    unit = _with_seasoning_rule(name, amount, unit)

    needs_review = entry.get("needsReview", True)
    needs_review = bool(needs_review) or ranged or (amount == 0 and unit != Unit.TO_TASTE)

    return Ingredient(name=name, amount=amount, unit=unit, needs_review=needs_review)


def parse_ingredient(entry: Any) -> Ingredient | None:
    """One ingredient from a string line or an object; None when unusable."""
    if isinstance(entry, str):
        line = entry.strip()
        return _parse_line(line) if line else None
    if isinstance(entry, dict):
        return _parse_entry(entry)
    return None


def parse_draft(raw: Any) -> RecipeDraft | None:
    """
    Build a RecipeDraft from a provider `recipe` object.

    Returns None only when `raw` is not an object.
    """
    if not isinstance(raw, dict):
        return None

    entries = raw.get("ingredients")
    ingredients = []
    if isinstance(entries, list):
        for entry in entries:
            ingredient = parse_ingredient(entry)
            if ingredient is not None:
                ingredients.append(ingredient)

    return RecipeDraft(
        title=safe_string(raw.get("title")),
        short_description=safe_string(raw.get("shortDescription")),
        instructions=instructions_text(raw.get("instructions")),
        servings=parse_servings(raw.get("servings")),
        time_minutes=parse_duration(raw.get("timeMinutes")),
        image=extract_image(raw.get("image")),
        tags=tuple(safe_string_list(raw.get("tags"))),
        ingredients=tuple(ingredients),
    )
