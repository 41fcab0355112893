"""Ingredient name cleanup: strip the quantity/unit prefix from a raw line."""

import re

_FRACTION_CHARS = "½⅓⅔¼¾⅛⅜⅝⅞"
_QUANTITY = rf"(?:\d+(?:[.,]\d+)?(?:\s+\d+/\d+|/\d+)?[{_FRACTION_CHARS}]?|[{_FRACTION_CHARS}])"
_RANGE = rf"{_QUANTITY}(?:\s*(?:-|–|—|to|до|a)\s*{_QUANTITY})?"

# Unit words that may follow the number. Onion words ("луковица") are not
# listed: for them the unit word is the ingredient.
_UNIT_WORDS = (
    r"kgs?|kilograms?|g|gr|grams?|ml|millilit(?:er|re)s?|l|lt|lit(?:er|re)s?"
    r"|tsp|tbsp?|teaspoons?|tablespoons?|pcs?|pieces?|cloves?|leaf|leaves|pinch(?:es)?"
    r"|кг|г|гр|грамм\w*|мл|л|литр\w*|шт|штук\w*|ч\.?\s*л|ст\.?\s*л|зубч\w*|горошин\w*|лист\w*|щепотк\w*"
    r"|kilos?|gramos?|litros?|cdta|cda|cucharadas?|cucharaditas?|dientes?|unidad(?:es)?|pizcas?"
)

_LEADING_QUANTITY_RE = re.compile(
    rf"^\s*{_RANGE}\s*(?:(?:{_UNIT_WORDS})(?!\w)\.?\s*(?:of\s+|de\s+)?)?",
    re.IGNORECASE,
)
_TRAILING_TASTE_RE = re.compile(r"[\s,(]*(?:to taste|по вкусу|al gusto)\)?\s*$", re.IGNORECASE)
_EDGE_PUNCTUATION = "-–—,:;. \t\n"


def clean_name(line: str) -> str:
    """
    Return the bare ingredient name from a raw ingredient line.

    Examples:
        "200 g flour" -> "flour"
        "2-3 onions" -> "onions"
        "2 cloves garlic, minced" -> "garlic, minced"
        "Salt, to taste" -> "Salt"
        "" -> ""

    Falls back to the trimmed line when stripping would leave nothing.
    """
    if not isinstance(line, str):
        return ""
    original = line.strip()
    if not original:
        return ""

    result = _LEADING_QUANTITY_RE.sub("", original, count=1)
    result = _TRAILING_TASTE_RE.sub("", result)
    result = result.strip(_EDGE_PUNCTUATION)
    return result or original
