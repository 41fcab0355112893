"""Recipe import: turn a recipe page or recipe photos into a RecipeDraft."""

from .models import ImportOutcome, ImportSource, Ingredient, RecipeDraft, Unit
from .parser import parse_draft
from .merger import merge_drafts
from .units import detect_unit_from_text, normalize_unit, parse_amount
from .names import clean_name

__all__ = [
    "ImportOutcome",
    "ImportSource",
    "Ingredient",
    "RecipeDraft",
    "Unit",
    "parse_draft",
    "merge_drafts",
    "detect_unit_from_text",
    "normalize_unit",
    "parse_amount",
    "clean_name",
]
