"""Data models for recipe import."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Unit(str, Enum):
    """Closed set of ingredient units."""

    G = "g"
    KG = "kg"
    ML = "ml"
    L = "l"
    PCS = "pcs"
    TSP = "tsp"
    TBSP = "tbsp"
    TO_TASTE = "to_taste"


class ImportSource(str, Enum):
    """Where an imported recipe came from."""

    URL = "url"
    PHOTO = "photo"


@dataclass(frozen=True)
class Ingredient:
    """One normalized ingredient line."""

    name: str
    amount: float = 0
    unit: Unit = Unit.PCS
    needs_review: bool = True

    def __post_init__(self):
        # "to taste" carries no quantity; negative amounts are meaningless
        if self.unit == Unit.TO_TASTE or self.amount < 0:
            object.__setattr__(self, "amount", 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit.value,
            "needsReview": self.needs_review,
        }


@dataclass(frozen=True)
class RecipeDraft:
    """Unsaved recipe candidate awaiting user confirmation."""

    title: str = ""
    short_description: str = ""
    instructions: str = ""
    servings: int | None = None
    time_minutes: int | None = None
    image: str = ""
    tags: tuple[str, ...] = ()
    ingredients: tuple[Ingredient, ...] = field(default_factory=tuple)

    @property
    def has_content(self) -> bool:
        """True when there is anything worth showing to the user."""
        return bool(self.title or self.instructions or self.short_description or self.ingredients)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "shortDescription": self.short_description,
            "instructions": self.instructions,
            "servings": self.servings,
            "timeMinutes": self.time_minutes,
            "image": self.image,
            "tags": list(self.tags),
            "ingredients": [ingredient.to_dict() for ingredient in self.ingredients],
        }


@dataclass(frozen=True)
class ImportOutcome:
    """Final result of an import request."""

    draft: RecipeDraft | None
    message: str
    issues: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "recipe": self.draft.to_dict() if self.draft else None,
            "message": self.message,
            "issues": list(self.issues),
        }


@dataclass(frozen=True)
class StageResult:
    """What one import tier (OCR) produced."""

    draft: RecipeDraft | None = None
    message: str = ""
    issues: tuple[str, ...] = ()


@dataclass(frozen=True)
class VisionResult:
    """Drafts, model messages and issues from one vision strategy."""

    parts: tuple[RecipeDraft, ...] = ()
    messages: tuple[str, ...] = ()
    issues: tuple[str, ...] = ()
