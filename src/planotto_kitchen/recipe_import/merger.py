"""Merge per-page drafts of one recipe into a single draft."""

from .models import Ingredient, RecipeDraft, Unit


def _first(values):
    return next((value for value in values if value), None)


def merge_drafts(parts: list[RecipeDraft] | tuple[RecipeDraft, ...]) -> RecipeDraft | None:
    """
    Combine drafts extracted from several photos of the same recipe.

    - title / short description / image: first non-empty, in page order
    - instructions: every page's steps, blank-line separated
    - servings / time: first value found
    - tags: union, first occurrence order
    - ingredients: grouped by (lowercased name, unit); amounts summed,
      needsReview OR-ed, first spelling kept
    """
    if not parts:
        return None

    grouped: dict[tuple[str, Unit], Ingredient] = {}
    for part in parts:
        for item in part.ingredients:
            key = (item.name.lower(), item.unit)
            previous = grouped.get(key)
            if previous is None:
                grouped[key] = item
                continue
            grouped[key] = Ingredient(
                name=previous.name,
                amount=max(0, previous.amount) + max(0, item.amount),
                unit=previous.unit,
                needs_review=previous.needs_review or item.needs_review,
            )

    return RecipeDraft(
        title=_first(part.title for part in parts) or "",
        short_description=_first(part.short_description for part in parts) or "",
        instructions="\n\n".join(part.instructions for part in parts if part.instructions).strip(),
        servings=_first(part.servings for part in parts),
        time_minutes=_first(part.time_minutes for part in parts),
        image=_first(part.image for part in parts) or "",
        tags=tuple(dict.fromkeys(tag for part in parts for tag in part.tags if tag)),
        ingredients=tuple(grouped.values()),
    )
