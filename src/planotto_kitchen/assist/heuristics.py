"""
Provider-free fallbacks for every assist action.

Each function takes the raw request payload and always returns a usable
response body, whatever the payload looks like. No network, no randomness
except through the injected EntropySource.
"""

import math
import re
from typing import Any

from planotto.entropy import EntropySource
from planotto_kitchen.recipe_import.models import (
    ImportOutcome,
    ImportSource,
    Ingredient,
    RecipeDraft,
    Unit,
)
from planotto_kitchen.recipe_import.normalizer import request_photos, safe_string, safe_string_list
from planotto_kitchen.recipe_import.prompts import (
    DRAFT_CREATED_MESSAGE,
    PHOTO_FAILURE_MESSAGE,
    RECOGNITION_INCOMPLETE_ISSUE,
    REVIEW_UNITS_ISSUE,
    URL_FALLBACK_TITLE,
    photos_processed_issue,
)

MAX_SUGGESTIONS = 4
MAX_TAGS = 6
PLACEHOLDER_IMAGE_SIZE = 1024


def _number(value: Any) -> float | None:
    """Finite number from a number or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return None


def _index(value: Any) -> int | None:
    number = _number(value)
    if number is None or number != int(number):
        return None
    return int(number)


# ---------------------------------------------------------------------------
# Ingredient / tag / servings hints
# ---------------------------------------------------------------------------


def ingredient_hints(payload: dict[str, Any]) -> dict[str, Any]:
    """Known products whose name contains each ingredient's name."""
    known_products = safe_string_list(payload.get("knownProducts"))
    entries = payload.get("ingredients")
    items = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        index = _index(entry.get("index"))
        name = safe_string(entry.get("name")).lower()
        if index is None or not name:
            continue
        suggestions = [product for product in known_products if name in product.lower()]
        items.append({"index": index, "suggestions": suggestions[:MAX_SUGGESTIONS]})
    return {"items": items}


# (tag id, keywords) scanned over the recipe text
TAG_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("vegan", ("vegan", "веган")),
    ("vegetarian", ("vegetarian", "вегет")),
    ("gluten_free", ("gluten free", "gluten-free", "без глют")),
    ("lactose_free", ("lactose free", "lactose-free", "dairy free", "без лакт")),
    ("breakfast", ("breakfast", "завтрак")),
    ("lunch", ("lunch", "обед")),
    ("dinner", ("dinner", "ужин")),
    ("quick", ("quick", "быстр")),
)


def recipe_text(payload: dict[str, Any]) -> str:
    """Title, description, instructions and ingredient names as one lowercase string."""
    ingredients = payload.get("ingredients")
    names = []
    for item in ingredients if isinstance(ingredients, list) else []:
        if isinstance(item, dict):
            item = item.get("name")
        text = safe_string(item)
        if text:
            names.append(text)
    parts = [
        safe_string(payload.get("title")),
        safe_string(payload.get("shortDescription")),
        safe_string(payload.get("instructions")),
        " ".join(names),
    ]
    return " ".join(parts).lower()


def tag_hints(payload: dict[str, Any]) -> dict[str, Any]:
    text = recipe_text(payload)
    tags = [tag for tag, keywords in TAG_KEYWORDS if any(word in text for word in keywords)]
    return {"suggestedTags": tags[:MAX_TAGS], "message": "Suggestion ready."}


def estimate_servings(total_amount: float) -> int:
    if total_amount > 1500:
        return 5
    if total_amount > 900:
        return 4
    if total_amount > 500:
        return 3
    return 2


def servings_hint(payload: dict[str, Any]) -> dict[str, Any]:
    """Guess servings from the summed ingredient amounts."""
    ingredients = payload.get("ingredients")
    total = 0.0
    for item in ingredients if isinstance(ingredients, list) else []:
        amount = _number(item.get("amount")) if isinstance(item, dict) else None
        if amount:
            total += amount
    servings = estimate_servings(total)
    return {
        "suggestedServings": servings,
        "message": f"Based on the ingredients this looks like {servings}-{servings + 1} servings. Set it?",
    }


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

IMAGE_PROMPT_GUARDS = (
    "no people, no faces, no text, no letters, no logo, no watermark, "
    "no qr code, no poster, no robot, no mascot"
)
_SOUP_RE = re.compile(r"soup|рагу|суп|broth", re.IGNORECASE)


def build_image_prompt(payload: dict[str, Any]) -> str:
    title = safe_string(payload.get("title")) or "home-made dish"
    ingredients = ", ".join(safe_string_list(payload.get("ingredients"))[:5])
    parts = [
        f"realistic home-cooked {title}",
        f"ingredients focus: {ingredients}" if ingredients else "",
        "close-up food photography, plated dish, natural kitchen light",
        IMAGE_PROMPT_GUARDS,
    ]
    return ", ".join(part for part in parts if part)


def build_placeholder_image_url(prompt: str, entropy: EntropySource, base_url: str) -> str:
    """Stock food photo URL; seed and nonce only bust caches."""
    category = "soup,food" if _SOUP_RE.search(prompt) else "food,meal"
    size = PLACEHOLDER_IMAGE_SIZE
    return (
        f"{base_url.rstrip('/')}/{size}/{size}/{category}"
        f"?lock={entropy.seed()}&_={entropy.nonce()}"
    )


def recipe_image(payload: dict[str, Any], entropy: EntropySource, base_url: str) -> dict[str, Any]:
    prompt = build_image_prompt(payload)
    return {
        "prompt": prompt,
        "imageUrl": build_placeholder_image_url(prompt, entropy, base_url),
        "message": "Photo prepared. Check it and replace it if needed.",
    }


# ---------------------------------------------------------------------------
# Menu and assistant
# ---------------------------------------------------------------------------


def menu_suggestion(payload: dict[str, Any]) -> dict[str, Any]:
    people = _number(payload.get("peopleCount"))
    days = _number(payload.get("days"))
    people = people if people and people > 0 else 2
    days = days if days and days > 0 else 7
    return {
        "message": (
            f"Basic plan: {days:g} days, {people:g} people. "
            "Alternate quick dishes with more elaborate ones."
        )
    }


EGG_KEYWORDS = ("яичниц", "омлет", "omelet", "omelette", "scrambled egg", "fried egg")
COOKING_KEYWORDS = (
    "как приготовить",
    "как сделать",
    "рецепт ",
    "пожарить",
    "сварить",
    "запечь",
    "how to cook",
    "how do i cook",
    "how to make",
    "how do i make",
    "recipe for",
    "fry ",
    "boil ",
    "bake ",
    *EGG_KEYWORDS,
)
UI_INSTRUCTION_KEYWORDS = (
    "перейдите в раздел",
    "нажмите кнопку",
    "добавить рецепт",
    "go to the section",
    "click the button",
    "press the button",
    "add recipe",
)

EGG_ANSWER = (
    "Quick fried eggs: heat a pan, add a little oil, crack in 2-3 eggs, salt them and cook "
    "for 2-4 minutes over medium heat to your liking. For a softer texture cover the pan "
    "with a lid for 1 minute."
)
SECTION_ANSWERS: tuple[tuple[str, str], ...] = (
    (
        "/recipes",
        "In recipes you can add a title, ingredients, steps, tags and a photo. "
        "Ask a specific question about a dish and I will answer step by step.",
    ),
    (
        "/menu",
        "In the menu, pick a period at the top and add dishes by day. I can suggest a "
        "simple plan if you tell me your restrictions and the number of people.",
    ),
    (
        "/shopping-list",
        "The shopping list is built from the menu. Tick off what you bought; items can "
        "be moved to the pantry.",
    ),
    (
        "/pantry",
        "Keep leftovers in the pantry by name, amount and unit. Matching names are summed.",
    ),
)
DEFAULT_HELP_ANSWER = (
    "Ask your question in plain words, for example \"how to make fried eggs\" or "
    "\"why didn't a product get into the shopping list\"."
)


def is_cooking_question(text: str) -> bool:
    value = text.lower()
    return any(keyword in value for keyword in COOKING_KEYWORDS)


def is_egg_question(text: str) -> bool:
    value = text.lower()
    return any(keyword in value for keyword in EGG_KEYWORDS)


def looks_like_ui_instruction(text: str) -> bool:
    value = text.lower()
    return any(keyword in value for keyword in UI_INSTRUCTION_KEYWORDS)


def assistant_help(payload: dict[str, Any]) -> dict[str, Any]:
    """Fixed answers keyed on the question, then on the current page."""
    question = safe_string(payload.get("question")).lower()
    pathname = safe_string(payload.get("pathname"))

    if is_egg_question(question) or "how to cook" in question or "как приготовить" in question:
        return {"message": EGG_ANSWER}
    for prefix, answer in SECTION_ANSWERS:
        if pathname.startswith(prefix):
            return {"message": answer}
    return {"message": DEFAULT_HELP_ANSWER}


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


def imported_draft(source: ImportSource, payload: dict[str, Any]) -> ImportOutcome:
    """
    Last-resort import result.

    Photos: no draft, just an explanation. URL: a skeleton draft seeded with
    the first known products for the user to complete.
    """
    if source == ImportSource.PHOTO:
        count = len(request_photos(payload))
        issue = photos_processed_issue(count) if count > 1 else RECOGNITION_INCOMPLETE_ISSUE
        return ImportOutcome(draft=None, message=PHOTO_FAILURE_MESSAGE, issues=(issue,))

    known_products = safe_string_list(payload.get("knownProducts"))
    draft = RecipeDraft(
        title=URL_FALLBACK_TITLE,
        ingredients=tuple(
            Ingredient(name=name, amount=0, unit=Unit.PCS, needs_review=True)
            for name in known_products[:3]
        ),
    )
    return ImportOutcome(draft=draft, message=DRAFT_CREATED_MESSAGE, issues=(REVIEW_UNITS_ISSUE,))
