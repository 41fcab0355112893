"""
Assist action dispatch.

Every action asks a provider first and falls back to the matching
heuristic whenever the provider is unconfigured, fails or answers with
nothing usable. Callers always get a response body.
"""

import asyncio
import logging
import math
from enum import Enum
from typing import Any

import httpx

from planotto.entropy import EntropySource, SystemEntropy
from planotto.llm import CompletionClient
from planotto.providers import ImageGenClient, OcrClient
from planotto_kitchen.config import KitchenSettings
from planotto_kitchen.recipe_import.coordinator import ImportCoordinator
from planotto_kitchen.recipe_import.normalizer import safe_string, safe_string_list
from planotto_kitchen.recipe_import.ocr import OcrExtractor
from planotto_kitchen.recipe_import.page_context import PageContextFetcher
from planotto_kitchen.recipe_import.vision import VisionImporter

from . import heuristics
from .heuristics import is_cooking_question, is_egg_question, looks_like_ui_instruction
from .prompts import (
    ASSISTANT_HELP_PROMPT,
    INGREDIENT_HINTS_PROMPT,
    MENU_SUGGESTION_PROMPT,
    SERVINGS_HINT_PROMPT,
    TAG_HINTS_PROMPT,
)
from .tags import RECIPE_TAGS, normalize_tag_id

logger = logging.getLogger(__name__)


class AssistAction(str, Enum):
    INGREDIENT_HINTS = "ingredient_hints"
    TAG_HINTS = "tag_hints"
    SERVINGS_HINT = "servings_hint"
    RECIPE_IMAGE = "recipe_image"
    MENU_SUGGESTION = "menu_suggestion"
    ASSISTANT_HELP = "assistant_help"
    IMPORT_RECIPE_URL = "import_recipe_url"
    IMPORT_RECIPE_PHOTO = "import_recipe_photo"


def filter_tags(suggested: list[str], allowed: list[str]) -> list[str]:
    """
    Keep only allow-listed tags.

    A suggestion matches when it is in `allowed` verbatim or when its
    resolved tag id is.
    """
    allowed_set = set(allowed)
    kept: list[str] = []
    for tag in suggested:
        candidate = tag if tag in allowed_set else normalize_tag_id(tag)
        if candidate in allowed_set and candidate not in kept:
            kept.append(candidate)
    return kept


def _hint_items(value: Any) -> list[dict[str, Any]] | None:
    """Validated `items` of an ingredient-hints answer, None when absent."""
    if not isinstance(value, list):
        return None
    items = []
    for item in value:
        if not isinstance(item, dict):
            continue
        index = item.get("index")
        if isinstance(index, bool) or not isinstance(index, int):
            continue
        items.append({"index": index, "suggestions": safe_string_list(item.get("suggestions"))})
    return items


def _positive_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) and value > 0 else None


class AssistService:
    """Handle one assist action."""

    def __init__(
        self,
        completion: CompletionClient,
        image_gen: ImageGenClient,
        coordinator: ImportCoordinator,
        settings: KitchenSettings,
        *,
        entropy: EntropySource | None = None,
    ):
        self._completion = completion
        self._image_gen = image_gen
        self._coordinator = coordinator
        self._settings = settings
        self._entropy = entropy or SystemEntropy()

    async def handle(self, action: AssistAction, payload: dict[str, Any]) -> dict[str, Any]:
        handler = {
            AssistAction.INGREDIENT_HINTS: self.ingredient_hints,
            AssistAction.TAG_HINTS: self.tag_hints,
            AssistAction.SERVINGS_HINT: self.servings_hint,
            AssistAction.RECIPE_IMAGE: self.recipe_image,
            AssistAction.MENU_SUGGESTION: self.menu_suggestion,
            AssistAction.ASSISTANT_HELP: self.assistant_help,
            AssistAction.IMPORT_RECIPE_URL: self.import_recipe_url,
            AssistAction.IMPORT_RECIPE_PHOTO: self.import_recipe_photo,
        }[action]
        logger.info(f"Assist action: {action.value}")
        return await handler(payload)

    async def _ask(self, system_prompt: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        """JSON answer of the text model, or None on any failure."""
        result = await self._completion.complete(system_prompt=system_prompt, user_payload=payload)
        if result.success and isinstance(result.payload, dict):
            return result.payload
        return None

    async def ingredient_hints(self, payload: dict[str, Any]) -> dict[str, Any]:
        answer = await self._ask(INGREDIENT_HINTS_PROMPT, payload)
        items = _hint_items(answer.get("items")) if answer else None
        if items is None:
            return heuristics.ingredient_hints(payload)
        return {"items": items}

    async def tag_hints(self, payload: dict[str, Any]) -> dict[str, Any]:
        allowed = safe_string_list(payload.get("allowedTags")) or list(RECIPE_TAGS)
        answer = await self._ask(TAG_HINTS_PROMPT, {**payload, "allowedTags": allowed})
        if answer is None:
            fallback = heuristics.tag_hints(payload)
            return {**fallback, "suggestedTags": filter_tags(fallback["suggestedTags"], allowed)}
        return {
            "suggestedTags": filter_tags(safe_string_list(answer.get("suggestedTags")), allowed),
            "message": safe_string(answer.get("message")) or "Tag suggestion ready.",
        }

    async def servings_hint(self, payload: dict[str, Any]) -> dict[str, Any]:
        answer = await self._ask(SERVINGS_HINT_PROMPT, payload)
        if answer is None:
            return heuristics.servings_hint(payload)
        return {
            "suggestedServings": _positive_number(answer.get("suggestedServings")),
            "message": safe_string(answer.get("message")) or "Servings suggestion ready.",
        }

    async def recipe_image(self, payload: dict[str, Any]) -> dict[str, Any]:
        fallback = heuristics.recipe_image(
            payload, self._entropy, self._settings.placeholder_image_base_url
        )
        if not self._image_gen.configured:
            return fallback

        generated = await self._image_gen.generate(fallback["prompt"])
        if generated.success:
            return {
                "prompt": fallback["prompt"],
                "imageUrl": generated.payload,
                "message": "Photo generated.",
            }
        logger.warning(f"Image generation failed: {generated.error_kind}")
        return {**fallback, "message": "Could not generate the photo. Using a placeholder instead."}

    async def menu_suggestion(self, payload: dict[str, Any]) -> dict[str, Any]:
        answer = await self._ask(MENU_SUGGESTION_PROMPT, payload)
        message = safe_string(answer.get("message")) if answer else ""
        return {"message": message} if message else heuristics.menu_suggestion(payload)

    async def assistant_help(self, payload: dict[str, Any]) -> dict[str, Any]:
        question = safe_string(payload.get("question"))
        if is_egg_question(question):
            return heuristics.assistant_help(payload)

        answer = await self._ask(ASSISTANT_HELP_PROMPT, payload)
        message = safe_string(answer.get("message")) if answer else ""
        if not message:
            return heuristics.assistant_help(payload)
        if is_cooking_question(question) and looks_like_ui_instruction(message):
            # The model answered a cooking question with app navigation
            return heuristics.assistant_help(payload)
        return {"message": message}

    async def import_recipe_url(self, payload: dict[str, Any]) -> dict[str, Any]:
        outcome = await self._coordinator.import_url(payload)
        return outcome.to_dict()

    async def import_recipe_photo(self, payload: dict[str, Any]) -> dict[str, Any]:
        outcome = await self._coordinator.import_photos(payload)
        return outcome.to_dict()


def create_assist_service(
    settings: KitchenSettings,
    *,
    http_client: httpx.AsyncClient | None = None,
    entropy: EntropySource | None = None,
    sleep=asyncio.sleep,
) -> AssistService:
    """Wire providers, import tiers and the dispatcher around one HTTP pool."""
    completion = CompletionClient(settings, http_client=http_client)
    image_gen = ImageGenClient(settings, http_client=http_client, sleep=sleep)
    coordinator = ImportCoordinator(
        completion=completion,
        ocr=OcrExtractor(OcrClient(settings, http_client=http_client), completion, settings, sleep=sleep),
        vision=VisionImporter(completion, known_products_limit=settings.known_products_limit),
        page_context=PageContextFetcher(settings, http_client=http_client),
        settings=settings,
    )
    return AssistService(completion, image_gen, coordinator, settings, entropy=entropy)
