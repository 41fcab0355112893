"""Vision import tier: photos go to the completion provider as images."""

import logging
from typing import Any

from planotto.llm import CompletionClient
from planotto.polling import Deadline

from .models import RecipeDraft, VisionResult
from .normalizer import safe_string
from .parser import parse_draft
from .prompts import BASE_FALLBACK_ISSUE, PAGE_ORDER_NOTE, PHOTO_IMPORT_PROMPT

logger = logging.getLogger(__name__)

MAX_VISION_PHOTOS = 8


class VisionImporter:
    """
    Two strategies over the same prompt.

    `combined` sends every photo in one call; `per_page` sends one call per
    photo, in the order given. Which one runs, and when, is the caller's
    decision.
    """

    def __init__(self, completion: CompletionClient, *, known_products_limit: int = 200):
        self._completion = completion
        self._known_products_limit = known_products_limit

    async def combined(
        self,
        photos: list[str],
        known_products: list[str],
        *,
        deadline: Deadline | None = None,
    ) -> VisionResult:
        photos = photos[:MAX_VISION_PHOTOS]
        context = {
            "totalPages": len(photos),
            "pageOrder": PAGE_ORDER_NOTE,
            "knownProducts": known_products[: self._known_products_limit],
        }
        return await self._collect([(context, photos)], deadline)

    async def per_page(
        self,
        photos: list[str],
        known_products: list[str],
        *,
        deadline: Deadline | None = None,
    ) -> VisionResult:
        photos = photos[:MAX_VISION_PHOTOS]
        calls = [
            (
                {
                    "page": index + 1,
                    "totalPages": len(photos),
                    "knownProducts": known_products[: self._known_products_limit],
                },
                [photo],
            )
            for index, photo in enumerate(photos)
        ]
        return await self._collect(calls, deadline)

    async def _collect(
        self,
        calls: list[tuple[dict[str, Any], list[str]]],
        deadline: Deadline | None,
    ) -> VisionResult:
        parts: list[RecipeDraft] = []
        messages: list[str] = []
        issues: list[str] = []

        for context, images in calls:
            result = await self._completion.complete(
                system_prompt=PHOTO_IMPORT_PROMPT,
                user_payload=context,
                images=images,
                model=self._completion.vision_model,
                deadline=deadline,
            )
            if not result.success:
                logger.warning(f"Vision call failed ({result.error_kind}) for {len(images)} photo(s)")
                issues.append(BASE_FALLBACK_ISSUE)
                continue

            answer = result.payload if isinstance(result.payload, dict) else {}
            message = safe_string(answer.get("message"))
            if message:
                messages.append(message)
            recipe = answer.get("recipe")
            draft = parse_draft(recipe) if recipe else None
            if draft is not None:
                parts.append(draft)

        return VisionResult(parts=tuple(parts), messages=tuple(messages), issues=tuple(issues))
