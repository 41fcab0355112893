"""
Import coordinator.

Photo imports walk the fallback tiers in order:

    OCR -> combined vision -> per-page vision -> merge -> heuristic

URL imports go completion -> parser -> heuristic. Every tier appends to the
issue list; the final list is deduplicated. Imports never fail hard: the
worst case is a heuristic (possibly empty) draft with its explanation.
"""

import dataclasses
import logging
from typing import Any

from planotto.llm import CompletionClient
from planotto.polling import Deadline, is_expired
from planotto_kitchen.assist.heuristics import imported_draft
from planotto_kitchen.config import KitchenSettings

from .merger import merge_drafts
from .models import ImportOutcome, ImportSource, RecipeDraft
from .normalizer import request_photos, safe_string, safe_string_list
from .ocr import OcrExtractor
from .page_context import PageContextFetcher
from .parser import parse_draft
from .prompts import (
    GENERIC_FALLBACK_TITLE,
    IMPORT_SUCCESS_MESSAGE,
    MULTI_PHOTO_SUCCESS_MESSAGE,
    OCR_SUCCESS_MESSAGE,
    PHOTO_FALLBACK_TITLE,
    URL_IMPORT_PROMPT,
)
from .vision import VisionImporter

logger = logging.getLogger(__name__)


def normalize_issues(issues) -> tuple[str, ...]:
    """Trimmed, non-empty, first occurrence wins."""
    cleaned = (safe_string(issue) for issue in issues)
    return tuple(dict.fromkeys(issue for issue in cleaned if issue))


def _titled(draft: RecipeDraft, fallback_title: str) -> RecipeDraft:
    return draft if draft.title else dataclasses.replace(draft, title=fallback_title)


class ImportCoordinator:
    """Sequence the import tiers for one request."""

    def __init__(
        self,
        completion: CompletionClient,
        ocr: OcrExtractor,
        vision: VisionImporter,
        page_context: PageContextFetcher,
        settings: KitchenSettings,
    ):
        self._completion = completion
        self._ocr = ocr
        self._vision = vision
        self._page_context = page_context
        self._settings = settings

    def _deadline(self) -> Deadline | None:
        seconds = self._settings.import_deadline_seconds
        return Deadline.after(seconds) if seconds > 0 else None

    async def import_photos(self, payload: dict[str, Any]) -> ImportOutcome:
        photos = request_photos(payload)[: self._settings.import_max_photos]
        known_products = safe_string_list(payload.get("knownProducts"))
        deadline = self._deadline()
        issues: list[str] = []

        if not photos:
            logger.info("Photo import without photos, using heuristic draft")
            return self._heuristic(ImportSource.PHOTO, payload, issues)

        # Tier 1: OCR + structuring
        stage = await self._ocr.extract(photos, known_products, deadline=deadline)
        if stage.draft is not None:
            logger.info("Photo import finished in OCR tier")
            return ImportOutcome(
                draft=_titled(stage.draft, PHOTO_FALLBACK_TITLE),
                message=stage.message or OCR_SUCCESS_MESSAGE,
                issues=normalize_issues(stage.issues),
            )
        issues.extend(stage.issues)

        if is_expired(deadline):
            logger.warning("Import deadline passed after OCR tier")
            return self._heuristic(ImportSource.PHOTO, payload, issues)

        # Tier 2: all photos in one vision call
        logger.info(f"Trying combined vision import for {len(photos)} photo(s)")
        vision = await self._vision.combined(photos, known_products, deadline=deadline)
        issues.extend(vision.issues)
        parts = list(vision.parts)
        messages = list(vision.messages)

        # Tier 3: one call per photo, only when the combined call found nothing
        if not parts and not is_expired(deadline):
            logger.info("Combined vision found nothing, trying page by page")
            pages = await self._vision.per_page(photos, known_products, deadline=deadline)
            issues.extend(pages.issues)
            parts.extend(pages.parts)
            messages.extend(pages.messages)

        merged = merge_drafts(parts)
        if merged is None or not merged.has_content:
            logger.info("No usable content from vision tiers, using heuristic draft")
            return self._heuristic(ImportSource.PHOTO, payload, issues)

        default_message = MULTI_PHOTO_SUCCESS_MESSAGE if len(photos) > 1 else IMPORT_SUCCESS_MESSAGE
        return ImportOutcome(
            draft=_titled(merged, PHOTO_FALLBACK_TITLE),
            message=messages[0] if messages else default_message,
            issues=normalize_issues(issues),
        )

    async def import_url(self, payload: dict[str, Any]) -> ImportOutcome:
        deadline = self._deadline()
        request = dict(payload)

        url = safe_string(payload.get("url"))
        if url:
            context = await self._page_context.fetch(url, deadline=deadline)
            if context:
                request["pageContext"] = context

        result = await self._completion.complete(
            system_prompt=URL_IMPORT_PROMPT,
            user_payload=request,
            deadline=deadline,
        )
        answer = result.payload if result.success and isinstance(result.payload, dict) else {}
        recipe = answer.get("recipe")
        draft = parse_draft(recipe) if recipe else None
        if draft is None:
            logger.info("URL import fell back to heuristic draft")
            return self._heuristic(ImportSource.URL, payload, [])

        return ImportOutcome(
            draft=_titled(draft, GENERIC_FALLBACK_TITLE),
            message=safe_string(answer.get("message")) or IMPORT_SUCCESS_MESSAGE,
            issues=normalize_issues(safe_string_list(answer.get("issues"))),
        )

    def _heuristic(
        self, source: ImportSource, payload: dict[str, Any], issues: list[str]
    ) -> ImportOutcome:
        fallback = imported_draft(source, payload)
        return dataclasses.replace(
            fallback, issues=normalize_issues([*fallback.issues, *issues])
        )
