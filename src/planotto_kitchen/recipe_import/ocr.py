"""
OCR import tier.

Submits every photo to the OCR provider in one multi-page job, waits for the
job with the bounded poller, mines the result JSON for text and asks the
completion provider to structure that text into a recipe.
"""

import asyncio
import logging
import re
from typing import Any

from planotto.llm import CompletionClient
from planotto.polling import DEADLINE_REASON, PENDING, TIMEOUT_REASON, Deadline, Done, Failed, poll
from planotto.providers import OcrClient
from planotto_kitchen.config import KitchenSettings

from .models import StageResult
from .normalizer import safe_string, safe_string_list
from .parser import parse_draft
from .prompts import (
    BASE_FALLBACK_ISSUE,
    OCR_JOB_FAILED_ISSUE,
    OCR_STRUCTURING_PROMPT,
    OCR_SUCCESS_MESSAGE,
    OCR_TEXT_INCOMPLETE_ISSUE,
    OCR_TIMEOUT_ISSUE,
    OCR_UNAVAILABLE_ISSUE,
    UNSTRUCTURED_ISSUE,
)

logger = logging.getLogger(__name__)

MAX_TEXT_DEPTH = 6

# Keys most likely to hold recognized text; visited before anything else
PRIORITY_KEYS = (
    "text",
    "ocr_text",
    "content",
    "markdown",
    "result",
    "results",
    "output",
    "outputs",
    "pages",
    "data",
)
RESULT_KEYS = ("response", "output", "result")
DONE_STATUSES = ("COMPLETED", "DONE")
FAILED_STATUSES = ("FAILED", "ERROR")

_URL_RE = re.compile(r"^(?:https?://|data:)", re.IGNORECASE)


def _ordered_children(value: dict[str, Any]) -> list[Any]:
    first = [value[key] for key in PRIORITY_KEYS if key in value]
    rest = [item for key, item in value.items() if key not in PRIORITY_KEYS]
    return first + rest


def collect_text_fragments(payload: Any, max_depth: int = MAX_TEXT_DEPTH) -> list[str]:
    """
    Walk an OCR result of unknown shape and collect text fragments.

    Uses an explicit stack: nothing deeper than `max_depth` levels below the
    root is visited. Strings of 2 chars or fewer and URLs are skipped.
    Fragments come back deduplicated, in document order.
    """
    fragments: dict[str, None] = {}
    stack: list[tuple[Any, int]] = [(payload, 0)]

    while stack:
        value, depth = stack.pop()
        if depth > max_depth or value is None:
            continue
        if isinstance(value, str):
            text = value.strip()
            if len(text) > 2 and not _URL_RE.match(text):
                fragments.setdefault(text, None)
            continue
        if isinstance(value, list):
            children = value
        elif isinstance(value, dict):
            children = _ordered_children(value)
        else:
            continue
        for child in reversed(children):
            stack.append((child, depth + 1))

    return list(fragments)


def extract_ocr_text(payload: Any, max_chars: int) -> str:
    """OCR text blob: deduplicated fragments, one per line, truncated."""
    return "\n".join(collect_text_fragments(payload)).strip()[:max_chars]


def _result_body(data: dict[str, Any]) -> Any | None:
    for key in RESULT_KEYS:
        if data.get(key) is not None:
            return data[key]
    return None


class OcrExtractor:
    """Run the OCR tier for one photo import."""

    def __init__(
        self,
        ocr: OcrClient,
        completion: CompletionClient,
        settings: KitchenSettings,
        *,
        sleep=asyncio.sleep,
    ):
        self._ocr = ocr
        self._completion = completion
        self._settings = settings
        self._sleep = sleep

    async def extract(
        self,
        photos: list[str],
        known_products: list[str],
        *,
        deadline: Deadline | None = None,
    ) -> StageResult:
        if not self._ocr.configured:
            logger.info("OCR key not configured, skipping OCR tier")
            return StageResult(issues=(BASE_FALLBACK_ISSUE,))

        submitted = await self._ocr.submit(
            photos, language=self._settings.ocr_language, deadline=deadline
        )
        if not submitted.success:
            logger.warning(f"OCR submit failed: {submitted.error_kind}")
            return StageResult(issues=(BASE_FALLBACK_ISSUE, OCR_UNAVAILABLE_ISSUE))

        payload, issue = await self._await_result(submitted.payload, deadline)
        if issue:
            return StageResult(issues=(BASE_FALLBACK_ISSUE, issue))

        text = extract_ocr_text(payload, self._settings.ocr_text_max_chars)
        if not text:
            logger.info("OCR result contained no usable text")
            return StageResult(issues=(BASE_FALLBACK_ISSUE, OCR_TEXT_INCOMPLETE_ISSUE))

        return await self._structure(text, known_products, deadline)

    async def _await_result(
        self, enqueued: Any, deadline: Deadline | None
    ) -> tuple[Any, str | None]:
        """
        Poll the job if the submit response points at one.

        Returns (result payload, None) or (None, issue sentence).
        """
        data = enqueued if isinstance(enqueued, dict) else {}
        status_url = safe_string(data.get("status_url"))
        response_url = safe_string(data.get("response_url"))
        poll_url = status_url or response_url
        if not poll_url:
            return data, None

        async def check():
            result = await self._ocr.fetch(poll_url, deadline=deadline)
            if not result.success:
                # Transient poll failures count as "still running"
                return PENDING
            body = result.payload if isinstance(result.payload, dict) else {}
            status = safe_string(body.get("status")).upper()
            if not status or status in DONE_STATUSES:
                found = _result_body(body)
                return Done(body if found is None else found)
            if status in FAILED_STATUSES:
                return Failed(status.lower())
            return PENDING

        outcome = await poll(
            check,
            max_attempts=self._settings.ocr_poll_attempts,
            delay=self._settings.ocr_poll_delay,
            deadline=deadline,
            sleep=self._sleep,
        )

        if isinstance(outcome, Failed):
            logger.warning(f"OCR job did not complete: {outcome.reason}")
            if outcome.reason in (TIMEOUT_REASON, DEADLINE_REASON):
                return None, OCR_TIMEOUT_ISSUE
            return None, OCR_JOB_FAILED_ISSUE

        payload = outcome.payload
        if (
            poll_url == status_url
            and response_url
            and response_url != status_url
            and isinstance(payload, dict)
            and _result_body(payload) is None
            and safe_string(payload.get("status"))
        ):
            # Queue status endpoints report completion without the result itself
            fetched = await self._ocr.fetch(response_url, deadline=deadline)
            if fetched.success and fetched.payload is not None:
                body = fetched.payload
                if isinstance(body, dict):
                    found = _result_body(body)
                    body = body if found is None else found
                payload = body
        return payload, None

    async def _structure(
        self, text: str, known_products: list[str], deadline: Deadline | None
    ) -> StageResult:
        result = await self._completion.complete(
            system_prompt=OCR_STRUCTURING_PROMPT,
            user_payload={
                "ocrText": text,
                "knownProducts": known_products[: self._settings.known_products_limit],
            },
            deadline=deadline,
        )

        answer = result.payload if result.success and isinstance(result.payload, dict) else {}
        draft = parse_draft(answer.get("recipe"))
        if draft is None:
            logger.info("OCR text could not be structured")
            return StageResult(issues=(BASE_FALLBACK_ISSUE, UNSTRUCTURED_ISSUE))

        return StageResult(
            draft=draft,
            message=safe_string(answer.get("message")) or OCR_SUCCESS_MESSAGE,
            issues=tuple(safe_string_list(answer.get("issues"))),
        )
