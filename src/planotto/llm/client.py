"""
Planotto - Completion client.

Wraps the OpenAI SDK pointed at OpenRouter. All chat/vision calls go through
here so that auth, error mapping and logging stay in one place.

The model is asked to answer with JSON; the first JSON object found in its
text becomes the result payload. Callers only ever see ProviderResult.
"""

import json
import logging
import re
from typing import Any

import httpx
from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, AsyncOpenAI

from planotto.config import CoreSettings
from planotto.llm.prompt_logger import log_provider_call
from planotto.polling import Deadline, bounded_timeout, is_expired
from planotto.providers.result import ErrorKind, ProviderResult, error_kind_for_status

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """
    Locate the first well-formed JSON object in model output.

    Tries, in order: the whole text, a fenced ```json block, and the
    substring between the first "{" and the last "}".
    """
    if not text or not text.strip():
        return None

    candidates = [text]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    first, last = text.find("{"), text.rfind("}")
    if first >= 0 and last > first:
        candidates.append(text[first : last + 1])

    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(value, dict):
            return value
    return None


def _provider_error_details(error: APIStatusError) -> str:
    """Best-effort diagnostic text from an error body (for logs only)."""
    body = error.body
    if isinstance(body, dict):
        detail = body.get("error", body)
        if isinstance(detail, dict):
            return str(detail.get("message") or detail.get("code") or detail)[:300]
        return str(detail)[:300]
    return str(error.message)[:300]


def _message_text(completion: Any) -> str:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content if isinstance(content, str) else ""


class CompletionClient:
    """
    Single-shot chat completion with optional image attachments.

    The SDK client is created lazily and only when a key is configured, so a
    missing key never results in a network call.
    """

    def __init__(self, settings: CoreSettings, *, http_client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._http_client = http_client
        self._client: AsyncOpenAI | None = None

    @property
    def api_key(self) -> str:
        return (self._settings.openrouter_api_key or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def default_model(self) -> str:
        return self._settings.openrouter_model

    @property
    def vision_model(self) -> str:
        return self._settings.openrouter_vision_model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self._settings.openrouter_base_url,
                max_retries=0,
                timeout=self._settings.provider_timeout_seconds,
                default_headers={
                    "HTTP-Referer": self._settings.openrouter_referer,
                    "X-Title": self._settings.openrouter_title,
                },
                http_client=self._http_client,
            )
        return self._client

    async def complete(
        self,
        *,
        system_prompt: str,
        user_payload: dict[str, Any] | str,
        images: list[str] | tuple[str, ...] = (),
        model: str | None = None,
        deadline: Deadline | None = None,
    ) -> ProviderResult:
        """
        Make one completion call and pull a JSON object out of the answer.

        Args:
            system_prompt: System message
            user_payload: Dict (sent as JSON text) or free text
            images: Image data URLs attached as multimodal parts
            model: Model override; defaults to the configured text model
            deadline: Optional deadline capping the network timeout

        Returns:
            ProviderResult. On success the payload is the parsed JSON object,
            or None when the answer contained no JSON object.
        """
        model = model or self.default_model
        user_text = (
            user_payload
            if isinstance(user_payload, str)
            else json.dumps(user_payload, ensure_ascii=False)
        )

        if not self.configured:
            logger.error("OPENROUTER_API_KEY is missing")
            return ProviderResult.fail(ErrorKind.NOT_CONFIGURED)
        if is_expired(deadline):
            return ProviderResult.fail(ErrorKind.TIMEOUT)

        user_content: str | list[dict[str, Any]] = user_text
        if images:
            user_content = [{"type": "text", "text": user_text}] + [
                {"type": "image_url", "image_url": {"url": url}} for url in images
            ]

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]
        request_log = {"model": model, "system": system_prompt, "user": user_text, "images": list(images)}

        try:
            completion = await self._get_client().chat.completions.create(
                model=model,
                messages=messages,
                temperature=self._settings.openrouter_temperature,
                timeout=bounded_timeout(self._settings.provider_timeout_seconds, deadline),
            )
        except APIStatusError as e:
            details = _provider_error_details(e)
            logger.error(
                f"Completion request failed: status={e.status_code} model={model} "
                f"has_images={bool(images)} details={details!r}"
            )
            log_provider_call(
                provider="openrouter", operation="chat", request=request_log, status=e.status_code, error=details
            )
            return ProviderResult.fail(error_kind_for_status(e.status_code))
        except APITimeoutError:
            logger.warning(f"Completion request timed out: model={model}")
            log_provider_call(provider="openrouter", operation="chat", request=request_log, error="timeout")
            return ProviderResult.fail(ErrorKind.TIMEOUT)
        except APIConnectionError as e:
            logger.warning(f"Completion transport error: {e}")
            log_provider_call(provider="openrouter", operation="chat", request=request_log, error=str(e))
            return ProviderResult.fail(ErrorKind.SERVICE_ERROR)
        except APIError as e:
            # Response arrived but could not be decoded
            logger.error(f"Completion returned an unreadable response: {e}")
            log_provider_call(provider="openrouter", operation="chat", request=request_log, error=str(e))
            return ProviderResult.fail(ErrorKind.INVALID_RESPONSE)

        text = _message_text(completion)
        log_provider_call(provider="openrouter", operation="chat", request=request_log, response=text)

        payload = extract_json_object(text)
        if payload is None:
            logger.info(f"Completion answer contained no JSON object (model={model})")
        return ProviderResult.ok(payload)
