"""
OCR provider client (fal.ai queue API).

fal accepts the key either as `Authorization: Key <k>` or as a bearer token
depending on how the key was issued. Every request tries the Key style
first and, on 401/403, retries exactly once with Bearer.
"""

import logging
from typing import Any

import httpx

from planotto.config import CoreSettings
from planotto.llm.prompt_logger import log_provider_call
from planotto.polling import Deadline, bounded_timeout, is_expired
from planotto.providers.http import client_session, read_json
from planotto.providers.result import ErrorKind, ProviderResult, error_kind_for_status

logger = logging.getLogger(__name__)

AUTH_MODES = ("Key", "Bearer")


class OcrClient:
    """Submit OCR jobs and fetch their status/result URLs."""

    def __init__(self, settings: CoreSettings, *, http_client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._http_client = http_client

    @property
    def api_key(self) -> str:
        return (self._settings.fal_key or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def submit(
        self,
        image_urls: list[str],
        *,
        language: str,
        deadline: Deadline | None = None,
    ) -> ProviderResult:
        """Enqueue an OCR job for all pages at once."""
        body = {
            "input": {
                "image_urls": list(image_urls),
                "language": language,
                "multi_page": True,
            }
        }
        return await self._request(
            "POST", self._settings.fal_ocr_endpoint, body, operation="ocr_submit", deadline=deadline
        )

    async def fetch(self, url: str, *, deadline: Deadline | None = None) -> ProviderResult:
        """GET a status or response URL handed back by `submit`."""
        return await self._request("GET", url, None, operation="ocr_poll", deadline=deadline)

    async def _request(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None,
        *,
        operation: str,
        deadline: Deadline | None,
    ) -> ProviderResult:
        if not self.configured:
            return ProviderResult.fail(ErrorKind.NOT_CONFIGURED)
        if is_expired(deadline):
            return ProviderResult.fail(ErrorKind.TIMEOUT)

        timeout = bounded_timeout(self._settings.provider_timeout_seconds, deadline)
        response: httpx.Response | None = None

        try:
            async with client_session(self._http_client, timeout) as client:
                for mode in AUTH_MODES:
                    response = await client.request(
                        method,
                        url,
                        headers={
                            "Authorization": f"{mode} {self.api_key}",
                            "Content-Type": "application/json",
                        },
                        json=body,
                        timeout=timeout,
                    )
                    if response.status_code not in (401, 403):
                        break
                    logger.info(f"OCR {operation} rejected {mode} auth ({response.status_code})")
        except httpx.TimeoutException:
            logger.warning(f"OCR {operation} timed out: {url}")
            log_provider_call(provider="fal", operation=operation, request=body, error="timeout")
            return ProviderResult.fail(ErrorKind.TIMEOUT)
        except httpx.HTTPError as e:
            logger.warning(f"OCR {operation} transport error: {e}")
            log_provider_call(provider="fal", operation=operation, request=body, error=str(e))
            return ProviderResult.fail(ErrorKind.SERVICE_ERROR)

        data = read_json(response)
        log_provider_call(
            provider="fal",
            operation=operation,
            request=body,
            response=data,
            status=response.status_code,
        )

        if response.is_success:
            return ProviderResult.ok(data)

        logger.error(
            f"OCR {operation} failed: status={response.status_code} details={response.text[:300]!r}"
        )
        return ProviderResult.fail(error_kind_for_status(response.status_code))
