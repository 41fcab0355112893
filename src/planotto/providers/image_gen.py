"""
Image generation provider client (FusionBrain / Kandinsky).

Two-step protocol:
1. GET /models -> pick the first available model id
2. POST /text2image/run (multipart: model_id + JSON params) -> job uuid
then poll GET /text2image/status/{uuid} until DONE/FAIL.

Requires both an API key and a secret key.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable

import httpx

from planotto.config import CoreSettings
from planotto.llm.prompt_logger import log_provider_call
from planotto.polling import (
    DEADLINE_REASON,
    PENDING,
    TIMEOUT_REASON,
    Deadline,
    Done,
    Failed,
    PollStatus,
    bounded_timeout,
    is_expired,
    poll,
)
from planotto.providers.http import client_session, read_json
from planotto.providers.result import ErrorKind, ProviderResult, error_kind_for_status

logger = logging.getLogger(__name__)

IMAGE_SIZE = 1024


class ImageGenClient:
    """Generate a single square image for a text prompt."""

    def __init__(
        self,
        settings: CoreSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._settings = settings
        self._http_client = http_client
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return self._settings.fusionbrain_key_pair() is not None

    def _headers(self) -> dict[str, str]:
        api_key, secret_key = self._settings.fusionbrain_key_pair()
        return {"X-Key": f"Key {api_key}", "X-Secret": f"Secret {secret_key}"}

    def _url(self, path: str) -> str:
        return f"{self._settings.fusionbrain_base_url.rstrip('/')}/{path.lstrip('/')}"

    async def generate(self, prompt: str, *, deadline: Deadline | None = None) -> ProviderResult:
        """
        Run the full model -> submit -> poll sequence.

        Returns:
            ProviderResult whose payload is a `data:image/png;base64,...` URL
        """
        if not self.configured:
            return ProviderResult.fail(ErrorKind.NOT_CONFIGURED)

        model = await self.fetch_model_id(deadline=deadline)
        if not model.success:
            return model

        job = await self.submit(model.payload, prompt, deadline=deadline)
        if not job.success:
            return job

        async def check() -> PollStatus:
            return await self.check(job.payload, deadline=deadline)

        status = await poll(
            check,
            max_attempts=self._settings.image_poll_attempts,
            delay=self._settings.image_poll_delay,
            deadline=deadline,
            sleep=self._sleep,
        )
        if isinstance(status, Done):
            return ProviderResult.ok(status.payload)

        logger.warning(f"Image generation job {job.payload} ended without an image: {status.reason}")
        if status.reason in (TIMEOUT_REASON, DEADLINE_REASON):
            return ProviderResult.fail(ErrorKind.TIMEOUT)
        return ProviderResult.fail(ErrorKind.JOB_FAILED)

    async def fetch_model_id(self, *, deadline: Deadline | None = None) -> ProviderResult:
        """First model id from the catalogue."""
        response = await self._send("GET", "models", operation="models", deadline=deadline)
        if isinstance(response, ProviderResult):
            return response
        if not response.is_success:
            return self._http_failure("models", response)

        data = read_json(response)
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            logger.error("Image generation model list was empty or malformed")
            return ProviderResult.fail(ErrorKind.INVALID_RESPONSE)

        try:
            model_id = int(data[0].get("id"))
        except (TypeError, ValueError):
            return ProviderResult.fail(ErrorKind.INVALID_RESPONSE)
        return ProviderResult.ok(model_id)

    async def submit(
        self, model_id: int, prompt: str, *, deadline: Deadline | None = None
    ) -> ProviderResult:
        """Start a generation job; payload is the job uuid."""
        params = {
            "type": "GENERATE",
            "numImages": 1,
            "width": IMAGE_SIZE,
            "height": IMAGE_SIZE,
            "generateParams": {"query": prompt},
        }
        files = {
            "model_id": (None, str(model_id)),
            "params": (None, json.dumps(params), "application/json"),
        }
        response = await self._send(
            "POST", "text2image/run", operation="run", deadline=deadline, files=files, request_log=params
        )
        if isinstance(response, ProviderResult):
            return response
        if not response.is_success:
            return self._http_failure("run", response)

        data = read_json(response)
        uuid = data.get("uuid") if isinstance(data, dict) else None
        if not isinstance(uuid, str) or not uuid.strip():
            logger.error("Image generation run returned no job id")
            return ProviderResult.fail(ErrorKind.INVALID_RESPONSE)
        return ProviderResult.ok(uuid.strip())

    async def check(self, uuid: str, *, deadline: Deadline | None = None) -> PollStatus:
        """One status probe, translated into a poll status."""
        response = await self._send(
            "GET", f"text2image/status/{uuid}", operation="status", deadline=deadline
        )
        if isinstance(response, ProviderResult) or not response.is_success:
            return PENDING

        data = read_json(response)
        if not isinstance(data, dict):
            return PENDING

        status = str(data.get("status") or "").strip().upper()
        images = data.get("images") if isinstance(data.get("images"), list) else []
        first = images[0].strip() if images and isinstance(images[0], str) else ""

        if status == "DONE" and first:
            return Done(f"data:image/png;base64,{first}")
        if status == "FAIL":
            return Failed(str(data.get("errorDescription") or "generation failed"))
        return PENDING

    async def _send(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        deadline: Deadline | None,
        files: dict | None = None,
        request_log: Any = None,
    ) -> httpx.Response | ProviderResult:
        if is_expired(deadline):
            return ProviderResult.fail(ErrorKind.TIMEOUT)

        timeout = bounded_timeout(self._settings.provider_timeout_seconds, deadline)
        try:
            async with client_session(self._http_client, timeout) as client:
                response = await client.request(
                    method, self._url(path), headers=self._headers(), files=files, timeout=timeout
                )
        except httpx.TimeoutException:
            logger.warning(f"Image generation {operation} timed out")
            log_provider_call(provider="fusionbrain", operation=operation, request=request_log, error="timeout")
            return ProviderResult.fail(ErrorKind.TIMEOUT)
        except httpx.HTTPError as e:
            logger.warning(f"Image generation {operation} transport error: {e}")
            log_provider_call(provider="fusionbrain", operation=operation, request=request_log, error=str(e))
            return ProviderResult.fail(ErrorKind.SERVICE_ERROR)

        log_provider_call(
            provider="fusionbrain",
            operation=operation,
            request=request_log,
            response=read_json(response),
            status=response.status_code,
        )
        return response

    def _http_failure(self, operation: str, response: httpx.Response) -> ProviderResult:
        logger.error(
            f"Image generation {operation} failed: status={response.status_code} "
            f"details={response.text[:300]!r}"
        )
        return ProviderResult.fail(error_kind_for_status(response.status_code))
