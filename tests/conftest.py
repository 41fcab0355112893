"""
Pytest configuration and fixtures for Planotto tests.

Outbound HTTP never leaves the process: every provider client gets an
httpx.AsyncClient over an httpx.MockTransport.
"""

import json

import httpx
import pytest

from planotto_kitchen.config import KitchenSettings

PROVIDER_ENV_VARS = (
    "OPENROUTER_API_KEY",
    "OPENROUTER_KEY",
    "FAL_KEY",
    "FAL_API_KEY",
    "FUSIONBRAIN_API_KEY",
    "FUSIONBRAIN_SECRET_KEY",
    "FUSIONBRAIN_CREDENTIALS",
    "PLANOTTO_LOG_PROVIDER_CALLS",
    "IMPORT_DEADLINE_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch):
    """Credentials from the developer's shell must not reach the tests."""
    for var in PROVIDER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_settings():
    """Settings factory ignoring any .env file; no provider configured by default."""

    def make(**overrides) -> KitchenSettings:
        values = {"import_fetch_pages": False, **overrides}
        return KitchenSettings(_env_file=None, **values)

    return make


@pytest.fixture
def chat_completion():
    """Build an OpenAI-compatible chat completion body around `content`."""

    def build(content) -> dict:
        if not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)
        return {
            "id": "gen-test",
            "object": "chat.completion",
            "created": 0,
            "model": "openai/gpt-4o-mini",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }

    return build


@pytest.fixture
def mock_http():
    """
    AsyncClient factory over a MockTransport.

    `handler(request)` returns an httpx.Response; every request is recorded
    on the returned client's `.requests` list.
    """

    def make(handler) -> httpx.AsyncClient:
        requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        client.requests = requests
        return client

    return make


@pytest.fixture
def no_sleep():
    """Sleep stand-in that records requested delays."""
    delays: list[float] = []

    async def sleep(seconds: float) -> None:
        delays.append(seconds)

    sleep.delays = delays
    return sleep
