"""Shared httpx plumbing for the provider clients."""

import contextlib
from typing import AsyncIterator

import httpx


@contextlib.asynccontextmanager
async def client_session(
    http_client: httpx.AsyncClient | None,
    timeout: float,
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the injected client, or a short-lived one when none was given.

    An injected client is owned by the caller and is not closed here.
    """
    if http_client is not None:
        yield http_client
        return
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        yield client


def read_json(response: httpx.Response):
    """Response body as JSON, or None when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None
