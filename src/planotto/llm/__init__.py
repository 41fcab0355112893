"""Completion provider access (OpenRouter via the OpenAI SDK)."""

from .client import CompletionClient, extract_json_object

__all__ = ["CompletionClient", "extract_json_object"]
