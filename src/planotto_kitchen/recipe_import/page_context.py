"""
Page context for URL imports.

Fetches the recipe page and pulls its Schema.org Recipe (JSON-LD first,
microdata second) so the completion provider sees the real page content
instead of just the link. Every failure here is silent: the import simply
proceeds without context.
"""

import logging
import re
from typing import Any
from urllib.parse import urlparse

import extruct
import httpx

from planotto.polling import Deadline, bounded_timeout, is_expired
from planotto.providers.http import client_session
from planotto_kitchen.config import KitchenSettings

from .normalizer import (
    extract_image,
    instructions_text,
    parse_duration,
    parse_servings,
    safe_string,
    safe_string_list,
)

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

LOGIN_INDICATORS = (
    "sign in to continue",
    "log in to view",
    "subscribe to read",
    "subscription required",
    "please log in",
    "members only",
)


def validate_url(url: str) -> str | None:
    """
    Validate URL format.

    Returns the normalized URL, or None if it cannot be fetched.
    """
    if not isinstance(url, str):
        return None
    url = url.strip()
    if not re.match(r"^https?://", url, re.IGNORECASE):
        return None
    if not urlparse(url).netloc:
        return None
    return url


def is_login_page(html: str) -> bool:
    """Detect if the page is a login/paywall page."""
    html_lower = html.lower()
    return any(indicator in html_lower for indicator in LOGIN_INDICATORS)


def _is_recipe_type(value: Any) -> bool:
    return value == "Recipe" or (isinstance(value, list) and "Recipe" in value)


def find_recipe_in_json_ld(items: list) -> dict | None:
    """Find Recipe schema in JSON-LD data, including inside @graph."""
    for item in items:
        if not isinstance(item, dict):
            continue
        if _is_recipe_type(item.get("@type")):
            return item
        for graph_item in item.get("@graph") or []:
            if isinstance(graph_item, dict) and _is_recipe_type(graph_item.get("@type")):
                return graph_item
    return None


def find_recipe_in_microdata(items: list) -> dict | None:
    """Find Recipe schema in microdata."""
    for item in items:
        if isinstance(item, dict) and "Recipe" in str(item.get("type", "")):
            properties = item.get("properties")
            return properties if isinstance(properties, dict) else None
    return None


def recipe_context(recipe: dict[str, Any]) -> dict[str, Any]:
    """Reduce a Schema.org Recipe to the fields the import prompt uses."""
    ingredients = recipe.get("recipeIngredient") or recipe.get("ingredients")
    return {
        "title": safe_string(recipe.get("name")),
        "description": safe_string(recipe.get("description")),
        "ingredients": safe_string_list(ingredients),
        "instructions": instructions_text(recipe.get("recipeInstructions")),
        "servings": parse_servings(recipe.get("recipeYield")),
        "timeMinutes": parse_duration(recipe.get("totalTime") or recipe.get("cookTime")),
        "image": extract_image(recipe.get("image")),
    }


def extract_page_recipe(html: str, base_url: str) -> dict[str, Any] | None:
    """Schema.org Recipe context from page HTML, or None."""
    try:
        data = extruct.extract(html, base_url=base_url, syntaxes=["json-ld", "microdata"])
    except Exception as e:
        # extruct surfaces lxml/json errors of many types on broken pages
        logger.debug(f"Structured data extraction failed for {base_url}: {e}")
        return None

    recipe = find_recipe_in_json_ld(data.get("json-ld", []))
    if not recipe:
        recipe = find_recipe_in_microdata(data.get("microdata", []))
    if not recipe:
        return None
    return recipe_context(recipe)


class PageContextFetcher:
    """Fetch a recipe page and return its structured recipe, if any."""

    def __init__(self, settings: KitchenSettings, *, http_client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._http_client = http_client

    @property
    def enabled(self) -> bool:
        return self._settings.import_fetch_pages

    async def fetch(self, url: str, *, deadline: Deadline | None = None) -> dict[str, Any] | None:
        target = validate_url(url)
        if not self.enabled or target is None or is_expired(deadline):
            return None

        timeout = bounded_timeout(self._settings.page_fetch_timeout_seconds, deadline)
        try:
            async with client_session(self._http_client, timeout) as client:
                response = await client.get(target, headers=BROWSER_HEADERS, timeout=timeout)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.info(f"Could not fetch recipe page {target}: {e}")
            return None

        html = response.text
        if is_login_page(html):
            logger.info(f"Recipe page is behind a login wall: {target}")
            return None

        context = extract_page_recipe(html, str(response.url))
        if context is None:
            logger.info(f"No structured recipe data found on {target}")
        return context
