"""Tests for fetching Schema.org recipe context from recipe pages."""

import asyncio
import json

import httpx

from planotto.polling import Deadline
from planotto_kitchen.recipe_import.page_context import (
    PageContextFetcher,
    extract_page_recipe,
    find_recipe_in_json_ld,
    find_recipe_in_microdata,
    is_login_page,
    recipe_context,
    validate_url,
)

RECIPE = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Lemon cake",
    "description": "Moist and bright",
    "recipeIngredient": ["200 g flour", "2 eggs", "1 lemon"],
    "recipeInstructions": [{"@type": "HowToStep", "text": "Mix"}, {"@type": "HowToStep", "text": "Bake"}],
    "recipeYield": "8 servings",
    "totalTime": "PT1H",
    "image": ["https://example.com/cake.jpg"],
}

EXPECTED_CONTEXT = {
    "title": "Lemon cake",
    "description": "Moist and bright",
    "ingredients": ["200 g flour", "2 eggs", "1 lemon"],
    "instructions": "Mix\nBake",
    "servings": 8,
    "timeMinutes": 60,
    "image": "https://example.com/cake.jpg",
}


def run(coro):
    return asyncio.run(coro)


def page_html(json_ld) -> str:
    return (
        "<html><head><title>Cake</title>"
        f'<script type="application/ld+json">{json.dumps(json_ld)}</script>'
        "</head><body><h1>Lemon cake</h1></body></html>"
    )


MICRODATA_HTML = """
<html><body>
<div itemscope itemtype="https://schema.org/Recipe">
  <h1 itemprop="name">Pea soup</h1>
  <span itemprop="recipeIngredient">500 g peas</span>
  <span itemprop="recipeIngredient">1 onion</span>
  <div itemprop="recipeInstructions">Boil everything.</div>
</div>
</body></html>
"""


class TestHelpers:
    def test_validate_url(self):
        assert validate_url(" https://example.com/cake ") == "https://example.com/cake"
        assert validate_url("ftp://example.com/cake") is None
        assert validate_url("example.com/cake") is None
        assert validate_url("https://") is None
        assert validate_url(None) is None

    def test_login_page(self):
        assert is_login_page("<p>Please LOG IN to view this recipe</p>")
        assert not is_login_page("<p>Preheat the oven</p>")

    def test_json_ld_graph(self):
        items = [{"@graph": [{"@type": "WebPage"}, {"@type": ["Recipe", "NewsArticle"], "name": "Pie"}]}]
        assert find_recipe_in_json_ld(items)["name"] == "Pie"
        assert find_recipe_in_json_ld([{"@type": "WebPage"}, "junk"]) is None

    def test_microdata(self):
        items = [{"type": "https://schema.org/Recipe", "properties": {"name": "Soup"}}]
        assert find_recipe_in_microdata(items) == {"name": "Soup"}
        assert find_recipe_in_microdata([{"type": "https://schema.org/Person"}]) is None

    def test_recipe_context(self):
        assert recipe_context(RECIPE) == EXPECTED_CONTEXT

    def test_extract_json_ld(self):
        assert extract_page_recipe(page_html(RECIPE), "https://example.com/cake") == EXPECTED_CONTEXT

    def test_extract_microdata(self):
        context = extract_page_recipe(MICRODATA_HTML, "https://example.com/soup")
        assert context["title"] == "Pea soup"
        assert context["ingredients"] == ["500 g peas", "1 onion"]

    def test_page_without_recipe(self):
        assert extract_page_recipe("<html><body>Hello</body></html>", "https://example.com") is None


class TestPageContextFetcher:
    def test_fetches_with_browser_headers(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(200, text=page_html(RECIPE)))
        fetcher = PageContextFetcher(make_settings(import_fetch_pages=True), http_client=http)

        context = run(fetcher.fetch("https://example.com/cake"))

        assert context == EXPECTED_CONTEXT
        assert "Mozilla" in http.requests[0].headers["user-agent"]

    def test_disabled_makes_no_request(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(200, text=page_html(RECIPE)))
        fetcher = PageContextFetcher(make_settings(import_fetch_pages=False), http_client=http)

        assert not fetcher.enabled
        assert run(fetcher.fetch("https://example.com/cake")) is None
        assert http.requests == []

    def test_invalid_url_or_expired_deadline(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(200, text=page_html(RECIPE)))
        fetcher = PageContextFetcher(make_settings(import_fetch_pages=True), http_client=http)

        assert run(fetcher.fetch("not a url")) is None
        assert run(fetcher.fetch("https://example.com/cake", deadline=Deadline.after(0))) is None
        assert http.requests == []

    def test_http_errors_are_silent(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(404, text="missing"))
        fetcher = PageContextFetcher(make_settings(import_fetch_pages=True), http_client=http)

        assert run(fetcher.fetch("https://example.com/cake")) is None

    def test_transport_errors_are_silent(self, make_settings, mock_http):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        fetcher = PageContextFetcher(make_settings(import_fetch_pages=True), http_client=mock_http(handler))

        assert run(fetcher.fetch("https://example.com/cake")) is None

    def test_login_wall(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(200, text="<p>Subscribe to read the full recipe</p>"))
        fetcher = PageContextFetcher(make_settings(import_fetch_pages=True), http_client=http)

        assert run(fetcher.fetch("https://example.com/cake")) is None
