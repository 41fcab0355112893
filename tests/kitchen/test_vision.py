"""Tests for the vision import tier."""

import asyncio
import json

import httpx

from planotto.llm import CompletionClient
from planotto_kitchen.recipe_import.prompts import BASE_FALLBACK_ISSUE, PAGE_ORDER_NOTE
from planotto_kitchen.recipe_import.vision import MAX_VISION_PHOTOS, VisionImporter


def run(coro):
    return asyncio.run(coro)


def photos(count):
    return [f"data:image/jpeg;base64,PAGE{index}" for index in range(count)]


def sent(request: httpx.Request) -> tuple[dict, list[str]]:
    """(context, image urls) of one vision call."""
    body = json.loads(request.content)
    parts = body["messages"][1]["content"]
    context = json.loads(parts[0]["text"])
    images = [part["image_url"]["url"] for part in parts[1:]]
    return context, images


def importer(make_settings, http, **kwargs) -> VisionImporter:
    settings = make_settings(openrouter_api_key="sk-test", openrouter_vision_model="vision/model")
    return VisionImporter(CompletionClient(settings, http_client=http), **kwargs)


class TestCombined:
    def test_one_call_with_every_photo(self, make_settings, mock_http, chat_completion):
        http = mock_http(
            lambda request: httpx.Response(
                200, json=chat_completion({"recipe": {"title": "Borscht"}, "message": "Looks tasty."})
            )
        )

        result = run(importer(make_settings, http).combined(photos(3), ["beets"]))

        assert len(http.requests) == 1
        context, images = sent(http.requests[0])
        assert context == {"totalPages": 3, "pageOrder": PAGE_ORDER_NOTE, "knownProducts": ["beets"]}
        assert images == photos(3)
        assert json.loads(http.requests[0].content)["model"] == "vision/model"
        assert [part.title for part in result.parts] == ["Borscht"]
        assert result.messages == ("Looks tasty.",)
        assert result.issues == ()

    def test_photo_cap(self, make_settings, mock_http, chat_completion):
        http = mock_http(lambda request: httpx.Response(200, json=chat_completion({"recipe": {"title": "x"}})))

        run(importer(make_settings, http).combined(photos(MAX_VISION_PHOTOS + 3), []))

        context, images = sent(http.requests[0])
        assert context["totalPages"] == MAX_VISION_PHOTOS
        assert len(images) == MAX_VISION_PHOTOS

    def test_known_products_cap(self, make_settings, mock_http, chat_completion):
        http = mock_http(lambda request: httpx.Response(200, json=chat_completion({})))

        run(importer(make_settings, http, known_products_limit=1).combined(photos(1), ["a", "b"]))

        context, _ = sent(http.requests[0])
        assert context["knownProducts"] == ["a"]

    def test_provider_failure_is_an_issue(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(429, json={"error": {"message": "slow down"}}))

        result = run(importer(make_settings, http).combined(photos(2), []))

        assert result.parts == ()
        assert result.issues == (BASE_FALLBACK_ISSUE,)

    def test_empty_recipe_is_not_a_part(self, make_settings, mock_http, chat_completion):
        http = mock_http(
            lambda request: httpx.Response(200, json=chat_completion({"recipe": {}, "message": "Blurry photo."}))
        )

        result = run(importer(make_settings, http).combined(photos(1), []))

        assert result.parts == ()
        assert result.messages == ("Blurry photo.",)


class TestPerPage:
    def test_one_call_per_photo_in_order(self, make_settings, mock_http, chat_completion):
        def handler(request):
            context, _ = sent(request)
            return httpx.Response(200, json=chat_completion({"recipe": {"instructions": f"Step {context['page']}"}}))

        http = mock_http(handler)

        result = run(importer(make_settings, http).per_page(photos(3), ["salt"]))

        calls = [sent(request) for request in http.requests]
        assert [context["page"] for context, _ in calls] == [1, 2, 3]
        assert all(context["totalPages"] == 3 for context, _ in calls)
        assert all(context["knownProducts"] == ["salt"] for context, _ in calls)
        assert [images for _, images in calls] == [[photo] for photo in photos(3)]
        assert [part.instructions for part in result.parts] == ["Step 1", "Step 2", "Step 3"]

    def test_failed_pages_are_skipped(self, make_settings, mock_http, chat_completion):
        def handler(request):
            context, _ = sent(request)
            if context["page"] == 2:
                return httpx.Response(500, json={"error": {"message": "boom"}})
            return httpx.Response(200, json=chat_completion({"recipe": {"title": f"Page {context['page']}"}}))

        http = mock_http(handler)

        result = run(importer(make_settings, http).per_page(photos(3), []))

        assert [part.title for part in result.parts] == ["Page 1", "Page 3"]
        assert result.issues == (BASE_FALLBACK_ISSUE,)

    def test_not_configured(self, make_settings, mock_http):
        http = mock_http(lambda request: httpx.Response(500))
        vision = VisionImporter(CompletionClient(make_settings(), http_client=http))

        result = run(vision.per_page(photos(2), []))

        assert result.parts == ()
        assert result.issues == (BASE_FALLBACK_ISSUE, BASE_FALLBACK_ISSUE)
        assert http.requests == []
