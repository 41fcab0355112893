"""Tests for the provider-free assist fallbacks and the tag vocabulary."""

import pytest

from planotto.entropy import FixedEntropy
from planotto_kitchen.assist import heuristics
from planotto_kitchen.assist.tags import RECIPE_TAGS, normalize_tag_id
from planotto_kitchen.recipe_import.models import ImportSource
from planotto_kitchen.recipe_import.prompts import (
    PHOTO_FAILURE_MESSAGE,
    RECOGNITION_INCOMPLETE_ISSUE,
    REVIEW_UNITS_ISSUE,
    URL_FALLBACK_TITLE,
)

BASE_URL = "https://loremflickr.com"


class TestTags:
    def test_vocabulary_ids_are_unique(self):
        assert len(RECIPE_TAGS) == len(set(RECIPE_TAGS)) == 29

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("vegan", "vegan"),
            ("Веган", "vegan"),
            ("Sin gluten", "gluten_free"),
            ("Rápido (hasta 30 min)", "quick"),
            ("  DESSERT ", "dessert"),
            ("пп", "healthy"),
            ("spicy", None),
            ("", None),
            (3, None),
        ],
    )
    def test_normalize_tag_id(self, value, expected):
        assert normalize_tag_id(value) == expected


class TestHints:
    def test_ingredient_hints(self):
        payload = {
            "ingredients": [
                {"index": 0, "name": "Milk"},
                {"index": "1", "name": "egg"},
                {"index": 2, "name": ""},
                {"name": "flour"},
                "junk",
            ],
            "knownProducts": ["milk 3.2%", "oat milk", "eggs", "coconut milk", "milk powder", "skim milk"],
        }
        assert heuristics.ingredient_hints(payload) == {
            "items": [
                {"index": 0, "suggestions": ["milk 3.2%", "oat milk", "coconut milk", "milk powder"]},
                {"index": 1, "suggestions": ["eggs"]},
            ]
        }

    def test_ingredient_hints_with_garbage(self):
        assert heuristics.ingredient_hints({"ingredients": "milk"}) == {"items": []}

    def test_tag_hints(self):
        result = heuristics.tag_hints(
            {"title": "Quick vegan breakfast bowl", "ingredients": [{"name": "oats"}, "banana"]}
        )
        assert result["suggestedTags"] == ["vegan", "breakfast", "quick"]
        assert result["message"]

    def test_tag_hints_russian(self):
        result = heuristics.tag_hints({"title": "Быстрый ужин", "instructions": "Без глютена"})
        assert result["suggestedTags"] == ["gluten_free", "dinner", "quick"]

    @pytest.mark.parametrize(
        "total,servings",
        [(0, 2), (500, 2), (501, 3), (900, 3), (901, 4), (1500, 4), (1501, 5)],
    )
    def test_estimate_servings(self, total, servings):
        assert heuristics.estimate_servings(total) == servings

    def test_servings_hint_sums_amounts(self):
        payload = {"ingredients": [{"amount": 600}, {"amount": "400"}, {"amount": "lots"}, {"amount": True}]}
        result = heuristics.servings_hint(payload)
        assert result["suggestedServings"] == 4
        assert "4-5" in result["message"]


class TestImages:
    def test_prompt_mentions_title_and_guards(self):
        prompt = heuristics.build_image_prompt({"title": "Lemon tart", "ingredients": ["lemon", "butter"]})
        assert "Lemon tart" in prompt
        assert "ingredients focus: lemon, butter" in prompt
        assert "no text" in prompt

    def test_prompt_without_title(self):
        assert "home-made dish" in heuristics.build_image_prompt({})

    def test_placeholder_url_is_deterministic_with_fixed_entropy(self):
        entropy = FixedEntropy(seed_value=7, nonce_value=99)
        assert (
            heuristics.build_placeholder_image_url("tomato soup", entropy, BASE_URL + "/")
            == "https://loremflickr.com/1024/1024/soup,food?lock=7&_=99"
        )
        assert (
            heuristics.build_placeholder_image_url("pasta", entropy, BASE_URL)
            == "https://loremflickr.com/1024/1024/food,meal?lock=7&_=99"
        )

    def test_recipe_image(self):
        result = heuristics.recipe_image({"title": "Борщ суп"}, FixedEntropy(), BASE_URL)
        assert result["imageUrl"].startswith(f"{BASE_URL}/1024/1024/soup,food?lock=42")
        assert result["prompt"].startswith("realistic home-cooked Борщ суп")


class TestAssistant:
    def test_menu_defaults(self):
        assert heuristics.menu_suggestion({})["message"].startswith("Basic plan: 7 days, 2 people.")
        assert heuristics.menu_suggestion({"peopleCount": "3", "days": 0})["message"].startswith(
            "Basic plan: 7 days, 3 people."
        )

    @pytest.mark.parametrize(
        "question", ["How to make an omelette?", "Как пожарить яичницу?", "how to cook dinner", "как приготовить суп"]
    )
    def test_cooking_questions_get_the_egg_answer(self, question):
        assert heuristics.assistant_help({"question": question}) == {"message": heuristics.EGG_ANSWER}

    def test_section_answer(self):
        message = heuristics.assistant_help({"question": "what is this?", "pathname": "/shopping-list/42"})
        assert message["message"].startswith("The shopping list")

    def test_default_answer(self):
        assert heuristics.assistant_help({"pathname": "/settings"}) == {"message": heuristics.DEFAULT_HELP_ANSWER}

    def test_question_classifiers(self):
        assert heuristics.is_cooking_question("Recipe for pancakes please")
        assert not heuristics.is_cooking_question("Where is my shopping list?")
        assert heuristics.looks_like_ui_instruction("Go to the section Recipes and click the button Add")
        assert not heuristics.looks_like_ui_instruction("Whisk two eggs with milk")


class TestImportedDraft:
    def test_photo(self):
        outcome = heuristics.imported_draft(ImportSource.PHOTO, {"imageDataUrl": "data:image/png;base64,A"})
        assert outcome.draft is None
        assert outcome.message == PHOTO_FAILURE_MESSAGE
        assert outcome.issues == (RECOGNITION_INCOMPLETE_ISSUE,)

    def test_url_with_garbage_products(self):
        outcome = heuristics.imported_draft(ImportSource.URL, {"knownProducts": "rice"})
        assert outcome.draft.title == URL_FALLBACK_TITLE
        assert outcome.draft.ingredients == ()
        assert outcome.issues == (REVIEW_UNITS_ISSUE,)
