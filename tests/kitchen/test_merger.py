"""Tests for merging per-page drafts."""

from planotto_kitchen.recipe_import.merger import merge_drafts
from planotto_kitchen.recipe_import.models import Ingredient, RecipeDraft, Unit


def page(**fields) -> RecipeDraft:
    return RecipeDraft(**fields)


class TestMergeDrafts:
    def test_nothing_to_merge(self):
        assert merge_drafts([]) is None
        assert merge_drafts(()) is None

    def test_single_part_is_unchanged(self):
        draft = page(
            title="Pancakes",
            instructions="Whisk",
            servings=2,
            tags=("breakfast",),
            ingredients=(Ingredient("milk", 300, Unit.ML, False),),
        )
        assert merge_drafts([draft]) == draft

    def test_same_ingredient_is_summed(self):
        merged = merge_drafts(
            [
                page(ingredients=(Ingredient("Salt", 1, Unit.TSP, False),)),
                page(ingredients=(Ingredient("salt", 2, Unit.TSP, True),)),
            ]
        )
        assert merged.ingredients == (Ingredient("Salt", 3, Unit.TSP, True),)

    def test_to_taste_duplicates_collapse_to_zero(self):
        merged = merge_drafts(
            [
                page(ingredients=(Ingredient("salt", 0, Unit.TO_TASTE, False),)),
                page(ingredients=(Ingredient("Salt", 0, Unit.TO_TASTE, False),)),
            ]
        )
        assert merged.ingredients == (Ingredient("salt", 0, Unit.TO_TASTE, False),)

    def test_different_units_stay_apart(self):
        merged = merge_drafts(
            [
                page(ingredients=(Ingredient("flour", 200, Unit.G, False),)),
                page(ingredients=(Ingredient("flour", 2, Unit.TBSP, False),)),
            ]
        )
        assert [(i.name, i.amount, i.unit) for i in merged.ingredients] == [
            ("flour", 200, Unit.G),
            ("flour", 2, Unit.TBSP),
        ]

    def test_first_values_win(self):
        merged = merge_drafts(
            [
                page(instructions="Page one", time_minutes=None),
                page(title="Borscht", servings=6, time_minutes=90, image="data:image/png;base64,A"),
                page(title="Ignored", servings=2, time_minutes=10, short_description="Hearty"),
            ]
        )
        assert merged.title == "Borscht"
        assert merged.servings == 6
        assert merged.time_minutes == 90
        assert merged.image == "data:image/png;base64,A"
        assert merged.short_description == "Hearty"

    def test_instructions_joined_in_page_order(self):
        merged = merge_drafts([page(instructions="Chop"), page(), page(instructions="Simmer")])
        assert merged.instructions == "Chop\n\nSimmer"

    def test_tags_union_keeps_first_order(self):
        merged = merge_drafts([page(tags=("soup", "dinner")), page(tags=("dinner", "winter"))])
        assert merged.tags == ("soup", "dinner", "winter")

    def test_ingredient_order_follows_first_occurrence(self):
        merged = merge_drafts(
            [
                page(ingredients=(Ingredient("beets", 2), Ingredient("carrot", 1))),
                page(ingredients=(Ingredient("cabbage", 1), Ingredient("Beets", 1))),
            ]
        )
        assert [(i.name, i.amount) for i in merged.ingredients] == [
            ("beets", 3),
            ("carrot", 1),
            ("cabbage", 1),
        ]
