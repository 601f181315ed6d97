"""Tests for food search and selection state."""

from calorics.services.search import FoodSelection, SearchIndex
from tests.conftest import APPLE, CHICKEN, PINEAPPLE, RICE

FOODS = [APPLE, CHICKEN, RICE, PINEAPPLE]


def test_filter_is_case_insensitive_substring_in_catalog_order() -> None:
    results = SearchIndex().filter("APP", FOODS)

    assert results == [APPLE, PINEAPPLE]


def test_filter_blank_query_returns_nothing() -> None:
    index = SearchIndex()

    assert index.filter("", FOODS) == []
    assert index.filter("   ", FOODS) == []
    assert index.filter(None, FOODS) == []


def test_filter_respects_limit() -> None:
    assert SearchIndex(limit=1).filter("e", FOODS) == [APPLE]


def test_select_fixes_food_and_defaults_serving() -> None:
    selection = FoodSelection()
    selection.set_query("app", FOODS)

    selection.select(APPLE)

    assert selection.results == []
    assert selection.food == APPLE
    assert selection.serving == APPLE.servings[0]
    assert selection.quantity == 1.0
    assert selection.query == "Apple"


def test_editing_query_invalidates_selection() -> None:
    selection = FoodSelection()
    selection.select(APPLE)
    selection.choose_serving("100 grams")
    selection.quantity = 2

    results = selection.set_query("chick", FOODS)

    assert results == [CHICKEN]
    assert selection.food is None
    assert selection.serving is None
    assert selection.quantity is None


def test_choose_serving_requires_matching_description() -> None:
    selection = FoodSelection()
    assert selection.choose_serving("100 grams") is None

    selection.select(APPLE)

    assert selection.choose_serving("1 cup") is None
    assert selection.serving is None
    assert selection.choose_serving("100 grams") == APPLE.servings[1]


def test_clear_resets_everything() -> None:
    selection = FoodSelection()
    selection.set_query("rice", FOODS)
    selection.select(RICE)

    selection.clear()

    assert selection.query == ""
    assert selection.results == []
    assert selection.food is None
    assert selection.serving is None
    assert selection.quantity is None
