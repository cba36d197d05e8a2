"""Unit tests for the Category Aggregator."""

import random

import pytest

from invbrowser.domain.model.criteria import FilterCriteria
from invbrowser.domain.service.category_aggregator import categories
from invbrowser.domain.service.filter_engine import apply_filters
from tests.fakes import make_product


def test_distinct_and_sorted():
    products = [
        make_product("1", category="Kitchen"),
        make_product("2", category="Books"),
        make_product("3", category="Kitchen"),
        make_product("4", category="Electronics"),
    ]
    assert categories(products) == ["Books", "Electronics", "Kitchen"]


def test_empty_collection():
    assert categories([]) == []


def test_free_form_categories_are_kept_verbatim():
    products = [make_product("1", category="garden"), make_product("2", category="Garden")]
    # Default string ordering: uppercase sorts first.
    assert categories(products) == ["Garden", "garden"]


@pytest.mark.parametrize("seed", range(10))
def test_filtering_never_changes_the_category_list(seed):
    rng = random.Random(seed)
    products = [
        make_product(str(i), price=rng.randint(1, 50), stock=rng.randint(0, 30),
                     category=rng.choice(["A", "B", "C"]))
        for i in range(20)
    ]
    before = categories(products)

    filtered = apply_filters(
        products,
        FilterCriteria(
            min_price=rng.randint(1, 50),
            show_low_stock=rng.random() < 0.5,
            selected_categories={rng.choice("ABC")},
        ),
    )

    assert categories(products) == before
    assert set(categories(filtered)) <= set(before)
