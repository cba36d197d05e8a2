"""Unit tests for domain value objects and the product payload."""

from decimal import Decimal

import pytest

from invbrowser.domain.exceptions import ValidationError
from invbrowser.domain.model.criteria import FilterCriteria
from invbrowser.domain.model.product import ProductInput
from invbrowser.domain.model.value_objects import (
    EMPTY,
    StockStatus,
    clamp_non_negative,
    parse_number,
)


# ── Coercion ─────────────────────────────────────────────────────────────────


class TestParseNumber:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("12", Decimal("12")),
            (" 3.5 ", Decimal("3.5")),
            (7, Decimal("7")),
            (2.25, Decimal("2.25")),
            (Decimal("1.10"), Decimal("1.10")),
            ("-4", Decimal("-4")),
        ],
    )
    def test_numbers(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "NaN", "inf", True, [1]])
    def test_absent(self, raw):
        assert parse_number(raw) is None


class TestClampNonNegative:

    def test_negative_snaps_to_zero(self):
        assert clamp_non_negative("-3") == Decimal("0")

    def test_blank_is_sentinel_not_zero(self):
        assert clamp_non_negative("") == EMPTY

    def test_garbage_is_sentinel(self):
        assert clamp_non_negative("12abc") == EMPTY

    def test_positive_passes_through(self):
        assert clamp_non_negative("4.5") == Decimal("4.5")


# ── StockStatus ──────────────────────────────────────────────────────────────


class TestStockStatus:

    @pytest.mark.parametrize(
        "stock, status",
        [
            (0, StockStatus.OUT_OF_STOCK),
            (1, StockStatus.LOW),
            (9, StockStatus.LOW),
            (10, StockStatus.MEDIUM),
            (20, StockStatus.MEDIUM),
            (21, StockStatus.HIGH),
        ],
    )
    def test_classify(self, stock, status):
        assert StockStatus.classify(stock) is status

    def test_str(self):
        assert str(StockStatus.LOW) == "Low Stock"


# ── ProductInput ─────────────────────────────────────────────────────────────


class TestProductInput:

    def test_happy_path_coerces_and_trims(self):
        data = ProductInput.create(" Lamp ", "19.99", "4", " Home Goods ")
        assert data == ProductInput("Lamp", Decimal("19.99"), 4, "Home Goods")

    def test_all_failing_fields_reported_together(self):
        with pytest.raises(ValidationError) as info:
            ProductInput.create("  ", "0", "-1", "")
        assert set(info.value.field_errors) == {"name", "price", "stock", "category"}
        assert info.value.field_errors["price"] == "Price must be > 0."

    def test_empty_sentinel_price_rejected(self):
        with pytest.raises(ValidationError) as info:
            ProductInput.create("Lamp", EMPTY, 1, "Home")
        assert set(info.value.field_errors) == {"price"}

    def test_zero_stock_accepted(self):
        assert ProductInput.create("Lamp", 1, 0, "Home").stock == 0

    def test_fractional_stock_rejected(self):
        with pytest.raises(ValidationError, match="whole number"):
            ProductInput.create("Lamp", 1, "2.5", "Home")


class TestFilterCriteria:

    def test_categories_normalized_to_frozenset(self):
        criteria = FilterCriteria(selected_categories=["A", "B", "A"])
        assert criteria.selected_categories == frozenset({"A", "B"})

    def test_equal_by_value(self):
        assert FilterCriteria(min_price="1") == FilterCriteria(min_price="1")
