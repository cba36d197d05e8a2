"""Product snapshot and the full-replace payload sent to the store.

Products are owned by the remote store. The browser only ever holds
read-only snapshots; every change goes through ``create``/``update`` and is
followed by a full reload.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from invbrowser.domain.exceptions import ValidationError
from invbrowser.domain.model.value_objects import EMPTY, parse_number

NAME_REQUIRED = "Name is required."
PRICE_POSITIVE = "Price must be > 0."
STOCK_NON_NEGATIVE = "Stock must be >= 0."
STOCK_WHOLE = "Stock must be a whole number."
CATEGORY_REQUIRED = "Category is required."


@dataclass(frozen=True)
class Product:
    """A product as last returned by ``list()``."""

    id: str
    name: str
    price: Decimal
    stock: int
    category: str


@dataclass(frozen=True)
class ProductInput:
    """Payload for ``create`` and ``update``: all four fields, always.

    Use ``ProductInput.create()`` for anything typed by a user; it runs the
    field checks. The plain constructor is kept for adapters that rebuild
    payloads already known to be valid.
    """

    name: str
    price: Decimal
    stock: int
    category: str

    @staticmethod
    def create(name: object, price: object, stock: object, category: object) -> ProductInput:
        """Validate raw field values and build a payload.

        The checks are independent: every failing field is reported in a
        single ValidationError.
        """
        errors: dict[str, str] = {}

        clean_name = str(name if name is not None else "").strip()
        if not clean_name:
            errors["name"] = NAME_REQUIRED

        price_value = None if price == EMPTY else parse_number(price)
        if price_value is None or price_value <= 0:
            errors["price"] = PRICE_POSITIVE

        stock_value = None if stock == EMPTY else parse_number(stock)
        if stock_value is None or stock_value < 0:
            errors["stock"] = STOCK_NON_NEGATIVE
        elif stock_value != stock_value.to_integral_value():
            errors["stock"] = STOCK_WHOLE

        clean_category = str(category if category is not None else "").strip()
        if not clean_category:
            errors["category"] = CATEGORY_REQUIRED

        if errors:
            raise ValidationError(
                "; ".join(errors.values()), field_errors=errors
            )

        return ProductInput(
            name=clean_name,
            price=price_value,  # type: ignore[arg-type]
            stock=int(stock_value),  # type: ignore[arg-type]
            category=clean_category,
        )
