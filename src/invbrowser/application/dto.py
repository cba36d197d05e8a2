"""Data Transfer Objects — plain containers handed to the presentation layer.

A ``PageView`` is everything needed to draw one page: the visible rows
(already annotated with their edit state), the page-number controls and
the category checklist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from invbrowser.domain.model.value_objects import StockStatus
from invbrowser.domain.service.pagination import PageWindow


@dataclass(frozen=True)
class ProductRow:
    """A product as displayed: snapshot fields plus derived view state."""

    id: str
    name: str
    price: Decimal
    stock: int
    category: str
    stock_status: StockStatus
    is_editing: bool


@dataclass(frozen=True)
class PageView:
    rows: list[ProductRow]
    pagination: PageWindow
    total_products: int
    matching_products: int
    categories: list[str]
    error: str | None = None
