"""User-chosen query state: filter criteria and sort key.

Both are transient and owned by the active view. They are frozen so the
orchestrator can replace them wholesale and detect changes by value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class SortKey(Enum):
    NONE = "none"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    STOCK_ASC = "stock-asc"
    STOCK_DESC = "stock-desc"

    @staticmethod
    def parse(raw: str | None) -> SortKey:
        """Map a UI value to a SortKey; blank means NONE."""
        if raw is None or not raw.strip():
            return SortKey.NONE
        return SortKey(raw.strip().lower())


@dataclass(frozen=True)
class FilterCriteria:
    """Filter predicates applied as a conjunction.

    Numeric bounds are inclusive and may be given as numbers or raw text;
    ``None`` or a blank string means unbounded on that side.
    """

    min_price: Decimal | int | float | str | None = None
    max_price: Decimal | int | float | str | None = None
    min_stock: Decimal | int | float | str | None = None
    max_stock: Decimal | int | float | str | None = None
    show_low_stock: bool = False
    show_out_of_stock: bool = False
    selected_categories: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of categories; order is irrelevant.
        if not isinstance(self.selected_categories, frozenset):
            object.__setattr__(
                self, "selected_categories", frozenset(self.selected_categories)
            )
