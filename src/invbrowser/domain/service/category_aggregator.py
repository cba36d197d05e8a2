"""Domain service: Category Aggregator."""

from __future__ import annotations

from collections.abc import Iterable

from invbrowser.domain.model.product import Product


def categories(products: Iterable[Product]) -> list[str]:
    """Distinct categories of the *unfiltered* collection, sorted ascending.

    Callers must pass the full collection so the category checklist stays
    stable while the user filters.
    """
    return sorted({p.category for p in products})
