"""Domain service: Filter Engine.

Narrows a product collection by the user's criteria. Clauses are applied
as a conjunction in a fixed order; a clause whose criterion is unset is a
no-op. The input list is never mutated.

Note that the two stock flags are independent AND clauses. With both set,
the low-stock clause (``0 < stock < threshold``) and the out-of-stock
clause (``stock == 0``) exclude each other, so nothing survives.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from invbrowser.domain.model.criteria import FilterCriteria
from invbrowser.domain.model.product import Product
from invbrowser.domain.model.value_objects import LOW_STOCK_THRESHOLD, parse_number

Predicate = Callable[[Product], bool]


def build_predicates(
    criteria: FilterCriteria,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> list[Predicate]:
    """Return the active clauses, in application order."""
    clauses: list[Predicate] = []

    min_price = parse_number(criteria.min_price)
    max_price = parse_number(criteria.max_price)
    min_stock = parse_number(criteria.min_stock)
    max_stock = parse_number(criteria.max_stock)

    if min_price is not None:
        clauses.append(lambda p: p.price >= min_price)
    if max_price is not None:
        clauses.append(lambda p: p.price <= max_price)
    if min_stock is not None:
        clauses.append(lambda p: p.stock >= min_stock)
    if max_stock is not None:
        clauses.append(lambda p: p.stock <= max_stock)
    if criteria.show_low_stock:
        clauses.append(lambda p: 0 < p.stock < low_stock_threshold)
    if criteria.show_out_of_stock:
        clauses.append(lambda p: p.stock == 0)
    if criteria.selected_categories:
        selected = criteria.selected_categories
        clauses.append(lambda p: p.category in selected)

    return clauses


def apply_filters(
    products: Sequence[Product],
    criteria: FilterCriteria,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> list[Product]:
    """Return the products that satisfy every active clause, in input order."""
    filtered = list(products)
    for clause in build_predicates(criteria, low_stock_threshold):
        filtered = [p for p in filtered if clause(p)]
    return filtered
