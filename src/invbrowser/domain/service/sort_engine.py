"""Domain service: Sort Engine.

Produces a new ordered list; the cached collection is never sorted in
place. Python's ``sorted`` is stable, including with ``reverse=True``, so
products with equal keys keep their pre-sort relative order under every
key.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Callable, Sequence

from invbrowser.domain.model.criteria import SortKey
from invbrowser.domain.model.product import Product


def name_collation_key(name: str) -> tuple[str, str]:
    """Locale-style key: accents and case ignored first, exact text second."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name


_KEYS: dict[SortKey, tuple[Callable[[Product], object], bool]] = {
    SortKey.NAME_ASC: (lambda p: name_collation_key(p.name), False),
    SortKey.NAME_DESC: (lambda p: name_collation_key(p.name), True),
    SortKey.PRICE_ASC: (lambda p: p.price, False),
    SortKey.PRICE_DESC: (lambda p: p.price, True),
    SortKey.STOCK_ASC: (lambda p: p.stock, False),
    SortKey.STOCK_DESC: (lambda p: p.stock, True),
}


def sort_products(products: Sequence[Product], key: SortKey) -> list[Product]:
    if key is SortKey.NONE:
        return list(products)
    key_func, descending = _KEYS[key]
    return sorted(products, key=key_func, reverse=descending)
