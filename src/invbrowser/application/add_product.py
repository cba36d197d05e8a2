"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from invbrowser.domain.model.product import Product, ProductInput
from invbrowser.domain.repository.product_store import ProductStore

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self, name: object, price: object, stock: object, category: object) -> Product:
        """Validate the raw fields and create the product in the store.

        Raises ValidationError (with every failing field) before any network
        call, or whatever the store raises.
        """
        data = ProductInput.create(name, price, stock, category)
        product = self._store.create(data)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product
