"""Abstract store for the Product collection.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (REST, JSON file, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from invbrowser.domain.model.product import Product, ProductInput


class ProductStore(ABC):

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return the authoritative collection.

        Raises TransportError on network or parse failure.
        """

    @abstractmethod
    def create(self, data: ProductInput) -> Product:
        """Create a product. Raises ValidationError or TransportError."""

    @abstractmethod
    def update(self, product_id: str, data: ProductInput) -> Product:
        """Replace every field of a product.

        Raises NotFoundError if *product_id* no longer exists.
        """

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product. Raises NotFoundError or TransportError."""

    @abstractmethod
    def bulk_import(self, file_path: Path) -> None:
        """Import a tabular file with columns name, price, stock, category."""
