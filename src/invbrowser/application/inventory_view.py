"""Application service: View Pipeline Orchestrator.

Owns the view state (collection snapshot, criteria, sort key, current
page) and recomputes the pipeline explicitly on four events:

- collection replaced (``reload``): categories and the filtered/sorted
  result are recomputed, the page is clamped;
- criteria changed / sort key changed: the result is recomputed and the
  page is reset to 1 in the same call, so no render ever sees the new
  criteria with the stale page;
- page changed: only the window moves.

Store failures are caught here and recorded in ``error``; they never
escape to the caller except through the handlers' return values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from invbrowser.application.add_product import AddProductHandler
from invbrowser.application.bulk_import import BulkImportHandler
from invbrowser.application.dto import PageView, ProductRow
from invbrowser.application.edit_coordinator import EditCoordinator, EditState
from invbrowser.domain.exceptions import (
    ConfigError,
    DomainException,
    NotFoundError,
    ValidationError,
)
from invbrowser.domain.model.criteria import FilterCriteria, SortKey
from invbrowser.domain.model.product import Product
from invbrowser.domain.model.value_objects import LOW_STOCK_THRESHOLD, StockStatus
from invbrowser.domain.repository.product_store import ProductStore
from invbrowser.domain.service.category_aggregator import categories
from invbrowser.domain.service.filter_engine import apply_filters
from invbrowser.domain.service.pagination import (
    DEFAULT_WINDOW_SIZE,
    paginate,
    total_pages_for,
)
from invbrowser.domain.service.sort_engine import sort_products

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewSettings:
    items_per_page: int = 9
    window_size: int = DEFAULT_WINDOW_SIZE
    low_stock_threshold: int = LOW_STOCK_THRESHOLD

    def __post_init__(self) -> None:
        for name in ("items_per_page", "window_size", "low_stock_threshold"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")


class InventoryView:

    def __init__(self, store: ProductStore, settings: ViewSettings | None = None) -> None:
        self._store = store
        self.settings = settings or ViewSettings()
        self._products: list[Product] = []
        self._categories: list[str] = []
        self._visible: list[Product] = []
        self._criteria = FilterCriteria()
        self._sort_key = SortKey.NONE
        self._current_page = 1
        self.error: str | None = None
        self.field_errors: dict[str, str] = {}
        self.editor = EditCoordinator(store, lookup=self.find_product, on_saved=self.reload)

    # --- State ----------------------------------------------------------------

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def sort_key(self) -> SortKey:
        return self._sort_key

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return total_pages_for(len(self._visible), self.settings.items_per_page)

    def find_product(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    # --- Events ---------------------------------------------------------------

    def reload(self) -> bool:
        """Replace the local snapshot with the store's authoritative list.

        On failure the collection is emptied and the error recorded.
        """
        try:
            products = self._store.list_all()
        except DomainException as exc:
            logger.warning("Loading products failed: %s", exc)
            self.error = f"Could not load products: {exc}"
            products = []
            ok = False
        else:
            logger.info("Loaded %d products", len(products))
            self.error = None
            self.field_errors = {}
            ok = True

        self._products = list(products)
        editing_id = self.editor.editing_id
        if (
            ok
            and editing_id is not None
            and self.editor.state is EditState.EDITING
            and self.find_product(editing_id) is None
        ):
            # Deleted elsewhere since the edit began
            self.editor.forget(editing_id)
        self._categories = categories(self._products)
        self._recompute()
        self._current_page = min(self._current_page, max(1, self.total_pages))
        return ok

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self._criteria = criteria
        self._current_page = 1
        self._recompute()

    def set_sort_key(self, sort_key: SortKey) -> None:
        self._sort_key = sort_key
        self._current_page = 1
        self._recompute()

    def reset_filters(self) -> None:
        self._criteria = FilterCriteria()
        self._sort_key = SortKey.NONE
        self._current_page = 1
        self._recompute()

    def go_to_page(self, page: int) -> int:
        """Move to *page*, clamped to ``[1, total_pages]``. Returns the page used."""
        self._current_page = min(max(1, page), max(1, self.total_pages))
        return self._current_page

    # --- Mutations ------------------------------------------------------------

    def add_product(self, name: object, price: object, stock: object, category: object) -> bool:
        try:
            AddProductHandler(self._store).handle(name, price, stock, category)
        except DomainException as exc:
            self._record_failure("Adding product", exc)
            return False
        self.reload()
        return True

    def delete_product(self, product_id: str) -> bool:
        try:
            self._store.delete(product_id)
        except NotFoundError as exc:
            self._record_failure(f"Deleting product {product_id}", exc)
            self.error = f"Product '{product_id}' no longer exists."
            self.editor.forget(product_id)
            self._reload_keeping_error()
            return False
        except DomainException as exc:
            self._record_failure(f"Deleting product {product_id}", exc)
            return False
        self.editor.forget(product_id)
        self.reload()
        return True

    def bulk_import(self, file_path: Path | str | None) -> bool:
        try:
            BulkImportHandler(self._store).handle(file_path)
        except DomainException as exc:
            self._record_failure("Import", exc)
            return False
        self.reload()
        return True

    # --- Rendering ------------------------------------------------------------

    def render(self) -> PageView:
        window = paginate(
            len(self._visible),
            self.settings.items_per_page,
            self._current_page,
            self.settings.window_size,
        )
        rows = [self._to_row(p) for p in self._visible[window.start:window.end]]
        return PageView(
            rows=rows,
            pagination=window,
            total_products=len(self._products),
            matching_products=len(self._visible),
            categories=self.categories,
            error=self.error,
        )

    # --- Internal helpers -----------------------------------------------------

    def _recompute(self) -> None:
        filtered = apply_filters(
            self._products, self._criteria, self.settings.low_stock_threshold
        )
        self._visible = sort_products(filtered, self._sort_key)

    def _to_row(self, product: Product) -> ProductRow:
        return ProductRow(
            id=product.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
            category=product.category,
            stock_status=StockStatus.classify(
                product.stock, self.settings.low_stock_threshold
            ),
            is_editing=self.editor.is_editing(product.id),
        )

    def _reload_keeping_error(self) -> None:
        error = self.error
        if self.reload():
            self.error = error

    def _record_failure(self, action: str, exc: DomainException) -> None:
        logger.warning("%s failed: %s", action, exc)
        self.error = str(exc)
        self.field_errors = exc.field_errors if isinstance(exc, ValidationError) else {}
