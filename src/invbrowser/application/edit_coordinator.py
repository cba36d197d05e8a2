"""Application service: Edit-State Coordinator.

Tracks the single product (if any) in edit mode, holds its local draft,
validates it and drives save/cancel/reload.

State machine::

    VIEWING --begin_edit(a)--> EDITING(a) --begin_edit(b)--> EDITING(b)
    EDITING(a) --cancel_edit(a)--> VIEWING
    EDITING(a) --validate_and_save(a)--> SAVING(a) --ok--> VIEWING (+ reload)
                                                   --fail--> EDITING(a)

The edited product is tracked as one optional id, separate from the
product cache. Whether a given product is being edited is derived by
comparison; cached snapshots are never flagged in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from invbrowser.domain.exceptions import (
    DomainException,
    EditStateError,
    NotFoundError,
    ValidationError,
)
from invbrowser.domain.model.product import Product, ProductInput
from invbrowser.domain.model.value_objects import clamp_non_negative
from invbrowser.domain.repository.product_store import ProductStore

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("name", "price", "stock", "category")
NUMERIC_FIELDS = ("price", "stock")


class EditState(Enum):
    VIEWING = "VIEWING"
    EDITING = "EDITING"
    SAVING = "SAVING"


@dataclass
class ProductDraft:
    """Unsaved edit of a product. Numeric fields may hold the EMPTY sentinel."""

    name: str
    price: Decimal | str
    stock: Decimal | str
    category: str

    @staticmethod
    def from_product(product: Product) -> ProductDraft:
        return ProductDraft(
            name=product.name,
            price=product.price,
            stock=Decimal(product.stock),
            category=product.category,
        )

    def to_input(self) -> ProductInput:
        """Run the field checks. Raises ValidationError listing every bad field."""
        return ProductInput.create(self.name, self.price, self.stock, self.category)


class EditCoordinator:

    def __init__(
        self,
        store: ProductStore,
        lookup: Callable[[str], Product | None],
        on_saved: Callable[[], None],
    ) -> None:
        self._store = store
        self._lookup = lookup
        self._on_saved = on_saved
        self._state = EditState.VIEWING
        self._editing_id: str | None = None
        self._draft: ProductDraft | None = None
        self.field_errors: dict[str, str] = {}
        self.error: str | None = None

    # --- Queries --------------------------------------------------------------

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def editing_id(self) -> str | None:
        return self._editing_id

    @property
    def draft(self) -> ProductDraft | None:
        return self._draft

    def is_editing(self, product_id: str) -> bool:
        return self._editing_id is not None and self._editing_id == product_id

    # --- Transitions ----------------------------------------------------------

    def begin_edit(self, product_id: str) -> None:
        """Enter edit mode for *product_id*, discarding any other draft."""
        if self._state is EditState.SAVING:
            raise EditStateError(
                f"Cannot edit product '{product_id}' while product "
                f"'{self._editing_id}' is being saved"
            )

        product = self._lookup(product_id)
        if product is None:
            raise NotFoundError(f"Product '{product_id}' no longer exists")

        if self._editing_id is not None and self._editing_id != product_id:
            logger.debug("Discarding draft for product %s", self._editing_id)

        self._enter(EditState.EDITING, product_id)
        self._draft = ProductDraft.from_product(product)
        logger.debug("Editing product %s", product_id)

    def cancel_edit(self, product_id: str) -> None:
        """Leave edit mode without touching the store. No-op if not editing it."""
        if self._state is EditState.EDITING and self._editing_id == product_id:
            self._reset()
            logger.debug("Cancelled edit of product %s", product_id)

    def update_draft_field(self, field: str, raw_value: object) -> None:
        """Set one draft field. Numeric fields are coerced and clamped to >= 0."""
        if self._state is not EditState.EDITING or self._draft is None:
            raise EditStateError("No product is being edited")
        if field not in DRAFT_FIELDS:
            raise EditStateError(f"Unknown product field '{field}'")

        if field in NUMERIC_FIELDS:
            value: object = clamp_non_negative(raw_value)
        else:
            value = "" if raw_value is None else str(raw_value)
        setattr(self._draft, field, value)

    def validate_and_save(self, product_id: str) -> bool:
        """Validate the draft and send it to the store.

        Returns True when the update succeeded and the collection was
        reloaded. On any failure the draft is kept, the coordinator stays in
        EDITING and the problem is recorded in ``field_errors``/``error``.
        """
        if self._state is EditState.SAVING:
            raise EditStateError(f"Product '{product_id}' is already being saved")
        if (
            self._state is not EditState.EDITING
            or self._editing_id != product_id
            or self._draft is None
        ):
            raise EditStateError(f"Product '{product_id}' is not being edited")

        self.field_errors = {}
        self.error = None

        try:
            data = self._draft.to_input()
        except ValidationError as exc:
            self.field_errors = exc.field_errors
            return False

        self._state = EditState.SAVING
        try:
            self._store.update(product_id, data)
        except NotFoundError as exc:
            self._fail(product_id, exc, "This product no longer exists.")
            return False
        except ValidationError as exc:
            self.field_errors = exc.field_errors
            self._fail(product_id, exc, str(exc))
            return False
        except DomainException as exc:
            self._fail(product_id, exc, str(exc))
            return False
        except Exception:
            # Never leave the session stuck in SAVING
            self._state = EditState.EDITING
            raise

        logger.info("Saved product %s", product_id)
        self._reset()
        self._on_saved()
        return True

    def forget(self, product_id: str) -> None:
        """Drop the edit session of a product that has been deleted."""
        if self._editing_id == product_id:
            logger.debug("Edited product %s was deleted", product_id)
            self._reset()

    # --- Internal helpers -----------------------------------------------------

    def _enter(self, state: EditState, product_id: str | None) -> None:
        self._state = state
        self._editing_id = product_id
        self.field_errors = {}
        self.error = None

    def _reset(self) -> None:
        self._enter(EditState.VIEWING, None)
        self._draft = None

    def _fail(self, product_id: str, exc: Exception, message: str) -> None:
        logger.warning("Saving product %s failed: %s", product_id, exc)
        self._state = EditState.EDITING
        self.error = message
