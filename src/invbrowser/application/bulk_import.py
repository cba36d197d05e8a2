"""Application service: Bulk Import use case.

Hands a spreadsheet to the store. Parsing happens store-side; this layer
only refuses what can never succeed (no file, wrong type) before any
network traffic.
"""

from __future__ import annotations

import logging
from pathlib import Path

from invbrowser.domain.exceptions import ValidationError
from invbrowser.domain.repository.product_store import ProductStore

logger = logging.getLogger(__name__)

ACCEPTED_SUFFIXES = (".csv", ".xlsx")


class BulkImportHandler:

    def __init__(self, store: ProductStore) -> None:
        self._store = store

    def handle(self, file_path: Path | str | None) -> None:
        if file_path is None or not str(file_path).strip():
            raise ValidationError("Please select a file.", {"file": "Please select a file."})

        path = Path(file_path)
        if path.suffix.lower() not in ACCEPTED_SUFFIXES:
            message = f"Unsupported file type '{path.suffix or path.name}'; expected .csv or .xlsx"
            raise ValidationError(message, {"file": message})
        if not path.is_file():
            message = f"File not found: {path}"
            raise ValidationError(message, {"file": message})

        self._store.bulk_import(path)
        logger.info("Imported products from %s", path.name)
