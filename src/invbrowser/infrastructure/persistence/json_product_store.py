"""JSON-file-backed implementation of ProductStore.

Stands in for the remote store when no API URL is configured. Bulk import
reads ``.csv`` with the stdlib ``csv`` module and ``.xlsx`` with
``openpyxl``; every row is validated before anything is written.
"""

from __future__ import annotations

import csv
import json
import logging
import zipfile
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from invbrowser.domain.exceptions import NotFoundError, TransportError, ValidationError
from invbrowser.domain.model.product import Product, ProductInput
from invbrowser.domain.repository.product_store import ProductStore

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "price", "stock", "category")


class JsonProductStore(ProductStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- ProductStore interface -----------------------------------------------

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def create(self, data: ProductInput) -> Product:
        products = self._load()
        product = self._build(self._next_id(products), data)
        products[product.id] = product
        self._persist(products)
        return product

    def update(self, product_id: str, data: ProductInput) -> Product:
        products = self._load()
        if product_id not in products:
            raise NotFoundError(f"Product with ID '{product_id}' not found")
        product = self._build(product_id, data)
        products[product_id] = product
        self._persist(products)
        return product

    def delete(self, product_id: str) -> None:
        products = self._load()
        if products.pop(product_id, None) is None:
            raise NotFoundError(f"Product with ID '{product_id}' not found")
        self._persist(products)

    def bulk_import(self, file_path: Path) -> None:
        rows = self._read_rows(file_path)

        # Phase 1: validate every row, fail before any mutation
        inputs: list[ProductInput] = []
        errors: dict[str, str] = {}
        for line_no, row in rows:
            try:
                inputs.append(
                    ProductInput.create(
                        row.get("name"), row.get("price"), row.get("stock"), row.get("category")
                    )
                )
            except ValidationError as exc:
                errors[f"row {line_no}"] = str(exc)
        if errors:
            raise ValidationError(
                f"{len(errors)} invalid row(s) in {file_path.name}", field_errors=errors
            )

        # Phase 2: append and persist
        products = self._load()
        for data in inputs:
            product = self._build(self._next_id(products), data)
            products[product.id] = product
        self._persist(products)
        logger.info("Imported %d products from %s", len(inputs), file_path.name)

    # --- Tabular file helpers -------------------------------------------------

    def _read_rows(self, file_path: Path) -> list[tuple[int, dict[str, Any]]]:
        suffix = file_path.suffix.lower()
        try:
            if suffix == ".csv":
                headers, body = self._read_csv(file_path)
            elif suffix == ".xlsx":
                headers, body = self._read_xlsx(file_path)
            else:
                raise ValidationError(f"Unsupported file type '{suffix}'")
        except (
            OSError,
            UnicodeDecodeError,
            csv.Error,
            zipfile.BadZipFile,
            InvalidFileException,
        ) as exc:
            raise TransportError(f"Cannot read {file_path.name}: {exc}") from exc

        normalized = [str(h).strip().lower() if h is not None else "" for h in headers]
        missing = [col for col in REQUIRED_COLUMNS if col not in normalized]
        if missing:
            raise ValidationError(f"Missing required column(s): {', '.join(missing)}")

        rows: list[tuple[int, dict[str, Any]]] = []
        # Line 1 is the header row
        for line_no, values in enumerate(body, start=2):
            if all(v is None or str(v).strip() == "" for v in values):
                continue
            rows.append((line_no, dict(zip(normalized, values))))
        return rows

    @staticmethod
    def _read_csv(file_path: Path) -> tuple[list[Any], list[list[Any]]]:
        with file_path.open(newline="", encoding="utf-8-sig") as handle:
            reader = list(csv.reader(handle))
        if not reader:
            return [], []
        return reader[0], reader[1:]

    @staticmethod
    def _read_xlsx(file_path: Path) -> tuple[list[Any], list[list[Any]]]:
        wb = openpyxl.load_workbook(str(file_path), read_only=True, data_only=True)
        try:
            ws = wb[wb.sheetnames[0]]
            rows = [list(row) for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()
        if not rows:
            return [], []
        return rows[0], rows[1:]

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _build(product_id: str, data: ProductInput) -> Product:
        return Product(
            id=product_id,
            name=data.name,
            price=data.price,
            stock=data.stock,
            category=data.category,
        )

    @staticmethod
    def _next_id(products: dict[str, Product]) -> str:
        numeric = [int(pid) for pid in products if pid.isdigit()]
        return str(max(numeric) + 1) if numeric else "1"

    def _load(self) -> dict[str, Product]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise TransportError(f"Cannot read {self._file_path}: {exc}") from exc
        if not isinstance(raw, list):
            raise TransportError(f"Malformed product file {self._file_path}: expected a JSON array")
        try:
            return {
                str(item["id"]): Product(
                    id=str(item["id"]),
                    name=item["name"],
                    price=Decimal(str(item["price"])),
                    stock=int(item["stock"]),
                    category=item["category"],
                )
                for item in raw
            }
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise TransportError(f"Malformed product file {self._file_path}: {exc!r}") from exc

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [
            {
                "id": p.id,
                "name": p.name,
                "price": str(p.price),
                "stock": p.stock,
                "category": p.category,
            }
            for p in products.values()
        ]
        try:
            self._file_path.write_text(
                json.dumps(raw, indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise TransportError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise TransportError(f"Cannot create {self._file_path}: {exc}") from exc
