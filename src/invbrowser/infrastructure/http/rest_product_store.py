"""REST implementation of ProductStore, backed by ``requests``.

Endpoints, relative to the collection URL (e.g. ``https://host/api/products``)::

    GET    {base}            list
    POST   {base}            create (JSON)
    PUT    {base}/{id}       update (JSON)
    DELETE {base}/{id}       delete
    POST   {base}/upload     bulk import (multipart field "file")

Mutating calls carry the ``x-api-key`` header.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests

from invbrowser.domain.exceptions import NotFoundError, TransportError, ValidationError
from invbrowser.domain.model.product import Product, ProductInput
from invbrowser.domain.model.value_objects import parse_number
from invbrowser.domain.repository.product_store import ProductStore

logger = logging.getLogger(__name__)

_VALIDATION_STATUSES = {400, 409, 422}

_UPLOAD_CONTENT_TYPES = {
    ".csv": "text/csv",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class RestProductStore(ProductStore):

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 15,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._session = session or requests.Session()

    # --- ProductStore interface -----------------------------------------------

    def list_all(self) -> list[Product]:
        payload = self._request("GET", self._base_url)
        if isinstance(payload, dict):
            # Some deployments wrap the list: {"products": [...]}
            payload = payload.get("products", payload.get("data"))
        if not isinstance(payload, list):
            raise TransportError("Product list response is not a JSON array")
        return [self._to_domain(raw) for raw in payload]

    def create(self, data: ProductInput) -> Product:
        payload = self._request(
            "POST", self._base_url, json=self._to_raw(data), auth=True
        )
        return self._echo(payload, data)

    def update(self, product_id: str, data: ProductInput) -> Product:
        payload = self._request(
            "PUT", self._item_url(product_id), json=self._to_raw(data), auth=True
        )
        return self._echo(payload, data, product_id)

    def delete(self, product_id: str) -> None:
        self._request("DELETE", self._item_url(product_id), auth=True)

    def bulk_import(self, file_path: Path) -> None:
        content_type = _UPLOAD_CONTENT_TYPES.get(
            file_path.suffix.lower(), "application/octet-stream"
        )
        try:
            handle = file_path.open("rb")
        except OSError as exc:
            raise TransportError(f"Cannot read {file_path}: {exc}") from exc
        with handle:
            self._request(
                "POST",
                f"{self._base_url}/upload",
                files={"file": (file_path.name, handle, content_type)},
                auth=True,
            )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(data: ProductInput) -> dict[str, Any]:
        return {
            "name": data.name,
            "price": float(data.price),
            "stock": data.stock,
            "category": data.category,
        }

    @staticmethod
    def _to_domain(raw: Any) -> Product:
        if not isinstance(raw, dict):
            raise TransportError(f"Unexpected product record: {raw!r}")
        product_id = raw.get("_id", raw.get("id"))
        price = parse_number(raw.get("price"))
        stock = parse_number(raw.get("stock"))
        if (
            product_id is None
            or price is None
            or stock is None
            or stock != stock.to_integral_value()
        ):
            raise TransportError(f"Malformed product record: {raw!r}")
        return Product(
            id=str(product_id),
            name=str(raw.get("name") or ""),
            price=price,
            stock=int(stock),
            category=str(raw.get("category") or ""),
        )

    @classmethod
    def _echo(cls, payload: Any, data: ProductInput, product_id: str = "") -> Product:
        """The saved record, or the sent fields when the store only acknowledges."""
        try:
            return cls._to_domain(payload)
        except TransportError:
            logger.debug("Store returned no product record; echoing the payload")
        if isinstance(payload, dict):
            product_id = str(payload.get("_id", payload.get("id", product_id)))
        return Product(
            id=product_id,
            name=data.name,
            price=data.price,
            stock=data.stock,
            category=data.category,
        )

    # --- HTTP helpers ---------------------------------------------------------

    def _item_url(self, product_id: str) -> str:
        return f"{self._base_url}/{quote(str(product_id), safe='')}"

    def _request(self, method: str, url: str, auth: bool = False, **kwargs: Any) -> Any:
        headers = {"x-api-key": self._api_key} if auth and self._api_key else {}
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(
                method, url, headers=headers, timeout=self._timeout, **kwargs
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Could not reach product store: {exc}") from exc

        if resp.status_code == 404:
            raise NotFoundError(self._error_message(resp) or "Product no longer exists")
        if resp.status_code in _VALIDATION_STATUSES:
            message = self._error_message(resp) or "The store rejected the product data"
            raise ValidationError(message, self._field_errors(resp))
        if not resp.ok:
            logger.warning("%s %s returned HTTP %s", method, url, resp.status_code)
            raise TransportError(
                f"Product store returned HTTP {resp.status_code}: "
                f"{self._error_message(resp) or resp.reason}"
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from product store: {exc}") from exc

    @staticmethod
    def _error_body(resp: requests.Response) -> dict[str, Any]:
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    @classmethod
    def _error_message(cls, resp: requests.Response) -> str:
        body = cls._error_body(resp)
        message = body.get("message") or body.get("error")
        if isinstance(message, str):
            return message
        return resp.text.strip()[:200] if resp.text else ""

    @classmethod
    def _field_errors(cls, resp: requests.Response) -> dict[str, str]:
        errors = cls._error_body(resp).get("errors")
        if isinstance(errors, dict):
            return {str(k): str(v) for k, v in errors.items()}
        if isinstance(errors, list):
            return {f"row {i + 1}": str(e) for i, e in enumerate(errors)}
        return {}
