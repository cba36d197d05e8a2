"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from invbrowser.application.inventory_view import InventoryView, ViewSettings
from invbrowser.domain.repository.product_store import ProductStore
from invbrowser.infrastructure.config import Settings
from invbrowser.infrastructure.http.rest_product_store import RestProductStore
from invbrowser.infrastructure.persistence.json_product_store import JsonProductStore


def product_store(settings: Settings) -> ProductStore:
    """The REST store when an API URL is configured, else the local JSON file."""
    if settings.uses_remote_store:
        return RestProductStore(
            settings.api_url, api_key=settings.api_key, timeout=settings.timeout
        )
    return JsonProductStore(settings.data_file)


def view_settings(settings: Settings) -> ViewSettings:
    return ViewSettings(
        items_per_page=settings.items_per_page,
        window_size=settings.page_window,
        low_stock_threshold=settings.low_stock_threshold,
    )


def inventory_view(settings: Settings) -> InventoryView:
    """A view over the configured store, already loaded."""
    view = InventoryView(product_store(settings), view_settings(settings))
    view.reload()
    return view
