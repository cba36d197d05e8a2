"""CLI commands for browsing and managing products."""

from __future__ import annotations

import click

from invbrowser.application.dto import PageView
from invbrowser.application.inventory_view import InventoryView
from invbrowser.domain.exceptions import DomainException
from invbrowser.domain.model.criteria import FilterCriteria, SortKey
from invbrowser.infrastructure.bootstrap import inventory_view
from invbrowser.infrastructure.config import Settings

SORT_CHOICES = [key.value for key in SortKey]


def _open_view(settings: Settings) -> InventoryView:
    try:
        return inventory_view(settings)
    except DomainException as exc:
        raise click.ClickException(str(exc))


def _format_errors(field_errors: dict[str, str]) -> str:
    return "\n".join(f"  {field}: {message}" for field, message in field_errors.items())


def _fail(message: str | None, field_errors: dict[str, str] | None = None) -> None:
    text = message or "Operation failed"
    if field_errors:
        text = f"{text}\n{_format_errors(field_errors)}"
    raise click.ClickException(text)


def _render_pagination(page: PageView) -> str:
    window = page.pagination
    parts: list[str] = []
    if window.first_page_jump is not None:
        parts.append(str(window.first_page_jump))
        if window.visible_pages[0] > 2:
            parts.append("…")
    for number in window.visible_pages:
        parts.append(f"[{number}]" if number == window.current_page else str(number))
    if window.last_page_jump is not None:
        if window.visible_pages[-1] < window.total_pages - 1:
            parts.append("…")
        parts.append(str(window.last_page_jump))
    return f"Page {window.current_page} of {window.total_pages}:  " + " ".join(parts)


def _display_page(page: PageView) -> None:
    if not page.rows:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<8} {'Name':<24} {'Price':>10} {'Stock':>7}  {'Status':<13} {'Category':<16}"
    )
    click.echo("-" * 84)
    for row in page.rows:
        click.echo(
            f"{row.id:<8} {row.name:<24} {row.price:>10.2f} {row.stock:>7}  "
            f"{str(row.stock_status):<13} {row.category:<16}"
        )
    click.echo("-" * 84)
    click.echo(f"Showing {len(page.rows)} of {page.matching_products} matching "
               f"({page.total_products} products)")
    if page.pagination.needs_controls:
        click.echo(_render_pagination(page))


@click.command("list")
@click.option("--min-price", default="", help="Lowest price (inclusive).")
@click.option("--max-price", default="", help="Highest price (inclusive).")
@click.option("--min-stock", default="", help="Lowest stock (inclusive).")
@click.option("--max-stock", default="", help="Highest stock (inclusive).")
@click.option("--low-stock", is_flag=True, default=False, help="Only show low stock.")
@click.option("--out-of-stock", is_flag=True, default=False, help="Only show out of stock.")
@click.option("--category", "categories", multiple=True, help="Category to include (repeatable).")
@click.option("--sort", "sort_key", type=click.Choice(SORT_CHOICES), default="none", help="Sort order.")
@click.option("--page", default=1, type=int, help="Page number.")
@click.pass_obj
def product_list(
    settings: Settings,
    min_price: str,
    max_price: str,
    min_stock: str,
    max_stock: str,
    low_stock: bool,
    out_of_stock: bool,
    categories: tuple[str, ...],
    sort_key: str,
    page: int,
) -> None:
    """List products, filtered, sorted and paged."""
    view = _open_view(settings)
    if view.error:
        _fail(view.error, view.field_errors)

    view.set_criteria(
        FilterCriteria(
            min_price=min_price,
            max_price=max_price,
            min_stock=min_stock,
            max_stock=max_stock,
            show_low_stock=low_stock,
            show_out_of_stock=out_of_stock,
            selected_categories=frozenset(categories),
        )
    )
    view.set_sort_key(SortKey.parse(sort_key))
    view.go_to_page(page)
    _display_page(view.render())


@click.command("categories")
@click.pass_obj
def product_categories(settings: Settings) -> None:
    """List the categories present in the catalog."""
    view = _open_view(settings)
    if view.error:
        _fail(view.error, view.field_errors)
    if not view.categories:
        click.echo("No categories found.")
        return
    for category in view.categories:
        click.echo(category)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, help="Units in stock.")
@click.option("--category", required=True, help="Category.")
@click.pass_obj
def product_add(settings: Settings, name: str, price: str, stock: str, category: str) -> None:
    """Add a new product to the catalog."""
    view = _open_view(settings)
    if not view.add_product(name, price, stock, category):
        _fail(view.error, view.field_errors)
    click.echo(f"Product '{name.strip()}' added ({view.render().total_products} products)")


@click.command("edit")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price.")
@click.option("--stock", default=None, help="New stock.")
@click.option("--category", default=None, help="New category.")
@click.pass_obj
def product_edit(
    settings: Settings,
    product_id: str,
    name: str | None,
    price: str | None,
    stock: str | None,
    category: str | None,
) -> None:
    """Edit a product; fields not given keep their current value."""
    view = _open_view(settings)
    editor = view.editor

    try:
        editor.begin_edit(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    changes = {"name": name, "price": price, "stock": stock, "category": category}
    for field, value in changes.items():
        if value is not None:
            editor.update_draft_field(field, value)

    if not editor.validate_and_save(product_id):
        _fail(editor.error or "Product not saved", editor.field_errors)

    click.echo(f"Product #{product_id} updated.")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(settings: Settings, product_id: str) -> None:
    """Delete a product."""
    view = _open_view(settings)
    if not view.delete_product(product_id):
        _fail(view.error, view.field_errors)
    click.echo(f"Product #{product_id} deleted.")


@click.command("import")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.pass_obj
def product_import(settings: Settings, file_path: str) -> None:
    """Bulk import products from a .csv or .xlsx file."""
    view = _open_view(settings)
    if not view.bulk_import(file_path):
        _fail(view.error, view.field_errors)
    click.echo(f"Imported {file_path} ({view.render().total_products} products)")
