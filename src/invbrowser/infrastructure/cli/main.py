import logging

import click

from invbrowser.domain.exceptions import ConfigError
from invbrowser.infrastructure.cli.product_commands import (
    product_add,
    product_categories,
    product_delete,
    product_edit,
    product_import,
    product_list,
)
from invbrowser.infrastructure.config import Settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Inventory Browser — filter, sort, page and edit a product catalog"""
    if ctx.obj is None:
        try:
            ctx.obj = Settings.from_env()
        except ConfigError as exc:
            raise click.ClickException(str(exc))

    level = logging.DEBUG if verbose else getattr(logging, ctx.obj.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def products() -> None:
    """Browse and manage products."""


# Register subcommands
products.add_command(product_add)
products.add_command(product_categories)
products.add_command(product_delete)
products.add_command(product_edit)
products.add_command(product_import)
products.add_command(product_list)
