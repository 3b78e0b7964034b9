import logging

import click

from orderflow.config import get_settings
from orderflow.infrastructure.cli.order_commands import (
    order_available,
    order_count,
    order_create,
    order_fail,
    order_ingest,
    order_list,
    order_process,
    order_show,
)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log at DEBUG level.")
def cli(verbose: bool) -> None:
    """orderflow: order lifecycle service"""
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
order.add_command(order_available)
order.add_command(order_count)
order.add_command(order_create)
order.add_command(order_fail)
order.add_command(order_ingest)
order.add_command(order_list)
order.add_command(order_process)
order.add_command(order_show)
