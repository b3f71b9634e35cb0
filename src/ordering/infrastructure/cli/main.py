import click

from ordering.infrastructure.cli.order_commands import order_demo, order_quote
from ordering.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log aggregate events to stderr.")
def cli(verbose: bool) -> None:
    """Ordering — order aggregate toolkit"""
    configure_logging(verbose)


@cli.group()
def order() -> None:
    """Price and walk through orders."""


# Register subcommands
order.add_command(order_demo)
order.add_command(order_quote)
