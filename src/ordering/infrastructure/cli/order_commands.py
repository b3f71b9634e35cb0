"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from ordering.application.dto import OrderDTO, OrderItemSpec
from ordering.application.price_order import PriceOrderHandler
from ordering.domain.exceptions import DomainException
from ordering.domain.model.order import Order


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Laptop:1200:1,Mouse:25:2' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for triple in raw.split(","):
        triple = triple.strip()
        parts = triple.rsplit(":", 2)
        if len(parts) != 3:
            raise click.BadParameter(
                f"Invalid item format '{triple}'. Expected 'ProductName:Price:Quantity'."
            )
        name, price, qty_str = parts
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        specs.append(
            OrderItemSpec(product_name=name.strip(), unit_price=price.strip(), quantity=qty)
        )
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying a priced order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    if dto.coupon_code:
        click.echo(f"Coupon:   {dto.coupon_code}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>20}")
    click.echo(f"  {'Discount':<27} {dto.discount:>20}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("quote")
@click.option("--items", required=True, help="Items as 'Product:Price:Qty,Product:Price:Qty'.")
@click.option("--coupon", default=None, help="Coupon code (SAVE10, SAVE20, WELCOME).")
@click.option("--submit", is_flag=True, default=False, help="Submit the order after pricing.")
def order_quote(items: str, coupon: str | None, submit: bool) -> None:
    """Price an order with bulk and coupon discounts applied."""
    specs = _parse_items(items)
    handler = PriceOrderHandler()

    try:
        dto = handler.handle(specs, coupon_code=coupon, submit=submit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


def _echo_totals(order: Order) -> None:
    click.echo(f"Subtotal: {order.subtotal}")
    click.echo(f"Discount: {order.discount_amount}")
    click.echo(f"Total:    {order.total}")
    click.echo()


@click.command("demo")
def order_demo() -> None:
    """Walk an order through its whole lifecycle."""
    order = Order()
    click.echo(f"Order created: {order.id}")
    click.echo(f"Status: {order.status.value}")
    click.echo()

    click.echo("Adding Laptop, Mouse x2 and Keyboard...")
    order.add_item("Laptop", "1200.00", 1)
    order.add_item("Mouse", "25.00", 2)
    order.add_item("Keyboard", "75.00", 1)
    _echo_totals(order)

    click.echo("Adding 2 more mice (merged into the existing line)...")
    order.add_item("Mouse", "25.00", 2)
    click.echo(f"Items in order: {order.item_count}")
    for item in order.items:
        click.echo(
            f"  - {item.product_name}: {item.quantity} x {item.unit_price} = {item.line_total}"
        )
    _echo_totals(order)

    click.echo("Adding a Monitor (5+ units triggers the bulk discount)...")
    order.add_item("Monitor", "300.00", 1)
    _echo_totals(order)

    click.echo("Applying coupon SAVE20...")
    order.apply_coupon("SAVE20")
    _echo_totals(order)

    order.submit()
    click.echo(f"Submitted. Status: {order.status.value}")

    try:
        order.add_item("Headphones", "100.00", 1)
    except DomainException as exc:
        click.echo(f"Adding after submission rejected: {exc}")

    order.ship()
    click.echo(f"Shipped. Status: {order.status.value}")

    try:
        order.cancel()
    except DomainException as exc:
        click.echo(f"Cancelling after shipping rejected: {exc}")
