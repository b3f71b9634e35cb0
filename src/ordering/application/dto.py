"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals (or the live aggregate) to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line (product name, unit price, quantity)."""

    product_name: str
    unit_price: str
    quantity: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete priced order as displayed to the user."""

    id: str
    status: str
    created_at: str
    items: list[OrderLineItemDTO]
    item_count: int
    total_quantity: int
    coupon_code: str | None
    subtotal: str
    discount: str
    total: str
