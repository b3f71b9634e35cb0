"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here: one line per product,
discounts recomputed from scratch, a monotonic status lifecycle, and
items that can only change while the order is a draft.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

import structlog

from ordering.domain.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from ordering.domain.model.value_objects import Money, Quantity

logger = structlog.get_logger()


class OrderStatus(Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
BULK_QUANTITY_THRESHOLD = 5
BULK_DISCOUNT_RATE = Decimal("0.10")

# Coupon codes are matched case-insensitively against these upper-case keys.
COUPON_PERCENT_DISCOUNTS: dict[str, Decimal] = {
    "SAVE10": Decimal("0.10"),
    "SAVE20": Decimal("0.20"),
}
COUPON_FLAT_DISCOUNTS: dict[str, Decimal] = {
    "WELCOME": Decimal("50.00"),
}

# Only code in this module holds the key, so only Order can build items.
_CONSTRUCTION_KEY = object()


def _validate_line(
    product_name: str,
    unit_price: Money | str | int | Decimal,
    quantity: int,
    currency: str = "USD",
) -> tuple[str, Money, Quantity]:
    """Normalise and validate the arguments describing one order line."""
    if not isinstance(product_name, str) or not product_name.strip():
        raise InvalidArgumentError("Product name cannot be empty")

    price = unit_price if isinstance(unit_price, Money) else Money.of(unit_price, currency)
    if not price.is_positive:
        raise InvalidArgumentError(f"Unit price must be positive, got {price}")

    return product_name.strip(), price, Quantity(quantity)


class OrderItem:
    """A line of an order, owned by exactly one Order.

    Read-only from the outside: there are no public mutators and the
    constructor refuses callers that do not hold the module's
    construction key.  ``Order`` goes through ``_create`` and
    ``_update_quantity``.
    """

    __slots__ = ("_id", "_product_name", "_unit_price", "_quantity")

    def __init__(
        self,
        key: object,
        item_id: UUID,
        product_name: str,
        unit_price: Money,
        quantity: Quantity,
    ) -> None:
        if key is not _CONSTRUCTION_KEY:
            raise TypeError("OrderItem instances can only be created through Order.add_item()")
        self._id = item_id
        self._product_name = product_name
        self._unit_price = unit_price
        self._quantity = quantity

    @classmethod
    def _create(
        cls,
        product_name: str,
        unit_price: Money | str | int | Decimal,
        quantity: int,
    ) -> OrderItem:
        name, price, qty = _validate_line(product_name, unit_price, quantity)
        return cls(_CONSTRUCTION_KEY, uuid4(), name, price, qty)

    def _update_quantity(self, new_quantity: int) -> None:
        self._quantity = Quantity(new_quantity)

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def product_name(self) -> str:
        return self._product_name

    @property
    def unit_price(self) -> Money:
        return self._unit_price

    @property
    def quantity(self) -> int:
        return self._quantity.value

    @property
    def line_total(self) -> Money:
        return self._unit_price * self._quantity.value

    def __repr__(self) -> str:
        return (
            f"OrderItem(id={self._id}, product_name={self._product_name!r}, "
            f"unit_price={self._unit_price}, quantity={self._quantity})"
        )


class Order:
    """Aggregate root for a customer order.

    New orders start as DRAFT with no items.  Items, quantities and the
    coupon can only change while the order is a draft; afterwards the
    order only moves forward through its lifecycle::

        DRAFT -> SUBMITTED -> SHIPPED
          \\         \\
           +---------+--> CANCELLED

    The order is not thread-safe; concurrent writers need their own lock.
    """

    def __init__(self, currency: str = "USD") -> None:
        self._id = uuid4()
        self._created_at = datetime.now(timezone.utc)
        self._currency = currency
        self._status = OrderStatus.DRAFT
        self._items: list[OrderItem] = []
        self._coupon_code: str | None = None
        self._discount_amount = Money.zero(currency)

    # --- Identity & state -----------------------------------------------------

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def coupon_code(self) -> str | None:
        return self._coupon_code

    @property
    def items(self) -> tuple[OrderItem, ...]:
        """Snapshot of the lines in insertion order."""
        return tuple(self._items)

    # --- Item management ------------------------------------------------------

    def add_item(
        self,
        product_name: str,
        unit_price: Money | str | int | Decimal,
        quantity: int,
    ) -> None:
        """Add a product, merging into the existing line for the same name.

        Names match case-insensitively.  On a merge the existing line
        keeps its unit price and its quantity grows by ``quantity``.
        """
        self._ensure_draft()
        name, price, qty = _validate_line(product_name, unit_price, quantity, self._currency)
        if price.currency != self._currency:
            raise InvalidArgumentError(
                f"Unit price currency {price.currency} does not match "
                f"order currency {self._currency}"
            )

        existing = self._find_item_by_product_name(name)
        if existing is not None:
            self._merge_with_existing_item(existing, qty.value)
        else:
            item = OrderItem._create(name, price, qty.value)
            self._items.append(item)
            logger.debug(
                "Item added to order",
                order_id=str(self._id),
                item_id=str(item.id),
                product=item.product_name,
                quantity=item.quantity,
            )

        self._recalculate_discounts()

    def remove_item(self, item_id: UUID | str) -> None:
        self._ensure_draft()
        item = self._find_item_by_id(item_id)
        self._items.remove(item)
        logger.debug(
            "Item removed from order",
            order_id=str(self._id),
            item_id=str(item.id),
            product=item.product_name,
        )
        self._recalculate_discounts()

    def apply_coupon(self, coupon_code: str) -> None:
        """Apply a coupon, replacing any coupon applied before.

        Unknown codes are accepted and simply give no discount.
        """
        self._ensure_draft()
        if not isinstance(coupon_code, str) or not coupon_code.strip():
            raise InvalidArgumentError("Coupon code cannot be empty")

        code = coupon_code.strip()
        if not _is_known_coupon(code):
            logger.warning("Unrecognised coupon code", order_id=str(self._id), coupon=code)

        self._coupon_code = code
        logger.debug("Coupon applied", order_id=str(self._id), coupon=code)
        self._recalculate_discounts()

    # --- State transitions ----------------------------------------------------

    def submit(self) -> None:
        """Transition DRAFT -> SUBMITTED.  The order must have items."""
        if self._status != OrderStatus.DRAFT:
            raise InvalidStateError("Order is already submitted")
        if not self._items:
            raise InvalidStateError("Cannot submit an empty order")
        self._transition_to(OrderStatus.SUBMITTED)

    def cancel(self) -> None:
        """Transition DRAFT|SUBMITTED -> CANCELLED."""
        if self._status == OrderStatus.CANCELLED:
            raise InvalidStateError("Order is already cancelled")
        if self._status == OrderStatus.SHIPPED:
            raise InvalidStateError("Cannot cancel a shipped order")
        self._transition_to(OrderStatus.CANCELLED)

    def ship(self) -> None:
        """Transition SUBMITTED -> SHIPPED."""
        if self._status != OrderStatus.SUBMITTED:
            raise InvalidStateError("Only submitted orders can be shipped")
        self._transition_to(OrderStatus.SHIPPED)

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self._currency)
        for item in self._items:
            result = result + item.line_total
        return result

    @property
    def discount_amount(self) -> Money:
        return self._discount_amount

    @property
    def total(self) -> Money:
        # Not clamped: stacked discounts may exceed the subtotal.
        return self.subtotal - self._discount_amount

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self._items)

    def __repr__(self) -> str:
        return (
            f"Order(id={self._id}, status={self._status.value}, "
            f"items={self.item_count}, total={self.total})"
        )

    # --- Internal helpers -----------------------------------------------------

    def _ensure_draft(self) -> None:
        if self._status != OrderStatus.DRAFT:
            raise InvalidStateError("Cannot modify a non-draft order")

    def _find_item_by_product_name(self, product_name: str) -> OrderItem | None:
        wanted = product_name.strip().casefold()
        for item in self._items:
            if item.product_name.casefold() == wanted:
                return item
        return None

    def _find_item_by_id(self, item_id: UUID | str) -> OrderItem:
        if isinstance(item_id, str):
            try:
                item_id = UUID(item_id)
            except ValueError:
                raise NotFoundError(f"Item with ID {item_id!r} not found") from None
        for item in self._items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Item with ID {item_id} not found")

    def _merge_with_existing_item(self, item: OrderItem, quantity: int) -> None:
        item._update_quantity(item.quantity + quantity)
        logger.debug(
            "Item quantity merged",
            order_id=str(self._id),
            item_id=str(item.id),
            product=item.product_name,
            quantity=item.quantity,
        )

    def _recalculate_discounts(self) -> None:
        """Rebuild the discount from zero out of the current items and coupon."""
        subtotal = self.subtotal
        discount = Money.zero(self._currency)
        discount = discount + self._bulk_discount(subtotal)
        discount = discount + self._coupon_discount(subtotal)
        self._discount_amount = discount
        logger.debug(
            "Discounts recalculated",
            order_id=str(self._id),
            subtotal=str(subtotal),
            discount=str(discount),
        )

    def _bulk_discount(self, subtotal: Money) -> Money:
        if self.total_quantity >= BULK_QUANTITY_THRESHOLD:
            return subtotal * BULK_DISCOUNT_RATE
        return Money.zero(self._currency)

    def _coupon_discount(self, subtotal: Money) -> Money:
        """Coupon discount, computed on the undiscounted subtotal."""
        if self._coupon_code is None:
            return Money.zero(self._currency)
        code = self._coupon_code.upper()
        if code in COUPON_PERCENT_DISCOUNTS:
            return subtotal * COUPON_PERCENT_DISCOUNTS[code]
        if code in COUPON_FLAT_DISCOUNTS:
            return Money(COUPON_FLAT_DISCOUNTS[code], self._currency)
        return Money.zero(self._currency)

    def _transition_to(self, new_status: OrderStatus) -> None:
        previous = self._status
        self._status = new_status
        logger.debug(
            "Order status changed",
            order_id=str(self._id),
            from_status=previous.value,
            to_status=new_status.value,
        )


def _is_known_coupon(code: str) -> bool:
    key = code.upper()
    return key in COUPON_PERCENT_DISCOUNTS or key in COUPON_FLAT_DISCOUNTS
