"""Application service: Price Order use case.

Builds a fresh Order in memory from the requested lines, optionally
applies a coupon and submits it, then hands back a DTO.  Nothing is
persisted; the aggregate lives only for the duration of the call.
"""

from __future__ import annotations

import structlog

from ordering.application.dto import OrderDTO, OrderItemSpec, OrderLineItemDTO
from ordering.domain.model.order import Order

logger = structlog.get_logger()


class PriceOrderHandler:

    def __init__(self, currency: str = "USD") -> None:
        self._currency = currency

    def handle(
        self,
        item_specs: list[OrderItemSpec],
        coupon_code: str | None = None,
        submit: bool = False,
    ) -> OrderDTO:
        """Price an order.

        Steps:
        1. Add every requested line through the aggregate (merging
           repeated product names).
        2. Apply the coupon, if any.
        3. Submit when asked to (fails on an empty order).
        4. Return a DTO.
        """
        order = Order(currency=self._currency)

        for spec in item_specs:
            order.add_item(spec.product_name, spec.unit_price, spec.quantity)

        if coupon_code is not None:
            order.apply_coupon(coupon_code)

        if submit:
            order.submit()

        logger.info(
            "Order priced",
            order_id=str(order.id),
            status=order.status.value,
            items=order.item_count,
            total=str(order.total),
        )
        return to_dto(order)


# --- Mapping ------------------------------------------------------------------


def to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=str(order.id),
        status=order.status.value,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        items=[
            OrderLineItemDTO(
                id=str(item.id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        item_count=order.item_count,
        total_quantity=order.total_quantity,
        coupon_code=order.coupon_code,
        subtotal=str(order.subtotal),
        discount=str(order.discount_amount),
        total=str(order.total),
    )
