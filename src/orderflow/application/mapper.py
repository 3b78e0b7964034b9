"""Conversion between commands, the Order aggregate and DTOs."""

from __future__ import annotations

from orderflow.application.dto import (
    CreateOrderCommand,
    OrderDTO,
    OrderItemCommand,
    OrderItemDTO,
)
from orderflow.domain.model.order import Order, OrderItem
from orderflow.domain.model.value_objects import DEFAULT_CURRENCY, Money, ProductId


def to_domain(command: CreateOrderCommand, default_currency: str = DEFAULT_CURRENCY) -> Order:
    """Build a new RECEIVED order from a creation command."""
    items = [to_item_domain(item, default_currency) for item in command.items]
    return Order.create(external_order_id=command.external_order_id, items=items)


def to_item_domain(
    command: OrderItemCommand, default_currency: str = DEFAULT_CURRENCY
) -> OrderItem:
    return OrderItem(
        product_id=ProductId(command.product_id),
        product_name=command.product_name.strip(),
        unit_price=Money.of(command.unit_price, command.currency or default_currency),
        quantity=command.quantity,
    )


def to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=str(order.id) if order.id is not None else "",
        external_order_id=order.external_order_id.value,
        total_amount=order.total_amount.amount,  # type: ignore[union-attr]
        currency=order.total_amount.currency,  # type: ignore[union-attr]
        status=order.status.value,
        created_at=order.created_at,
        updated_at=order.updated_at,  # type: ignore[arg-type]
        items=[
            OrderItemDTO(
                id=str(item.id),
                product_id=item.product_id.value,
                product_name=item.product_name,
                unit_price=item.unit_price.amount,
                quantity=item.quantity,
                subtotal=item.subtotal.amount,
                currency=item.unit_price.currency,
            )
            for item in order.items
        ],
    )


def to_dto_list(orders: list[Order]) -> list[OrderDTO]:
    return [to_dto(order) for order in orders]
