"""Inbound adapter for "order created" messages from the upstream system.

The payload is checked against a pydantic schema first; anything that
does not fit is rejected as a ``ValidationError`` before the use case
runs.  Domain errors from the use case propagate unchanged so the
transport can decide between retrying and dead-lettering.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.dto import CreateOrderCommand, OrderDTO, OrderItemCommand
from orderflow.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


class OrderItemMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_id: str = Field(min_length=1)
    product_name: str | None = None
    quantity: int = Field(gt=0)
    price: Decimal = Field(gt=0)
    currency: str | None = None


class OrderCreatedMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    correlation_id: str = Field(min_length=1)
    customer_id: str = Field(min_length=1)
    external_order_id: str | None = None
    items: list[OrderItemMessage] = Field(min_length=1)
    created_at: datetime | None = None

    def to_command(self) -> CreateOrderCommand:
        # Upstream identifies the order by its customer id unless it sends
        # an explicit order id; item names are optional on the wire.
        return CreateOrderCommand(
            external_order_id=self.external_order_id or self.customer_id,
            items=[
                OrderItemCommand(
                    product_id=item.product_id,
                    product_name=item.product_name or item.product_id,
                    unit_price=item.price,
                    quantity=item.quantity,
                    currency=item.currency,
                )
                for item in self.items
            ],
        )


class OrderCreatedConsumer:

    def __init__(self, create_order: CreateOrderHandler) -> None:
        self._create_order = create_order

    def handle(self, payload: dict[str, Any] | str | bytes) -> OrderDTO:
        message = self.parse(payload)
        logger.info(
            "Order created message received: correlation_id=%s, customer_id=%s, items=%d",
            message.correlation_id,
            message.customer_id,
            len(message.items),
        )
        dto = self._create_order.handle(
            message.to_command(), correlation_id=message.correlation_id
        )
        logger.info(
            "Order created from message: id=%s, correlation_id=%s",
            dto.id,
            message.correlation_id,
        )
        return dto

    @staticmethod
    def parse(payload: dict[str, Any] | str | bytes) -> OrderCreatedMessage:
        try:
            if isinstance(payload, (str, bytes)):
                return OrderCreatedMessage.model_validate_json(payload)
            return OrderCreatedMessage.model_validate(payload)
        except pydantic.ValidationError as exc:
            errors = ", ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            logger.warning("Invalid order created message: %s", errors)
            raise ValidationError(f"Invalid order created message: {errors}") from exc
