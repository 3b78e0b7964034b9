"""Data Transfer Objects: plain containers that cross layer boundaries.

Commands carry what the upstream system sent; the DTOs carry a finished
order back out without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class OrderItemCommand:
    """Input: one item as sent by the upstream system."""

    product_id: str
    product_name: str
    unit_price: Decimal | str | int | None
    quantity: int
    currency: str | None = None


@dataclass(frozen=True)
class CreateOrderCommand:
    """Input: a new order as sent by the upstream system."""

    external_order_id: str
    items: list[OrderItemCommand] = field(default_factory=list)


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single order item."""

    id: str
    product_id: str
    product_name: str
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    currency: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "unitPrice": str(self.unit_price),
            "quantity": self.quantity,
            "subtotal": str(self.subtotal),
            "currency": self.currency,
        }


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as handed to downstream consumers."""

    id: str
    external_order_id: str
    total_amount: Decimal
    currency: str
    status: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemDTO]

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready representation using the outbound field names."""
        return {
            "id": self.id,
            "externalOrderId": self.external_order_id,
            "totalAmount": str(self.total_amount),
            "currency": self.currency,
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "items": [item.to_payload() for item in self.items],
        }
