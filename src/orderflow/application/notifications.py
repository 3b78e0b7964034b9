"""Status-change notifications sent to downstream systems.

Publishing is fire-and-forget from the use cases' point of view: a
publisher that raises is logged and the use case carries on.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from orderflow.domain.model.order import Order, OrderStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: str
    previous_status: str | None
    current_status: str
    customer_id: str
    changed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: str | None = None

    @staticmethod
    def for_order(
        order: Order,
        previous_status: OrderStatus | None,
        correlation_id: str | None = None,
    ) -> OrderStatusChanged:
        # Upstream orders carry no customer of their own; the external id
        # identifies them to the downstream side.
        return OrderStatusChanged(
            order_id=str(order.id),
            previous_status=previous_status.value if previous_status else None,
            current_status=order.status.value,
            customer_id=order.external_order_id.value,
            changed_at=order.updated_at or datetime.now(timezone.utc),
            correlation_id=correlation_id,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "previous_status": self.previous_status,
            "current_status": self.current_status,
            "customer_id": self.customer_id,
            "changed_at": self.changed_at.isoformat(),
            "correlation_id": self.correlation_id,
        }


class StatusChangePublisher(ABC):

    @abstractmethod
    def publish(self, event: OrderStatusChanged) -> None:
        """Hand the event to the downstream channel."""


def notify_status_change(
    publisher: StatusChangePublisher | None,
    order: Order,
    previous_status: OrderStatus | None,
    correlation_id: str | None = None,
) -> None:
    if publisher is None:
        return
    event = OrderStatusChanged.for_order(order, previous_status, correlation_id)
    try:
        publisher.publish(event)
    except Exception:
        # The order is already saved.
        logger.exception(
            "Failed to publish status change: order_id=%s, status=%s, correlation_id=%s",
            event.order_id,
            event.current_status,
            event.correlation_id,
        )
