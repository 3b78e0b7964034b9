"""Application service: Mark Order As Failed use case.

The optional reason is written to the log only; the aggregate does not
store it.
"""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application import mapper
from orderflow.application.dto import OrderDTO
from orderflow.application.notifications import StatusChangePublisher, notify_status_change
from orderflow.domain.exceptions import OrderNotFound
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class MarkOrderFailedHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        publisher: StatusChangePublisher | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._publisher = publisher

    def handle(
        self,
        order_id: UUID,
        reason: str | None = None,
        correlation_id: str | None = None,
    ) -> OrderDTO:
        logger.warning("Marking order as failed: id=%s, reason=%s", order_id, reason)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        previous_status = order.status

        order.mark_as_failed()
        saved = self._order_repo.save(order)

        logger.warning("Order failed: id=%s, previous_status=%s", saved.id, previous_status.value)
        notify_status_change(self._publisher, saved, previous_status, correlation_id)
        return mapper.to_dto(saved)
