"""Application service: Mark Order As Available use case."""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application import mapper
from orderflow.application.dto import OrderDTO
from orderflow.application.notifications import StatusChangePublisher, notify_status_change
from orderflow.domain.exceptions import OrderNotFound
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class MarkOrderAvailableHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        publisher: StatusChangePublisher | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._publisher = publisher

    def handle(self, order_id: UUID, correlation_id: str | None = None) -> OrderDTO:
        logger.info("Marking order as available: %s", order_id)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        previous_status = order.status

        order.mark_as_available()
        saved = self._order_repo.save(order)

        logger.info("Order available: id=%s", saved.id)
        notify_status_change(self._publisher, saved, previous_status, correlation_id)
        return mapper.to_dto(saved)
