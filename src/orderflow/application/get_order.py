"""Application service: Get Order queries (read-only)."""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application import mapper
from orderflow.application.dto import OrderDTO
from orderflow.domain.exceptions import ValidationError
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def parse_status(status: str | OrderStatus) -> OrderStatus:
    """Accept an OrderStatus or its name in any case."""
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus[status.strip().upper()]
    except (KeyError, AttributeError) as exc:
        raise ValidationError(f"Unknown order status: {status!r}") from exc


class GetOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def by_id(self, order_id: UUID) -> OrderDTO | None:
        logger.debug("Looking up order by id: %s", order_id)
        order = self._order_repo.get_by_id(order_id)
        return mapper.to_dto(order) if order is not None else None

    def by_external_order_id(self, external_order_id: str) -> OrderDTO | None:
        if not isinstance(external_order_id, str) or not external_order_id.strip():
            return None
        external_order_id = external_order_id.strip()
        logger.debug("Looking up order by external id: %s", external_order_id)
        order = self._order_repo.get_by_external_order_id(external_order_id)
        return mapper.to_dto(order) if order is not None else None

    def by_status(self, status: str | OrderStatus) -> list[OrderDTO]:
        order_status = parse_status(status)
        logger.debug("Listing orders in status %s", order_status.value)
        return mapper.to_dto_list(self._order_repo.list_by_status(order_status))

    def list_all(self) -> list[OrderDTO]:
        logger.debug("Listing all orders")
        return mapper.to_dto_list(self._order_repo.list_all())

    def count_by_status(self, status: str | OrderStatus) -> int:
        return self._order_repo.count_by_status(parse_status(status))
