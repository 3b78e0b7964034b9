"""Application service: Create Order use case.

Validates the inbound command, rejects duplicates, builds the Order
aggregate, calculates its total and persists it.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from orderflow.application import mapper
from orderflow.application.dto import CreateOrderCommand, OrderDTO, OrderItemCommand
from orderflow.application.notifications import StatusChangePublisher, notify_status_change
from orderflow.domain.exceptions import DuplicateOrder, ValidationError
from orderflow.domain.model.value_objects import DEFAULT_CURRENCY
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def _has_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        publisher: StatusChangePublisher | None = None,
        default_currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._order_repo = order_repo
        self._publisher = publisher
        self._default_currency = default_currency

    def handle(self, command: CreateOrderCommand, correlation_id: str | None = None) -> OrderDTO:
        """Create a new order.

        Steps:
        1. Check the command's shape before any domain object is built.
        2. Reject an external id that is already stored.
        3. Build the Order and calculate its total (-> CALCULATED).
        4. Persist and return a DTO.

        The existence check in step 2 is only a fast path: two concurrent
        creates can both pass it, and the repository's ``save`` is what
        finally refuses the second one with ``DuplicateOrder``.
        """
        self._validate(command)
        external_order_id = command.external_order_id.strip()
        logger.info("Creating order: external_order_id=%s", external_order_id)

        if self._order_repo.exists_by_external_order_id(external_order_id):
            logger.warning("Duplicate order rejected: external_order_id=%s", external_order_id)
            raise DuplicateOrder(external_order_id)

        order = mapper.to_domain(command, self._default_currency)
        order.calculate_total()
        saved = self._order_repo.save(order)

        logger.info(
            "Order created: id=%s, external_order_id=%s, total=%s",
            saved.id,
            saved.external_order_id,
            saved.total_amount,
        )
        notify_status_change(self._publisher, saved, None, correlation_id)
        return mapper.to_dto(saved)

    # --- Structural validation ------------------------------------------------

    @classmethod
    def _validate(cls, command: CreateOrderCommand) -> None:
        if command is None:
            raise ValidationError("Create order command is required")
        if not _has_text(command.external_order_id):
            raise ValidationError("External order id is required")
        if not command.items:
            raise ValidationError("Order must contain at least one item")
        for item in command.items:
            cls._validate_item(item)

    @staticmethod
    def _validate_item(item: OrderItemCommand) -> None:
        if not _has_text(item.product_id):
            raise ValidationError("Product id is required")
        if not _has_text(item.product_name):
            raise ValidationError("Product name is required")

        if item.unit_price is None:
            raise ValidationError("Unit price must be greater than zero")
        try:
            price = Decimal(str(item.unit_price))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid unit price: {item.unit_price!r}") from exc
        if not price.is_finite() or price <= 0:
            raise ValidationError("Unit price must be greater than zero")

        if (
            item.quantity is None
            or isinstance(item.quantity, bool)
            or not isinstance(item.quantity, int)
            or item.quantity <= 0
        ):
            raise ValidationError("Quantity must be greater than zero")
