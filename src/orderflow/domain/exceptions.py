"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each error keeps its context (ids, statuses, versions) as attributes so
callers never have to parse the message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from orderflow.domain.model.order import OrderStatus


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidMoney(ValidationError):
    """Currency mismatch, negative amount or negative arithmetic result."""


class InvalidProductId(ValidationError):
    """A product identifier has an invalid format."""


class InvalidExternalOrderId(ValidationError):
    """An external order identifier has an invalid format."""


class InvalidStatusTransition(DomainException):
    """The order lifecycle does not allow moving between these statuses."""

    def __init__(self, from_status: OrderStatus, to_status: OrderStatus) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid status transition: {from_status.value} -> {to_status.value}"
        )


class DuplicateOrder(DomainException):
    """An order with the same external id already exists."""

    def __init__(self, external_order_id: str) -> None:
        self.external_order_id = external_order_id
        super().__init__(f"Order already exists with external id '{external_order_id}'")


class OrderNotFound(DomainException):
    """A requested order does not exist."""

    def __init__(self, order_id: Any) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class ConcurrentModification(DomainException):
    """The order was changed by someone else since it was loaded."""

    def __init__(self, order_id: Any, expected_version: int, actual_version: int) -> None:
        self.order_id = order_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Order {order_id} was modified concurrently "
            f"(loaded version {expected_version}, stored version {actual_version})"
        )
