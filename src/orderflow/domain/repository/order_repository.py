"""Abstract repository for the Order aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Implementations are the only place that can make
``external_order_id`` uniqueness and optimistic versioning hold under
concurrent writers, so both are part of the ``save`` contract rather
than checks the application layer may skip.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from orderflow.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def save(self, order: Order) -> Order:
        """Insert or update an order and return the stored state.

        On first insert (``order.id is None``) an id is assigned and the
        version becomes 1.  On update the stored version must equal
        ``order.version``, otherwise ``ConcurrentModification`` is raised;
        on success the version is incremented.  Saving an order whose
        external id belongs to a different stored order raises
        ``DuplicateOrder``.
        """

    @abstractmethod
    def get_by_id(self, order_id: UUID) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_external_order_id(self, external_order_id: str) -> Order | None:
        """Return the order carrying this upstream id, or None."""

    @abstractmethod
    def exists_by_external_order_id(self, external_order_id: str) -> bool:
        """True if an order with this upstream id is stored."""

    @abstractmethod
    def list_by_status(self, status: OrderStatus) -> list[Order]:
        """Return every order currently in *status*."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every stored order."""

    @abstractmethod
    def delete_by_id(self, order_id: UUID) -> None:
        """Remove an order; unknown ids are ignored."""

    @abstractmethod
    def count_by_status(self, status: OrderStatus) -> int:
        """Number of orders currently in *status*."""
