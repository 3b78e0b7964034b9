"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its items.
All business invariants are enforced here, except the two that only the
storage layer can guarantee under concurrency: ``external_order_id``
uniqueness and the optimistic ``version`` check.  Those belong to the
repository.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from orderflow.domain.exceptions import InvalidStatusTransition, ValidationError
from orderflow.domain.model.value_objects import ExternalOrderId, Money, ProductId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    RECEIVED = "RECEIVED"
    PROCESSING = "PROCESSING"
    CALCULATED = "CALCULATED"
    AVAILABLE = "AVAILABLE"
    FAILED = "FAILED"

    @property
    def description(self) -> str:
        return self.value.capitalize()

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.RECEIVED: frozenset({OrderStatus.PROCESSING, OrderStatus.FAILED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.CALCULATED, OrderStatus.FAILED}),
    OrderStatus.CALCULATED: frozenset({OrderStatus.AVAILABLE, OrderStatus.FAILED}),
    OrderStatus.AVAILABLE: frozenset(),
    OrderStatus.FAILED: frozenset(),
}

PRODUCT_NAME_MAX_LENGTH = 255


@dataclass(frozen=True)
class OrderItem:
    """A line of an order: what was bought, how many, and at what price.

    ``subtotal`` is derived from ``unit_price`` and ``quantity`` when the
    item is built and cannot be passed in.
    """

    product_id: ProductId
    product_name: str
    unit_price: Money
    quantity: int
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)
    subtotal: Money = field(init=False)

    def __post_init__(self) -> None:
        if isinstance(self.product_id, str):
            object.__setattr__(self, "product_id", ProductId(self.product_id))
        if not isinstance(self.product_id, ProductId):
            raise ValidationError("ProductId is required")

        if not isinstance(self.product_name, str) or not self.product_name.strip():
            raise ValidationError("Product name is required")
        if len(self.product_name) > PRODUCT_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Product name cannot exceed {PRODUCT_NAME_MAX_LENGTH} characters"
            )

        if not isinstance(self.unit_price, Money):
            raise ValidationError("Unit price is required")
        if not self.unit_price.is_positive():
            raise ValidationError("Unit price must be greater than zero")

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")

        object.__setattr__(self, "subtotal", self.unit_price * self.quantity)


@dataclass
class Order:
    """Aggregate root for orders received from the upstream system.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is kept simple so the repository can
    reconstitute persisted orders (status, total, version) as they were
    stored; it still refuses an order without items.
    """

    external_order_id: ExternalOrderId
    items: list[OrderItem]
    status: OrderStatus = OrderStatus.RECEIVED
    total_amount: Money | None = None
    id: UUID | None = None
    version: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.external_order_id, str):
            self.external_order_id = ExternalOrderId(self.external_order_id)
        if not isinstance(self.external_order_id, ExternalOrderId):
            raise ValidationError("ExternalOrderId is required")
        if not self.items:
            raise ValidationError("Order must contain at least one item")

        # The order owns its own copy of the item list.
        self.items = list(self.items)
        if self.total_amount is None:
            self.total_amount = Money.zero(self.items[0].unit_price.currency)
        if self.updated_at is None:
            self.updated_at = self.created_at

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        external_order_id: str | ExternalOrderId,
        items: list[OrderItem],
    ) -> Order:
        """Create a new order in RECEIVED status, enforcing all invariants."""
        if external_order_id is None:
            raise ValidationError("ExternalOrderId is required")
        if not items:
            raise ValidationError("Order must contain at least one item")
        for item in items:
            if not isinstance(item, OrderItem):
                raise ValidationError(f"Not an order item: {item!r}")

        return Order(external_order_id=external_order_id, items=list(items))

    # --- Item management ------------------------------------------------------

    def add_item(self, item: OrderItem) -> None:
        if self.status != OrderStatus.RECEIVED:
            raise ValidationError(
                f"Cannot add items to an order in {self.status.value} status"
            )
        if not isinstance(item, OrderItem):
            raise ValidationError(f"Not an order item: {item!r}")
        self.items.append(item)
        self._touch()

    # --- Calculation ----------------------------------------------------------

    def calculate_total(self) -> Money:
        """Sum item subtotals into ``total_amount``.

        Advances RECEIVED and PROCESSING orders to CALCULATED; any other
        status is left as is.  All items must share one currency.
        """
        if not self.items:
            raise ValidationError("Order must contain at least one item to calculate its total")

        total = Money.zero(self.items[0].subtotal.currency)
        for item in self.items:
            total = total + item.subtotal
        self.total_amount = total

        if self.status in (OrderStatus.RECEIVED, OrderStatus.PROCESSING):
            self.status = OrderStatus.CALCULATED
        self._touch()
        return total

    # --- State transitions ----------------------------------------------------

    def start_processing(self) -> None:
        self._transition_to(OrderStatus.PROCESSING)

    def mark_as_available(self) -> None:
        self._transition_to(OrderStatus.AVAILABLE)

    def mark_as_failed(self) -> None:
        """Move to FAILED from any status except AVAILABLE.

        This is a business override of the transition table: a failure can
        be recorded at any point until the order has been made available.
        """
        if self.status == OrderStatus.AVAILABLE:
            raise InvalidStatusTransition(self.status, OrderStatus.FAILED)
        self.status = OrderStatus.FAILED
        self._touch()

    # --- Queries --------------------------------------------------------------

    def is_available(self) -> bool:
        return self.status == OrderStatus.AVAILABLE

    def is_failed(self) -> bool:
        return self.status == OrderStatus.FAILED

    @property
    def item_count(self) -> int:
        return len(self.items)

    # --- Internal helpers -----------------------------------------------------

    def _transition_to(self, target: OrderStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransition(self.status, target)
        self.status = target
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _utcnow()
