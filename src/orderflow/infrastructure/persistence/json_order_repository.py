"""JSON-file-backed implementation of OrderRepository.

Every save is a read-check-write of the whole file done under one
process-wide lock, and the file is replaced atomically.  That is what
makes the ``external_order_id`` uniqueness and version checks hold for
concurrent writers in the same process.  Separate processes sharing one
file are not coordinated.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from uuid import UUID, uuid4

from orderflow.domain.exceptions import ConcurrentModification, DuplicateOrder, OrderNotFound
from orderflow.domain.model.order import Order, OrderItem, OrderStatus
from orderflow.domain.model.value_objects import ExternalOrderId, Money, ProductId
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

_WRITE_LOCK = threading.RLock()


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def save(self, order: Order) -> Order:
        external_order_id = order.external_order_id.value

        with _WRITE_LOCK:
            orders = self._load_raw()
            current_id = str(order.id) if order.id is not None else None

            for raw in orders:
                if raw["external_order_id"] == external_order_id and raw["id"] != current_id:
                    raise DuplicateOrder(external_order_id)

            if order.id is None:
                new_id = uuid4()
                new_version = 1
                orders.append(self._to_raw(order, new_id, new_version))
            else:
                index = self._index_of(orders, current_id)
                if index is None:
                    raise OrderNotFound(order.id)
                stored_version = orders[index]["version"]
                if stored_version != order.version:
                    raise ConcurrentModification(order.id, order.version, stored_version)
                new_id = order.id
                new_version = order.version + 1
                orders[index] = self._to_raw(order, new_id, new_version)

            self._persist_raw(orders)

        order.id = new_id
        order.version = new_version
        logger.info(
            "Order saved: id=%s, external_order_id=%s, status=%s, version=%d",
            order.id,
            external_order_id,
            order.status.value,
            order.version,
        )
        return order

    def get_by_id(self, order_id: UUID) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == str(order_id):
                return self._to_domain(raw)
        return None

    def get_by_external_order_id(self, external_order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["external_order_id"] == external_order_id:
                return self._to_domain(raw)
        return None

    def exists_by_external_order_id(self, external_order_id: str) -> bool:
        return any(
            raw["external_order_id"] == external_order_id for raw in self._load_raw()
        )

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["status"] == status.value
        ]

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def delete_by_id(self, order_id: UUID) -> None:
        with _WRITE_LOCK:
            orders = self._load_raw()
            remaining = [raw for raw in orders if raw["id"] != str(order_id)]
            if len(remaining) != len(orders):
                self._persist_raw(remaining)
                logger.info("Order deleted: id=%s", order_id)

    def count_by_status(self, status: OrderStatus) -> int:
        return sum(1 for raw in self._load_raw() if raw["status"] == status.value)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order, order_id: UUID, version: int) -> dict:
        return {
            "id": str(order_id),
            "external_order_id": order.external_order_id.value,
            "status": order.status.value,
            "total_amount": str(order.total_amount.amount),  # type: ignore[union-attr]
            "currency": order.total_amount.currency,  # type: ignore[union-attr]
            "version": version,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),  # type: ignore[union-attr]
            "items": [
                {
                    "id": str(item.id),
                    "product_id": item.product_id.value,
                    "product_name": item.product_name,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "quantity": item.quantity,
                    "created_at": item.created_at.isoformat(),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderItem(
                id=UUID(i["id"]),
                product_id=ProductId(i["product_id"]),
                product_name=i["product_name"],
                unit_price=Money(Decimal(i["unit_price"]), i["currency"]),
                quantity=i["quantity"],
                created_at=datetime.fromisoformat(i["created_at"]),
            )
            for i in raw["items"]
        ]
        return Order(
            id=UUID(raw["id"]),
            external_order_id=ExternalOrderId(raw["external_order_id"]),
            items=items,
            status=OrderStatus(raw["status"]),
            total_amount=Money(Decimal(raw["total_amount"]), raw["currency"]),
            version=raw["version"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _index_of(orders: list[dict], order_id: str | None) -> int | None:
        for i, raw in enumerate(orders):
            if raw["id"] == order_id:
                return i
        return None

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(orders, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
