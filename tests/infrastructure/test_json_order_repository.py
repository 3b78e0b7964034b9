"""Tests for the JSON-file order repository."""

import json
from decimal import Decimal
from uuid import uuid4

import pytest

from orderflow.domain.exceptions import ConcurrentModification, DuplicateOrder, OrderNotFound
from orderflow.domain.model.order import Order, OrderItem, OrderStatus
from orderflow.domain.model.value_objects import Money
from orderflow.infrastructure.persistence.json_order_repository import JsonOrderRepository


def _order(external_order_id: str = "EXT-1") -> Order:
    order = Order.create(external_order_id, [
        OrderItem(product_id="SKU-1", product_name="Widget", unit_price=Money.of("50.00"), quantity=2),
        OrderItem(product_id="SKU-2", product_name="Gadget", unit_price=Money.of("30.00", "BRL"), quantity=3),
    ])
    order.calculate_total()
    return order


@pytest.fixture
def repo(tmp_path):
    return JsonOrderRepository(tmp_path / "data" / "orders.json")


def test_creates_empty_file(tmp_path):
    path = tmp_path / "nested" / "orders.json"
    JsonOrderRepository(path)
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_insert_assigns_id_and_version(repo):
    order = _order()
    saved = repo.save(order)
    assert saved is order
    assert order.id is not None
    assert order.version == 1


def test_round_trip_preserves_aggregate(repo):
    order = repo.save(_order())
    loaded = repo.get_by_id(order.id)

    assert loaded is not order
    assert loaded.external_order_id == order.external_order_id
    assert loaded.status == OrderStatus.CALCULATED
    assert loaded.total_amount == Money.of("190.00")
    assert [i.id for i in loaded.items] == [i.id for i in order.items]
    assert [i.subtotal.amount for i in loaded.items] == [Decimal("100.00"), Decimal("90.00")]
    assert loaded.created_at == order.created_at
    assert loaded.updated_at == order.updated_at
    assert loaded.version == 1


def test_update_increments_version(repo):
    order = repo.save(_order())
    loaded = repo.get_by_id(order.id)
    loaded.mark_as_available()
    repo.save(loaded)

    stored = repo.get_by_id(order.id)
    assert stored.version == 2
    assert stored.is_available()


def test_stale_update_rejected(repo):
    order = repo.save(_order())
    first = repo.get_by_id(order.id)
    second = repo.get_by_id(order.id)

    first.mark_as_available()
    repo.save(first)

    second.mark_as_failed()
    with pytest.raises(ConcurrentModification):
        repo.save(second)
    assert second.version == 1
    assert repo.get_by_id(order.id).is_available()


def test_duplicate_external_id_rejected(repo):
    repo.save(_order("EXT-1"))
    duplicate = _order("EXT-1")
    with pytest.raises(DuplicateOrder):
        repo.save(duplicate)
    assert duplicate.id is None
    assert len(repo.list_all()) == 1


def test_update_of_missing_order_rejected(repo):
    order = _order()
    order.id = uuid4()
    order.version = 1
    with pytest.raises(OrderNotFound):
        repo.save(order)


def test_queries(repo):
    first = repo.save(_order("EXT-1"))
    repo.save(_order("EXT-2"))
    loaded = repo.get_by_id(first.id)
    loaded.mark_as_failed()
    repo.save(loaded)

    assert repo.exists_by_external_order_id("EXT-2")
    assert not repo.exists_by_external_order_id("EXT-3")
    assert repo.get_by_external_order_id("EXT-1").is_failed()
    assert repo.get_by_external_order_id("EXT-3") is None
    assert [o.external_order_id.value for o in repo.list_by_status(OrderStatus.CALCULATED)] == ["EXT-2"]
    assert repo.count_by_status(OrderStatus.FAILED) == 1
    assert repo.count_by_status(OrderStatus.AVAILABLE) == 0
    assert len(repo.list_all()) == 2


def test_delete(repo):
    order = repo.save(_order())
    repo.delete_by_id(order.id)
    assert repo.get_by_id(order.id) is None
    repo.delete_by_id(order.id)  # unknown ids are ignored


def test_instances_share_the_file(tmp_path):
    path = tmp_path / "orders.json"
    order = JsonOrderRepository(path).save(_order())
    assert JsonOrderRepository(path).get_by_id(order.id) is not None
