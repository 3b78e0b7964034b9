"""Tests for the inbound "order created" message consumer."""

import json
from decimal import Decimal

import pytest

from orderflow.application.create_order import CreateOrderHandler
from orderflow.domain.exceptions import DuplicateOrder, ValidationError
from orderflow.infrastructure.messaging.order_created_consumer import OrderCreatedConsumer
from tests.fakes import FakeOrderRepository, FakeStatusChangePublisher


def _message(**overrides) -> dict:
    message = {
        "correlation_id": "corr-42",
        "customer_id": "CUST-7",
        "items": [
            {"product_id": "SKU-1", "quantity": 2, "price": "50.00"},
            {"product_id": "SKU-2", "product_name": "Gadget", "quantity": 3, "price": 30},
        ],
        "created_at": "2024-05-01T10:00:00",
    }
    message.update(overrides)
    return message


def _setup():
    order_repo = FakeOrderRepository()
    publisher = FakeStatusChangePublisher()
    consumer = OrderCreatedConsumer(CreateOrderHandler(order_repo, publisher))
    return consumer, order_repo, publisher


def test_creates_order_from_message():
    consumer, order_repo, publisher = _setup()

    dto = consumer.handle(_message())

    assert dto.external_order_id == "CUST-7"
    assert dto.total_amount == Decimal("190.00")
    assert dto.status == "CALCULATED"
    assert [i.product_name for i in dto.items] == ["SKU-1", "Gadget"]
    assert order_repo.exists_by_external_order_id("CUST-7")
    assert publisher.events[0].correlation_id == "corr-42"


def test_accepts_raw_json():
    consumer, _, _ = _setup()
    dto = consumer.handle(json.dumps(_message(external_order_id="EXT-55")))
    assert dto.external_order_id == "EXT-55"


@pytest.mark.parametrize("overrides", [
    {"items": []},
    {"correlation_id": ""},
    {"customer_id": None},
    {"items": [{"product_id": "SKU-1", "quantity": 0, "price": "1"}]},
    {"items": [{"product_id": "SKU-1", "quantity": 1, "price": "-1"}]},
    {"items": [{"quantity": 1, "price": "1"}]},
])
def test_invalid_messages_rejected(overrides):
    consumer, order_repo, _ = _setup()
    with pytest.raises(ValidationError, match="Invalid order created message"):
        consumer.handle(_message(**overrides))
    assert order_repo.save_calls == 0


def test_malformed_json_rejected():
    consumer, _, _ = _setup()
    with pytest.raises(ValidationError):
        consumer.handle("{not json")


def test_redelivered_message_is_a_duplicate():
    consumer, order_repo, _ = _setup()
    consumer.handle(_message())
    with pytest.raises(DuplicateOrder):
        consumer.handle(_message())
    assert len(order_repo.list_all()) == 1
