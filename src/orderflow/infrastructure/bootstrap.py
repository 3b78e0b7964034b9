"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from orderflow.config import Settings, get_settings
from orderflow.infrastructure.messaging.jsonl_status_publisher import (
    JsonLinesStatusChangePublisher,
)
from orderflow.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)


def order_repository(settings: Settings | None = None) -> JsonOrderRepository:
    settings = settings or get_settings()
    return JsonOrderRepository(settings.orders_file)


def status_publisher(settings: Settings | None = None) -> JsonLinesStatusChangePublisher:
    settings = settings or get_settings()
    return JsonLinesStatusChangePublisher(settings.events_file)
