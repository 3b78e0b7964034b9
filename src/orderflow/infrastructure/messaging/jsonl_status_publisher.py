"""Outbox-file implementation of StatusChangePublisher.

Each notification is appended to a JSON-lines file that downstream
systems tail.  Delivery is fire-and-forget: a write failure is logged
and the use case that triggered it still succeeds.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from orderflow.application.notifications import OrderStatusChanged, StatusChangePublisher

logger = logging.getLogger(__name__)


class JsonLinesStatusChangePublisher(StatusChangePublisher):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()

    def publish(self, event: OrderStatusChanged) -> None:
        logger.info(
            "Publishing status change: order_id=%s, %s -> %s, correlation_id=%s",
            event.order_id,
            event.previous_status,
            event.current_status,
            event.correlation_id,
        )
        line = json.dumps(event.to_payload()) + "\n"
        try:
            with self._lock:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
                with self._file_path.open("a", encoding="utf-8") as fh:
                    fh.write(line)
        except OSError:
            logger.exception(
                "Failed to publish status change: order_id=%s, correlation_id=%s",
                event.order_id,
                event.correlation_id,
            )
