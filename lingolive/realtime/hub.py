"""Outbound delivery to live connections.

A transport (the websocket endpoint, or a test) attaches one *sink* per
connection: an async callable that takes the JSON-ready event dict. The hub
never lets a failing sink affect delivery to any other connection.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import structlog

from lingolive.schemas.events import OutboundEvent

logger = structlog.get_logger(__name__)

EventSink = Callable[[dict[str, Any]], Awaitable[None]]


class ConnectionHub:
    """Maps connection ids to their sinks."""

    def __init__(self) -> None:
        self._sinks: dict[str, EventSink] = {}

    def attach(self, connection_id: str, sink: EventSink) -> None:
        self._sinks[connection_id] = sink

    def detach(self, connection_id: str) -> None:
        self._sinks.pop(connection_id, None)

    def is_connected(self, connection_id: str | None) -> bool:
        return connection_id is not None and connection_id in self._sinks

    async def send(self, connection_id: str | None, event: OutboundEvent) -> bool:
        """Deliver one event. Returns ``False`` if the connection is gone or the send failed."""
        if connection_id is None:
            return False
        sink = self._sinks.get(connection_id)
        if sink is None:
            logger.debug("event_dropped_no_connection", connection_id=connection_id, event_type=event.type)
            return False
        try:
            await sink(event.to_wire())
        except Exception as e:
            logger.warning(
                "event_delivery_failed",
                connection_id=connection_id,
                event_type=event.type,
                error=str(e),
            )
            return False
        return True

    async def broadcast(self, connection_ids: Iterable[str], event: OutboundEvent) -> int:
        """Deliver to each connection independently. Returns the delivered count."""
        delivered = 0
        for connection_id in list(connection_ids):
            if await self.send(connection_id, event):
                delivered += 1
        return delivered

    def __len__(self) -> int:
        return len(self._sinks)
