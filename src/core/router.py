"""Stream event routing (core domain).

The router is the lifecycle state machine: it applies transport events to
the connection store strictly in the order they are delivered.

    connecting -> open -> closed
         \\         \\
          +-> error  +-> error

`closed` and `error` are terminal. Events naming a connection id the store
does not know are ignored rather than raised, since the transport may
deliver stale or out-of-order events after a reset.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from core.models import (
    STATUS_CLOSED,
    STATUS_CONNECTING,
    STATUS_ERROR,
    STATUS_OPEN,
    Connection,
    Message,
    StreamEvent,
)
from core.store import ConnectionStore

LOGGER = logging.getLogger(__name__)

EVENT_CONNECTION = "stream-connection"
EVENT_OPEN = "stream-open"
EVENT_MESSAGE = "stream-message"
EVENT_ERROR = "stream-error"
EVENT_CLOSE = "stream-close"

_STATUS_EVENTS = {
    EVENT_OPEN: STATUS_OPEN,
    EVENT_ERROR: STATUS_ERROR,
    EVENT_CLOSE: STATUS_CLOSED,
}


class StreamEventRouter:
    """Applies lifecycle and message events to a ConnectionStore."""

    def __init__(self, store: ConnectionStore) -> None:
        self._store = store

    def apply(self, event: StreamEvent) -> Optional[str]:
        """Apply one event and return the affected connection id.

        Returns None when the event changed nothing (unknown connection,
        terminal connection, or unknown event type).
        """

        if event.type == EVENT_CONNECTION:
            return self._create(event)

        connection = self._store.get(event.connection_id)
        if connection is None:
            LOGGER.debug("Ignoring %s for unknown connection %s", event.type, event.connection_id)
            return None

        if event.type == EVENT_MESSAGE:
            self._store.append_message(
                connection.id,
                Message(
                    id=event.message_id,
                    event_type=event.event_type,
                    data=event.data,
                    last_event_id=event.last_event_id,
                    timestamp=event.timestamp,
                ),
            )
            return connection.id

        status = _STATUS_EVENTS.get(event.type)
        if status is None:
            LOGGER.debug("Ignoring unknown stream event type %s", event.type)
            return None

        if connection.is_terminal:
            LOGGER.debug(
                "Ignoring %s for %s: connection already %s",
                event.type,
                connection.id,
                connection.status,
            )
            return None

        self._store.set_status(connection.id, status)
        LOGGER.info("Connection %s is %s (%s)", connection.id, status, connection.url)
        return connection.id

    def _create(self, event: StreamEvent) -> str:
        created_at = event.timestamp if event.timestamp is not None else time.time() * 1000
        self._store.add(
            Connection(
                id=event.connection_id,
                url=event.url,
                frame_url=event.frame_url,
                is_iframe=event.is_iframe,
                created_at=created_at,
                status=STATUS_CONNECTING,
            )
        )
        LOGGER.info("Connection %s created for %s", event.connection_id, event.url)
        return event.connection_id
