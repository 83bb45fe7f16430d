"""In-memory connection store.

The store is the single owner of connection and message data. It keeps
connections in insertion order and never shrinks or reorders a message log;
only a connection's status and messages change after creation.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.models import Connection, Message

LOGGER = logging.getLogger(__name__)


class ConnectionStore:
    """Ordered registry of connections keyed by connection id."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def get(self, connection_id: Optional[str]) -> Optional[Connection]:
        if connection_id is None:
            return None
        return self._connections.get(connection_id)

    def add(self, connection: Connection) -> Connection:
        """Register a connection, replacing any entry that reuses its id."""

        if connection.id in self._connections:
            LOGGER.warning("Connection id %s reused; replacing previous entry", connection.id)
        self._connections[connection.id] = connection
        return connection

    def set_status(self, connection_id: str, status: str) -> bool:
        connection = self._connections.get(connection_id)
        if connection is None:
            return False
        connection.status = status
        return True

    def append_message(self, connection_id: str, message: Message) -> bool:
        connection = self._connections.get(connection_id)
        if connection is None:
            return False
        connection.messages.append(message)
        return True

    def connections(self) -> List[Connection]:
        """All connections in insertion order."""

        return list(self._connections.values())

    def list_connections(self, url_filter: str = "") -> List[Connection]:
        """Connections whose URL contains url_filter (case-insensitive), newest first."""

        needle = url_filter.lower()
        selected = [
            connection
            for connection in self._connections.values()
            if not needle or needle in connection.url.lower()
        ]
        # sorted() is stable, so connections created in the same millisecond
        # keep their arrival order.
        return sorted(selected, key=lambda connection: connection.created_at, reverse=True)

    def replace_all(self, connections: Iterable[Connection]) -> None:
        """Swap the whole store for a snapshot (viewer attaching late)."""

        self._connections = {connection.id: connection for connection in connections}

    def clear(self) -> None:
        self._connections = {}

    def message_count(self) -> int:
        return sum(len(connection.messages) for connection in self._connections.values())
