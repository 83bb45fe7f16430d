"""Inspector session state.

The session is the explicitly owned application state that a presentation
layer drives: the connection store, the current selection, the URL filter
and the pending/applied filter sets. Presentation code reads listings from
it and calls its mutation entry points; it never touches the store directly.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from core.config import InspectorConfig
from core.fields import available_fields
from core.filter_engine import filter_messages, filter_stats
from core.models import MODE_EQUALS, Connection, FilterCondition, Message, StreamEvent
from core.router import StreamEventRouter
from core.store import ConnectionStore

LOGGER = logging.getLogger(__name__)


class InspectorSession:
    """Connections, selection and filter workflow for one inspected page."""

    def __init__(
        self,
        config: Optional[InspectorConfig] = None,
        store: Optional[ConnectionStore] = None,
    ) -> None:
        self._config = config or InspectorConfig()
        self.store = store or ConnectionStore()
        self._router = StreamEventRouter(self.store)
        self.selected_connection_id: Optional[str] = None
        self.selected_message_id: Any = None
        self.url_filter = ""
        self.pending_filters: List[FilterCondition] = []
        self.applied_filters: List[FilterCondition] = []

    # Ingestion

    def ingest(self, event: StreamEvent) -> Optional[str]:
        """Apply one transport event; returns the affected connection id."""

        return self._router.apply(event)

    def load_snapshot(self, connections: Iterable[Connection]) -> None:
        """Seed the store from an init snapshot taken before we attached."""

        self.store.replace_all(connections)
        if self.selected_connection_id not in self.store:
            self.selected_connection_id = None
            self.selected_message_id = None
        LOGGER.info("Loaded snapshot with %s connections", len(self.store))

    def reset(self) -> None:
        """Drop every connection, the selection and all filter state."""

        self.store.clear()
        self.selected_connection_id = None
        self.selected_message_id = None
        self.url_filter = ""
        self.pending_filters = []
        self.applied_filters = []
        LOGGER.info("Session reset")

    # Selection

    @property
    def selected_connection(self) -> Optional[Connection]:
        return self.store.get(self.selected_connection_id)

    def select_connection(self, connection_id: Optional[str]) -> Optional[Connection]:
        """Select a connection and resync pending filters from the applied set.

        Unapplied edits are discarded on purpose: the pending set always
        starts from what is actually filtering the list.
        """

        connection = self.store.get(connection_id)
        self.selected_connection_id = connection.id if connection else None
        self.selected_message_id = None
        self.pending_filters = list(self.applied_filters)
        return connection

    def select_message(self, message_id: Any) -> Optional[Message]:
        connection = self.selected_connection
        if connection is None:
            return None
        message = connection.find_message(message_id)
        if message is not None:
            self.selected_message_id = message.id
        return message

    def selected_message(self) -> Optional[Message]:
        connection = self.selected_connection
        if connection is None or self.selected_message_id is None:
            return None
        return connection.find_message(self.selected_message_id)

    # Queries

    def visible_connections(self) -> List[Connection]:
        return self.store.list_connections(self.url_filter)

    def visible_messages(self) -> List[Message]:
        connection = self.selected_connection
        if connection is None:
            return []
        return filter_messages(connection.messages, self.applied_filters)

    def available_fields(self) -> List[str]:
        return available_fields(self.selected_connection, self._config.max_depth)

    def stats(self) -> str:
        connection = self.selected_connection
        if connection is None:
            return ""
        visible = self.visible_messages()
        return filter_stats(len(visible), len(connection.messages), bool(self.applied_filters))

    @property
    def has_unapplied_changes(self) -> bool:
        return self.pending_filters != self.applied_filters

    # Filter editing (pending set only)

    def add_filter(
        self,
        field: Optional[str] = None,
        mode: str = MODE_EQUALS,
        value: str = "",
    ) -> Optional[FilterCondition]:
        """Append a pending condition.

        Without an explicit field the first available field of the selected
        connection is used; if there is none, nothing is added.
        """

        if field is None:
            fields = self.available_fields()
            if not fields:
                return None
            field = fields[0]
        condition = FilterCondition(field=field, mode=mode, value=value)
        self.pending_filters.append(condition)
        return condition

    def remove_filter(self, index: int) -> bool:
        if not 0 <= index < len(self.pending_filters):
            return False
        del self.pending_filters[index]
        return True

    def update_filter(
        self,
        index: int,
        field: Optional[str] = None,
        mode: Optional[str] = None,
        value: Optional[str] = None,
    ) -> bool:
        if not 0 <= index < len(self.pending_filters):
            return False
        current = self.pending_filters[index]
        self.pending_filters[index] = replace(
            current,
            field=current.field if field is None else field,
            mode=current.mode if mode is None else mode,
            value=current.value if value is None else value,
        )
        return True

    def apply_filters(self) -> None:
        # Conditions are frozen, so copying the list is a full value copy.
        self.applied_filters = list(self.pending_filters)

    def set_applied_filters(self, filters: Iterable[FilterCondition]) -> None:
        """Install a preset filter set as both applied and pending."""

        self.applied_filters = list(filters)
        self.pending_filters = list(self.applied_filters)

    def clear_filters(self) -> None:
        self.pending_filters = []
        self.applied_filters = []
