"""Messages panel: filter stats and the arrival-ordered message table."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from textual import on
from textual.containers import Container, Vertical
from textual.widgets import DataTable, Static

from adapters.display_formatting import clip_text, format_time
from core.config import DisplayConfig
from core.models import Connection, Message

from ..constants import EMPTY_MESSAGES


class MessagesPanel(Container):
    """Message table for the selected connection."""

    def __init__(self, display_config: Optional[DisplayConfig] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._display = display_config or DisplayConfig()
        self._table_ready = False
        # Rows are keyed by position; transport message ids may be missing.
        self._row_messages: dict[str, Any] = {}

    def compose(self):
        with Vertical(id="messages-panel"):
            yield Static("", id="messages-title")
            yield Static("", id="filter-stats")
            yield DataTable(id="messages-table", cursor_type="row")
            yield Static(EMPTY_MESSAGES, id="messages-empty")

    def on_mount(self) -> None:
        table = self.query_one("#messages-table", DataTable)
        table.add_column("id", key="id", width=6)
        table.add_column("type", key="type", width=12)
        table.add_column("data", key="data", width=60)
        table.add_column("time", key="time", width=10)
        table.zebra_stripes = True
        self._table_ready = True

    def reload(
        self,
        connection: Optional[Connection],
        messages: Iterable[Message],
        stats: str,
    ) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#messages-table", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        self._row_messages = {}

        title = self.query_one("#messages-title", Static)
        title.update(connection.url if connection else "")
        self.query_one("#filter-stats", Static).update(stats)

        for row, message in enumerate(messages):
            key = str(row)
            self._row_messages[key] = message.id
            table.add_row(
                str(message.id),
                message.event_type,
                clip_text(message.data, self._display.preview_chars),
                format_time(message.timestamp, self._display.time_format),
                key=key,
            )

        if 0 < cursor_row < table.row_count:
            table.move_cursor(row=cursor_row)
        empty = self.query_one("#messages-empty", Static)
        empty.display = connection is None or not connection.messages

    @on(DataTable.RowSelected, "#messages-table")
    def _on_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        key = event.row_key.value
        if key in self._row_messages:
            self.app.show_message_detail(self._row_messages[key])
