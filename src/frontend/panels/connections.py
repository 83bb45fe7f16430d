"""Connections panel: URL filter and the newest-first connection list."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from rich.text import Text
from textual import on
from textual.containers import Container, Vertical
from textual.widgets import DataTable, Input, Static

from adapters.display_formatting import STATUS_MARKERS, STATUS_STYLES, origin_label, url_path
from core.models import Connection

from ..constants import EMPTY_CONNECTIONS


class ConnectionsPanel(Container):
    """Left-hand list of tracked connections."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._table_ready = False

    def compose(self):
        with Vertical(id="connections-panel"):
            yield Input(placeholder="Filter by URL", id="url-filter")
            yield DataTable(id="connections-table", cursor_type="row")
            yield Static("", id="connections-empty")

    def on_mount(self) -> None:
        table = self.query_one("#connections-table", DataTable)
        table.add_column("", key="status", width=2)
        table.add_column("url", key="url", width=28)
        table.add_column("origin", key="origin", width=7)
        table.add_column("msgs", key="count", width=6)
        table.zebra_stripes = True
        self._table_ready = True
        self.reload([], None)

    def reload(self, connections: Iterable[Connection], selected_id: Optional[str]) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#connections-table", DataTable)
        table.clear()
        selected_row: Optional[int] = None
        for row, connection in enumerate(connections):
            marker = Text(
                STATUS_MARKERS.get(connection.status, "?"),
                style=STATUS_STYLES.get(connection.status, ""),
            )
            url_label = Text(url_path(connection.url))
            if connection.id == selected_id:
                url_label.stylize("bold")
                selected_row = row
            table.add_row(
                marker,
                url_label,
                origin_label(connection),
                str(len(connection.messages)),
                key=connection.id,
            )
        if selected_row is not None:
            table.move_cursor(row=selected_row)
        empty = self.query_one("#connections-empty", Static)
        empty.update("" if table.row_count else EMPTY_CONNECTIONS)

    @on(Input.Changed, "#url-filter")
    def _on_url_filter_changed(self, event: Input.Changed) -> None:
        self.app.set_url_filter(event.value)

    @on(DataTable.RowSelected, "#connections-table")
    def _on_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        connection_id = event.row_key.value
        if connection_id is not None:
            self.app.select_connection(str(connection_id))

    def reset_filter_input(self) -> None:
        url_input = self.query_one("#url-filter", Input)
        if url_input.value:
            url_input.value = ""
