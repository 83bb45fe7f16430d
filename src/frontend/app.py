"""Main Textual app for the streamscope inspector."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Footer, Static

import settings
from adapters.event_pump import EventPump
from adapters.jsonl_transport import STDIN_PATH, JsonlEnvelopeSource
from core.session import InspectorSession

from .constants import NO_FIELDS_NOTICE, STREAM_ORANGE
from .modals import ClearConfirmScreen, MessageDetailScreen
from .panels.connections import ConnectionsPanel
from .panels.filters import FiltersPanel
from .panels.messages import MessagesPanel
from .state import ViewState

LOGGER = logging.getLogger(__name__)


class InspectorApp(App):
    """Connection list, message table and filter editor over one session."""

    def __init__(
        self,
        session: Optional[InspectorSession] = None,
        events_path: Optional[str] = None,
        follow: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.session = session or InspectorSession(config=settings.INSPECTOR_CONFIG)
        self.view_state = ViewState(
            filters_visible=bool(self.session.pending_filters),
            source_label=self._source_label(events_path),
            following=follow,
        )
        self._events_path = events_path
        self._follow = follow

    BINDINGS = [
        ("ctrl+f", "toggle_filters", "Filters"),
        ("ctrl+n", "add_filter", "Add condition"),
        ("ctrl+e", "apply_filters", "Apply"),
        ("ctrl+r", "clear_filters", "Clear filters"),
        ("ctrl+l", "clear_all", "Clear"),
        ("q", "quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("server-push stream inspector", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(f"source: {self.view_state.source_label}", classes="subtle")
                    yield Static("", id="header-status")
                    yield Horizontal(
                        Button("Filters", id="toggle-filters-btn"),
                        Button("Clear", id="clear-btn", variant="error"),
                        id="header-actions",
                    )

        with Horizontal(id="body"):
            yield ConnectionsPanel(id="connections")
            with Vertical(id="right"):
                yield FiltersPanel(id="filters")
                yield MessagesPanel(settings.DISPLAY_CONFIG, id="messages")
        yield Footer()

    def on_mount(self) -> None:
        self._apply_filters_visibility()
        self.refresh_all()
        if self._events_path:
            self.run_worker(self._consume_events(), exclusive=True, group="ingest")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "toggle-filters-btn":
            self.action_toggle_filters()
        elif event.button.id == "clear-btn":
            self.action_clear_all()

    # Ingestion

    async def _consume_events(self) -> None:
        source = JsonlEnvelopeSource(
            self._events_path,
            follow=self._follow,
            poll_interval=settings.POLL_INTERVAL,
        )
        pump = EventPump(self.session, on_change=self._on_session_changed)
        consumer = asyncio.create_task(pump.run())
        try:
            count = await pump.feed(source)
            await pump.close()
            await consumer
            LOGGER.info("Capture finished: %s envelopes, %s applied", count, pump.applied)
        except OSError as exc:
            self.view_state.error = f"capture error: {exc.strerror or exc}"
            self._refresh_header()
        finally:
            if not consumer.done():
                consumer.cancel()

    def _on_session_changed(self, changed: str) -> None:
        self.refresh_connections()
        if changed == "*":
            self.refresh_messages()
            self.refresh_filters()
        elif changed == self.session.selected_connection_id:
            self.refresh_messages()
        self._refresh_header()

    # Entry points used by panels

    def set_url_filter(self, value: str) -> None:
        self.session.url_filter = value
        self.refresh_connections()

    def select_connection(self, connection_id: str) -> None:
        self.session.select_connection(connection_id)
        if self.session.pending_filters:
            self.view_state.filters_visible = True
            self._apply_filters_visibility()
        self.refresh_all()

    def show_message_detail(self, message_id: Any) -> None:
        message = self.session.select_message(message_id)
        if message is None:
            return
        self.push_screen(MessageDetailScreen(message))

    def remove_filter(self, index: int) -> None:
        if self.session.remove_filter(index):
            self.refresh_filters()

    # Actions

    def action_toggle_filters(self) -> None:
        self.view_state.filters_visible = not self.view_state.filters_visible
        self._apply_filters_visibility()

    def action_add_filter(self) -> None:
        if self.session.add_filter() is None:
            self.notify(NO_FIELDS_NOTICE, severity="warning")
            return
        self.view_state.filters_visible = True
        self._apply_filters_visibility()
        self.refresh_filters()

    def action_apply_filters(self) -> None:
        self.session.apply_filters()
        self.refresh_messages()
        self.refresh_pending_marker()

    def action_clear_filters(self) -> None:
        self.session.clear_filters()
        self.view_state.filters_visible = False
        self._apply_filters_visibility()
        self.refresh_filters()
        self.refresh_messages()

    def action_clear_all(self) -> None:
        if len(self.session.store):
            self.push_screen(ClearConfirmScreen(len(self.session.store)), self._handle_clear_choice)
        else:
            self._clear_all()

    def _handle_clear_choice(self, confirmed: bool | None) -> None:
        if confirmed:
            self._clear_all()

    def _clear_all(self) -> None:
        self.session.reset()
        self.query_one(ConnectionsPanel).reset_filter_input()
        self.view_state.filters_visible = False
        self._apply_filters_visibility()
        self.refresh_all()

    # Rendering

    def refresh_all(self) -> None:
        self.refresh_connections()
        self.refresh_messages()
        self.refresh_filters()
        self._refresh_header()

    def refresh_connections(self) -> None:
        self.query_one(ConnectionsPanel).reload(
            self.session.visible_connections(),
            self.session.selected_connection_id,
        )

    def refresh_messages(self) -> None:
        self.query_one(MessagesPanel).reload(
            self.session.selected_connection,
            self.session.visible_messages(),
            self.session.stats(),
        )

    def refresh_filters(self) -> None:
        self.query_one(FiltersPanel).rebuild(
            self.session.pending_filters,
            self.session.available_fields(),
        )
        self.refresh_pending_marker()

    def refresh_pending_marker(self) -> None:
        self.query_one(FiltersPanel).set_pending_marker(self.session.has_unapplied_changes)

    def _apply_filters_visibility(self) -> None:
        self.query_one(FiltersPanel).display = self.view_state.filters_visible

    def _refresh_header(self) -> None:
        status = self.query_one("#header-status", Static)
        status.remove_class("status-live", "status-error")
        if self.view_state.error:
            status.update(self.view_state.error)
            status.add_class("status-error")
            return
        mode = "following" if self.view_state.following else "loaded"
        status.update(
            f"{mode}: {len(self.session.store)} connections, "
            f"{self.session.store.message_count()} messages"
        )
        status.add_class("status-live")

    @staticmethod
    def _source_label(events_path: Optional[str]) -> str:
        if not events_path:
            return "no capture"
        if events_path == STDIN_PATH:
            return "stdin"
        return events_path

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("STREAM", STREAM_ORANGE),
            ("SCOPE > Inspector", "bold"),
        )
