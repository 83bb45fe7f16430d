"""Modal dialogs for the Textual inspector."""

from __future__ import annotations

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from adapters.display_formatting import detail_title, format_detail
from core.models import UNDECODABLE, Message


class MessageDetailScreen(ModalScreen[None]):
    """Full payload of one message, pretty-printed when it is JSON."""

    BINDINGS = [("escape", "close", "Back")]

    def __init__(self, message: Message) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        body = format_detail(self._message)
        if self._message.decoded is UNDECODABLE:
            renderable = body
        else:
            renderable = Syntax(body, "json", word_wrap=True, theme="ansi_dark")
        yield Container(
            Static(detail_title(self._message), classes="modal-title"),
            VerticalScroll(Static(renderable, id="detail-body"), id="detail-scroll"),
            Horizontal(
                Button("Copy", id="detail-copy", variant="primary"),
                Button("Back", id="detail-back"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--detail",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "detail-copy":
            self.app.copy_to_clipboard(self._message.data)
            self.app.notify("Payload copied to clipboard")
        else:
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class ClearConfirmScreen(ModalScreen[bool]):
    """Confirm dropping every captured connection."""

    def __init__(self, connection_count: int) -> None:
        super().__init__()
        self._connection_count = connection_count

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Clear all connections?", classes="modal-title"),
            Static(
                f"{self._connection_count} connections and their messages will be dropped. "
                "Filters are cleared too.",
                classes="modal-body",
            ),
            Horizontal(
                Button("Clear", id="clear-confirm", variant="error"),
                Button("Cancel", id="clear-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "clear-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)
