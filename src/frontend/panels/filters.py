"""Filter editor panel.

Rows edit the session's pending filter set only; nothing changes in the
message table until Apply copies pending into applied.
"""

from __future__ import annotations

from typing import Sequence

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Select, Static

from core.models import FilterCondition

from ..constants import MODE_LABELS


class FilterRow(Horizontal):
    """One pending condition: field, mode, value and a remove button."""

    def __init__(self, index: int, condition: FilterCondition, fields: Sequence[str]) -> None:
        super().__init__(classes="filter-row")
        self.index = index
        self._condition = condition
        options = list(fields)
        # A condition carried over from another connection may name a field
        # this connection has not produced yet.
        if condition.field not in options:
            options.insert(0, condition.field)
        self._field_options = options

    def compose(self):
        yield Select(
            [(field, field) for field in self._field_options],
            value=self._condition.field,
            allow_blank=False,
            classes="filter-field",
        )
        mode_options = list(MODE_LABELS)
        if self._condition.mode not in dict(MODE_LABELS):
            mode_options.append((self._condition.mode, self._condition.mode))
        yield Select(
            [(label, mode) for label, mode in mode_options],
            value=self._condition.mode,
            allow_blank=False,
            classes="filter-mode",
        )
        yield Input(
            value=self._condition.value,
            placeholder="Filter value...",
            classes="filter-value",
        )
        yield Button("×", classes="filter-remove", variant="error")

    @on(Select.Changed, ".filter-field")
    def _on_field_changed(self, event: Select.Changed) -> None:
        event.stop()
        if event.value is Select.BLANK:
            return
        self.app.session.update_filter(self.index, field=str(event.value))
        self.app.refresh_pending_marker()

    @on(Select.Changed, ".filter-mode")
    def _on_mode_changed(self, event: Select.Changed) -> None:
        event.stop()
        if event.value is Select.BLANK:
            return
        self.app.session.update_filter(self.index, mode=str(event.value))
        self.app.refresh_pending_marker()

    @on(Input.Changed, ".filter-value")
    def _on_value_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.app.session.update_filter(self.index, value=event.value)
        self.app.refresh_pending_marker()

    @on(Input.Submitted, ".filter-value")
    def _on_value_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.app.action_apply_filters()

    @on(Button.Pressed, ".filter-remove")
    def _on_remove(self, event: Button.Pressed) -> None:
        event.stop()
        self.app.remove_filter(self.index)


class FiltersPanel(Container):
    """Pending filter rows plus add/apply/clear actions."""

    def compose(self):
        with Vertical(id="filters-panel"):
            yield Vertical(id="filter-rows")
            with Horizontal(id="filter-actions"):
                yield Button("Add condition", id="add-filter", variant="primary")
                yield Button("Apply", id="apply-filters", variant="success")
                yield Button("Clear filters", id="clear-filters", variant="error")
                yield Static("", id="filter-pending")

    def on_mount(self) -> None:
        self.query_one("#filter-actions").styles.height = 3

    def rebuild(self, pending: Sequence[FilterCondition], fields: Sequence[str]) -> None:
        rows = self.query_one("#filter-rows", Vertical)
        rows.remove_children()
        if pending:
            rows.mount_all(
                FilterRow(index, condition, fields) for index, condition in enumerate(pending)
            )

    def set_pending_marker(self, dirty: bool) -> None:
        self.query_one("#filter-pending", Static).update("unapplied changes *" if dirty else "")

    @on(Button.Pressed, "#add-filter")
    def _on_add(self, event: Button.Pressed) -> None:
        event.stop()
        self.app.action_add_filter()

    @on(Button.Pressed, "#apply-filters")
    def _on_apply(self, event: Button.Pressed) -> None:
        event.stop()
        self.app.action_apply_filters()

    @on(Button.Pressed, "#clear-filters")
    def _on_clear(self, event: Button.Pressed) -> None:
        event.stop()
        self.app.action_clear_filters()
