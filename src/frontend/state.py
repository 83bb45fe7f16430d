"""View state that belongs to the terminal UI rather than the session."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ViewState:
    filters_visible: bool = False
    source_label: str = "no capture"
    following: bool = False
    error: str | None = None
