"""Shared constants for the Textual UI."""

from __future__ import annotations

from core.filter_engine import FILTER_MODES

STREAM_ORANGE = "#F5A623"
EMPTY_CONNECTIONS = "No connections yet"
EMPTY_MESSAGES = "No messages"
NO_FIELDS_NOTICE = "No fields available yet. Select a connection and wait for JSON messages."

# Select options as (label, value) pairs.
MODE_LABELS = tuple((mode, mode) for mode in FILTER_MODES)
