"""Shared display formatting helpers.

Keeping formatting here prevents drift between the terminal UI and the
headless replay output.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from core.models import UNDECODABLE, Connection, Message

STATUS_MARKERS = {
    "connecting": "◌",
    "open": "●",
    "error": "✖",
    "closed": "○",
}

STATUS_STYLES = {
    "connecting": "yellow",
    "open": "green",
    "error": "red",
    "closed": "grey50",
}


def url_path(url: str) -> str:
    """Return path + query of an absolute URL, or the input when unparsable."""

    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return path


def origin_label(connection: Connection) -> str:
    return "iframe" if connection.is_iframe else "main"


def format_time(timestamp: Optional[float], time_format: str = "%H:%M:%S") -> str:
    """Format an epoch-millis timestamp as local wall-clock time."""

    if timestamp is None:
        return ""
    try:
        return datetime.fromtimestamp(timestamp / 1000).strftime(time_format)
    except (OverflowError, OSError, ValueError):
        return ""


def format_detail(message: Message) -> str:
    """Pretty-print JSON payloads; other payloads are shown verbatim."""

    if message.decoded is UNDECODABLE:
        return message.data
    return json.dumps(message.decoded, indent=2, ensure_ascii=False)


def detail_title(message: Message) -> str:
    return f"Message #{message.id} - {message.event_type}"


def clip_text(value: str, limit: int = 64) -> str:
    value = value.replace("\n", " ")
    if len(value) <= limit:
        return value
    return value[: limit - 3] + "..."


def connection_summary(connection: Connection) -> str:
    marker = STATUS_MARKERS.get(connection.status, "?")
    return (
        f"{marker} {url_path(connection.url)} "
        f"[{origin_label(connection)}] {len(connection.messages)} msgs"
    )
