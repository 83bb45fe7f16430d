"""Field path extraction and resolution over decoded JSON payloads."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from core.models import UNDECODABLE, Connection

DEFAULT_MAX_DEPTH = 32


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _first_object(items: list) -> Optional[dict]:
    if items and isinstance(items[0], dict):
        return items[0]
    return None


def _collect(value: Any, prefix: str, fields: set[str], depth: int, max_depth: int) -> None:
    if depth > max_depth:
        return

    if isinstance(value, list):
        # Arrays are assumed homogeneous: only the first element is sampled and
        # its keys merge into the parent path namespace.
        first = _first_object(value)
        if first is not None:
            _collect(first, prefix, fields, depth + 1, max_depth)
        return

    if not isinstance(value, dict):
        return

    for key, child in value.items():
        path = _join(prefix, str(key))
        fields.add(path)
        if isinstance(child, dict):
            _collect(child, path, fields, depth + 1, max_depth)
        elif isinstance(child, list):
            first = _first_object(child)
            if first is not None:
                _collect(first, path, fields, depth + 1, max_depth)


def extract_fields(value: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> set[str]:
    """Return every addressable dotted path in a decoded JSON value.

    Scalars and None contribute nothing. Object keys contribute their full
    path and are recursed into; arrays contribute the paths of their first
    element when it is an object, without an index segment.
    """

    fields: set[str] = set()
    _collect(value, "", fields, 0, max_depth)
    return fields


def merge_fields(values: Iterable[Any], max_depth: int = DEFAULT_MAX_DEPTH) -> List[str]:
    """Union the fields of several decoded payloads, sorted for display."""

    fields: set[str] = set()
    for value in values:
        if value is UNDECODABLE:
            continue
        _collect(value, "", fields, 0, max_depth)
    return sorted(fields)


def available_fields(connection: Optional[Connection], max_depth: int = DEFAULT_MAX_DEPTH) -> List[str]:
    """Return the sorted union of field paths across a connection's messages.

    Messages whose data is not JSON are skipped.
    """

    if connection is None:
        return []
    return merge_fields((message.decoded for message in connection.messages), max_depth)


def resolve_path(value: Any, path: str) -> Any:
    """Walk a dotted path through a decoded payload.

    Returns MISSING when any segment cannot be followed. A JSON null at the
    end of the path is a present value; a null in the middle is not.
    Lists accept an integer index segment; any other segment descends into
    the first element, matching how extract_fields samples arrays.
    """

    current = value
    for segment in path.split("."):
        if isinstance(current, list):
            if segment.isascii() and segment.isdigit():
                index = int(segment)
                if index >= len(current):
                    return MISSING
                current = current[index]
                continue
            if not current:
                return MISSING
            current = current[0]

        if isinstance(current, dict):
            if segment not in current:
                return MISSING
            current = current[segment]
        else:
            return MISSING
    return current
