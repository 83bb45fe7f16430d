from __future__ import annotations

from core.fields import MISSING, available_fields, extract_fields, resolve_path
from core.models import Connection, Message


def _connection(*payloads: str) -> Connection:
    connection = Connection(id="c1", url="https://example.test/stream")
    for index, data in enumerate(payloads, start=1):
        connection.messages.append(Message(id=index, event_type="message", data=data))
    return connection


def test_nested_objects_yield_every_intermediate_and_leaf_path() -> None:
    assert extract_fields({"a": {"b": 1, "c": 2}}) == {"a", "a.b", "a.c"}


def test_array_of_objects_samples_first_element_without_index() -> None:
    assert extract_fields({"items": [{"x": 1}, {"x": 2, "y": 3}]}) == {"items", "items.x"}


def test_null_and_scalars_yield_nothing() -> None:
    assert extract_fields(None) == set()
    assert extract_fields(42) == set()
    assert extract_fields("text") == set()
    assert extract_fields(True) == set()


def test_top_level_array_merges_into_root_namespace() -> None:
    assert extract_fields([{"id": 1, "user": {"name": "a"}}]) == {"id", "user", "user.name"}


def test_array_of_scalars_contributes_only_its_own_key() -> None:
    assert extract_fields({"tags": ["a", "b"], "empty": []}) == {"tags", "empty"}


def test_depth_cap_stops_recursion() -> None:
    deep = {"a": {"b": {"c": {"d": 1}}}}
    assert extract_fields(deep, max_depth=1) == {"a", "a.b"}


def test_available_fields_skips_non_json_and_sorts() -> None:
    connection = _connection(
        '{"status": "ok", "meta": {"code": 200}}',
        "plain text heartbeat",
        '{"error": {"reason": "x"}, "status": "fail"}',
    )
    assert available_fields(connection) == ["error", "error.reason", "meta", "meta.code", "status"]


def test_available_fields_without_connection_is_empty() -> None:
    assert available_fields(None) == []


def test_resolve_path_walks_objects() -> None:
    payload = {"user": {"profile": {"name": "ada"}}}
    assert resolve_path(payload, "user.profile.name") == "ada"
    assert resolve_path(payload, "user.missing") is MISSING


def test_resolve_path_null_handling() -> None:
    assert resolve_path({"a": None}, "a") is None
    assert resolve_path({"a": None}, "a.b") is MISSING


def test_resolve_path_through_arrays() -> None:
    payload = {"items": [{"x": 1}, {"x": 2}]}
    assert resolve_path(payload, "items.x") == 1
    assert resolve_path(payload, "items.1.x") == 2
    assert resolve_path(payload, "items.5.x") is MISSING
    assert resolve_path({"items": []}, "items.x") is MISSING


def test_resolve_path_into_scalar_is_missing() -> None:
    assert resolve_path({"a": "text"}, "a.length") is MISSING
    assert resolve_path("text", "a") is MISSING


def test_resolve_path_non_ascii_digit_segment_descends_into_first_element() -> None:
    payload = {"a": [{"²": 1}]}
    assert "a.²" in extract_fields(payload)
    assert resolve_path(payload, "a.²") == 1
    assert resolve_path({"a": [{"x": 1}]}, "a.²") is MISSING
