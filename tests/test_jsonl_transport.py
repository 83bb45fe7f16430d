from __future__ import annotations

import asyncio
import json
from pathlib import Path

from adapters.jsonl_transport import FileTail, JsonlEnvelopeSource, parse_line, read_envelopes


def _write_lines(path: Path, envelopes: list[dict], trailing_newline: bool = True) -> None:
    text = "\n".join(json.dumps(envelope) for envelope in envelopes)
    if trailing_newline:
        text += "\n"
    path.write_text(text, encoding="utf-8")


def test_parse_line_skips_blank_malformed_and_non_objects() -> None:
    assert parse_line("") is None
    assert parse_line("   ") is None
    assert parse_line("{broken") is None
    assert parse_line("[1, 2]") is None
    assert parse_line('{"type": "navigation"}') == {"type": "navigation"}


def test_read_envelopes_from_file(tmp_path: Path) -> None:
    path = tmp_path / "capture.jsonl"
    path.write_text('{"type": "navigation"}\nnot json\n\n{"type": "init-data"}\n', encoding="utf-8")
    assert read_envelopes(str(path)) == [{"type": "navigation"}, {"type": "init-data"}]


def test_file_tail_buffers_partial_lines(tmp_path: Path) -> None:
    path = tmp_path / "capture.jsonl"
    path.write_text('{"a": 1}\n{"b":', encoding="utf-8")
    tail = FileTail(path)
    assert tail.poll() == ['{"a": 1}']
    assert tail.partial == '{"b":'

    with path.open("a", encoding="utf-8") as handle:
        handle.write(" 2}\n")
    assert tail.poll() == ['{"b": 2}']
    assert tail.poll() == []


def test_file_tail_restarts_after_truncation(tmp_path: Path) -> None:
    path = tmp_path / "capture.jsonl"
    path.write_text('{"a": 1}\n{"a": 2}\n', encoding="utf-8")
    tail = FileTail(path)
    tail.poll()
    path.write_text('{"c": 3}\n', encoding="utf-8")
    assert tail.poll() == ['{"c": 3}']


def test_file_tail_missing_file(tmp_path: Path) -> None:
    assert FileTail(tmp_path / "absent.jsonl").poll() == []


def test_async_source_reads_final_line_without_newline(tmp_path: Path) -> None:
    path = tmp_path / "capture.jsonl"
    _write_lines(path, [{"type": "navigation"}, {"type": "init-data"}], trailing_newline=False)

    async def _collect() -> list[dict]:
        return [envelope async for envelope in JsonlEnvelopeSource(str(path))]

    assert asyncio.run(_collect()) == [{"type": "navigation"}, {"type": "init-data"}]


def test_parse_line_skips_envelopes_nested_too_deep() -> None:
    deep = "[" * 100000 + "]" * 100000
    assert parse_line('{"a":' + deep + "}") is None


def test_read_envelopes_continues_past_deeply_nested_line(tmp_path: Path) -> None:
    path = tmp_path / "capture.jsonl"
    deep = "[" * 100000 + "]" * 100000
    path.write_text('{"a":' + deep + '}\n{"type": "navigation"}\n', encoding="utf-8")
    assert read_envelopes(str(path)) == [{"type": "navigation"}]
