from __future__ import annotations

import json
from pathlib import Path

import pytest

from app import main


def _capture(path: Path) -> None:
    envelopes = [
        {
            "type": "stream-event",
            "payload": {
                "type": "stream-connection",
                "connectionId": "C1",
                "url": "https://example.test/sse/orders",
                "frameUrl": "https://example.test/",
                "isIframe": False,
                "timestamp": 1000,
            },
        },
        {"type": "stream-event", "payload": {"type": "stream-open", "connectionId": "C1"}},
        {
            "type": "stream-event",
            "payload": {
                "type": "stream-message",
                "connectionId": "C1",
                "messageId": 1,
                "eventType": "message",
                "data": '{"status":"ok","code":200}',
                "timestamp": 1001,
            },
        },
        {
            "type": "stream-event",
            "payload": {
                "type": "stream-message",
                "connectionId": "C1",
                "messageId": 2,
                "eventType": "message",
                "data": '{"status":"fail","code":500}',
                "timestamp": 1002,
            },
        },
    ]
    path.write_text("\n".join(json.dumps(envelope) for envelope in envelopes) + "\n", encoding="utf-8")


def test_replay_prints_filtered_messages_and_stats(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    capture = tmp_path / "capture.jsonl"
    _capture(capture)

    main(["replay", "--events", str(capture), "--filter", "status=ok", "--fields"])
    out = capsys.readouterr().out

    assert "/sse/orders" in out
    assert "  code\n" in out
    assert '{"status":"ok","code":200}' in out
    assert '"fail"' not in out
    assert "Showing 1/2 messages" in out


def test_replay_rejects_bad_filter_expression(tmp_path: Path) -> None:
    capture = tmp_path / "capture.jsonl"
    _capture(capture)
    with pytest.raises(SystemExit):
        main(["replay", "--events", str(capture), "--filter", "status"])
