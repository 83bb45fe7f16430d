"""Application entry point for the streamscope inspector."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.display_formatting import (
    clip_text,
    connection_summary,
    format_time,
)
from adapters.event_mapper import dispatch_all
from adapters.jsonl_transport import read_envelopes
from core.filter_engine import build_filters
from core.models import Connection, FilterCondition
from core.session import InspectorSession
from frontend.validators import parse_filter_expression

NAME = "STREAMSCOPE"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(console: bool = True) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # The TUI owns the terminal, so console output is only for headless runs.
    if console and config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/streamscope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_session(cli_filters: Optional[list[FilterCondition]] = None) -> InspectorSession:
    session = InspectorSession(config=settings.INSPECTOR_CONFIG)
    # Filters given on the command line replace the presets from config.json.
    if cli_filters:
        session.set_applied_filters(cli_filters)
    else:
        session.set_applied_filters(build_filters(settings.FILTERS_CONFIG))
    return session


def _parse_cli_filters(parser: argparse.ArgumentParser, expressions: list[str]) -> list[FilterCondition]:
    conditions: list[FilterCondition] = []
    for expression in expressions:
        info = parse_filter_expression(expression)
        if info.error or info.condition is None:
            parser.error(f"invalid --filter {expression!r}: {info.error}")
        conditions.append(info.condition)
    return conditions


def _print_connections(connections: list[Connection]) -> None:
    if not connections:
        print("No connections.")
        return
    for index, connection in enumerate(connections, start=1):
        created = format_time(connection.created_at, settings.TIME_FORMAT)
        print(f"{index}. {connection.id} | {created} | {connection_summary(connection)}")


def _replay(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    logger = logging.getLogger(__name__)
    if args.events != "-" and not os.path.exists(args.events):
        parser.error(f"events file not found: {args.events}")

    session = _build_session(_parse_cli_filters(parser, args.filter or []))
    envelopes = read_envelopes(args.events)
    changed = dispatch_all(session, envelopes)
    logger.info("Replayed %s envelopes (%s applied)", len(envelopes), changed)

    session.url_filter = args.url_filter or ""
    connections = session.visible_connections()
    print("Connections:")
    _print_connections(connections)

    connection_id = args.connection
    if connection_id is None and connections:
        connection_id = connections[0].id
    # Selecting resyncs pending from applied, so the CLI filters survive.
    connection = session.select_connection(connection_id)
    if connection is None:
        if args.connection is not None:
            print(f"Connection not found: {args.connection}")
        return

    print(f"\nConnection {connection.id} ({connection.status}) {connection.url}")
    if args.fields:
        fields = session.available_fields()
        print("Fields:")
        for field in fields:
            print(f"  {field}")
        if not fields:
            print("  (no JSON fields)")

    print("Messages:")
    for message in session.visible_messages():
        time_label = format_time(message.timestamp, settings.TIME_FORMAT)
        preview = clip_text(message.data, settings.PREVIEW_CHARS)
        print(f"  {message.id} | {message.event_type} | {time_label} | {preview}")

    stats = session.stats()
    if stats:
        print(stats)


def _view(args: argparse.Namespace) -> None:
    _print_banner()
    from frontend.app import InspectorApp

    InspectorApp(
        session=_build_session(),
        events_path=args.events,
        follow=args.follow,
    ).run()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="streamscope")
    subparsers = parser.add_subparsers(dest="command")

    view_parser = subparsers.add_parser("view", help="Launch the inspector TUI")
    view_parser.add_argument("--events", help="JSONL capture file to load ('-' for stdin)")
    view_parser.add_argument("--follow", action="store_true", help="Keep reading as the capture grows")

    replay_parser = subparsers.add_parser("replay", help="Replay a capture and print the filtered view")
    replay_parser.add_argument("--events", required=True, help="JSONL capture file ('-' for stdin)")
    replay_parser.add_argument("--connection", help="Connection id to show (default: newest)")
    replay_parser.add_argument("--url-filter", default="", help="Only list connections whose URL contains this")
    replay_parser.add_argument(
        "--filter",
        action="append",
        metavar="EXPR",
        help="field=value (equals) or field~value (contains); repeat to AND",
    )
    replay_parser.add_argument("--fields", action="store_true", help="Print the available filter fields")

    args = parser.parse_args(argv)
    if args.command == "replay":
        _configure_logging()
        _replay(replay_parser, args)
        return

    if args.command is None:
        args = view_parser.parse_args([])
    # The TUI reads keystrokes from stdin, so captures must come from a file.
    if args.events == "-":
        view_parser.error("view needs a capture file; use replay for stdin")
    _configure_logging(console=False)
    _view(args)


if __name__ == "__main__":
    main()
