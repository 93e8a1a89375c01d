from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from entitygraph.adapters.transport import encode_parent
from entitygraph.app import (
    create_parent,
    export_parent,
    get_parent,
    run_round_trip_demo,
    sync_parent_payload,
)
from entitygraph.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Persist and reconcile parent/child graphs")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Store a new parent with children")
    create.add_argument(
        "--value",
        dest="values",
        action="append",
        default=[],
        help="Child value (repeatable)",
    )
    create.add_argument(
        "--name",
        type=str,
        help="Optional parent name",
    )

    show = subparsers.add_parser("show", help="Print a stored parent")
    show.add_argument("--parent-id", type=str, required=True, help="Parent identity")

    export = subparsers.add_parser("export", help="Write a stored parent as JSON")
    export.add_argument("--parent-id", type=str, required=True, help="Parent identity")
    export.add_argument(
        "--output",
        type=str,
        help="File to write the payload to (defaults to stdout)",
    )

    sync = subparsers.add_parser("sync", help="Reconcile a JSON payload into storage")
    sync.add_argument(
        "--payload",
        type=str,
        default="-",
        help="Payload file, or '-' to read stdin (default: %(default)s)",
    )

    demo = subparsers.add_parser(
        "demo",
        help="Store, round-trip through JSON, add children and reconcile",
    )
    demo.add_argument(
        "--value",
        dest="values",
        action="append",
        help="Initial child value (repeatable, default: X1)",
    )
    demo.add_argument(
        "--add",
        dest="added",
        action="append",
        help="Child value appended after the round trip (repeatable, default: X2)",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _read_payload(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write(text: str) -> None:
    sys.stdout.write(text + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    parent_id: UUID | None = None
    try:
        parsed_args = _parse_args(args_list)
        if getattr(parsed_args, "parent_id", None) is not None:
            parent_id = _parse_uuid(parsed_args.parent_id)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "create":
            parent = create_parent(parsed_args.values, name=parsed_args.name)
            log.info("Created parent %s", parent.id)
            _write(str(parent.id))
        elif parsed_args.command == "show" and parent_id is not None:
            parent = get_parent(parent_id)
            _write(encode_parent(parent, indent=2))
        elif parsed_args.command == "export" and parent_id is not None:
            payload = export_parent(parent_id, indent=2)
            if parsed_args.output:
                Path(parsed_args.output).write_text(payload + "\n", encoding="utf-8")
                log.info("Wrote parent %s to %s", parent_id, parsed_args.output)
            else:
                _write(payload)
        elif parsed_args.command == "sync":
            result = sync_parent_payload(_read_payload(parsed_args.payload))
            log.info(
                "Sync finished: parent=%s, inserted=%s, updated=%s, removed=%s, committed=%s",
                result.parent_id,
                result.inserted,
                result.updated,
                result.removed,
                result.committed,
            )
        elif parsed_args.command == "demo":
            demo = run_round_trip_demo(
                initial_values=parsed_args.values or ("X1",),
                added_values=parsed_args.added or ("X2",),
            )
            _write(encode_parent(demo.stored, indent=2))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load `.env`, install the SIGINT handler, run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
