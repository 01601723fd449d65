from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from gtfsgraph.adapters.memory import InMemoryEntityStore
from gtfsgraph.adapters.sqlalchemy import SqlAlchemyEntityStore
from gtfsgraph.app import load_feed, table_overview
from gtfsgraph.config import ConfigurationError, configure_logging, load_reader_settings
from gtfsgraph.domain.model import EntityType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from gtfsgraph.config import ReaderSettings
    from gtfsgraph.domain.ports import EntityStore

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load GTFS transit feeds")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Root log level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    load = subparsers.add_parser("load", help="Load a feed into an entity store")
    load.add_argument("source", help="Feed directory, zip archive or http(s) URL")
    load.add_argument(
        "--config",
        type=Path,
        help="TOML file with reader settings (a [reader] table or top-level keys)",
    )
    load.add_argument(
        "--default-agency-id",
        type=str,
        help="Agency id for rows and ids without an explicit agency",
    )
    load.add_argument(
        "--map-agency",
        action="append",
        default=[],
        metavar="OLD=NEW",
        help="Translate a source agency id before ids are built (repeatable)",
    )
    load.add_argument(
        "--overwrite-duplicates",
        action="store_true",
        default=None,
        help="Let a later row replace an earlier one with the same id instead of failing",
    )
    load.add_argument(
        "--tables",
        type=str,
        help="Comma separated entity types to load, in order (see the tables command)",
    )
    target = load.add_mutually_exclusive_group()
    target.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the data directory)",
    )
    target.add_argument(
        "--in-memory",
        action="store_true",
        help="Load into memory only and report counts",
    )

    subparsers.add_parser("tables", help="List feed tables in load order")

    return parser.parse_args(list(argv))


def _parse_agency_mapping(values: Sequence[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for value in values:
        old, separator, new = value.partition("=")
        if not separator or not old.strip() or not new.strip():
            raise ValueError(f"Invalid agency mapping (expected OLD=NEW): {value}")
        mapping[old.strip()] = new.strip()
    return mapping


def _parse_entity_types(value: str) -> tuple[EntityType, ...]:
    entity_types: list[EntityType] = []
    for name in value.split(","):
        stripped = name.strip()
        if not stripped:
            continue
        try:
            entity_types.append(EntityType(stripped))
        except ValueError as exc:
            raise ValueError(f"Unknown entity type: {stripped}") from exc
    if not entity_types:
        raise ValueError("--tables needs at least one entity type")
    return tuple(entity_types)


def _reader_settings(args: argparse.Namespace) -> ReaderSettings:
    settings = load_reader_settings(args.config)
    cli_mapping = _parse_agency_mapping(args.map_agency)
    return settings.with_overrides(
        default_agency_id=args.default_agency_id,
        agency_id_mapping={**settings.agency_id_mapping, **cli_mapping} if cli_mapping else None,
        overwrite_duplicates=args.overwrite_duplicates,
        entity_types=_parse_entity_types(args.tables) if args.tables else None,
    )


def _build_store(args: argparse.Namespace) -> EntityStore:
    if args.in_memory:
        return InMemoryEntityStore()
    return SqlAlchemyEntityStore.from_uri(args.database_uri)


def _list_tables() -> None:
    for info in table_overview():
        requirement = "required" if info.required else "optional"
        print(f"{info.entity_type:<16} {info.filename:<22} {requirement}")  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.getLevelNamesMapping()[parsed_args.log_level])

    settings: ReaderSettings | None = None
    try:
        if parsed_args.command == "load":
            settings = _reader_settings(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "tables":
            _list_tables()
        elif parsed_args.command == "load" and settings is not None:
            summary = load_feed(
                parsed_args.source,
                options=settings.to_options(),
                store=_build_store(parsed_args),
            )
            for entity_type, count in summary.counts.items():
                log.info("%s: %s", entity_type, count)
            if summary.skipped_tables:
                log.info("Skipped absent tables: %s", ", ".join(summary.skipped_tables))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during feed load")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
