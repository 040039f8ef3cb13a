from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from family_camp.config.loader import DEFAULT_CONFIG_PATH, CampConfig, ConfigError, load_config
from family_camp.db.connection import db_cursor
from family_camp.db.store import RegistrantStore
from family_camp.logging.error_log import ErrorLogBuffer
from family_camp.logging.init import log_summary, setup_logging
from family_camp.models.registrant import ChurchLocation, Gender
from family_camp.services.exporter import ExportError, export_roster
from family_camp.services.importer import import_file
from family_camp.services.registration import register
from family_camp.services.roster import (
    NO_TERM_MESSAGE,
    SearchStatus,
    find_by_name,
    load_admin_listing,
    load_roster,
)
from family_camp.services.session import PermissionDeniedError, SessionContext
from family_camp.services.summary import render_import_summary

"""CLI entrypoint.

Commands:
    roster      print the grouped roster
    search      find a participant's group by (partial) name
    export      write the roster workbook
    import      upsert registrants from a workbook
    register    register one participant
    admin-list  eligible registrants, newest first

Exit codes: 0 success, 1 fatal, 2 partial failure (import skipped rows or failed).
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

ADMIN_COMMANDS = {"export", "import", "admin-list"}


@contextmanager
def _open_store(cfg: CampConfig) -> Iterator[RegistrantStore]:  # pragma: no cover (thin wrapper)
    with db_cursor(cfg.database) as cur:
        yield RegistrantStore(cur, cfg.tables)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="family-camp", description="Family camp roster tools")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--user", default=None, help="User id for admin commands (overrides config user_id)")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("roster", help="Show group assignments")

    s = sub.add_parser("search", help="Find your group")
    s.add_argument("name", nargs="?", default="")

    e = sub.add_parser("export", help="Export roster workbook")
    e.add_argument("--output-dir", type=Path, default=None)

    i = sub.add_parser("import", help="Import registrants from a workbook")
    i.add_argument("file", type=Path)

    r = sub.add_parser("register", help="Register a participant")
    r.add_argument("--name", required=True)
    r.add_argument("--age", required=True)
    r.add_argument("--gender", required=True, help="/".join(g.value for g in Gender))
    r.add_argument("--location", required=True, help=", ".join(ChurchLocation.values()))

    sub.add_parser("admin-list", help="List eligible registrants, newest first")
    return p.parse_args(argv)


def _participant_word(n: int) -> str:
    return "participant" if n == 1 else "participants"


def _cmd_roster(store: Any, logger: logging.Logger) -> int:
    loaded = load_roster(store)
    if not loaded.ok:
        logger.error(loaded.error)
        return EXIT_FATAL
    if not loaded.groups:
        logger.info("No participants assigned to groups yet.")
        return EXIT_SUCCESS
    for key, members in loaded.groups.items():
        logger.info(f"{key} ({len(members)} {_participant_word(len(members))})")
        for p in members:
            logger.info(f"  - {p.full_name} ({p.age}, {p.gender_label}, {p.location_label})")
    return EXIT_SUCCESS


def _cmd_search(store: Any, term: str, logger: logging.Logger) -> int:
    loaded = load_roster(store)
    if not loaded.ok:
        logger.error(loaded.error)
        return EXIT_FATAL
    outcome = find_by_name(loaded.registrants, term)
    if outcome.status is SearchStatus.FOUND:
        logger.info(outcome.message)
        for p in outcome.matches:
            logger.info(f"  {p.full_name} - {p.group_label}")
    else:
        logger.warning(outcome.message)
    return EXIT_SUCCESS


def _cmd_export(store: Any, cfg: CampConfig, output_dir: Path | None, logger: logging.Logger) -> int:
    loaded = load_roster(store)
    if not loaded.ok:
        logger.error(loaded.error)
        return EXIT_FATAL
    try:
        exported = export_roster(loaded.registrants, event_title=cfg.event_title)
    except ExportError as e:
        logger.error(str(e))
        return EXIT_FATAL
    if exported is None:
        return EXIT_SUCCESS
    path = exported.write_to(output_dir or Path(cfg.output_directory))
    logger.info(f"wrote {path}")
    return EXIT_SUCCESS


def _cmd_import(store: Any, file: Path, logger: logging.Logger) -> int:
    if not file.exists():
        logger.error(f"file not found: {file}")
        return EXIT_FATAL
    error_log = ErrorLogBuffer()
    result = import_file(file, store, file_name=file.name, error_log=error_log)
    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")
    log_summary(render_import_summary(result))
    if result.success and result.skipped_count == 0:
        return EXIT_SUCCESS
    return EXIT_PARTIAL_FAILURE


def _cmd_register(store: Any, args: argparse.Namespace, logger: logging.Logger) -> int:
    outcome = register(store, args.name, args.age, args.gender, args.location)
    if not outcome.success:
        logger.error(outcome.message)
        return EXIT_FATAL
    return EXIT_SUCCESS


def _cmd_admin_list(store: Any, logger: logging.Logger) -> int:
    loaded = load_admin_listing(store)
    if not loaded.ok:
        logger.error(f"Error: {loaded.error}")
        return EXIT_FATAL
    for p in loaded.registrants:
        logger.info(f"{p.full_name} | {p.age} | {p.gender_label} | {p.location_label} | {p.group_label}")
    logger.info(f"{len(loaded.registrants)} eligible registrants (age 12+)")
    return EXIT_SUCCESS


def _dispatch(store: Any, cfg: CampConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    if cfg.require_admin and args.command in ADMIN_COMMANDS:
        session = SessionContext.start(store, args.user or cfg.user_id)
        try:
            session.require_admin()
        except PermissionDeniedError as e:
            logger.error(f"{args.command}: {e}")
            return EXIT_FATAL
        finally:
            session.clear()

    if args.command == "roster":
        return _cmd_roster(store, logger)
    if args.command == "search":
        return _cmd_search(store, args.name, logger)
    if args.command == "export":
        return _cmd_export(store, cfg, args.output_dir, logger)
    if args.command == "import":
        return _cmd_import(store, args.file, logger)
    if args.command == "register":
        return _cmd_register(store, args, logger)
    if args.command == "admin-list":
        return _cmd_admin_list(store, logger)
    logger.error(f"unknown command: {args.command}")  # pragma: no cover
    return EXIT_FATAL


def main(argv: list[str] | None = None) -> int:
    # None のときのみシステム引数を読む (テストから [] を渡せるように)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    logger = setup_logging(logging.DEBUG if args.debug else logging.INFO)
    logger.debug("debug mode enabled")

    # .env overrides the process environment so DB settings from it win
    load_dotenv(dotenv_path=Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    # blank search is answered without opening a connection
    if args.command == "search" and not args.name.strip():
        logger.warning(NO_TERM_MESSAGE)
        return EXIT_SUCCESS

    try:
        with _open_store(cfg) as store:
            return _dispatch(store, cfg, args, logger)
    except Exception as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
