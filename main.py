from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from cake import __version__
from cake.config import DEFAULT_CONFIG_PATH, ConfigError, Settings, load_settings
from cake.confluence import FetchError, fetch_page
from cake.parser import ScheduleParser
from cake.render import format_table, select_current, to_ics, to_json
from cake.server import DocumentSource, create_app, parse_listen

DESCRIPTION = """\
cake - wiki schedule table reader.

Reads a wiki page holding a duty roster table (one uniquely coloured row per
person: name, optional e-mail and chat link) followed by monthly calendar
tables headed "<Month>, <Year>" whose day cells share the roster colours.
"""


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"cake {__version__}")

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("-L", dest="list_mode", action="store_true", help="List mode")
    mode.add_argument("-D", dest="daemon", action="store_true", help="Run in daemon mode and serve schedules by HTTP")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", help="Page REST URL to get data from")
    source.add_argument("--id", dest="page_id", help="Page ID, rendered through the configured URL template")
    source.add_argument("--file", help="Read a saved page body instead of fetching it")

    parser.add_argument("--login", help="Wiki user login")
    parser.add_argument("--password", help="Wiki user password")
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to config file in dotenv format (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-j", dest="json", action="store_true", help="Dump in JSON")
    parser.add_argument("-c", dest="current", action="store_true", help="Print only the person currently on duty")
    parser.add_argument("--ics", help="Also write duty dates to this iCalendar file")
    parser.add_argument("--listen", default=None, help="Listen address and port for daemon mode (default: :8080)")
    parser.add_argument("--date", default=None, help="Reference date YYYY-MM-DD instead of today")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    if not (args.url or args.page_id or args.file):
        parser.error("one of --url, --id or --file is required")
    return args


def load_document(args: argparse.Namespace, settings: Settings) -> str:
    if args.file:
        logging.info("Reading page from %s", args.file)
        return Path(args.file).read_text(encoding="utf-8")
    url = args.url or settings.page_url(args.page_id)
    return fetch_page(url, settings.login, settings.password)


def run_daemon(args: argparse.Namespace, settings: Settings) -> int:
    source = DocumentSource(lambda: load_document(args, settings))
    source.refresh()
    app = create_app(source, settings.timezone, months=settings.months, current_only=args.current)
    host, port = parse_listen(args.listen or settings.listen)
    logging.info("Starting server at %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def run_list(args: argparse.Namespace, settings: Settings) -> int:
    document = load_document(args, settings)
    if args.date:
        now = date.fromisoformat(args.date)
    else:
        now = datetime.now(settings.timezone).date()

    persons = ScheduleParser(months=settings.months).parse(document, now)
    logging.info("Parsed %d persons on duty roster", len(persons))
    if not persons:
        logging.warning("No roster rows found on the page")

    if args.ics:
        Path(args.ics).write_text(to_ics(persons), encoding="utf-8")
        logging.info("Saved calendar to %s", args.ics)

    if args.json:
        sys.stdout.write(to_json(persons, current_only=args.current))
        return 0

    if args.current:
        current = select_current(persons)
        persons = [current] if current else []
    sys.stdout.write(format_table(persons))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = load_settings(
            args.config,
            login=args.login,
            password=args.password,
            require_credentials=not args.file,
        )
        if args.daemon:
            return run_daemon(args, settings)
        return run_list(args, settings)
    except (ConfigError, FetchError, OSError, ValueError) as exc:
        logging.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
