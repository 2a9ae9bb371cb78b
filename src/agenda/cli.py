#!/usr/bin/env python3
"""Browse the Agenda Maceió events directory from the command line.

- Upcoming events only (events on earlier days are never listed)
- Filters: free-text search, categories, relative date window
- Filters travel as a shareable link (?search=...&categories=...&date=...)
- Default window is "today"; searching lifts it to "any date"
- Detail view per event id
- Events file built from the events spreadsheet by 'agenda refresh'
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from datetime import datetime

import agenda.config as config
from agenda import command_query, command_refresh, command_show
from agenda.config import DEFAULT_RETRIES, DEFAULT_TOP, TIMEZONE_NAME
from agenda.dates import local_now, to_local
from agenda.event_store import DiskProvider, EventStore
from agenda.models import Category, DateWindow
from agenda.user_config import ensure_config, get_shortcuts, load_config, validate_config

DEFAULT_CONFIG_PATH = pathlib.Path.home() / ".agenda" / "config.toml"


def _category_arg(value: str) -> Category:
    category = Category.from_token(value)
    if category is None:
        choices = ", ".join(c.value for c in Category)
        raise argparse.ArgumentTypeError(f"unknown category '{value}' (choose from {choices})")
    return category


def _top_arg(value: str) -> int:
    try:
        top = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count '{value}'")
    if top < 0:
        raise argparse.ArgumentTypeError(f"--top must be 0 or more, got {top}")
    return top


def _now_arg(value: str) -> datetime:
    try:
        return to_local(datetime.fromisoformat(value))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid date '{value}'. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM."
        )


def _add_query_args(parser: argparse.ArgumentParser) -> None:
    """Register filter-related flags on *parser*."""
    parser.add_argument(
        "--query",
        default=None,
        metavar="QUERY_STRING",
        help="Start from a shared link's filters, e.g. 'categories=SHOW&date=weekend'.",
    )
    parser.add_argument(
        "--shortcut",
        default=None,
        metavar="NAME",
        help="Start from a named link in the config file. Mutually exclusive with --query.",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Drop all filters from the starting link (back to today's events).",
    )
    parser.add_argument(
        "--search",
        default=None,
        help="Search title, location and description (case-insensitive). "
             "A non-empty search switches the date window to 'all'.",
    )
    parser.add_argument(
        "--category",
        action="append",
        type=_category_arg,
        default=None,
        metavar="CATEGORY",
        help="Toggle a category (repeatable): "
             + ", ".join(c.value for c in Category) + ".",
    )
    parser.add_argument(
        "--date",
        type=DateWindow,
        choices=list(DateWindow),
        default=None,
        metavar="WINDOW",
        help="Date window: " + ", ".join(w.value for w in DateWindow) + " (default: today).",
    )
    parser.add_argument(
        "--top",
        type=_top_arg,
        default=DEFAULT_TOP,
        help=f"How many events to print (default: {DEFAULT_TOP}, 0 prints all). Ignored with --json.",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Browse upcoming events in Maceió from a local events file.\n"
            "\n"
            "Subcommands:\n"
            "  agenda refresh   Load the events spreadsheet and write the events file.\n"
            "  agenda show ID   Show the details of one event.\n"
            "  agenda [options] List upcoming events (default).\n"
            "\n"
            "Events file: <data-dir>/events.json"
        ),
        epilog=(
            "Examples:\n"
            "  agenda refresh --csv eventos.csv\n"
            "    Build the events file from a CSV export of the spreadsheet.\n"
            "\n"
            "  agenda\n"
            "    Show today's events.\n"
            "\n"
            "  agenda --date weekend --category SHOW --category STANDUP\n"
            "    Shows and stand-up comedy this weekend.\n"
            "\n"
            "  agenda --search jazz\n"
            "    Search every upcoming event for 'jazz'.\n"
            "\n"
            "  agenda --query 'categories=TEATRO&date=next-week'\n"
            "    Open a shared link.\n"
            "\n"
            "  agenda show evt-42\n"
            "    Show one event."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Override the data directory (default: ~/.cache/agenda).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to the config file (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument(
        "--now",
        type=_now_arg,
        default=None,
        metavar="ISO_DATETIME",
        help=f"Reference time for date windows, in {TIMEZONE_NAME} local time (default: now).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print results as JSON.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the reference time and decoded filters to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")
    refresh_parser = subparsers.add_parser(
        "refresh",
        help="Load the events spreadsheet and write the events file.",
    )
    refresh_parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_RETRIES,
        help=f"Retry attempts for HTTP requests with exponential backoff (default: {DEFAULT_RETRIES}).",
    )
    source = refresh_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--url",
        default=None,
        help="CSV URL to fetch instead of the configured spreadsheet.",
    )
    source.add_argument(
        "--csv",
        default=None,
        dest="csv_path",
        help="Local CSV file to read instead of the configured spreadsheet.",
    )
    show_parser = subparsers.add_parser(
        "show",
        help="Show the details of one event.",
    )
    show_parser.add_argument("event_id", help="Event id.")
    _add_query_args(parser)
    return parser.parse_args(argv)


def _load_user_config(args: argparse.Namespace) -> dict:
    if args.config is not None:
        path = pathlib.Path(args.config).expanduser()
        if not path.is_file():
            print(f"Error: config file not found: {path}", file=sys.stderr)
            raise SystemExit(2)
    else:
        path = DEFAULT_CONFIG_PATH
        ensure_config(path)
    user_config = load_config(path)
    validate_config(user_config)
    return user_config


def main() -> int:
    args = parse_args()
    config.configure(data_dir=args.data_dir)
    user_config = _load_user_config(args)
    store = EventStore(DiskProvider(config.get_events_file()))

    if args.command == "refresh":
        if args.json_output:
            print("--json is not supported for refresh.", file=sys.stderr)
            return 2
        return command_refresh.run(
            args.retries,
            store,
            user_config=user_config,
            url=args.url,
            csv_path=args.csv_path,
        )
    if args.command == "show":
        return command_show.run(args.event_id, store, json_output=args.json_output)

    now = args.now if args.now is not None else local_now()
    return command_query.run(
        args,
        store,
        now=now,
        shortcuts=get_shortcuts(user_config),
    )


if __name__ == "__main__":
    raise SystemExit(main())
