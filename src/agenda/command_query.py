"""Query command – list upcoming events matching the current filters."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime

from agenda.dates import end_of_this_week, format_price, format_short_date, format_time, is_today
from agenda.event_store import CacheError, EventStore, FilterResult, event_start
from agenda.filter_state import (
    FilterState,
    clear_filters,
    from_query_string,
    set_date_window,
    set_search,
    to_query_string,
    toggle_category,
)
from agenda.models import DateWindow, Event

_DIM = "\033[2m" if sys.stderr.isatty() else ""
_RESET = "\033[0m" if sys.stderr.isatty() else ""


class UsageError(ValueError):
    """Raised when command-line filter options cannot be combined."""


def build_filter_state(args: argparse.Namespace, shortcuts: dict[str, str]) -> FilterState:
    """Decode the starting link, then apply flag mutators in UI order.

    Order: link/shortcut -> --clear -> --search -> --category -> --date, so an
    explicit --date wins over the window lifted by --search.
    """
    if args.query is not None and args.shortcut is not None:
        raise UsageError("--query and --shortcut are mutually exclusive.")
    query_string = args.query or ""
    if args.shortcut is not None:
        if args.shortcut not in shortcuts:
            raise UsageError(f"Unknown shortcut: '{args.shortcut}'.")
        query_string = shortcuts[args.shortcut]

    state = from_query_string(query_string)
    if args.clear:
        state = clear_filters()
    if args.search is not None:
        state = set_search(state, args.search)
    for category in args.category or []:
        state = toggle_category(state, category)
    if args.date is not None:
        state = set_date_window(state, args.date)
    return state


def share_link(state: FilterState) -> str:
    query_string = to_query_string(state)
    return f"?{query_string}" if query_string else "/"


def _has_time(event: Event) -> bool:
    return bool(event.time) or len(event.date.strip()) > 10


def format_event_line(event: Event, start: datetime) -> str:
    when = format_short_date(start)
    if _has_time(event):
        when = f"{when} • {format_time(start)}"
    return " | ".join([
        when,
        event.title,
        event.location or "-",
        format_price(event.price),
        event.category.label,
        event.id,
    ])


def _count_line(result: FilterResult, state: FilterState) -> str:
    if result.has_active_filters:
        line = f"Mostrando {result.filtered_count} de {result.total_count} eventos"
        if state.date_window is not DateWindow.ALL:
            line = f"{line} ({state.date_window.label})"
        return line
    return f"{result.filtered_count} eventos encontrados"


def _print_events(
    result: FilterResult,
    state: FilterState,
    events: list[Event],
    now: datetime,
) -> None:
    print(_count_line(result, state))
    if not events:
        print("Nenhum evento encontrado")
        if result.has_active_filters:
            print("Tente ajustar os filtros ou buscar por outro termo para encontrar mais eventos.")
        return

    bold = "\033[1m" if sys.stdout.isatty() else ""
    reset_ansi = "\033[0m" if sys.stdout.isatty() else ""
    prev_week_end = None
    for event in events:
        start = event_start(event)
        if start is None:
            continue
        week_end = end_of_this_week(start)
        if prev_week_end is not None and week_end != prev_week_end:
            print()
        prev_week_end = week_end

        line = format_event_line(event, start)
        if is_today(start, now):
            line = f"{bold}{line}{reset_ansi}"
        print(line)


def _warn_if_stale(store: EventStore, now: datetime) -> None:
    staleness = store.check_staleness(now)
    if not staleness.is_stale:
        return
    age_days = staleness.age.days
    if age_days >= 1:
        print(f"Warning: events file is {age_days} day{'s' if age_days != 1 else ''} old. "
              "Run 'agenda refresh' to update.", file=sys.stderr)
    else:
        age_hours = int(staleness.age.total_seconds() // 3600)
        print(f"Warning: events file is {age_hours} hours old. "
              "Run 'agenda refresh' to update.", file=sys.stderr)


def run(
    args: argparse.Namespace,
    store: EventStore,
    *,
    now: datetime,
    shortcuts: dict[str, str],
) -> int:
    try:
        state = build_filter_state(args, shortcuts)
    except UsageError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.debug:
        print(
            f"{_DIM}[debug] now={now.isoformat()} filters={state.model_dump(mode='json')}{_RESET}",
            file=sys.stderr,
        )

    _warn_if_stale(store, now)

    try:
        result = store.query(state, now)
    except CacheError as e:
        print(str(e), file=sys.stderr)
        return 1

    if args.json_output:
        output = {
            "type": "events",
            "generated_at": now.isoformat(),
            "query": to_query_string(state),
            "filters": {
                "search": state.search_text,
                "categories": [c.value for c in state.categories],
                "date": state.date_window.value,
            },
            "total_count": result.total_count,
            "filtered_count": result.filtered_count,
            "has_active_filters": result.has_active_filters,
            "events": [e.to_dict() for e in result.events],
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0

    display = result.events[: args.top] if args.top else result.events
    _print_events(result, state, display, now)
    print(f"{_DIM}Link: {share_link(state)}{_RESET}", file=sys.stderr)
    return 0
