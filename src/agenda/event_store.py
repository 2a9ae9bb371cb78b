"""EventStore — unified abstraction for reading and writing agenda events.

Providers handle storage mechanics (disk or memory).  Callers construct a
provider, pass it to ``EventStore``, and interact only with the store after
that.
"""

from __future__ import annotations

import functools
import json
import pathlib
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from pyuca import Collator

from agenda.config import CACHE_STALE_HOURS
from agenda.dates import is_past_day, matches_window, parse_local_datetime, to_local
from agenda.filter_state import FilterState
from agenda.models import DateWindow, Event


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class CacheError(Exception):
    """Raised when the events file is missing or corrupt."""


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass
class CacheInfo:
    is_stale: bool
    age: timedelta


@dataclass
class FilterResult:
    events: list[Event]
    total_count: int
    filtered_count: int
    has_active_filters: bool


# ---------------------------------------------------------------------------
# Shared utilities
# ---------------------------------------------------------------------------

def event_start(event: Event) -> datetime | None:
    return parse_local_datetime(event.date, event.time)


@functools.lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def title_sort_key(title: str) -> tuple[int, ...]:
    """Collation key for titles (Unicode Collation Algorithm, pt-BR order).

    Portuguese has no tailoring over the root table: punctuation sorts before
    letters, "é" before "è", lowercase before uppercase on an otherwise equal
    title.
    """
    return _collator().sort_key(title)


# ---------------------------------------------------------------------------
# Provider protocol & implementations
# ---------------------------------------------------------------------------

class EventProvider(Protocol):
    def load(self) -> list[Event]: ...
    def save(self, events: list[Event], fetched_at: datetime) -> pathlib.Path | None: ...
    def check_staleness(self, now: datetime) -> CacheInfo: ...


class DiskProvider:
    """Reads and writes events as a single JSON file."""

    def __init__(self, path: pathlib.Path) -> None:
        self._path = path

    def load(self) -> list[Event]:
        if not self._path.is_file():
            raise CacheError("No events file. Run 'agenda refresh' first.")
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            # The static site ships a bare list; refresh writes a payload.
            items = data if isinstance(data, list) else data["events"]
            return [Event.from_dict(d) for d in items]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError) as err:
            raise CacheError(f"Cannot read events file {self._path}: {err}") from err

    def save(self, events: list[Event], fetched_at: datetime) -> pathlib.Path:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "fetched_at": fetched_at.isoformat(),
            "events": [e.to_dict() for e in events],
        }
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        return self._path

    def check_staleness(self, now: datetime) -> CacheInfo:
        if not self._path.is_file():
            return CacheInfo(is_stale=False, age=timedelta(0))
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            fetched_at = datetime.fromisoformat(data["fetched_at"])
        except (json.JSONDecodeError, KeyError, TypeError, OSError, ValueError):
            return CacheInfo(is_stale=False, age=timedelta(0))
        age = to_local(now) - to_local(fetched_at)
        return CacheInfo(is_stale=age > timedelta(hours=CACHE_STALE_HOURS), age=age)


class MemoryProvider:
    """Holds events in memory.  Used by tests and the eval runner."""

    def __init__(self, events: list[Event]) -> None:
        self._events = events

    def load(self) -> list[Event]:
        return self._events

    def save(self, events: list[Event], fetched_at: datetime) -> None:
        self._events = events

    def check_staleness(self, now: datetime) -> CacheInfo:
        return CacheInfo(is_stale=False, age=timedelta(0))


# ---------------------------------------------------------------------------
# EventStore
# ---------------------------------------------------------------------------

class EventStore:
    """Database-like abstraction over event storage.

    Provider binding is fixed after construction.  Callers interact only with
    ``query()``, ``get_by_id()``, ``save()``, and ``check_staleness()``.
    """

    def __init__(self, provider: EventProvider) -> None:
        self._provider = provider

    def query(self, state: FilterState, now: datetime) -> FilterResult:
        events = self._provider.load()
        return apply_filters(events, state, now)

    def get_by_id(self, event_id: str) -> Event | None:
        for event in self._provider.load():
            if event.id == event_id:
                return event
        return None

    def save(self, events: list[Event], fetched_at: datetime) -> pathlib.Path | None:
        return self._provider.save(events, fetched_at)

    def check_staleness(self, now: datetime) -> CacheInfo:
        return self._provider.check_staleness(now)


# ---------------------------------------------------------------------------
# Filter / sort pipeline
# ---------------------------------------------------------------------------

def apply_filters(
    events: Iterable[Event],
    state: FilterState,
    now: datetime,
) -> FilterResult:
    """Filter, sort, and return events.  Pure function — no I/O.

    Events whose date cannot be parsed are skipped; events on a day before
    ``now`` are not upcoming and never shown.
    """
    now = to_local(now)

    # -- upcoming ------------------------------------------------------------

    upcoming: list[tuple[datetime, Event]] = []
    for event in events:
        start = event_start(event)
        if start is None or is_past_day(start, now):
            continue
        upcoming.append((start, event))

    # -- filter chain --------------------------------------------------------

    filtered = upcoming
    search_term = state.search_text.strip().casefold()
    if search_term:
        filtered = [
            (start, item) for start, item in filtered
            if search_term in item.title.casefold()
            or search_term in item.location.casefold()
            or search_term in item.description.casefold()
        ]
    if state.categories:
        selected = set(state.categories)
        filtered = [
            (start, item) for start, item in filtered
            if item.category in selected
        ]
    if state.date_window is not DateWindow.ALL:
        filtered = [
            (start, item) for start, item in filtered
            if matches_window(state.date_window, start, now)
        ]

    # -- sort ----------------------------------------------------------------

    filtered = sorted(
        filtered,
        key=lambda pair: (pair[0], title_sort_key(pair[1].title)),
    )

    return FilterResult(
        events=[item for _, item in filtered],
        total_count=len(upcoming),
        filtered_count=len(filtered),
        has_active_filters=state.has_active_filters,
    )
