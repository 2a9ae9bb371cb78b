"""Spreadsheet rows -> Event records.

Expected columns (header row first):

    A id | B title | C category | D thumbnail | E date (YYYY-MM-DD)
    F time (HH:MM, optional) | G description | H location | I address
    J price (number, empty = free) | K ticketUrl (optional)

Rows that cannot become a valid event are dropped with a warning on stderr.
"""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable, Sequence

from agenda.dates import parse_local_datetime
from agenda.models import DEFAULT_CATEGORY, Category, Event

COLUMNS = (
    "id", "title", "category", "thumbnail", "date", "time",
    "description", "location", "address", "price", "ticketUrl",
)

_PRICE_PREFIX_RE = re.compile(r"^\s*R\$\s*", re.IGNORECASE)


def _cells(row: Sequence[str]) -> dict[str, str]:
    padded = list(row) + [""] * (len(COLUMNS) - len(row))
    return {name: str(value or "").strip() for name, value in zip(COLUMNS, padded)}


def parse_price(raw: str) -> float | None:
    """Parse a price cell: ``50``, ``50.5``, ``50,50``, ``R$ 1.234,50``.

    Raises ``ValueError`` for text that is not a non-negative amount.
    """
    text = _PRICE_PREFIX_RE.sub("", raw).strip()
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    value = float(text)
    if value < 0:
        raise ValueError(f"negative price: {raw!r}")
    return value


def row_to_event(row: Sequence[str], line: int) -> Event | None:
    """Build one event from a row; ``None`` (with a warning) when unusable."""
    cells = _cells(row)
    event_id = cells["id"]
    title = cells["title"]
    date = cells["date"]
    if not event_id or not title or not date:
        print(f"Warning: row {line}: missing id, title or date, skipped.", file=sys.stderr)
        return None

    time_of_day = cells["time"] or None
    if parse_local_datetime(date, time_of_day) is None:
        print(f"Warning: row {line}: invalid date '{date}', skipped.", file=sys.stderr)
        return None

    raw_category = cells["category"]
    category = DEFAULT_CATEGORY
    if raw_category:
        found = Category.from_token(raw_category)
        if found is None:
            print(
                f"Warning: row {line}: unknown category '{raw_category}', "
                f"using {DEFAULT_CATEGORY.value}.",
                file=sys.stderr,
            )
        else:
            category = found

    raw_price = cells["price"]
    try:
        price = parse_price(raw_price)
    except ValueError:
        print(f"Warning: row {line}: invalid price '{raw_price}', treated as free.", file=sys.stderr)
        price = None

    return Event(
        id=event_id,
        title=title,
        category=category,
        date=date,
        time=time_of_day,
        description=cells["description"],
        location=cells["location"],
        address=cells["address"],
        thumbnail=cells["thumbnail"] or None,
        price=price,
        ticket_url=cells["ticketUrl"] or None,
    )


def rows_to_events(rows: Iterable[Sequence[str]], *, has_header: bool = True) -> list[Event]:
    """Convert sheet rows to events, sorted by date and time.

    Duplicate ids keep the first occurrence.
    """
    events: list[Event] = []
    seen_ids: set[str] = set()
    first_line = 2 if has_header else 1
    row_iter = iter(rows)
    if has_header:
        next(row_iter, None)
    for line, row in enumerate(row_iter, start=first_line):
        if not any(str(cell).strip() for cell in row):
            continue
        event = row_to_event(row, line)
        if event is None:
            continue
        if event.id in seen_ids:
            print(f"Warning: row {line}: duplicate id '{event.id}', skipped.", file=sys.stderr)
            continue
        seen_ids.add(event.id)
        events.append(event)

    events.sort(key=lambda e: parse_local_datetime(e.date, e.time))
    return events
