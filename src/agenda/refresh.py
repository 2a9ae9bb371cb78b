"""Refresh pipeline: spreadsheet -> events file.

Its public API is ``refresh(...)``.
"""

from __future__ import annotations

import os
import pathlib
import sys
from datetime import datetime

from agenda.config import DEFAULT_SHEET_NAME, SHEET_NAME_ENV, SPREADSHEET_ID_ENV
from agenda.dates import local_now
from agenda.download import download_rows, read_csv_rows, sheet_csv_url
from agenda.event_store import EventStore
from agenda.ingest import rows_to_events


class SourceError(Exception):
    """Raised when no spreadsheet source is configured."""


def resolve_source_url(user_config: dict) -> str:
    """Pick the CSV URL: env vars first, then the user config file."""
    spreadsheet_id = os.environ.get(SPREADSHEET_ID_ENV) or user_config.get("spreadsheet_id")
    if spreadsheet_id:
        sheet_name = (
            os.environ.get(SHEET_NAME_ENV)
            or user_config.get("sheet_name")
            or DEFAULT_SHEET_NAME
        )
        return sheet_csv_url(spreadsheet_id, sheet_name)
    csv_url = user_config.get("csv_url")
    if csv_url:
        return csv_url
    raise SourceError(
        f"No spreadsheet configured. Set {SPREADSHEET_ID_ENV}, add "
        "'spreadsheet_id' to the config file, or pass --url/--csv."
    )


def refresh(
    *,
    store: EventStore,
    retries: int,
    url: str | None = None,
    csv_path: pathlib.Path | None = None,
    fetched_at: datetime | None = None,
) -> tuple[int, pathlib.Path | None]:
    """Load sheet rows, convert them and save. Returns (event_count, path)."""
    if csv_path is not None:
        print(f"Reading events from {csv_path}", file=sys.stderr)
        rows = read_csv_rows(csv_path)
    elif url is not None:
        print("Fetching events spreadsheet", file=sys.stderr)
        rows = download_rows(url, retries=retries)
    else:
        raise SourceError("refresh needs a URL or a CSV path.")

    if len(rows) <= 1:
        print("Warning: spreadsheet has no event rows.", file=sys.stderr)
    events = rows_to_events(rows)
    path = store.save(events, fetched_at or local_now())
    return len(events), path
