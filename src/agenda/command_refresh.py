"""Refresh command – load the events spreadsheet and write the events file."""

from __future__ import annotations

import pathlib
import sys
import urllib.error

from agenda.event_store import EventStore
from agenda.refresh import SourceError, refresh, resolve_source_url


def run(
    retries: int,
    store: EventStore,
    *,
    user_config: dict,
    url: str | None = None,
    csv_path: str | None = None,
) -> int:
    try:
        if csv_path is None and url is None:
            url = resolve_source_url(user_config)
        count, path = refresh(
            store=store,
            retries=retries,
            url=url,
            csv_path=pathlib.Path(csv_path) if csv_path else None,
        )
    except SourceError as err:
        print(str(err), file=sys.stderr)
        return 2
    except (urllib.error.URLError, urllib.error.HTTPError, OSError) as err:
        print(f"Error fetching events: {err}", file=sys.stderr)
        return 1
    location = f" in {path}" if path else ""
    print(f"Saved {count} events{location}", file=sys.stderr)
    return 0
