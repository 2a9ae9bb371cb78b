"""Shared helpers for eval infrastructure."""

from __future__ import annotations

import json
import pathlib
from datetime import datetime

from agenda.models import Category, Event


def make_event(
    event_id: str,
    title: str,
    date: str,
    *,
    category: Category = Category.SHOW,
    time: str | None = None,
    location: str = "",
    description: str = "",
    price: float | None = None,
) -> Event:
    return Event(
        id=event_id,
        title=title,
        category=category,
        date=date,
        time=time,
        location=location,
        description=description,
        price=price,
    )


def write_events_file(
    tmp_path: pathlib.Path,
    events: list[Event],
    fetched_at: datetime,
) -> pathlib.Path:
    """Write an events file into *tmp_path*."""
    path = tmp_path / "events.json"
    payload = {"fetched_at": fetched_at.isoformat(), "events": [e.to_dict() for e in events]}
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return path
