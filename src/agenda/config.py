"""Shared configuration values for agenda modules."""

from __future__ import annotations

import pathlib

_DEFAULT_DATA_DIR = pathlib.Path.home() / ".cache" / "agenda"
_data_dir_override: pathlib.Path | None = None

TIMEZONE_NAME = "America/Maceio"
CACHE_STALE_HOURS = 24
DEFAULT_TOP = 100

EVENTS_FILENAME = "events.json"

SPREADSHEET_ID_ENV = "AGENDA_SPREADSHEET_ID"
SHEET_NAME_ENV = "AGENDA_SHEET_NAME"
DEFAULT_SHEET_NAME = "Eventos"
SHEET_CSV_URL_TEMPLATE = (
    "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq"
    "?tqx=out:csv&sheet={sheet_name}"
)
DEFAULT_RETRIES = 5
REQUEST_TIMEOUT_SEC = 30


def configure(*, data_dir: str | None = None) -> None:
    global _data_dir_override
    if data_dir is not None:
        _data_dir_override = pathlib.Path(data_dir).expanduser()


def get_data_dir() -> pathlib.Path:
    if _data_dir_override is not None:
        return _data_dir_override
    return _DEFAULT_DATA_DIR


def get_events_file() -> pathlib.Path:
    return get_data_dir() / EVENTS_FILENAME


def _reset() -> None:
    """Reset runtime overrides. For testing only."""
    global _data_dir_override
    _data_dir_override = None
