"""User configuration — TOML loading, validation, and template auto-creation."""

from __future__ import annotations

import pathlib
import re
import sys
import tomllib


CONFIG_TEMPLATE = """\
# Google Sheets source for 'agenda refresh'
# (AGENDA_SPREADSHEET_ID / AGENDA_SHEET_NAME env vars take precedence)
# spreadsheet_id = "1AbC..."
# sheet_name = "Eventos"

# Or any URL serving the sheet as CSV:
# csv_url = "https://example.com/eventos.csv"

# Shortcuts: named filter links callable via 'agenda --shortcut <name>'
# Each shortcut is a query string (search, categories, date).
# Example:
# [shortcuts]
# fim-de-semana = "date=weekend"
# teatro = "categories=TEATRO,DANCA&date=all"
"""

_SHORTCUT_NAME_RE = re.compile(r"^[a-zA-Z0-9-]+$")
_STRING_KEYS = ("spreadsheet_id", "sheet_name", "csv_url")


def ensure_config(path: pathlib.Path) -> None:
    """Create config file with template if it does not exist."""
    if path.is_file():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONFIG_TEMPLATE, encoding="utf-8")


def load_config(path: pathlib.Path) -> dict:
    """Read and parse a TOML config file."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        print(f"Error: malformed config file {path}: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc


def validate_config(config: dict) -> None:
    """Validate source keys and shortcuts in the parsed config."""
    for key in _STRING_KEYS:
        if key in config and not isinstance(config[key], str):
            print(f"Error: '{key}' must be a string.", file=sys.stderr)
            raise SystemExit(2)
    shortcuts = config.get("shortcuts")
    if shortcuts is None:
        return
    if not isinstance(shortcuts, dict):
        print("Error: [shortcuts] must be a table.", file=sys.stderr)
        raise SystemExit(2)
    for name, value in shortcuts.items():
        if not _SHORTCUT_NAME_RE.match(name):
            print(
                f"Error: shortcut name '{name}' is invalid. "
                "Use only letters, digits, and hyphens.",
                file=sys.stderr,
            )
            raise SystemExit(2)
        if not isinstance(value, str):
            print(
                f"Error: shortcut '{name}' must be a query string.",
                file=sys.stderr,
            )
            raise SystemExit(2)


def get_shortcuts(config: dict) -> dict[str, str]:
    """Return the shortcuts mapping from config."""
    return config.get("shortcuts", {})
