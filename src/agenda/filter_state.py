"""FilterState and its query-string codec.

The filter state travels as a flat ``str -> str`` mapping (``search``,
``categories``, ``date``) so it can live in a URL and be shared as a link.
Encoding is minimal: defaults are omitted, so an empty mapping means
"today, no search, all categories".
"""

from __future__ import annotations

import urllib.parse
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from agenda.models import Category, DateWindow

SEARCH_KEY = "search"
CATEGORIES_KEY = "categories"
DATE_KEY = "date"

DEFAULT_DATE_WINDOW = DateWindow.TODAY


class FilterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    search_text: str = Field("", description="Free-text search over title, location and description.")
    categories: tuple[Category, ...] = Field((), description="Selected categories, in selection order. Empty means no restriction.")
    date_window: DateWindow = Field(DEFAULT_DATE_WINDOW, description="Relative date window.")

    @property
    def has_active_filters(self) -> bool:
        return (
            self.search_text != ""
            or len(self.categories) > 0
            or self.date_window is not DateWindow.ALL
        )


def _unique_categories(tokens: Iterable[str]) -> tuple[Category, ...]:
    found: dict[Category, None] = {}
    for token in tokens:
        category = Category.from_token(token)
        if category is not None:
            found.setdefault(category, None)
    return tuple(found)


def parse_date_window(token: str | None) -> DateWindow:
    """Map a ``date`` token to a window; unknown or missing means TODAY."""
    try:
        return DateWindow((token or "").strip().lower())
    except ValueError:
        return DEFAULT_DATE_WINDOW


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

def decode(query: Mapping[str, str]) -> FilterState:
    raw_categories = query.get(CATEGORIES_KEY)
    return FilterState(
        search_text=query.get(SEARCH_KEY) or "",
        categories=_unique_categories(raw_categories.split(",")) if raw_categories else (),
        date_window=parse_date_window(query.get(DATE_KEY)),
    )


def encode(state: FilterState) -> dict[str, str]:
    query: dict[str, str] = {}
    if state.search_text:
        query[SEARCH_KEY] = state.search_text
    if state.categories:
        query[CATEGORIES_KEY] = ",".join(c.value for c in state.categories)
    if state.date_window is not DEFAULT_DATE_WINDOW:
        query[DATE_KEY] = state.date_window.value
    return query


def from_query_string(query_string: str) -> FilterState:
    """Decode a URL query string; the first value wins for repeated keys."""
    pairs = urllib.parse.parse_qsl(query_string.lstrip("?"), keep_blank_values=True)
    query: dict[str, str] = {}
    for key, value in pairs:
        query.setdefault(key, value)
    return decode(query)


def to_query_string(state: FilterState) -> str:
    return urllib.parse.urlencode(encode(state))


# ---------------------------------------------------------------------------
# Mutators
# ---------------------------------------------------------------------------

def set_search(state: FilterState, text: str) -> FilterState:
    """Set the search text.

    Searching lifts the date window to ALL so results are not hidden by
    "today only".  Clearing the search leaves the window as it is.
    """
    if text.strip():
        return state.model_copy(update={"search_text": text, "date_window": DateWindow.ALL})
    return state.model_copy(update={"search_text": ""})


def toggle_category(state: FilterState, category: Category) -> FilterState:
    if category in state.categories:
        remaining = tuple(c for c in state.categories if c is not category)
    else:
        remaining = state.categories + (category,)
    return state.model_copy(update={"categories": remaining})


def set_date_window(state: FilterState, window: DateWindow) -> FilterState:
    return state.model_copy(update={"date_window": window})


def clear_filters() -> FilterState:
    return decode({})
