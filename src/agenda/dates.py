"""Date-window predicates and pt-BR date formatting.

Every event date is local wall-clock time in the directory's city.  Values
are parsed into *naive* ``datetime`` objects and compared against an explicit
``now``; nothing in this module reads the clock except :func:`local_now`.

Weeks end on Sunday: "this week" runs from today through the coming Sunday,
and "next week" is the Monday-to-Sunday block right after it.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from agenda.config import TIMEZONE_NAME
from agenda.models import DateWindow

_SATURDAY = 5
_SUNDAY = 6

_WEEKDAYS = ("segunda-feira", "terça-feira", "quarta-feira", "quinta-feira",
             "sexta-feira", "sábado", "domingo")
_WEEKDAYS_SHORT = ("seg", "ter", "qua", "qui", "sex", "sáb", "dom")
_MONTHS = ("janeiro", "fevereiro", "março", "abril", "maio", "junho", "julho",
           "agosto", "setembro", "outubro", "novembro", "dezembro")


# ---------------------------------------------------------------------------
# Parsing / clock
# ---------------------------------------------------------------------------

def local_now(tz_name: str = TIMEZONE_NAME) -> datetime:
    """Current wall-clock time in *tz_name*, as a naive datetime."""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def to_local(now: datetime, tz_name: str = TIMEZONE_NAME) -> datetime:
    """Normalize a reference instant to naive local time."""
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def _parse_time(value: str) -> time | None:
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_local_datetime(value: str | None, time_of_day: str | None = None) -> datetime | None:
    """Parse a stored event date as local wall-clock time.

    Accepts ``YYYY-MM-DD`` or an ISO date-time.  A UTC offset in the text is
    dropped, not converted.  ``time_of_day`` (``HH:MM``) applies only when the
    date itself carries no time; a malformed one is ignored.  Returns ``None``
    when the date cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            parsed = datetime.combine(date.fromisoformat(text), time())
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    parsed = parsed.replace(tzinfo=None)
    if len(text) == 10 and time_of_day:
        tod = _parse_time(time_of_day)
        if tod is not None:
            parsed = datetime.combine(parsed.date(), tod.replace(tzinfo=None))
    return parsed


# ---------------------------------------------------------------------------
# Window bounds
# ---------------------------------------------------------------------------

def _today(now: datetime) -> date:
    return to_local(now).date()


def end_of_this_week(now: datetime) -> date:
    """The coming Sunday; today when today is Sunday."""
    today = _today(now)
    return today + timedelta(days=_SUNDAY - today.weekday())


def weekend_bounds(now: datetime) -> tuple[date, date]:
    today = _today(now)
    if today.weekday() == _SATURDAY:
        return today, today + timedelta(days=1)
    if today.weekday() == _SUNDAY:
        return today - timedelta(days=1), today
    saturday = today + timedelta(days=_SATURDAY - today.weekday())
    return saturday, saturday + timedelta(days=1)


def next_week_bounds(now: datetime) -> tuple[date, date]:
    monday = end_of_this_week(now) + timedelta(days=1)
    return monday, monday + timedelta(days=6)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def is_past(when: datetime, now: datetime) -> bool:
    return when < to_local(now)


def is_past_day(when: datetime, now: datetime) -> bool:
    """True when *when* falls on a calendar day before today."""
    return when.date() < _today(now)


def is_today(when: datetime, now: datetime) -> bool:
    return when.date() == _today(now)


def is_tomorrow(when: datetime, now: datetime) -> bool:
    return when.date() == _today(now) + timedelta(days=1)


def is_this_week(when: datetime, now: datetime) -> bool:
    return _today(now) <= when.date() <= end_of_this_week(now)


def is_this_weekend(when: datetime, now: datetime) -> bool:
    start, end = weekend_bounds(now)
    return start <= when.date() <= end


def is_next_week(when: datetime, now: datetime) -> bool:
    start, end = next_week_bounds(now)
    return start <= when.date() <= end


_WINDOW_PREDICATES = {
    DateWindow.TODAY: is_today,
    DateWindow.TOMORROW: is_tomorrow,
    DateWindow.THIS_WEEK: is_this_week,
    DateWindow.WEEKEND: is_this_weekend,
    DateWindow.NEXT_WEEK: is_next_week,
}


def matches_window(window: DateWindow, when: datetime, now: datetime) -> bool:
    if window is DateWindow.ALL:
        return True
    return _WINDOW_PREDICATES[window](when, now)


def classify(when: datetime, now: datetime) -> set[DateWindow]:
    """All windows (besides ALL) that contain *when*."""
    return {w for w, pred in _WINDOW_PREDICATES.items() if pred(when, now)}


# ---------------------------------------------------------------------------
# pt-BR formatting
# ---------------------------------------------------------------------------

def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def format_short_date(when: datetime) -> str:
    """E.g. ``Sáb, 7 de fev``."""
    weekday = _WEEKDAYS_SHORT[when.weekday()]
    month = _MONTHS[when.month - 1][:3]
    return _capitalize(f"{weekday}, {when.day} de {month}")


def format_full_date(when: datetime) -> str:
    """E.g. ``Sábado, 7 de fevereiro``."""
    weekday = _WEEKDAYS[when.weekday()]
    return _capitalize(f"{weekday}, {when.day} de {_MONTHS[when.month - 1]}")


def format_time(when: datetime) -> str:
    return f"{when.hour:02d}:{when.minute:02d}"


def format_full_date_time(when: datetime) -> str:
    """E.g. ``Sábado, 7 de fevereiro de 2026 às 19:00``."""
    return f"{format_full_date(when)} de {when.year} às {format_time(when)}"


def format_price(price: float | None) -> str:
    if not price:
        return "Gratuito"
    whole, cents = f"{price:,.2f}".split(".")
    return f"R$ {whole.replace(',', '.')},{cents}"
