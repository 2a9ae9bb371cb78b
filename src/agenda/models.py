"""Shared domain models for agenda."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Category(str, Enum):
    SHOW = "SHOW"
    TEATRO = "TEATRO"
    FESTIVAL = "FESTIVAL"
    STANDUP = "STANDUP"
    EXPOSICAO = "EXPOSICAO"
    CINEMA = "CINEMA"
    DANCA = "DANCA"
    BARZINHO = "BARZINHO"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @classmethod
    def from_token(cls, token: str) -> Category | None:
        """Case-insensitive lookup; ``None`` for unknown tokens."""
        try:
            return cls(token.strip().upper())
        except ValueError:
            return None


CATEGORY_LABELS: dict[Category, str] = {
    Category.SHOW: "Show",
    Category.TEATRO: "Teatro",
    Category.FESTIVAL: "Festival",
    Category.STANDUP: "Stand-up",
    Category.EXPOSICAO: "Exposição",
    Category.CINEMA: "Cinema",
    Category.DANCA: "Dança",
    Category.BARZINHO: "Barzinho",
}

DEFAULT_CATEGORY = Category.SHOW


class DateWindow(str, Enum):
    """Relative date windows, valued by their query-string token."""

    ALL = "all"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this-week"
    WEEKEND = "weekend"
    NEXT_WEEK = "next-week"

    @property
    def label(self) -> str:
        return DATE_WINDOW_LABELS[self]


DATE_WINDOW_LABELS: dict[DateWindow, str] = {
    DateWindow.ALL: "Qualquer data",
    DateWindow.TODAY: "Hoje",
    DateWindow.TOMORROW: "Amanhã",
    DateWindow.THIS_WEEK: "Esta semana",
    DateWindow.WEEKEND: "Este fim de semana",
    DateWindow.NEXT_WEEK: "Semana que vem",
}


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    category: Category
    date: str
    time: str | None = None
    description: str = ""
    location: str = ""
    address: str = ""
    thumbnail: str | None = None
    price: float | None = None
    ticket_url: str | None = None

    @property
    def is_free(self) -> bool:
        return not self.price

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category.value,
            "thumbnail": self.thumbnail or "",
            "date": self.date,
            "time": self.time,
            "description": self.description,
            "location": self.location,
            "address": self.address,
            "price": self.price,
            "ticketUrl": self.ticket_url,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> Event:
        price = d.get("price")
        return Event(
            id=str(d["id"]),
            title=d["title"],
            category=Category.from_token(d.get("category") or "") or DEFAULT_CATEGORY,
            date=d["date"],
            time=d.get("time") or None,
            description=d.get("description") or "",
            location=d.get("location") or "",
            address=d.get("address") or "",
            thumbnail=d.get("thumbnail") or None,
            price=float(price) if price is not None else None,
            ticket_url=d.get("ticketUrl") or None,
        )
