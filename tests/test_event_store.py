"""Tests for the filter/sort pipeline and EventStore providers."""
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from agenda.event_store import (
    CacheError,
    DiskProvider,
    EventStore,
    MemoryProvider,
    apply_filters,
    title_sort_key,
)
from agenda.filter_state import FilterState, decode, set_search
from agenda.models import Category, DateWindow, Event

NOW = datetime(2025, 1, 8, 10, 0)  # Wednesday
ALL = FilterState(date_window=DateWindow.ALL)


def _event(event_id: str, title: str, date: str, **kwargs) -> Event:
    kwargs.setdefault("category", Category.SHOW)
    return Event(id=event_id, title=title, date=date, **kwargs)


def _ids(result) -> list[str]:
    return [e.id for e in result.events]


# ---------------------------------------------------------------------------
# apply_filters
# ---------------------------------------------------------------------------

class TestApplyFilters:
    def test_reference_scenario(self):
        events = [
            _event("b", "Show B", "2025-01-10", price=50.0),
            _event("past", "Show Antigo", "2025-01-05"),
            _event("a", "Show A", "2025-01-10"),
        ]
        result = apply_filters(events, ALL, NOW)
        assert _ids(result) == ["a", "b"]
        assert result.total_count == 2
        assert result.filtered_count == result.total_count
        assert result.has_active_filters is False

    def test_earlier_today_still_listed(self):
        events = [_event("early", "Café", "2025-01-08", time="07:00")]
        assert _ids(apply_filters(events, ALL, NOW)) == ["early"]

    def test_sorted_by_full_datetime(self):
        events = [
            _event("night", "A Noite", "2025-01-09", time="21:00"),
            _event("noon", "Z Meio-dia", "2025-01-09", time="12:00"),
            _event("midnight", "M Data", "2025-01-09"),
        ]
        assert _ids(apply_filters(events, ALL, NOW)) == ["midnight", "noon", "night"]

    def test_title_tie_break_uses_ptbr_collation(self):
        events = [
            _event("z", "Zabumba", "2025-01-09"),
            _event("o-acc", "Ópera", "2025-01-09"),
            _event("a-low", "arraiá", "2025-01-09"),
            _event("o", "Oficina", "2025-01-09"),
        ]
        assert _ids(apply_filters(events, ALL, NOW)) == ["a-low", "o", "o-acc", "z"]

    def test_title_tie_break_case_accents_and_punctuation(self):
        titles = ["Show a", "show a", "Zorba", "«Hamlet»", "è", "é"]
        events = [_event(title, title, "2025-01-09") for title in titles]
        assert _ids(apply_filters(events, ALL, NOW)) == [
            "«Hamlet»", "é", "è", "show a", "Show a", "Zorba",
        ]

    def test_aware_now_uses_city_day(self):
        # 01:00 UTC on the 9th is still the 8th in Maceió.
        aware = datetime(2025, 1, 9, 1, 0, tzinfo=timezone.utc)
        events = [_event("x", "Hoje", "2025-01-08", time="20:00")]
        assert _ids(apply_filters(events, FilterState(), aware)) == ["x"]

    def test_unparseable_dates_skipped(self):
        events = [
            _event("ok", "Ok", "2025-01-09"),
            _event("bad", "Bad", "sexta que vem"),
            _event("empty", "Empty", ""),
        ]
        result = apply_filters(events, ALL, NOW)
        assert _ids(result) == ["ok"]
        assert result.total_count == 1

    def test_search_matches_title_location_description(self):
        events = [
            _event("t", "Noite do JAZZ", "2025-01-09"),
            _event("l", "Show", "2025-01-09", location="Jazz Bar"),
            _event("d", "Outro", "2025-01-09", description="banda de jazz"),
            _event("n", "Forró", "2025-01-09"),
        ]
        state = FilterState(search_text="  jazz ", date_window=DateWindow.ALL)
        result = apply_filters(events, state, NOW)
        assert sorted(_ids(result)) == ["d", "l", "t"]
        assert result.total_count == 4
        assert result.filtered_count == 3

    def test_category_filter(self):
        events = [
            _event("s", "Show", "2025-01-09"),
            _event("t", "Peça", "2025-01-09", category=Category.TEATRO),
            _event("c", "Filme", "2025-01-09", category=Category.CINEMA),
        ]
        state = FilterState(categories=(Category.TEATRO, Category.CINEMA), date_window=DateWindow.ALL)
        assert _ids(apply_filters(events, state, NOW)) == ["c", "t"]

    def test_date_window_filter(self):
        events = [
            _event("today", "Hoje", "2025-01-08", time="22:00"),
            _event("sat", "Sábado", "2025-01-11"),
            _event("next", "Próxima", "2025-01-14"),
        ]
        assert _ids(apply_filters(events, FilterState(), NOW)) == ["today"]
        weekend = FilterState(date_window=DateWindow.WEEKEND)
        assert _ids(apply_filters(events, weekend, NOW)) == ["sat"]
        next_week = FilterState(date_window=DateWindow.NEXT_WEEK)
        assert _ids(apply_filters(events, next_week, NOW)) == ["next"]

    def test_filters_combine(self):
        events = [
            _event("hit", "Samba", "2025-01-11", category=Category.BARZINHO),
            _event("wrong-cat", "Samba", "2025-01-11"),
            _event("wrong-day", "Samba", "2025-01-14", category=Category.BARZINHO),
            _event("wrong-text", "Pagode", "2025-01-11", category=Category.BARZINHO),
        ]
        state = FilterState(
            search_text="samba",
            categories=(Category.BARZINHO,),
            date_window=DateWindow.WEEKEND,
        )
        result = apply_filters(events, state, NOW)
        assert _ids(result) == ["hit"]
        assert result.has_active_filters is True

    def test_search_through_codec_ignores_today(self):
        events = [_event("later", "Jazz", "2025-02-01")]
        state = set_search(decode({}), "jazz")
        assert _ids(apply_filters(events, state, NOW)) == ["later"]

    def test_empty_result(self):
        result = apply_filters([], FilterState(), NOW)
        assert result.events == []
        assert result.total_count == 0

    def test_input_not_mutated(self):
        events = [
            _event("b", "B", "2025-01-10"),
            _event("a", "A", "2025-01-09"),
        ]
        snapshot = list(events)
        apply_filters(events, ALL, NOW)
        assert events == snapshot

    def test_deterministic(self):
        events = [_event(str(i), f"Evento {i % 3}", "2025-01-09") for i in range(9)]
        first = _ids(apply_filters(events, ALL, NOW))
        assert all(_ids(apply_filters(events, ALL, NOW)) == first for _ in range(3))
        assert [e.title for e in apply_filters(events, ALL, NOW).events] == sorted(
            e.title for e in events
        )


class TestTitleSortKey:
    def test_accents_compared_after_base_letters(self):
        assert title_sort_key("ópera") < title_sort_key("opus")
        assert title_sort_key("opera") < title_sort_key("Ópera")

    def test_lowercase_before_uppercase(self):
        assert title_sort_key("show a") < title_sort_key("Show a")

    def test_acute_before_grave(self):
        assert title_sort_key("é") < title_sort_key("è")

    def test_punctuation_before_letters(self):
        assert title_sort_key("«Hamlet»") < title_sort_key("Abacaxi")


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------

class TestDiskProvider:
    def test_missing_file(self, tmp_path):
        provider = DiskProvider(tmp_path / "events.json")
        with pytest.raises(CacheError, match="agenda refresh"):
            provider.load()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CacheError, match="Cannot read"):
            DiskProvider(path).load()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "sub" / "events.json"
        provider = DiskProvider(path)
        events = [_event("a", "Ópera", "2025-01-09", time="19:00", price=30.0, ticket_url="https://x")]
        assert provider.save(events, NOW) == path
        assert provider.load() == events
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["events"][0]["ticketUrl"] == "https://x"

    def test_bare_list_accepted(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(
            json.dumps([{"id": "1", "title": "Show", "category": "SHOW", "date": "2025-01-09",
                         "price": None, "ticketUrl": None}]),
            encoding="utf-8",
        )
        [event] = DiskProvider(path).load()
        assert event.id == "1"
        assert event.is_free

    def test_staleness(self, tmp_path):
        provider = DiskProvider(tmp_path / "events.json")
        assert provider.check_staleness(NOW).is_stale is False
        provider.save([], NOW - timedelta(days=3))
        info = provider.check_staleness(NOW)
        assert info.is_stale is True
        assert info.age.days == 3

    def test_fresh_file_not_stale(self, tmp_path):
        provider = DiskProvider(tmp_path / "events.json")
        provider.save([], NOW - timedelta(hours=1))
        assert provider.check_staleness(NOW).is_stale is False


class TestEventStore:
    def test_query_and_get_by_id(self):
        events = [
            _event("a", "A", "2025-01-08"),
            _event("old", "Old", "2024-12-01"),
        ]
        store = EventStore(MemoryProvider(events))
        assert [e.id for e in store.query(FilterState(), NOW).events] == ["a"]
        # Detail lookup does not hide past events.
        assert store.get_by_id("old").title == "Old"
        assert store.get_by_id("missing") is None

    def test_save_replaces(self):
        store = EventStore(MemoryProvider([]))
        store.save([_event("a", "A", "2025-01-09")], NOW)
        assert store.get_by_id("a") is not None
