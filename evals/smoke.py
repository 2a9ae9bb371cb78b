"""Smoke eval set: listing scenarios around one reference Wednesday."""

from __future__ import annotations

from datetime import datetime

from pydantic_evals import Case, Dataset

from agenda.filter_state import FilterState, decode, set_search
from agenda.models import Category, DateWindow

from .evaluators import NoPastEvents, OrderedIdsMatch
from .helpers import make_event
from .models import ScenarioInput

# Wednesday 2025-01-08, 10:00 local.
NOW = datetime(2025, 1, 8, 10, 0)

FIXTURE_EVENTS = [
    make_event("past", "Festa de Reis", "2025-01-05"),
    make_event("wed-early", "Roda de Samba", "2025-01-08", time="08:00", category=Category.BARZINHO),
    make_event("fri-b", "Show B", "2025-01-10", price=50),
    make_event("fri-a", "Show A", "2025-01-10"),
    make_event("sat", "Orquestra na Praia", "2025-01-11", time="18:00", location="Pajuçara"),
    make_event("sun", "Ópera ao ar livre", "2025-01-12", category=Category.TEATRO),
    make_event("next-mon", "Cine Clube", "2025-01-13", category=Category.CINEMA),
    make_event("next-sat", "Jazz no Jaraguá", "2025-01-18", description="Noite de jazz"),
    make_event("broken", "Data inválida", "10/01/2025"),
]

dataset = Dataset(
    name="smoke",
    cases=[
        Case(
            name="all_upcoming_sorted",
            inputs=ScenarioInput(
                events=FIXTURE_EVENTS,
                state=FilterState(date_window=DateWindow.ALL),
                now=NOW,
            ),
            expected_output=["wed-early", "fri-a", "fri-b", "sat", "sun", "next-mon", "next-sat"],
        ),
        Case(
            name="default_link_is_today",
            inputs=ScenarioInput(events=FIXTURE_EVENTS, state=decode({}), now=NOW),
            expected_output=["wed-early"],
        ),
        Case(
            name="weekend",
            inputs=ScenarioInput(
                events=FIXTURE_EVENTS,
                state=FilterState(date_window=DateWindow.WEEKEND),
                now=NOW,
            ),
            expected_output=["sat", "sun"],
        ),
        Case(
            name="next_week",
            inputs=ScenarioInput(
                events=FIXTURE_EVENTS,
                state=FilterState(date_window=DateWindow.NEXT_WEEK),
                now=NOW,
            ),
            expected_output=["next-mon", "next-sat"],
        ),
        Case(
            name="search_lifts_today",
            inputs=ScenarioInput(
                events=FIXTURE_EVENTS,
                state=set_search(decode({}), "JAZZ"),
                now=NOW,
            ),
            expected_output=["next-sat"],
        ),
        Case(
            name="category_this_week",
            inputs=ScenarioInput(
                events=FIXTURE_EVENTS,
                state=decode({"categories": "TEATRO,SHOW", "date": "this-week"}),
                now=NOW,
            ),
            expected_output=["fri-a", "fri-b", "sat", "sun"],
        ),
    ],
    evaluators=[OrderedIdsMatch(), NoPastEvents()],
)
