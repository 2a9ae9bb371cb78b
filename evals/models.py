"""Domain-specific input model for eval cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from agenda.filter_state import FilterState
from agenda.models import Event


@dataclass
class ScenarioInput:
    events: list[Event]
    state: FilterState
    now: datetime
