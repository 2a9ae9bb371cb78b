"""Run a filter pipeline eval set: ``python -m evals.runner --set smoke``."""

from __future__ import annotations

import argparse
import importlib
import sys
import tempfile
from pathlib import Path

import agenda.config as config
from agenda.event_store import DiskProvider, EventStore

from .helpers import write_events_file
from .models import ScenarioInput


def list_event_ids(inp: ScenarioInput) -> list[str]:
    """Write the scenario's events to a scratch data dir and query them."""
    with tempfile.TemporaryDirectory() as tmp:
        tmp_path = Path(tmp)
        write_events_file(tmp_path, inp.events, fetched_at=inp.now)
        config.configure(data_dir=str(tmp_path))
        try:
            store = EventStore(DiskProvider(config.get_events_file()))
            return [e.id for e in store.query(inp.state, inp.now).events]
        finally:
            config._reset()


def main() -> int:
    parser = argparse.ArgumentParser(description="Run filter pipeline eval sets")
    parser.add_argument("--set", dest="eval_set", default="smoke", help="Eval set module under evals/")
    parser.add_argument("--verbose", action="store_true", help="Show evaluator reasons")
    args = parser.parse_args()

    try:
        module = importlib.import_module(f"{__package__}.{args.eval_set}")
    except ModuleNotFoundError:
        print(f"Error: eval set '{args.eval_set}' not found", file=sys.stderr)
        return 1

    report = module.dataset.evaluate_sync(list_event_ids)
    report.print(include_reasons=args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
