#!/usr/bin/env python3
"""
Run agenda CLI flows under debugger.

Usage from IntelliJ IDEA / PyCharm:
- Open this file and run with the debugger.
- Set breakpoints in:
  - filter_state.py
  - event_store.py
  - command_query.py
"""

import sys

from agenda.cli import main


if __name__ == "__main__":
    # Change argv to simulate different CLI invocations.

    # Default listing (today):
    sys.argv = ["agenda", "--debug"]

    # Weekend shows at a fixed reference time:
    # sys.argv = ["agenda", "--now", "2025-01-08T10:00", "--date", "weekend", "--category", "SHOW"]

    # Shared link:
    # sys.argv = ["agenda", "--query", "?search=jazz&date=all"]

    # JSON output:
    # sys.argv = ["agenda", "--json", "--date", "this-week"]

    # Detail view:
    # sys.argv = ["agenda", "show", "evt-1"]

    # Refresh from a CSV export:
    # sys.argv = ["agenda", "refresh", "--csv", "eventos.csv"]

    raise SystemExit(main())
