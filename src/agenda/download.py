"""Event sheet download.

This module owns all network I/O: fetching the spreadsheet as CSV and
splitting it into rows.  Parsing rows into events lives in ``ingest``.
"""

from __future__ import annotations

import csv
import io
import pathlib
import random
import time
import urllib.error
import urllib.parse
import urllib.request

from agenda.config import REQUEST_TIMEOUT_SEC, SHEET_CSV_URL_TEMPLATE


def sheet_csv_url(spreadsheet_id: str, sheet_name: str) -> str:
    return SHEET_CSV_URL_TEMPLATE.format(
        spreadsheet_id=urllib.parse.quote(spreadsheet_id, safe=""),
        sheet_name=urllib.parse.quote(sheet_name, safe=""),
    )


def _request_with_retry(
    url: str,
    *,
    headers: dict[str, str],
    timeout_sec: int = REQUEST_TIMEOUT_SEC,
    retries: int = 5,
    backoff_base_sec: float = 0.5,
) -> bytes:
    last_error: Exception | None = None
    for attempt in range(retries + 1):
        req = urllib.request.Request(url, headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=timeout_sec) as resp:
                return resp.read()
        except urllib.error.HTTPError as err:
            last_error = err
            if err.code in (429, 500, 502, 503, 504):
                if attempt < retries:
                    retry_after = err.headers.get("Retry-After")
                    if retry_after and retry_after.isdigit():
                        delay = float(retry_after)
                    else:
                        delay = backoff_base_sec * (2**attempt) + random.uniform(0.0, 0.3)
                    time.sleep(delay)
                    continue
            raise
        except urllib.error.URLError as err:
            last_error = err
            if attempt < retries:
                delay = backoff_base_sec * (2**attempt) + random.uniform(0.0, 0.3)
                time.sleep(delay)
                continue
            raise

    if last_error is not None:
        raise last_error
    raise RuntimeError("_request_with_retry failed without explicit error")


def parse_csv(text: str) -> list[list[str]]:
    return [row for row in csv.reader(io.StringIO(text))]


def download_rows(url: str, *, retries: int = 5) -> list[list[str]]:
    """Fetch a CSV export and return its rows, header included."""
    payload = _request_with_retry(
        url,
        headers={
            "accept": "text/csv,*/*;q=0.8",
            "user-agent": "Mozilla/5.0",
        },
        retries=retries,
    )
    return parse_csv(payload.decode("utf-8-sig"))


def read_csv_rows(path: pathlib.Path) -> list[list[str]]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return [row for row in csv.reader(f)]
