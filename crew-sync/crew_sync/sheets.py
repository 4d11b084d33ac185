# FILE: crew-sync/crew_sync/sheets.py
"""
sheets.py
Read and write the volunteer tracking sheet (Google Sheets v4 values API).

The repository loads every row once, hands out mutable SheetRow objects and
writes single rows back. Rows added during the run are appended to the loaded
list so later applications can match them.

Quota / rate-limit responses are raised as QuotaExceededError; the sync loop
decides whether to wait and retry.
"""
from __future__ import annotations

import re
import time
import logging
from typing import Dict, List, Mapping, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

LOG = logging.getLogger("crew_sync.sheets")

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

QUOTA_MARKER = "Quota exceeded"

_A1_ROW_RE = re.compile(r"![A-Z]+(\d+)")

class QuotaExceededError(RuntimeError):
    """The Sheets API refused a call because the per-minute quota is spent."""

def is_quota_error(exc: BaseException) -> bool:
    return isinstance(exc, QuotaExceededError) or QUOTA_MARKER in str(exc)

def sheets_service(creds_path: str):
    creds = service_account.Credentials.from_service_account_file(creds_path, scopes=SCOPES)
    return build("sheets", "v4", credentials=creds, cache_discovery=False)

def _col_letter(n: int) -> str:
    res = ""
    while n:
        n, r = divmod(n - 1, 26)
        res = chr(65 + r) + res
    return res

def _quote_title(title: str) -> str:
    return "'" + title.replace("'", "''") + "'"

def _row_number_of(a1_range: Optional[str]) -> Optional[int]:
    """Row number of an A1 range: 'Film Crew'!A7:K7 -> 7."""
    if not isinstance(a1_range, str):
        return None
    m = _A1_ROW_RE.search(a1_range)
    return int(m.group(1)) if m else None

class SheetRow(dict):
    """
    Header -> cell text for one sheet row; row_number is 1-based (row 1 is the header).
    `cells` keeps the row as read, including columns without a usable header.
    """
    def __init__(self, row_number: int, values: Mapping[str, str], cells: Optional[List[str]] = None):
        super().__init__(values)
        self.row_number = row_number
        self.cells: List[str] = list(cells or [])

class SheetsRepository:
    def __init__(self, spreadsheet_id: str, sheet_index: int = 0, *, service=None,
                 creds_path: Optional[str] = None, dry_run: bool = False,
                 rate_limit_seconds: float = 0.5):
        if service is None:
            if not creds_path:
                raise RuntimeError("GOOGLE_APPLICATION_CREDENTIALS not set")
            service = sheets_service(creds_path)
        self.spreadsheet_id = spreadsheet_id
        self.sheet_index = sheet_index
        self.dry_run = dry_run
        self._spreadsheets = service.spreadsheets()
        self._values = self._spreadsheets.values()
        self._rate_limit_seconds = rate_limit_seconds
        self._last_call_ts = 0.0
        self.title: Optional[str] = None
        self.headers: List[str] = []
        self.rows: List[SheetRow] = []
        self._columns: Dict[str, int] = {}    # header -> first column index using it
        self._next_row_number = 2
        self._missing_warned: set = set()

    # --------- API plumbing ---------

    def _rate_limit(self):
        if self._rate_limit_seconds <= 0: return
        wait = self._rate_limit_seconds - (time.time() - self._last_call_ts)
        if wait > 0: time.sleep(wait)
        self._last_call_ts = time.time()

    def _execute(self, req):
        self._rate_limit()
        try:
            return req.execute(num_retries=0)
        except HttpError as e:
            status = getattr(e, "status_code", None)
            if status is None and hasattr(e, "resp"):
                status = getattr(e.resp, "status", None)
            text = str(e).lower()
            if status == 429 or "quota" in text or "rate limit" in text:
                raise QuotaExceededError(f"{QUOTA_MARKER}: {e}") from e
            raise

    def _row_values(self, row: SheetRow) -> List[str]:
        missing = [k for k in row if k not in self._columns and k not in self._missing_warned]
        if missing:
            LOG.warning("Sheet '%s' has no column(s) %s; values not written.", self.title, missing)
            self._missing_warned.update(missing)
        # start from the cells as read so unheaded and duplicate-header columns survive
        out = [str(c or "") for c in row.cells[:len(self.headers)]]
        out += [""] * (len(self.headers) - len(out))
        for h, j in self._columns.items():
            out[j] = str(row.get(h, "") or "")
        return out

    def _shift_rows_from(self, row_number: int) -> None:
        for r in self.rows:
            if r.row_number >= row_number:
                r.row_number += 1

    # --------- Public API ---------

    def load_rows(self) -> List[SheetRow]:
        meta = self._execute(self._spreadsheets.get(spreadsheetId=self.spreadsheet_id, includeGridData=False))
        sheets = meta.get("sheets", [])
        if self.sheet_index >= len(sheets):
            raise ValueError(f"Spreadsheet has no sheet at index {self.sheet_index}")
        self.title = sheets[self.sheet_index]["properties"]["title"]
        LOG.info("Loaded doc: %s / %s", meta.get("properties", {}).get("title", self.spreadsheet_id), self.title)

        resp = self._execute(self._values.get(spreadsheetId=self.spreadsheet_id, range=f"{_quote_title(self.title)}!A1:ZZ"))
        values = resp.get("values", []) or []
        self.headers = [h.strip() for h in values[0]] if values else []
        self._columns = {}
        for j, h in enumerate(self.headers):
            if h:
                self._columns.setdefault(h, j)
        dupes = sorted({h for h in self.headers if h and self.headers.count(h) > 1})
        if dupes:
            LOG.warning("Sheet '%s' repeats header(s) %s; only the first of each is read and written.", self.title, dupes)

        self.rows = []
        for i, raw in enumerate(values[1:], start=2):
            cells = list(raw)
            self.rows.append(SheetRow(i, {h: (cells[j] if j < len(cells) else "") for h, j in self._columns.items()}, cells))
        self._next_row_number = len(values) + 1 if values else 2
        LOG.info("Loaded %d row(s) from '%s'.", len(self.rows), self.title)
        return self.rows

    def add_row(self, values: Mapping[str, Optional[str]]) -> SheetRow:
        row = SheetRow(self._next_row_number, {h: "" for h in self._columns})
        row.update({k: (v or "") for k, v in values.items()})
        if self.dry_run:
            LOG.info("DRY_RUN: would append row %d", row.row_number)
        else:
            resp = self._execute(self._values.append(
                spreadsheetId=self.spreadsheet_id, range=f"{_quote_title(self.title)}!A:ZZ",
                valueInputOption="RAW", insertDataOption="INSERT_ROWS",
                body={"values": [self._row_values(row)]},
            ))
            placed = _row_number_of((resp or {}).get("updates", {}).get("updatedRange"))
            if placed is not None and placed != row.row_number:
                LOG.warning("Sheets placed the new row at %d instead of %d.", placed, row.row_number)
                row.row_number = placed
            # INSERT_ROWS pushes everything at or below the new row down by one
            self._shift_rows_from(row.row_number)
        self._next_row_number = max(self._next_row_number, row.row_number) + 1
        self.rows.append(row)
        return row

    def save_row(self, row: SheetRow) -> None:
        if self.dry_run:
            LOG.info("DRY_RUN: would rewrite row %d", row.row_number)
            return
        n = row.row_number
        rng = f"{_quote_title(self.title)}!A{n}:{_col_letter(len(self.headers))}{n}"
        self._execute(self._values.update(
            spreadsheetId=self.spreadsheet_id, range=rng, valueInputOption="RAW",
            body={"values": [self._row_values(row)]},
        ))
