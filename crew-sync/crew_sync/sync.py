# FILE: crew-sync/crew_sync/sync.py
"""
Drive every merged application through classify -> write, one at a time.

Applications are never processed concurrently: rows added or updated for one
application must be visible when the next one is matched.
"""
from __future__ import annotations

import time
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from crew_sync.dates import DEFAULT_YEAR
from crew_sync.merger import APPLICATION_COLUMNS, identity_key
from crew_sync.rows import ADDED, AMBIGUOUS, SKIPPED, UPDATED, classify
from crew_sync.sheets import QuotaExceededError, is_quota_error

LOG = logging.getLogger("crew_sync.sync")

FAILED = "failed"

AnswersFetcher = Callable[[str], Dict[str, Optional[str]]]

class RowRepository(Protocol):
    rows: List[dict]
    def add_row(self, values: Dict[str, Optional[str]]) -> dict: ...
    def save_row(self, row) -> None: ...

@dataclass
class SyncReport:
    counts: Dict[str, int] = field(default_factory=lambda: {ADDED: 0, UPDATED: 0, SKIPPED: 0, AMBIGUOUS: 0, FAILED: 0})
    failed: List[Tuple[str, str]] = field(default_factory=list)   # (identity key, reason)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def record(self, key: str, outcome: str, reason: str = "") -> None:
        self.counts[outcome] = self.counts.get(outcome, 0) + 1
        if outcome in (FAILED, AMBIGUOUS):
            self.failed.append((key, reason or outcome))

    def summary(self) -> str:
        return ", ".join(f"{k}={v}" for k, v in self.counts.items())

def sync_application(app: Dict, repo: RowRepository, fetch_answers: AnswersFetcher,
                     year: int = DEFAULT_YEAR) -> str:
    key = identity_key(app)
    answers = fetch_answers(app.get(APPLICATION_COLUMNS["ID"]))
    decision = classify(app, answers, repo.rows, year)

    if decision.action == AMBIGUOUS:
        LOG.error("Multiple matches (%d) for %s", decision.matches, key)
    elif decision.action == UPDATED:
        row = decision.row
        before = dict(row)
        row.update(decision.values)
        try:
            repo.save_row(row)
        except Exception:
            # leave the row as the sheet still has it, so a retry sees the difference again
            row.clear()
            row.update(before)
            raise
        LOG.info("Updated %s", key)
    elif decision.action == ADDED:
        repo.add_row(decision.values)
        LOG.info("Added %s", key)
    else:
        LOG.info("Skipped %s", key)
    return decision.action

def handle_application(app: Dict, repo: RowRepository, fetch_answers: AnswersFetcher, *,
                       year: int = DEFAULT_YEAR, max_attempts: int = 5, retry_seconds: float = 30.0,
                       sleep: Callable[[float], None] = time.sleep) -> str:
    """
    sync_application with a bounded wait-and-retry on quota errors.
    Raises QuotaExceededError once `max_attempts` have all hit the quota.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return sync_application(app, repo, fetch_answers, year)
        except Exception as e:
            if not is_quota_error(e):
                raise
            if attempt >= max_attempts:
                LOG.error("Google API quota still exceeded after %d attempt(s); giving up.", attempt)
                if isinstance(e, QuotaExceededError):
                    raise
                raise QuotaExceededError(str(e)) from e
            LOG.warning("Google API quota exceeded. Waiting %.0fs for refresh (attempt %d/%d).",
                        retry_seconds, attempt, max_attempts)
            sleep(retry_seconds)

def sync_all(apps: Iterable[Dict], repo: RowRepository, fetch_answers: AnswersFetcher, *,
             year: int = DEFAULT_YEAR, max_attempts: int = 5, retry_seconds: float = 30.0,
             sleep: Callable[[float], None] = time.sleep) -> SyncReport:
    report = SyncReport()
    for app in apps:
        key = identity_key(app)
        try:
            outcome = handle_application(app, repo, fetch_answers, year=year, max_attempts=max_attempts,
                                         retry_seconds=retry_seconds, sleep=sleep)
        except QuotaExceededError:
            raise
        except Exception as e:
            LOG.exception("Failed to sync %s", key)
            report.record(key, FAILED, f"{type(e).__name__}: {e}")
            continue
        report.record(key, outcome)
    return report
