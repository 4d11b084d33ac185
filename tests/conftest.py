# Shared pytest fixtures
from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from crew_sync.questions import GENERAL_SUPPORT, PROFESSIONAL
from crew_sync.sheets import SheetRow

PRO_CREW = "Film Crew: Professionals"
SUP_CREW = "Film Crew: General Support"


class MemoryRepository:
    """In-memory stand-in for SheetsRepository."""
    def __init__(self, rows: Optional[List[Dict[str, str]]] = None):
        self.rows: List[SheetRow] = [SheetRow(i, r) for i, r in enumerate(rows or [], start=2)]
        self.added: List[SheetRow] = []
        self.saved: List[SheetRow] = []

    def add_row(self, values):
        row = SheetRow(len(self.rows) + 2, {k: (v or "") for k, v in values.items()})
        self.rows.append(row)
        self.added.append(row)
        return row

    def save_row(self, row):
        self.saved.append(row)


def raw_app(**overrides) -> Dict[str, str]:
    app = {
        "ID": "101",
        "First Name": "Ada",
        "Last Name": "Lovelace",
        "Email Address": "ada@example.com",
        "Phone Number": "(503) 555-1234",
        "Rank": "1",
        "Crew": PRO_CREW,
        "Friends": "Charles",
        "Local or OOT?": "Local",
        "Status": "accepted",
        "Shirt size": "M",
        "Days: Sat, July 30": "TRUE",
        "Days: Sun, July 31": "FALSE",
    }
    app.update(overrides)
    return app


@pytest.fixture()
def make_raw_app():
    return raw_app


@pytest.fixture()
def memory_repo():
    return MemoryRepository


@pytest.fixture()
def pro_answers() -> Dict[str, Optional[str]]:
    return {
        PROFESSIONAL.shift_rank_8_2: "3rd",
        PROFESSIONAL.shift_rank_12_7: "1st",
        PROFESSIONAL.shift_rank_5_12: "2nd",
        PROFESSIONAL.shift_rank_7_3: "4th",
        PROFESSIONAL.returning: "Yes",
        PROFESSIONAL.history: "Two years, camera op",
        PROFESSIONAL.dates: "Friday, July 29th, Monday, August 1st",
        PROFESSIONAL.skill: "Professional",
        PROFESSIONAL.experience: "Documentary shooter",
        PROFESSIONAL.portfolio: "https://example.com/reel",
        PROFESSIONAL.interests: "Camera, Editing",
    }


@pytest.fixture()
def sup_answers() -> Dict[str, Optional[str]]:
    return {
        GENERAL_SUPPORT.shift_rank_8_2: "1",
        GENERAL_SUPPORT.shift_rank_12_7: "2",
        GENERAL_SUPPORT.shift_rank_5_12: "3",
        GENERAL_SUPPORT.shift_rank_7_3: "4",
        GENERAL_SUPPORT.returning: "No",
        GENERAL_SUPPORT.experience: "Ran a film club",
    }
