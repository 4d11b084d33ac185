# FILE: crew-sync/crew_sync/merger.py
from __future__ import annotations

from typing import Dict, Iterable, List, Union

# Column names of the VMS crew application CSV export
APPLICATION_COLUMNS = {
    "FIRST_NAME": "First Name",
    "LAST_NAME": "Last Name",
    "EMAIL": "Email Address",
    "PHONE": "Phone Number",
    "RANK": "Rank",
    "CREW": "Crew",
    "FRIENDS": "Friends",
    "LOCAL_OOT": "Local or OOT?",
    "STATUS": "Status",
    "SHIRT_SIZE": "Shirt size",
    "ID": "ID",
}

DAYS_PREFIX = "Days: "
PROFESSIONALS_MARKER = "Professionals"

Rank = Union[int, str]

def identity_key(app: Dict) -> str:
    c = APPLICATION_COLUMNS
    return f"{app.get(c['FIRST_NAME'])} {app.get(c['LAST_NAME'])} - {app.get(c['EMAIL'])} - {app.get(c['PHONE'])}"

def display_name(app: Dict) -> str:
    c = APPLICATION_COLUMNS
    return f"{app.get(c['FIRST_NAME'])} {app.get(c['LAST_NAME'])}"

def _rank(value) -> Rank:
    s = str(value if value is not None else "").strip()
    return int(s) if s.isdigit() else s

def crew_rank(app: Dict) -> Dict[Rank, str]:
    return {_rank(app.get(APPLICATION_COLUMNS["RANK"])): app.get(APPLICATION_COLUMNS["CREW"])}

def rank_sort_key(rank: Rank):
    return (0, rank, "") if isinstance(rank, int) else (1, 0, str(rank))

def merge_applications(raw_apps: Iterable[Dict]) -> List[Dict]:
    """
    Collapse per-crew CSV records of the same person into one application.

    - "Crew" becomes {rank: crew name}, accumulated over every record of the person
    - "Rank" is always None on the merged record
    - base fields come from the existing record if its lowest-ranked crew is a Professionals
      crew, otherwise from the incoming record
    - output keeps first-seen order of identity keys
    """
    crew_col = APPLICATION_COLUMNS["CREW"]
    merged: Dict[str, Dict] = {}
    for app in raw_apps:
        key = identity_key(app)
        existing = merged.get(key)
        existing_crews: Dict[Rank, str] = existing[crew_col] if existing else {}
        first_rank = min(existing_crews, key=rank_sort_key) if existing_crews else None
        first_crew = existing_crews.get(first_rank) or ""
        base = existing if PROFESSIONALS_MARKER in first_crew else app
        merged[key] = {
            **base,
            APPLICATION_COLUMNS["RANK"]: None,
            crew_col: {**existing_crews, **crew_rank(app)},
        }
    return list(merged.values())
