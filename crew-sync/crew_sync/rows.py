# FILE: crew-sync/crew_sync/rows.py
"""
Match a merged application against tracking-sheet rows and compute the row to write.

Review notes mix two kinds of lines:
  "* New"                   -> generated here, recomputed on every run
  "Said they love bacon"    -> typed by a reviewer, always kept
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from crew_sync.dates import DEFAULT_YEAR, crew_days, format_date_list, rank_shifts
from crew_sync.merger import APPLICATION_COLUMNS, DAYS_PREFIX, display_name, rank_sort_key
from crew_sync.normalize import phones_equal, texts_equal
from crew_sync.questions import CREW_SHORTNAMES, is_new, question_set_for

EMAIL_COL = "EMAIL"
PHONE_COL = "PHONE"

ADDED = "added"
UPDATED = "updated"
SKIPPED = "skipped"
AMBIGUOUS = "ambiguous"

_AUTO_NOTE_RE = re.compile(r"^\*\s.+")

Answers = Mapping[str, Optional[str]]

# ---------------- Column names ----------------
# "{year}" is filled with the season year when rows are built

NAME_COL         = "VOLUNTEERS"
NOTES_COL        = "{year} Notes"
AVAILABILITY_COL = "{year} Availability (times in order of preference)"
FRIENDS_COL      = "{year} Schedule with..."
LOCAL_COL        = "{year} Local?"
ACCEPTED_COL     = "{year} Accepted?"
STATUS_COL       = "{year} Status"
SHIRT_COL        = "Shirt Size"
REVIEW_COL       = "For Review ({year})"

OUTPUT_COLUMNS = [
    NAME_COL, NOTES_COL, AVAILABILITY_COL, FRIENDS_COL, LOCAL_COL, ACCEPTED_COL,
    STATUS_COL, SHIRT_COL, EMAIL_COL, PHONE_COL, REVIEW_COL,
]

def output_columns(year: int = DEFAULT_YEAR) -> List[str]:
    return [col.format(year=year) for col in OUTPUT_COLUMNS]

# ---------------- Notes ----------------

def _tags(app: Dict, answers: Answers) -> str:
    crews = app.get(APPLICATION_COLUMNS["CREW"]) or {}
    tags = ["NEW"] if is_new(answers) else []
    for rank in sorted(crews, key=rank_sort_key):
        short = CREW_SHORTNAMES.get(crews[rank])
        if short:
            tags.append(short)
    return " - ".join(tags)

def _answer_line(label: str, answers: Answers, question: Optional[str]) -> str:
    value = answers.get(question) if question else None
    return f"* {label}: {value}" if value else ""

def format_notes(app: Dict, answers: Answers) -> str:
    qs = question_set_for(answers)
    lines = [_tags(app, answers), _answer_line("Previous", answers, qs.history)]
    if qs.is_professional:
        lines += [
            _answer_line("Skill", answers, qs.skill),
            _answer_line("Experience", answers, qs.experience),
            _answer_line("Portfolio", answers, qs.portfolio),
            _answer_line("Interests", answers, qs.interests),
        ]
    else:
        lines.append(_answer_line("Experience", answers, qs.experience))
    return "\n".join(ln for ln in lines if ln)

def general_days(app: Dict) -> List[str]:
    return [k[len(DAYS_PREFIX):] for k, v in app.items() if k.startswith(DAYS_PREFIX) and v == "TRUE"]

def format_availability(app: Dict, answers: Answers, year: int = DEFAULT_YEAR) -> str:
    qs = question_set_for(answers)
    days = format_date_list(general_days(app) + crew_days(answers.get(qs.dates)), year)
    shifts = rank_shifts(
        answers.get(qs.shift_rank_8_2),
        answers.get(qs.shift_rank_12_7),
        answers.get(qs.shift_rank_5_12),
        answers.get(qs.shift_rank_7_3),
    )
    return f"{days}\n{shifts}"

# ---------------- Review notes ----------------

def format_review_notes(answers: Answers) -> List[str]:
    qs = question_set_for(answers)
    notes: List[str] = []
    if is_new(answers):
        notes.append("* New")
    if qs.is_professional and not answers.get(qs.portfolio):
        notes.append("* Missing portfolio")
    if not answers.get(qs.experience):
        notes.append("* Missing experience")
    return notes

def strip_auto_notes(text: Optional[str]) -> str:
    """Drop "* " lines and any blank lines directly after them; keep everything else."""
    kept: List[str] = []
    after_bullet = False
    for ln in (text or "").split("\n"):
        if _AUTO_NOTE_RE.match(ln):
            after_bullet = True
        elif after_bullet and not ln:
            continue
        else:
            after_bullet = False
            kept.append(ln)
    return "\n".join(kept).strip("\n")

def merge_review_notes(answers: Answers, prior: Optional[str]) -> str:
    parts = format_review_notes(answers) + [strip_auto_notes(prior)]
    return "\n".join(p for p in parts if p)

# ---------------- Row building ----------------

def build_row(app: Dict, answers: Answers, existing: Optional[Mapping[str, str]] = None,
              year: int = DEFAULT_YEAR) -> Dict[str, str]:
    c = APPLICATION_COLUMNS
    prior_review = (existing or {}).get(REVIEW_COL.format(year=year))
    status = app.get(c["STATUS"])
    values = {
        NAME_COL: display_name(app),
        NOTES_COL: format_notes(app, answers),
        AVAILABILITY_COL: format_availability(app, answers, year),
        FRIENDS_COL: app.get(c["FRIENDS"]),
        LOCAL_COL: "Y" if app.get(c["LOCAL_OOT"]) == "Local" else "N",
        ACCEPTED_COL: "Y" if status == "accepted" else "",
        STATUS_COL: status,
        SHIRT_COL: app.get(c["SHIRT_SIZE"]),
        EMAIL_COL: app.get(c["EMAIL"]),
        PHONE_COL: app.get(c["PHONE"]),
        REVIEW_COL: merge_review_notes(answers, prior_review),
    }
    return {col.format(year=year): v for col, v in values.items()}

def needs_update(row: Mapping[str, str], values: Mapping[str, Optional[str]]) -> bool:
    # None, "" and missing cells all mean "no value"
    return any((row.get(k) or None) != (v or None) for k, v in values.items())

def find_matches(app: Dict, rows: Sequence[Mapping[str, str]]) -> List:
    email = app.get(APPLICATION_COLUMNS["EMAIL"])
    phone = app.get(APPLICATION_COLUMNS["PHONE"])
    return [r for r in rows if texts_equal(email, r.get(EMAIL_COL)) or phones_equal(phone, r.get(PHONE_COL))]

@dataclass
class RowDecision:
    action: str
    row: Optional[Mapping[str, str]] = None
    values: Dict[str, str] = field(default_factory=dict)
    matches: int = 0

def classify(app: Dict, answers: Answers, rows: Sequence[Mapping[str, str]],
             year: int = DEFAULT_YEAR) -> RowDecision:
    """
    Decide what to do with one application:
      0 matching rows -> added (values = new row)
      1 matching row  -> updated or skipped (values = full recomputed row)
      2+              -> ambiguous (nothing to write)
    """
    matches = find_matches(app, rows)
    if len(matches) > 1:
        return RowDecision(AMBIGUOUS, matches=len(matches))
    if not matches:
        return RowDecision(ADDED, values=build_row(app, answers, None, year))
    row = matches[0]
    values = build_row(app, answers, row, year)
    action = UPDATED if needs_update(row, values) else SKIPPED
    return RowDecision(action, row=row, values=values, matches=1)
