# FILE: crew-sync/crew_sync/dates.py
"""
Availability formatting: loose "Sat, July 30" style dates and shift preferences.
"""
from __future__ import annotations

import re
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

LOG = logging.getLogger("crew_sync.dates")

DEFAULT_YEAR = 2022
INVALID_DATE = "Invalid Date"

# "<weekday>, <month> <day>" -> first match only
_LOOSE_DATE_RE = re.compile(r"(\w+)\W+(\w+)\W+(\d+)")
# crew date answers look like "Saturday, July 30th, Sunday, July 31st"
_CREW_DAY_RE = re.compile(r"\w+\W+\w+\W+\d+\w+")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

SHIFT_LABELS = ("am", "pm", "evening", "late night")

def parse_loose_date(text: str, year: int = DEFAULT_YEAR) -> Optional[date]:
    """
    Parse the first "word, word, digits" run of `text` as weekday, month, day.
    Returns None (and logs a warning) when nothing matches or the date is not real.
    """
    m = _LOOSE_DATE_RE.search(text or "")
    if m:
        _weekday, month, day = m.groups()
        for fmt in ("%B %d %Y", "%b %d %Y"):
            try:
                return datetime.strptime(f"{month} {day} {year}", fmt).date()
            except ValueError:
                continue
    LOG.warning("Invalid Date: %s", text)
    return None

def format_day(d: Optional[date]) -> str:
    if d is None:
        return INVALID_DATE
    return f"{d:%a} {d.month}/{d.day}"

def format_date_list(days: Iterable[str], year: int = DEFAULT_YEAR) -> str:
    """
    Parse, sort chronologically, format and de-duplicate a list of loose dates.
    Invalid dates sort after every valid one.
      ["Sat, July 30", "Sat, July 30", "Sun, July 31"] -> "Sat 7/30, Sun 7/31"
    """
    parsed = [parse_loose_date(d, year) for d in days]
    parsed.sort(key=lambda d: (d is None, d or date.min))
    out: List[str] = []
    for d in parsed:
        label = format_day(d)
        if label not in out:
            out.append(label)
    return ", ".join(out)

def crew_days(text: Optional[str]) -> List[str]:
    """Pull "Weekday, Month 30th" tokens out of a crew dates answer."""
    return _CREW_DAY_RE.findall(text or "")

def parse_rank(text: Optional[str]) -> Optional[int]:
    """Leading integer of a preference answer ("1st" -> 1); None when there is none."""
    m = _LEADING_INT_RE.match(text or "")
    return int(m.group(1)) if m else None

def rank_shifts(am: Optional[str], pm: Optional[str], evening: Optional[str], late_night: Optional[str]) -> str:
    """
    Order the four shift slots by the applicant's preference numbers.
    Missing or non-numeric ranks go last; ties keep slot order.
    """
    ranked = [
        (parse_rank(am), SHIFT_LABELS[0]),
        (parse_rank(pm), SHIFT_LABELS[1]),
        (parse_rank(evening), SHIFT_LABELS[2]),
        (parse_rank(late_night), SHIFT_LABELS[3]),
    ]
    ranked.sort(key=lambda s: (s[0] is None, s[0] or 0))
    return ", ".join(label for _rank, label in ranked)
