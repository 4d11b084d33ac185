# FILE: crew-sync/crew_sync/normalize.py
from __future__ import annotations

import re
from typing import Optional

_NON_DIGIT_RE = re.compile(r"\D")

def texts_equal(a: Optional[str], b: Optional[str]) -> bool:
    """Case and surrounding-whitespace insensitive equality. None counts as ''."""
    return (a or "").strip().upper() == (b or "").strip().upper()

def phones_equal(a: Optional[str], b: Optional[str]) -> bool:
    """
    Compare phone numbers on their digits only.
      "(503) 555-1234" == "503-555-1234"
      "5035551234"     != "15035551234"   (country code is not normalized)
    """
    return texts_equal(_NON_DIGIT_RE.sub("", a or ""), _NON_DIGIT_RE.sub("", b or ""))
