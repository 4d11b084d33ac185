"""
Crew Sync Package

Reconciles volunteer crew applications from the VMS admin tool with the
volunteer tracking Google Sheet.

Modules:
- main.py       : entry point (fetch -> merge -> sync, one application at a time)
- config.py     : settings from env / .env
- vms.py        : CSV export + detail page fetch from the admin tool
- questions.py  : crew survey prompts, answer map extraction
- merger.py     : merge per-crew records of the same applicant
- dates.py      : availability dates and shift preference formatting
- normalize.py  : email / phone comparisons
- rows.py       : match applications to sheet rows, compute row values
- sheets.py     : Google Sheets row repository
- sync.py       : per-application sync loop with quota retry
"""

__version__ = "0.1.0"

from .main import main

__all__ = ["main"]
