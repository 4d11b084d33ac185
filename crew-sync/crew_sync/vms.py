# FILE: crew-sync/crew_sync/vms.py
"""
Client for the volunteer admin tool (VMS): the crew application CSV export and
the per-application detail page holding the crew survey answers.
"""
from __future__ import annotations

import csv
import io
import logging
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from crew_sync.questions import extract_answers

LOG = logging.getLogger("crew_sync.vms")

DEFAULT_BASE_URL = "https://volunteer.pickathon.com/admin/"
ENTITY = "CrewApplication"

def parse_applications_csv(text: str) -> List[Dict[str, str]]:
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    return [dict(r) for r in reader]

def parse_detail_blocks(html: str) -> List[str]:
    """Text of every `.form-control li` item, child elements separated by newlines."""
    soup = BeautifulSoup(html, "html.parser")
    return [li.get_text("\n") for li in soup.select(".form-control li")]

class VmsClient:
    def __init__(self, cookie: str, base_url: str = DEFAULT_BASE_URL, timeout: int = 30,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Cookie"] = cookie

    def _get(self, params: Dict[str, str]) -> str:
        r = self.session.get(self.base_url, params=params, timeout=self.timeout, allow_redirects=True)
        r.raise_for_status()
        return r.text

    def fetch_applications(self) -> List[Dict[str, str]]:
        apps = parse_applications_csv(self._get({"entity": ENTITY, "action": "export"}))
        LOG.info("Fetched %d crew application record(s).", len(apps))
        return apps

    def fetch_detail_html(self, app_id: str) -> str:
        return self._get({"entity": ENTITY, "action": "show", "id": str(app_id)})

    def fetch_answers(self, app_id: str) -> Dict[str, Optional[str]]:
        return extract_answers(parse_detail_blocks(self.fetch_detail_html(app_id)))
