"""
Main entry: sync VMS crew applications into the volunteer tracking sheet.

Env (required):
  GDOC_ID
  VMS_COOKIE

Env (optional):
  GOOGLE_APPLICATION_CREDENTIALS = path to service-account JSON   (default: google-creds.json)
  DRY_RUN         = "true" | "false"          (default: false)
  SEASON_YEAR     = year used for dates and column names (default: 2022)
  ONLY_APPLICANT  = only sync applicants whose "<name> - <email> - <phone>" contains this
  QUOTA_RETRY_SECONDS, QUOTA_MAX_ATTEMPTS, SHEETS_RATE_LIMIT_SECONDS, SHEET_INDEX, VMS_BASE_URL
"""

import logging
from dotenv import load_dotenv
from pydantic import ValidationError

from crew_sync.config import get_settings
from crew_sync.merger import identity_key, merge_applications
from crew_sync.sheets import SheetsRepository
from crew_sync.sync import sync_all
from crew_sync.vms import VmsClient

LOG = logging.getLogger("crew_sync")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    load_dotenv()

    try:
        s = get_settings()
    except ValidationError as e:
        LOG.error("Missing or invalid settings: %s", e)
        return

    LOG.info("=== Crew Sync ===  SEASON_YEAR=%s  DRY_RUN=%s", s.SEASON_YEAR, s.DRY_RUN)

    # ---------------- Load both sides ----------------
    vms = VmsClient(s.VMS_COOKIE, base_url=s.VMS_BASE_URL, timeout=s.REQUEST_TIMEOUT)
    raw_apps = vms.fetch_applications()

    repo = SheetsRepository(
        s.GDOC_ID, s.SHEET_INDEX,
        creds_path=s.GOOGLE_APPLICATION_CREDENTIALS,
        dry_run=s.DRY_RUN,
        rate_limit_seconds=s.SHEETS_RATE_LIMIT_SECONDS,
    )
    repo.load_rows()

    apps = merge_applications(raw_apps)
    LOG.info("Merged %d record(s) into %d application(s).", len(raw_apps), len(apps))
    if s.ONLY_APPLICANT:
        apps = [a for a in apps if s.ONLY_APPLICANT in identity_key(a)]
        LOG.info("ONLY_APPLICANT=%r -> %d application(s).", s.ONLY_APPLICANT, len(apps))

    # ---------------- Per-application sync ----------------
    report = sync_all(
        apps, repo, vms.fetch_answers,
        year=s.SEASON_YEAR,
        max_attempts=s.QUOTA_MAX_ATTEMPTS,
        retry_seconds=s.QUOTA_RETRY_SECONDS,
    )

    if report.failed:
        for key, reason in report.failed:
            LOG.warning(" - %s: %s", key, reason)
        LOG.warning("Completed with %d problem application(s): %s", len(report.failed), report.summary())
    else:
        LOG.info("Done: %s", report.summary())
    return report


if __name__ == "__main__":
    main()
