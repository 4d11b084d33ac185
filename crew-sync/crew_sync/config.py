from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", case_sensitive=True)
    GDOC_ID: str
    VMS_COOKIE: str
    GOOGLE_APPLICATION_CREDENTIALS: str = "google-creds.json"
    VMS_BASE_URL: str = "https://volunteer.pickathon.com/admin/"
    SHEET_INDEX: int = 0
    SEASON_YEAR: int = 2022
    DRY_RUN: bool = False

    QUOTA_RETRY_SECONDS: float = 30.0
    QUOTA_MAX_ATTEMPTS: int = 5
    SHEETS_RATE_LIMIT_SECONDS: float = 0.5
    REQUEST_TIMEOUT: int = 30

    ONLY_APPLICANT: Optional[str] = None   # substring of "<name> - <email> - <phone>"

@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore
