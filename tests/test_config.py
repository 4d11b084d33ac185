import pytest
from pydantic import ValidationError

from crew_sync.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("GDOC_ID", "VMS_COOKIE", "DRY_RUN", "SEASON_YEAR", "ONLY_APPLICANT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("GDOC_ID", "doc123")
    monkeypatch.setenv("VMS_COOKIE", "SESSION=abc")
    monkeypatch.setenv("DRY_RUN", "true")
    monkeypatch.setenv("SEASON_YEAR", "2023")

    s = get_settings()
    assert s.GDOC_ID == "doc123"
    assert s.DRY_RUN is True
    assert s.SEASON_YEAR == 2023
    assert s.QUOTA_MAX_ATTEMPTS == 5
    assert s.ONLY_APPLICANT is None


def test_settings_from_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("GDOC_ID=fromfile\nVMS_COOKIE=c\nUNRELATED=1\n", encoding="utf-8")
    s = Settings()
    assert s.GDOC_ID == "fromfile"
    assert s.SHEET_INDEX == 0


def test_settings_require_doc_and_cookie():
    with pytest.raises(ValidationError):
        Settings()
