from worklog_engine.config import Settings
from worklog_engine.store import LogStore


def test_settings_read_prefixed_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("WORKLOG_DATA_PATH", str(tmp_path / "blob.json"))
    monkeypatch.setenv("WORKLOG_ENFORCE_UNIQUE_DATES", "true")
    monkeypatch.setenv("WORKLOG_WEEK_STARTS_ON", "monday")

    settings = Settings(_env_file=None)
    assert settings.data_path == str(tmp_path / "blob.json")
    assert settings.enforce_unique_dates is True
    assert settings.week_starts_on == "monday"


def test_defaults(monkeypatch):
    for name in ("WORKLOG_DATA_PATH", "WORKLOG_ENFORCE_UNIQUE_DATES", "WORKLOG_WEEK_STARTS_ON"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.data_path is None
    assert settings.enforce_unique_dates is False
    assert settings.week_starts_on == "sunday"


def test_store_from_settings(monkeypatch, tmp_path):
    path = tmp_path / "blob.json"
    monkeypatch.setenv("WORKLOG_DATA_PATH", str(path))
    store = LogStore.from_settings(Settings(_env_file=None))
    store.create({"user_id": "u1", "date": "2025-01-07", "mood": "good", "summary": "Saved"})
    assert path.is_file()
