"""Tests for environment-driven settings."""

from datetime import timedelta
from pathlib import Path

from raceinfo.config import Settings, racing_now


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RACEINFO_BUCKET", raising=False)
        settings = Settings(_env_file=None)
        assert settings.races_key == "races.json"
        assert settings.odds_key == "odds.json"
        assert settings.fill_timeout is None
        assert settings.blob_backend == "gcs"
        assert "debug" not in Settings.model_fields

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RACEINFO_BUCKET", "racing-2026")
        monkeypatch.setenv("RACEINFO_FILL_TIMEOUT", "12.5")
        monkeypatch.setenv("RACEINFO_LOCAL_DATA_DIR", "/srv/data")
        settings = Settings(_env_file=None)
        assert settings.bucket == "racing-2026"
        assert settings.fill_timeout == 12.5
        assert settings.local_data_dir == Path("/srv/data")

    def test_timezone(self):
        settings = Settings(_env_file=None, timezone="Australia/Melbourne")
        assert settings.tz.key == "Australia/Melbourne"


def test_racing_now_is_timezone_aware():
    now = racing_now()
    assert now.tzinfo is not None
    assert now.utcoffset() in (timedelta(hours=0), timedelta(hours=1))
