"""Tests for configuration management."""

from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from hadithmaster.config import Settings
from hadithmaster.store import make_content_store
from hadithmaster.store.sqlite_store import SQLiteContentStore


class TestSettings:
    """Test Settings class."""

    def test_default_values(self) -> None:
        """Test that settings have expected defaults."""
        settings = Settings()
        assert settings.hadiths_collection == "hadiths"
        assert settings.schedule_collection == "dailyHadithSchedule"
        assert settings.schedule_hour == 0
        assert settings.schedule_timezone == "UTC"

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test HADITHMASTER_ environment variables are read."""
        monkeypatch.setenv("HADITHMASTER_STORE_BACKEND", "firestore")
        monkeypatch.setenv("HADITHMASTER_SCHEDULE_HOUR", "6")

        settings = Settings()

        assert settings.store_backend == "firestore"
        assert settings.schedule_hour == 6

    def test_paths_under_home(self, tmp_path: Path) -> None:
        """Test derived paths default to the data directory."""
        settings = Settings(home=str(tmp_path))
        assert settings.data_dir == tmp_path
        assert settings.sqlite_file == tmp_path / "hadiths.db"
        assert settings.cache_path == tmp_path / "cache.json"
        assert settings.log_path is None

    def test_explicit_paths_win(self, tmp_path: Path) -> None:
        settings = Settings(
            home=str(tmp_path / "home"),
            sqlite_path=str(tmp_path / "db.sqlite"),
            cache_file=str(tmp_path / "c.json"),
            log_file=str(tmp_path / "log.txt"),
        )
        assert settings.sqlite_file == tmp_path / "db.sqlite"
        assert settings.cache_path == tmp_path / "c.json"
        assert settings.log_path == tmp_path / "log.txt"

    @pytest.mark.parametrize(
        ("timezone", "expected"),
        [("", None), ("Asia/Karachi", ZoneInfo("Asia/Karachi"))],
        ids=["local", "named"],
    )
    def test_tzinfo(self, timezone: str, expected: ZoneInfo | None) -> None:
        assert Settings(timezone=timezone).tzinfo == expected

    def test_ensure_directories_creates_dirs(self, tmp_path: Path) -> None:
        """Test ensure_directories creates the data and cache directories only."""
        settings = Settings(
            home=str(tmp_path / "data"),
            cache_file=str(tmp_path / "cache" / "c.json"),
            sqlite_path=str(tmp_path / "db" / "hadiths.db"),
        )

        settings.ensure_directories()

        assert (tmp_path / "data").is_dir()
        assert (tmp_path / "cache").is_dir()
        assert not (tmp_path / "db").exists()


class TestStoreFactory:
    """Test content store selection from settings."""

    def test_sqlite_backend(self, tmp_path: Path) -> None:
        store = make_content_store(Settings(home=str(tmp_path)))
        assert isinstance(store, SQLiteContentStore)
        assert store.db_path == tmp_path / "hadiths.db"

    def test_unknown_backend(self, tmp_path: Path) -> None:
        settings = Settings(home=str(tmp_path)).model_copy(update={"store_backend": "mongo"})

        with pytest.raises(ValueError, match="Unknown store backend"):
            make_content_store(settings)
