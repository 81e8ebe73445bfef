"""CLI smoke tests for Hadith Master."""

import json
from pathlib import Path

import pytest
from fakes import H1_DOC
from typer.testing import CliRunner

from hadithmaster.cli import app
from hadithmaster.config import settings
from hadithmaster.models import Hadith
from hadithmaster.services import DAILY_HADITH_DATE_KEY, DAILY_HADITH_KEY

runner = CliRunner()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global settings at a fresh SQLite store and cache file."""
    monkeypatch.setattr(settings, "home", str(tmp_path))
    monkeypatch.setattr(settings, "store_backend", "sqlite")
    monkeypatch.setattr(settings, "sqlite_path", "")
    monkeypatch.setattr(settings, "cache_backend", "file")
    monkeypatch.setattr(settings, "cache_file", "")
    monkeypatch.setattr(settings, "log_file", "")
    return tmp_path


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_app_shows_help(self) -> None:
        """Test app shows help when no args provided."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "daily hadith" in result.output

    def test_version_flag(self) -> None:
        """Test --version flag shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Hadith Master" in result.output

    @pytest.mark.parametrize(
        ("group", "expected"),
        [
            ("schedule", "daily hadith schedule"),
            ("hadith", "Browse, search and import"),
            ("daemon", "Background daemon"),
        ],
    )
    def test_group_help(self, group: str, expected: str) -> None:
        result = runner.invoke(app, [group, "--help"])
        assert result.exit_code == 0
        assert expected in result.output


class TestDailyCommands:
    """Test today, refresh and status against a temporary store."""

    def test_today_on_empty_store_shows_default(self, isolated_home: Path) -> None:
        result = runner.invoke(app, ["today"])

        assert result.exit_code == 0
        assert "No hadiths" in result.output

    def test_import_then_today(self, isolated_home: Path) -> None:
        imported = runner.invoke(app, ["hadith", "import"])
        assert imported.exit_code == 0
        assert "Added 5 hadiths" in imported.output

        today = runner.invoke(app, ["today"])
        assert today.exit_code == 0
        assert "Hadith of the Day" in today.output
        assert (isolated_home / "cache.json").exists()

        status = runner.invoke(app, ["status"])
        assert status.exit_code == 0
        assert "fresh" in status.output

    def test_status_without_cache(self, isolated_home: Path) -> None:
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "nothing" in result.output

    def test_today_serves_stale_cache_when_store_unreachable(
        self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An unopenable database falls back to the hadith cached on an earlier day."""
        stale = Hadith.model_validate(dict(H1_DOC, id="h1"))
        (isolated_home / "cache.json").write_text(
            json.dumps(
                {
                    DAILY_HADITH_KEY: stale.model_dump_json(by_alias=True),
                    DAILY_HADITH_DATE_KEY: "2020-01-01",
                }
            )
        )
        unopenable = isolated_home / "db_is_a_dir"
        unopenable.mkdir()
        monkeypatch.setattr(settings, "sqlite_path", str(unopenable))

        result = runner.invoke(app, ["today"])

        assert result.exit_code == 0
        assert "Verily actions are by intentions" in result.output
        assert "Umar" in result.output

    def test_today_without_cache_reports_unreachable_store(
        self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        unopenable = isolated_home / "db_is_a_dir"
        unopenable.mkdir()
        monkeypatch.setattr(settings, "sqlite_path", str(unopenable))

        result = runner.invoke(app, ["today"])

        assert result.exit_code == 1
        assert "Could not load today's hadith" in result.output

    def test_refresh_on_empty_store_fails(self, isolated_home: Path) -> None:
        result = runner.invoke(app, ["refresh"])
        assert result.exit_code == 1
        assert "Refresh failed" in result.output


class TestCatalogueCommands:
    """Test schedule and hadith subcommands."""

    def test_schedule_tomorrow_then_list(self, isolated_home: Path) -> None:
        runner.invoke(app, ["hadith", "import"])

        first = runner.invoke(app, ["schedule", "tomorrow"])
        second = runner.invoke(app, ["schedule", "tomorrow"])
        listed = runner.invoke(app, ["schedule", "list"])

        assert first.exit_code == 0 and "Scheduled hadith" in first.output
        assert second.exit_code == 0 and "Already scheduled" in second.output
        assert listed.exit_code == 0 and "Daily Hadith Schedule" in listed.output

    def test_schedule_tomorrow_without_hadiths_fails(self, isolated_home: Path) -> None:
        result = runner.invoke(app, ["schedule", "tomorrow"])
        assert result.exit_code == 1

    def test_search_and_stats(self, isolated_home: Path) -> None:
        runner.invoke(app, ["hadith", "import"])

        found = runner.invoke(app, ["hadith", "search", "intentions"])
        missing = runner.invoke(app, ["hadith", "search", "zzzz"])
        stats = runner.invoke(app, ["hadith", "stats"])

        assert found.exit_code == 0 and "Umar" in found.output
        assert "No hadiths match" in missing.output
        assert "Total: 5" in stats.output

    def test_import_bad_file_fails(self, isolated_home: Path) -> None:
        bad = isolated_home / "bad.json"
        bad.write_text("{}")

        result = runner.invoke(app, ["hadith", "import", str(bad)])

        assert result.exit_code == 1
        assert "Import failed" in result.output

    def test_daemon_run_unknown_job(self, isolated_home: Path) -> None:
        result = runner.invoke(app, ["daemon", "run", "nope"])
        assert result.exit_code == 1
        assert "Unknown job" in result.output
