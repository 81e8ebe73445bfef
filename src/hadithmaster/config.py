"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HADITHMASTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Content store
    store_backend: Literal["sqlite", "firestore"] = "sqlite"
    sqlite_path: str = ""  # Empty = <data_dir>/hadiths.db
    firestore_project: str = ""  # Empty = project from default credentials
    firestore_database: str = ""  # Empty = "(default)"
    hadiths_collection: str = "hadiths"
    schedule_collection: str = "dailyHadithSchedule"

    # Local cache for the resolved daily hadith
    cache_backend: Literal["file", "memory"] = "file"
    cache_file: str = ""  # Empty = <data_dir>/cache.json

    # Calendar day used for "today". Empty = process local time
    timezone: str = ""

    # Daily scheduling job (matches the midnight UTC cloud function)
    schedule_hour: int = 0
    schedule_minute: int = 0
    schedule_timezone: str = "UTC"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: str = ""

    # Data directory override. Empty = ~/.hadithmaster
    home: str = ""

    @property
    def data_dir(self) -> Path:
        """Get the data directory."""
        if self.home:
            return Path(self.home).expanduser()
        return Path.home() / ".hadithmaster"

    @property
    def sqlite_file(self) -> Path:
        """Get the SQLite database path."""
        if self.sqlite_path:
            return Path(self.sqlite_path).expanduser()
        return self.data_dir / "hadiths.db"

    @property
    def cache_path(self) -> Path:
        """Get the daily hadith cache file path."""
        if self.cache_file:
            return Path(self.cache_file).expanduser()
        return self.data_dir / "cache.json"

    @property
    def log_path(self) -> Path | None:
        """Get the log file path, if file logging is enabled."""
        return Path(self.log_file).expanduser() if self.log_file else None

    @property
    def tzinfo(self) -> ZoneInfo | None:
        """Timezone for computing the calendar day, None for process local."""
        return ZoneInfo(self.timezone) if self.timezone else None

    @property
    def schedule_tzinfo(self) -> ZoneInfo:
        """Timezone the daily scheduling job runs in."""
        return ZoneInfo(self.schedule_timezone)

    def ensure_directories(self) -> None:
        """Create the data and cache directories. The store creates its own."""
        for dir_path in [self.data_dir, self.cache_path.parent]:
            dir_path.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
