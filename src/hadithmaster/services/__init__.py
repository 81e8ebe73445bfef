"""Service layer for Hadith Master.

- DailyHadithService: resolves, caches and schedules the hadith of the day
- HadithService: browsing, search, statistics and import
"""

from .daily_service import (
    DAILY_HADITH_DATE_KEY,
    DAILY_HADITH_KEY,
    DailyHadithService,
    ScheduleOutcome,
    day_key,
)
from .exceptions import HadithNotFoundError, ImportDataError, ServiceError
from .factory import make_daily_service, make_hadith_service
from .hadith_service import SAMPLE_DATA_FILE, HadithService, ImportResult

__all__ = [
    # Services
    "DailyHadithService",
    "HadithService",
    "make_daily_service",
    "make_hadith_service",
    # Types
    "ImportResult",
    "ScheduleOutcome",
    "day_key",
    "DAILY_HADITH_KEY",
    "DAILY_HADITH_DATE_KEY",
    "SAMPLE_DATA_FILE",
    # Exceptions
    "HadithNotFoundError",
    "ImportDataError",
    "ServiceError",
]
