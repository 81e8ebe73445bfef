"""Daily hadith resolution and caching.

Resolution order for "today's hadith":

1. Local cache, when its day stamp is today (no store access).
2. The schedule row for today, dereferenced to its hadith.
3. A uniformly random active hadith.

Every successful store resolution is written back to the local cache. When
the store is unreachable, a cached hadith from any day is returned instead
of failing; the error propagates only when nothing is cached.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from pydantic import ValidationError

from ..cache.base import CacheError, LocalCache
from ..models import CachedDaily, DailySchedule, Hadith
from ..store.base import StoreUnavailableError
from ..store.repository import HadithRepository
from .exceptions import HadithNotFoundError

logger = logging.getLogger(__name__)

DAILY_HADITH_KEY = "daily_hadith"
DAILY_HADITH_DATE_KEY = "daily_hadith_date"


def day_key(now: datetime, tz: tzinfo | None = None) -> str:
    """Calendar day of ``now`` as ``YYYY-MM-DD``.

    With ``tz`` set, ``now`` is converted into that zone first (naive values
    are taken as process local time). Without it, an aware ``now`` is
    converted to process local time and a naive one is used as given.
    """
    if tz is not None:
        now = now.astimezone(tz)
    elif now.tzinfo is not None:
        now = now.astimezone()
    return now.date().isoformat()


@dataclass
class ScheduleOutcome:
    """Result of ensuring a schedule row exists for a date."""

    date: str
    schedule: DailySchedule
    created: bool


class DailyHadithService:
    """Resolves, caches and schedules the hadith of the day.

    Calls are not synchronized. Two concurrent resolutions on a stale cache
    both hit the store and the last cache write wins. Callers should not
    overlap force_refresh() calls.
    """

    def __init__(
        self,
        repository: HadithRepository,
        cache: LocalCache,
        rng: random.Random | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            repository: Typed access to the hadith and schedule collections
            cache: Local cache holding the resolved hadith and its day
            rng: Random source for fallback selection (default: module random)
            tz: Timezone defining the calendar day (default: process local)
        """
        self.repository = repository
        self.cache = cache
        self._rng = rng or random.Random()
        self.tz = tz

    def close(self) -> None:
        self.repository.close()

    def day_key(self, now: datetime | None = None) -> str:
        """Calendar day string for ``now`` in the configured timezone."""
        return day_key(now or datetime.now(), self.tz)

    # =========================================================================
    # Cache
    # =========================================================================

    def cached(self) -> CachedDaily | None:
        """Read the cached hadith/day pair, None on a miss or corrupt entry."""
        raw = self.cache.get(DAILY_HADITH_KEY)
        day = self.cache.get(DAILY_HADITH_DATE_KEY)
        if raw is None or day is None:
            return None

        try:
            hadith = Hadith.model_validate_json(raw)
        except ValidationError:
            logger.warning("Cached daily hadith is unreadable, treating as a miss")
            return None
        return CachedDaily(day=day, hadith=hadith)

    def _write_cache(self, hadith: Hadith, day: str) -> None:
        try:
            self.cache.set_many(
                {
                    DAILY_HADITH_KEY: hadith.model_dump_json(by_alias=True),
                    DAILY_HADITH_DATE_KEY: day,
                }
            )
        except CacheError as e:
            logger.warning(f"Could not cache daily hadith: {e}")

    def _clear_cache(self) -> None:
        try:
            self.cache.remove_many([DAILY_HADITH_KEY, DAILY_HADITH_DATE_KEY])
        except CacheError as e:
            logger.warning(f"Could not clear daily hadith cache: {e}")

    def is_fresh_for_today(self, now: datetime | None = None) -> bool:
        """Check whether the cache holds a readable hadith stamped with today's date."""
        cached = self.cached()
        return cached is not None and cached.day == self.day_key(now)

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve_today(self, now: datetime | None = None) -> Hadith:
        """Get the hadith for today.

        Args:
            now: Current time (default: datetime.now())

        Returns:
            The cached, scheduled or randomly selected hadith

        Raises:
            HadithNotFoundError: If there is no schedule and no active hadith
            StoreUnavailableError: If the store fails and nothing is cached
        """
        today = self.day_key(now)
        cached = self.cached()

        if cached is not None and cached.day == today:
            return cached.hadith

        try:
            return self._resolve_from_store(today)
        except StoreUnavailableError as e:
            if cached is None:
                raise
            logger.warning(f"Store unavailable ({e}), serving hadith cached for {cached.day}")
            return cached.hadith

    def force_refresh(self, now: datetime | None = None) -> Hadith:
        """Drop the cached hadith and resolve today's again from the store.

        Raises:
            HadithNotFoundError: If there is no schedule and no active hadith
            StoreUnavailableError: If the store fails
        """
        today = self.day_key(now)
        self._clear_cache()
        return self._resolve_from_store(today)

    def _resolve_from_store(self, today: str) -> Hadith:
        hadith = self._scheduled_hadith(today) or self._random_active()
        if hadith is None:
            raise HadithNotFoundError("No hadiths found in database")

        self._write_cache(hadith, today)
        return hadith

    def _scheduled_hadith(self, date: str) -> Hadith | None:
        schedule = self.repository.find_schedule(date)
        if schedule is None:
            logger.debug(f"No schedule for {date}")
            return None

        hadith = self.repository.get_hadith(schedule.hadith_id)
        if hadith is None:
            logger.warning(
                f"Schedule {schedule.id} for {date} points at missing hadith {schedule.hadith_id}"
            )
        return hadith

    def _random_active(self) -> Hadith | None:
        active = self.repository.list_active()
        return self._rng.choice(active) if active else None

    # =========================================================================
    # Scheduling
    # =========================================================================

    def ensure_tomorrow_scheduled(self, now: datetime | None = None) -> ScheduleOutcome:
        """Create tomorrow's schedule row from a random active hadith, unless one exists.

        Without a uniqueness constraint on date in the store, concurrent calls
        can both insert; resolution then takes whichever row the store returns
        first.

        Raises:
            HadithNotFoundError: If no active hadith exists to schedule
            StoreUnavailableError: If the store fails
        """
        now = now or datetime.now()
        tomorrow = self.day_key(now + timedelta(days=1))

        existing = self.repository.find_schedule(tomorrow)
        if existing is not None:
            logger.info(f"Hadith already scheduled for {tomorrow}")
            return ScheduleOutcome(date=tomorrow, schedule=existing, created=False)

        hadith = self._random_active()
        if hadith is None or hadith.id is None:
            raise HadithNotFoundError("No active hadiths found")

        schedule = self.repository.insert_schedule(
            DailySchedule(
                date=tomorrow,
                hadith_id=hadith.id,
                featured=True,
                sent=False,
                created_at=datetime.now().astimezone(),
            )
        )
        logger.info(f"Daily hadith scheduled for {tomorrow}: hadith {hadith.id}")
        return ScheduleOutcome(date=tomorrow, schedule=schedule, created=True)
