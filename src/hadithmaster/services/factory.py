"""Service construction from settings."""

from ..cache.factory import make_cache
from ..config import Settings, settings
from ..store.factory import make_repository
from .daily_service import DailyHadithService
from .hadith_service import HadithService


def make_daily_service(cfg: Settings | None = None) -> DailyHadithService:
    cfg = cfg or settings
    return DailyHadithService(
        repository=make_repository(cfg),
        cache=make_cache(cfg),
        tz=cfg.tzinfo,
    )


def make_hadith_service(cfg: Settings | None = None) -> HadithService:
    return HadithService(make_repository(cfg or settings))
