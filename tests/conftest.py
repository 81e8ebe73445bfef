"""Shared test fixtures for Hadith Master."""

import random

import pytest
from fakes import H1_DOC, FakeContentStore, make_hadith_doc

from hadithmaster.cache import MemoryCache
from hadithmaster.services import DailyHadithService, HadithService
from hadithmaster.store import HadithRepository
from hadithmaster.store.repository import HADITHS_COLLECTION, SCHEDULE_COLLECTION


@pytest.fixture
def store() -> FakeContentStore:
    """Empty fake store."""
    return FakeContentStore()


@pytest.fixture
def seeded_store(store: FakeContentStore) -> FakeContentStore:
    """Store with three active hadiths (h1, h2, h3) and one inactive (h4)."""
    store.seed(HADITHS_COLLECTION, "h1", H1_DOC)
    store.seed(
        HADITHS_COLLECTION,
        "h2",
        make_hadith_doc(category="manners", tags=["character", "safety"]),
    )
    store.seed(
        HADITHS_COLLECTION,
        "h3",
        make_hadith_doc(
            narrator="Aisha",
            text="The most beloved deeds to Allah are those done consistently, even if small.",
            book="Sahih Muslim",
            category="worship",
            difficulty="intermediate",
        ),
    )
    store.seed(HADITHS_COLLECTION, "h4", make_hadith_doc(isActive=False, category="manners"))
    return store


@pytest.fixture
def schedule(seeded_store: FakeContentStore):
    """Factory adding schedule rows to the seeded store."""

    def _add(date: str = "2024-12-30", hadith_id: str = "h1", doc_id: str | None = None) -> None:
        seeded_store.seed(
            SCHEDULE_COLLECTION,
            doc_id or f"s-{date}-{hadith_id}",
            {"date": date, "hadithId": hadith_id, "featured": True, "sent": False},
        )

    return _add


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def repository(seeded_store: FakeContentStore) -> HadithRepository:
    return HadithRepository(seeded_store)


@pytest.fixture
def daily_service(repository: HadithRepository, cache: MemoryCache) -> DailyHadithService:
    return DailyHadithService(repository, cache, rng=random.Random(42))


@pytest.fixture
def hadith_service(repository: HadithRepository) -> HadithService:
    return HadithService(repository)
