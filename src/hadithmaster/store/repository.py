"""Typed access to the hadith and schedule collections."""

import logging
from typing import Any

from pydantic import ValidationError

from ..models import DailySchedule, Hadith
from .base import ContentStore, Document

logger = logging.getLogger(__name__)

HADITHS_COLLECTION = "hadiths"
SCHEDULE_COLLECTION = "dailyHadithSchedule"


class HadithRepository:
    """Query surface over a ContentStore.

    Raw documents are validated here; a document that does not validate is
    logged and skipped, never passed on. Store failures
    (StoreUnavailableError) propagate unchanged.
    """

    def __init__(
        self,
        store: ContentStore,
        hadiths_collection: str = HADITHS_COLLECTION,
        schedule_collection: str = SCHEDULE_COLLECTION,
    ) -> None:
        self.store = store
        self.hadiths_collection = hadiths_collection
        self.schedule_collection = schedule_collection

    def close(self) -> None:
        """Release the underlying store."""
        self.store.close()

    @staticmethod
    def _to_hadith(doc: Document) -> Hadith | None:
        try:
            return Hadith.model_validate(doc)
        except ValidationError as e:
            logger.warning(f"Skipping invalid hadith {doc.get('id')!r}: {e.error_count()} errors")
            return None

    @staticmethod
    def _to_schedule(doc: Document) -> DailySchedule | None:
        try:
            return DailySchedule.model_validate(doc)
        except ValidationError as e:
            logger.warning(f"Skipping invalid schedule {doc.get('id')!r}: {e.error_count()} errors")
            return None

    # ==================== Hadiths ====================

    def get_hadith(self, hadith_id: str) -> Hadith | None:
        """Fetch one hadith by identifier, None if missing or invalid."""
        doc = self.store.get(self.hadiths_collection, hadith_id)
        return self._to_hadith(doc) if doc is not None else None

    def list_hadiths(
        self, filters: dict[str, Any] | None = None, limit: int | None = None
    ) -> list[Hadith]:
        """List hadiths matching equality filters on document field names."""
        docs = self.store.query(self.hadiths_collection, filters=filters, limit=limit)
        return [h for h in (self._to_hadith(doc) for doc in docs) if h is not None]

    def list_active(self, limit: int | None = None) -> list[Hadith]:
        """List hadiths eligible for random and featured selection."""
        return self.list_hadiths({"isActive": True}, limit=limit)

    def insert_hadith(self, hadith: Hadith) -> Hadith:
        """Insert a hadith and return it with its assigned identifier."""
        doc_id = self.store.insert(self.hadiths_collection, hadith.to_document(), doc_id=hadith.id)
        return hadith.model_copy(update={"id": doc_id})

    # ==================== Schedule ====================

    def find_schedule(self, date: str) -> DailySchedule | None:
        """First schedule row for a date, None if there is none.

        More than one row per date is possible when the store has no
        uniqueness constraint; the first one the store returns wins.
        """
        docs = self.store.query(self.schedule_collection, filters={"date": date}, limit=1)
        for doc in docs:
            schedule = self._to_schedule(doc)
            if schedule is not None:
                return schedule
        return None

    def insert_schedule(self, schedule: DailySchedule) -> DailySchedule:
        """Insert a schedule row and return it with its assigned identifier."""
        doc_id = self.store.insert(self.schedule_collection, schedule.to_document())
        return schedule.model_copy(update={"id": doc_id})

    def list_schedules(self, limit: int | None = None) -> list[DailySchedule]:
        """Schedule rows, newest date first."""
        docs = self.store.query(
            self.schedule_collection, limit=limit, order_by="date", descending=True
        )
        return [s for s in (self._to_schedule(doc) for doc in docs) if s is not None]
