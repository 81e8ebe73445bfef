"""Hadith catalogue: browsing, search, statistics and import."""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..models import DailySchedule, Hadith, HadithStats
from ..store.repository import HadithRepository
from .exceptions import ImportDataError

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent.parent / "data" / "sample_hadiths.json"


@dataclass
class ImportResult:
    """Outcome of a bulk import."""

    added: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.skipped)


class HadithService:
    """Read and add operations over the hadith collection.

    Filtering by category or difficulty and search only consider active
    hadiths. Search is a client-side substring match; the document stores
    offer no full-text index.
    """

    def __init__(self, repository: HadithRepository) -> None:
        self.repository = repository

    def close(self) -> None:
        self.repository.close()

    def list_all(self, limit: int | None = None) -> list[Hadith]:
        return self.repository.list_hadiths(limit=limit)

    def by_category(self, category: str) -> list[Hadith]:
        return self.repository.list_hadiths({"category": category, "isActive": True})

    def by_difficulty(self, difficulty: str) -> list[Hadith]:
        return self.repository.list_hadiths({"difficulty": difficulty, "isActive": True})

    def search(self, term: str) -> list[Hadith]:
        """Active hadiths whose text, narrator, book or tags contain ``term``."""
        term = term.strip()
        if not term:
            return []
        return [h for h in self.repository.list_active() if h.matches(term)]

    def stats(self) -> HadithStats:
        """Count hadiths in total, active, and per category and difficulty."""
        hadiths = self.repository.list_hadiths()
        return HadithStats(
            total=len(hadiths),
            active=sum(1 for h in hadiths if h.is_active),
            categories=dict(Counter(h.category or "uncategorized" for h in hadiths)),
            difficulties=dict(Counter(h.difficulty or "unspecified" for h in hadiths)),
        )

    def upcoming(self, limit: int = 7) -> list[DailySchedule]:
        """Most recent schedule rows, newest date first."""
        return self.repository.list_schedules(limit=limit)

    def add(self, data: dict[str, Any] | Hadith) -> Hadith:
        """Validate and insert a hadith.

        ``isActive`` defaults to true and ``createdAt`` to the current time.

        Raises:
            ImportDataError: If the data is not a valid hadith
        """
        if isinstance(data, Hadith):
            hadith = data
        else:
            try:
                hadith = Hadith.model_validate(data)
            except ValidationError as e:
                raise ImportDataError(f"Invalid hadith: {e.errors()[0]['msg']}") from e

        if hadith.created_at is None:
            hadith = hadith.model_copy(update={"created_at": datetime.now(timezone.utc)})
        return self.repository.insert_hadith(hadith)

    def import_file(self, path: Path) -> ImportResult:
        """Add every hadith in a JSON array file.

        Entries whose ``id`` already exists in the store are skipped, so the
        same file can be imported twice.

        Raises:
            ImportDataError: If the file is unreadable or an entry is invalid
        """
        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ImportDataError(f"Cannot read {path}: {e}") from e

        if not isinstance(entries, list):
            raise ImportDataError(f"{path} must contain a JSON array of hadiths")

        hadiths: list[Hadith] = []
        for index, entry in enumerate(entries):
            try:
                hadiths.append(Hadith.model_validate(entry))
            except ValidationError as e:
                raise ImportDataError(f"Entry {index} in {path}: {e.errors()[0]['msg']}") from e

        result = ImportResult()
        for hadith in hadiths:
            if hadith.id is not None and self.repository.get_hadith(hadith.id) is not None:
                result.skipped.append(hadith.id)
                continue
            added = self.add(hadith)
            result.added.append(added.id or "")

        logger.info(
            f"Imported {len(result.added)} hadiths from {path} ({len(result.skipped)} skipped)"
        )
        return result
