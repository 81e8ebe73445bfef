"""Content store factory.

Backends are lazy-loaded so the Firestore client library is only imported
when it is actually configured.
"""

from collections.abc import Callable

from ..config import Settings, settings
from .base import ContentStore
from .repository import HadithRepository


def _make_sqlite(cfg: Settings) -> ContentStore:
    from .sqlite_store import SQLiteContentStore

    return SQLiteContentStore(cfg.sqlite_file)


def _make_firestore(cfg: Settings) -> ContentStore:
    from .firestore_store import FirestoreContentStore

    return FirestoreContentStore(project=cfg.firestore_project, database=cfg.firestore_database)


# Backend registry (add entries here for new backends)
BACKENDS: dict[str, Callable[[Settings], ContentStore]] = {
    "sqlite": _make_sqlite,
    "firestore": _make_firestore,
}


def make_content_store(cfg: Settings | None = None) -> ContentStore:
    """Create the configured content store.

    Raises:
        ValueError: If the backend name is unknown
    """
    cfg = cfg or settings
    try:
        builder = BACKENDS[cfg.store_backend]
    except KeyError:
        raise ValueError(f"Unknown store backend: {cfg.store_backend}") from None
    return builder(cfg)


def make_repository(cfg: Settings | None = None) -> HadithRepository:
    """Create a repository over the configured store and collections."""
    cfg = cfg or settings
    return HadithRepository(
        make_content_store(cfg),
        hadiths_collection=cfg.hadiths_collection,
        schedule_collection=cfg.schedule_collection,
    )
