"""Content store clients for the hadith and schedule collections.

Backends:
- SQLite: local JSON document table (default)
- Firestore: Google Cloud Firestore
"""

from .base import ContentStore, Document, StoreError, StoreUnavailableError
from .factory import make_content_store, make_repository
from .repository import HADITHS_COLLECTION, SCHEDULE_COLLECTION, HadithRepository

__all__ = [
    "ContentStore",
    "Document",
    "HadithRepository",
    "HADITHS_COLLECTION",
    "SCHEDULE_COLLECTION",
    "StoreError",
    "StoreUnavailableError",
    "make_content_store",
    "make_repository",
]
