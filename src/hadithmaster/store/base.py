"""Base content store interface.

Defines the interface every document store backend implements. The daily
hadith engine depends only on the three query shapes below: equality-filtered
lookup with an optional limit, lookup by identifier, and insert.
"""

from abc import ABC, abstractmethod
from typing import Any

Document = dict[str, Any]


class StoreError(Exception):
    """Base exception for content store errors."""

    pass


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached or a query fails in transport."""

    pass


class ContentStore(ABC):
    """Abstract base class for document stores.

    To add a new backend:
    1. Create a class that extends ContentStore
    2. Implement query(), get(), insert()
    3. Register it in make_content_store()

    Every returned document is a plain dict carrying its identifier under
    the ``id`` key.
    """

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        """Return documents whose fields equal every value in ``filters``.

        Args:
            collection: Collection name
            filters: Field name to required value (equality only)
            limit: Maximum number of documents to return
            order_by: Optional field to order by
            descending: Reverse the ordering

        Raises:
            StoreUnavailableError: If the store cannot be queried
        """
        pass

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Document | None:
        """Fetch one document by identifier, None if it does not exist.

        Raises:
            StoreUnavailableError: If the store cannot be queried
        """
        pass

    @abstractmethod
    def insert(self, collection: str, data: Document, doc_id: str | None = None) -> str:
        """Insert a document and return its identifier.

        Args:
            collection: Collection name
            data: Document fields (JSON-safe)
            doc_id: Explicit identifier; the store assigns one when omitted

        Raises:
            StoreUnavailableError: If the write fails
        """
        pass

    def close(self) -> None:
        """Release connections. Default is a no-op."""
        pass
