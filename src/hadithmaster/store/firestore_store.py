"""Cloud Firestore document store.

Talks to the same ``hadiths`` and ``dailyHadithSchedule`` collections the
web frontend and the scheduled cloud function use. Credentials come from
the environment (GOOGLE_APPLICATION_CREDENTIALS or the runtime's default
service account).
"""

import logging
from typing import Any

from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter

from .base import ContentStore, Document, StoreError, StoreUnavailableError

logger = logging.getLogger(__name__)

# API failures and credential/token failures (no network to the token endpoint)
TRANSPORT_ERRORS = (api_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


class FirestoreContentStore(ContentStore):
    """Document store backed by Google Cloud Firestore."""

    def __init__(
        self,
        project: str | None = None,
        database: str | None = None,
        client: firestore.Client | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            project: GCP project ID (default: from credentials)
            database: Firestore database name (default: "(default)")
            client: Pre-built client, mainly for tests
        """
        self._project = project or None
        self._database = database or None
        self._client = client

    @property
    def client(self) -> firestore.Client:
        """Lazy-create the Firestore client."""
        if self._client is None:
            try:
                kwargs: dict[str, Any] = {}
                if self._project:
                    kwargs["project"] = self._project
                if self._database:
                    kwargs["database"] = self._database
                self._client = firestore.Client(**kwargs)
            except (auth_exceptions.GoogleAuthError, OSError) as e:
                raise StoreUnavailableError(f"Cannot create Firestore client: {e}") from e
            logger.info(f"Connected to Firestore: {self._project or 'default'}")
        return self._client

    @staticmethod
    def _snapshot_to_document(snapshot: Any) -> Document:
        doc = snapshot.to_dict() or {}
        doc["id"] = snapshot.id
        return doc

    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        try:
            ref: Any = self.client.collection(collection)
            for field, value in (filters or {}).items():
                ref = ref.where(filter=FieldFilter(field, "==", value))
            if order_by:
                direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
                ref = ref.order_by(order_by, direction=direction)
            if limit is not None:
                ref = ref.limit(limit)
            return [self._snapshot_to_document(snap) for snap in ref.stream()]
        except TRANSPORT_ERRORS as e:
            raise StoreUnavailableError(f"Firestore query on {collection} failed: {e}") from e

    def get(self, collection: str, doc_id: str) -> Document | None:
        try:
            snapshot = self.client.collection(collection).document(doc_id).get()
        except TRANSPORT_ERRORS as e:
            raise StoreUnavailableError(f"Firestore get {collection}/{doc_id} failed: {e}") from e
        return self._snapshot_to_document(snapshot) if snapshot.exists else None

    def insert(self, collection: str, data: Document, doc_id: str | None = None) -> str:
        payload = {k: v for k, v in data.items() if k != "id"}
        try:
            col = self.client.collection(collection)
            if doc_id:
                col.document(doc_id).create(payload)
                return doc_id
            _, ref = col.add(payload)
        except api_exceptions.AlreadyExists as e:
            raise StoreError(f"{collection}/{doc_id} already exists") from e
        except TRANSPORT_ERRORS as e:
            raise StoreUnavailableError(f"Firestore insert into {collection} failed: {e}") from e
        return ref.id

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
