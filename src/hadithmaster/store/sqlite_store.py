"""SQLite-backed document store.

Documents are stored as JSON text in a single table keyed by collection and
identifier. Equality filters and ordering use SQLite's JSON functions, so a
filter on ``isActive`` or ``date`` works the same way it does against
Firestore. Rows come back in insertion order unless ``order_by`` is given,
which keeps "first match" stable when a date has more than one schedule row.
"""

import json
import logging
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .base import ContentStore, Document, StoreError, StoreUnavailableError

logger = logging.getLogger(__name__)


class SQLiteContentStore(ContentStore):
    """Document store on a local SQLite file."""

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        """Initialize the store. The database is opened on first use.

        Args:
            db_path: Path to the SQLite database file
            timeout: Seconds to wait on a locked database
        """
        self.db_path = db_path
        self.timeout = timeout
        self._schema_ready = False

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and always close it.

        The schema is created on the first connection, so constructing the
        store never touches the database file.
        """
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailableError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            if not self._schema_ready:
                self._create_schema(conn)
                self._schema_ready = True
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise StoreError(f"Constraint violated: {e}") from e
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreUnavailableError(f"SQLite error: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _create_schema(conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                data TEXT NOT NULL,
                UNIQUE (collection, id)
            )
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_collection
            ON documents(collection)
        """)

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Document:
        doc = json.loads(row["data"])
        doc["id"] = row["id"]
        return doc

    def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        clauses = ["collection = ?"]
        params: list[Any] = [collection]

        for field, value in (filters or {}).items():
            if value is None:
                clauses.append("json_extract(data, ?) IS NULL")
                params.append(f"$.{field}")
            else:
                clauses.append("json_extract(data, ?) = ?")
                params.extend([f"$.{field}", value])

        sql = f"SELECT id, data FROM documents WHERE {' AND '.join(clauses)}"

        if order_by:
            direction = "DESC" if descending else "ASC"
            sql += f" ORDER BY json_extract(data, ?) {direction}, seq"
            params.append(f"$.{order_by}")
        else:
            sql += " ORDER BY seq"

        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_document(row) for row in rows]

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT id, data FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            ).fetchone()
        return self._row_to_document(row) if row else None

    def insert(self, collection: str, data: Document, doc_id: str | None = None) -> str:
        doc_id = doc_id or uuid.uuid4().hex
        payload = {k: v for k, v in data.items() if k != "id"}
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)",
                (collection, doc_id, json.dumps(payload, default=str)),
            )
        logger.debug(f"Inserted {collection}/{doc_id}")
        return doc_id
