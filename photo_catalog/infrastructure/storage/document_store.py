"""SQLite-backed JSON document store.

Each record is a JSON document in a single ``documents`` table keyed by
``(collection, id)``. Queries reach into documents with SQLite's JSON
functions, so partial updates are field-level ``json_set`` writes and tag
addition is one guarded statement rather than a read-modify-write cycle.
"""
import json
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Optional

import aiosqlite

from ...domain.models import Album, Photo, User
from .base import (
    CatalogStore,
    StoreConfig,
    StorageError,
    StorageReadError,
    StorageWriteError,
    WriteResult,
    validate_update_fields,
)

logger = logging.getLogger(__name__)

PHOTOS = "photos"
ALBUMS = "albums"
USERS = "users"
COLLECTIONS = (PHOTOS, ALBUMS, USERS)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS documents (
        collection TEXT NOT NULL,
        id INTEGER NOT NULL,
        body TEXT NOT NULL,
        PRIMARY KEY (collection, id)
    )
"""

# Appends the tag only when no case-folded equal tag is already present.
ADD_TAG_SQL = """
    UPDATE documents
    SET body = json_set(
        body, '$.tags',
        json_insert(COALESCE(json_extract(body, '$.tags'), '[]'), '$[#]', ?)
    )
    WHERE collection = 'photos' AND id = ?
      AND NOT EXISTS (
        SELECT 1 FROM json_each(documents.body, '$.tags')
        WHERE casefold(json_each.value) = casefold(?)
      )
"""


def _casefold(value):
    """SQL function: Unicode case folding, matching ``str.casefold``."""
    if value is None:
        return None
    return str(value).casefold()


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class DocumentStore(CatalogStore):
    """Document database backend on aiosqlite.

    Documents keep the flat-file shape, so records copied between backends
    are unchanged. Storage order is insertion order (rowid); upserts keep
    a document's original position.
    """

    def __init__(self, config: StoreConfig):
        """Initialize document store.

        Args:
            config: Storage configuration with database_path
        """
        if config.backend != "document":
            raise ValueError(f"DocumentStore requires backend='document', got '{config.backend}'")

        self.config = config
        self.database_path = Path(config.database_path)
        self._conn: Optional[aiosqlite.Connection] = None

    async def open(self) -> None:
        """Connect and create the schema if needed."""
        if self._conn is not None:
            return
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        conn = None
        try:
            conn = await aiosqlite.connect(self.database_path)
            conn.row_factory = aiosqlite.Row
            await conn.create_function("casefold", 1, _casefold, deterministic=True)
            await conn.execute(SCHEMA)
            await conn.commit()
        except sqlite3.Error as e:
            # The connection's worker thread must be stopped or the process cannot exit
            if conn is not None:
                await conn.close()
            raise StorageError(f"Could not open document store at {self.database_path}: {e}")
        self._conn = conn
        logger.info("Opened document store %s", self.database_path)

    async def close(self) -> None:
        """Close the connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageError("Document store is not open")
        return self._conn

    async def _fetchall(self, sql: str, parameters: tuple = ()) -> list[dict]:
        """Fetch matching documents, decoded, in storage order."""
        conn = self._connection()
        try:
            cursor = await conn.execute(sql, parameters)
            rows = await cursor.fetchall()
            await cursor.close()
        except sqlite3.Error as e:
            raise StorageReadError(f"Document query failed: {e}")
        try:
            return [json.loads(row["body"]) for row in rows]
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Stored document is not valid JSON: {e}")

    async def _fetchone(self, sql: str, parameters: tuple = ()) -> Optional[dict]:
        docs = await self._fetchall(sql, parameters)
        return docs[0] if docs else None

    async def _write(self, sql: str, parameters: tuple = ()) -> int:
        """Execute a write and commit. Returns the affected row count."""
        conn = self._connection()
        try:
            cursor = await conn.execute(sql, parameters)
            rowcount = cursor.rowcount
            await cursor.close()
            await conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(f"Document write failed: {e}")
        return rowcount

    async def _exists(self, collection: str, doc_id: int) -> bool:
        conn = self._connection()
        try:
            cursor = await conn.execute(
                "SELECT 1 FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id)
            )
            row = await cursor.fetchone()
            await cursor.close()
        except sqlite3.Error as e:
            raise StorageReadError(f"Document query failed: {e}")
        return row is not None

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_all_photos(self) -> list[Photo]:
        docs = await self._fetchall(
            "SELECT body FROM documents WHERE collection = ? ORDER BY rowid", (PHOTOS,)
        )
        return [Photo.from_document(doc) for doc in docs]

    async def get_all_albums(self) -> list[Album]:
        docs = await self._fetchall(
            "SELECT body FROM documents WHERE collection = ? ORDER BY rowid", (ALBUMS,)
        )
        return [Album.from_document(doc) for doc in docs]

    async def get_all_users(self) -> list[User]:
        docs = await self._fetchall(
            "SELECT body FROM documents WHERE collection = ? ORDER BY rowid", (USERS,)
        )
        return [User.from_document(doc) for doc in docs]

    async def find_photo_by_id(self, photo_id: int) -> Optional[Photo]:
        doc = await self._fetchone(
            "SELECT body FROM documents WHERE collection = ? AND id = ?", (PHOTOS, photo_id)
        )
        return Photo.from_document(doc) if doc else None

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        doc = await self._fetchone(
            "SELECT body FROM documents WHERE collection = ? AND id = ?", (USERS, user_id)
        )
        return User.from_document(doc) if doc else None

    async def get_albums_by_ids(self, album_ids: Iterable[int]) -> list[Album]:
        ids = sorted(set(album_ids))
        if not ids:
            return []
        docs = await self._fetchall(
            f"""SELECT body FROM documents
                WHERE collection = ? AND id IN ({_placeholders(len(ids))})
                ORDER BY rowid""",
            (ALBUMS, *ids)
        )
        return [Album.from_document(doc) for doc in docs]

    async def find_albums_by_name(self, name: str, case_insensitive: bool = True) -> list[Album]:
        if case_insensitive:
            condition = "casefold(json_extract(body, '$.name')) = casefold(?)"
        else:
            condition = "json_extract(body, '$.name') = ?"
        docs = await self._fetchall(
            f"""SELECT body FROM documents
                WHERE collection = ? AND {condition}
                ORDER BY rowid""",
            (ALBUMS, name or "")
        )
        return [Album.from_document(doc) for doc in docs]

    async def get_photos_by_album_ids(self, album_ids: Iterable[int]) -> list[Photo]:
        ids = sorted(set(album_ids))
        if not ids:
            return []
        docs = await self._fetchall(
            f"""SELECT body FROM documents
                WHERE collection = ?
                  AND EXISTS (
                    SELECT 1 FROM json_each(documents.body, '$.albums')
                    WHERE json_each.value IN ({_placeholders(len(ids))})
                  )
                ORDER BY rowid""",
            (PHOTOS, *ids)
        )
        return [Photo.from_document(doc) for doc in docs]

    # =========================================================================
    # Writes
    # =========================================================================

    async def update_photo_fields(self, photo_id: int, fields: dict) -> WriteResult:
        updates = validate_update_fields(fields)
        if not updates:
            return WriteResult(matched=await self._exists(PHOTOS, photo_id))

        # One path/value pair per supplied field, so untouched fields are never rewritten
        set_args = ", ".join(f"'$.{key}', ?" for key in updates)
        rowcount = await self._write(
            f"""UPDATE documents SET body = json_set(body, {set_args})
                WHERE collection = ? AND id = ?""",
            (*updates.values(), PHOTOS, photo_id)
        )
        return WriteResult(matched=rowcount > 0, modified=rowcount > 0)

    async def add_tag_set_wise(self, photo_id: int, tag: str) -> WriteResult:
        rowcount = await self._write(ADD_TAG_SQL, (tag, photo_id, tag))
        if rowcount > 0:
            return WriteResult(matched=True, modified=True)
        # Nothing written: either the photo is gone or the tag was already there
        return WriteResult(matched=await self._exists(PHOTOS, photo_id))

    async def import_documents(self, collection: str, documents: Iterable[dict]) -> int:
        """Insert or replace documents in a collection.

        Existing documents with the same id are replaced in place.

        Args:
            collection: 'photos', 'albums' or 'users'
            documents: Documents carrying an integer ``id``

        Returns:
            Number of documents written
        """
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")

        rows = [(collection, doc["id"], json.dumps(doc)) for doc in documents]
        if not rows:
            return 0

        conn = self._connection()
        try:
            await conn.executemany(
                """INSERT INTO documents (collection, id, body) VALUES (?, ?, ?)
                   ON CONFLICT(collection, id) DO UPDATE SET body = excluded.body""",
                rows
            )
            await conn.commit()
        except sqlite3.Error as e:
            raise StorageWriteError(f"Document import failed: {e}")
        return len(rows)
