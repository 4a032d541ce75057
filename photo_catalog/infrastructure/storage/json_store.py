"""Flat-file JSON catalog storage."""
import asyncio
import json
import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

import aiofiles
import aiofiles.os

from ...config import ALBUMS_FILE, PHOTOS_FILE, USERS_FILE
from ...domain.models import Album, Photo, User
from .base import (
    CatalogStore,
    StoreConfig,
    StorageReadError,
    StorageWriteError,
    WriteResult,
    validate_update_fields,
)

logger = logging.getLogger(__name__)


class JsonFileStore(CatalogStore):
    """Catalog stored as three JSON documents in one directory.

    Layout:
        data_dir/
            photos.json   list of photo objects (a single object is accepted)
            albums.json   list of album objects
            users.json    list of user objects

    Every read goes back to disk so external edits are picked up. Writes are
    read-modify-write cycles serialized by one lock and land atomically via
    a temporary file and ``os.replace``.
    """

    def __init__(self, config: StoreConfig):
        """Initialize flat-file storage.

        Args:
            config: Storage configuration with data_dir
        """
        if config.backend != "json":
            raise ValueError(f"JsonFileStore requires backend='json', got '{config.backend}'")

        self.config = config
        self.data_dir = Path(config.data_dir)
        self._write_lock = asyncio.Lock()

    def _get_path(self, file_name: str) -> Path:
        return self.data_dir / file_name

    async def _load(self, file_name: str):
        path = self._get_path(file_name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
            return json.loads(content)
        except (IOError, OSError) as e:
            raise StorageReadError(f"Could not load the file named '{file_name}': {e}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageReadError(f"File '{file_name}' is not valid JSON: {e}")

    async def _save(self, file_name: str, data) -> None:
        path = self._get_path(file_name)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=4))
            await aiofiles.os.replace(tmp_path, path)
        except (IOError, OSError) as e:
            raise StorageWriteError(f"Could not save the file named '{file_name}': {e}")
        logger.debug("Data saved to %s", path)

    async def _load_collection(self, file_name: str) -> list[dict]:
        data = await self._load(file_name)
        # A collection holding one record may be stored as a bare object
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise StorageReadError(f"File '{file_name}' does not hold a list of records")
        return data

    async def get_all_photos(self) -> list[Photo]:
        return [Photo.from_document(doc) for doc in await self._load_collection(PHOTOS_FILE)]

    async def get_all_albums(self) -> list[Album]:
        return [Album.from_document(doc) for doc in await self._load_collection(ALBUMS_FILE)]

    async def get_all_users(self) -> list[User]:
        return [User.from_document(doc) for doc in await self._load_collection(USERS_FILE)]

    async def find_photo_by_id(self, photo_id: int) -> Optional[Photo]:
        for photo in await self.get_all_photos():
            if photo.id == photo_id:
                return photo
        return None

    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        for user in await self.get_all_users():
            if user.id == user_id:
                return user
        return None

    async def get_albums_by_ids(self, album_ids: Iterable[int]) -> list[Album]:
        wanted = set(album_ids)
        if not wanted:
            return []
        return [album for album in await self.get_all_albums() if album.id in wanted]

    async def find_albums_by_name(self, name: str, case_insensitive: bool = True) -> list[Album]:
        target = (name or "").casefold() if case_insensitive else (name or "")
        matches = []
        for album in await self.get_all_albums():
            album_name = album.name.casefold() if case_insensitive else album.name
            if album.name and album_name == target:
                matches.append(album)
        return matches

    async def get_photos_by_album_ids(self, album_ids: Iterable[int]) -> list[Photo]:
        wanted = set(album_ids)
        if not wanted:
            return []
        return [
            photo for photo in await self.get_all_photos()
            if wanted.intersection(photo.albums)
        ]

    async def _modify_photo(self, photo_id: int, change: Callable[[dict], bool]) -> WriteResult:
        """Apply ``change`` to the stored photo document under the write lock.

        ``change`` mutates the document in place and returns whether it
        modified anything. The file is only rewritten when it did.
        """
        async with self._write_lock:
            raw = await self._load(PHOTOS_FILE)
            single_object = isinstance(raw, dict)
            docs = [raw] if single_object else raw
            if not isinstance(docs, list):
                raise StorageReadError(f"File '{PHOTOS_FILE}' does not hold a list of records")

            for doc in docs:
                if doc.get("id") == photo_id:
                    modified = change(doc)
                    if modified:
                        await self._save(PHOTOS_FILE, docs[0] if single_object else docs)
                    return WriteResult(matched=True, modified=modified)
            return WriteResult(matched=False)

    async def update_photo_fields(self, photo_id: int, fields: dict) -> WriteResult:
        updates = validate_update_fields(fields)

        def apply(doc: dict) -> bool:
            changed = False
            for key, value in updates.items():
                if doc.get(key) != value:
                    doc[key] = value
                    changed = True
            return changed

        return await self._modify_photo(photo_id, apply)

    async def add_tag_set_wise(self, photo_id: int, tag: str) -> WriteResult:
        wanted = tag.casefold()

        def apply(doc: dict) -> bool:
            tags = doc.get("tags")
            if not isinstance(tags, list):
                tags = doc["tags"] = []
            if any(str(existing).casefold() == wanted for existing in tags):
                return False
            tags.append(tag)
            return True

        return await self._modify_photo(photo_id, apply)

    async def replace_collections(
        self,
        photos: list[Photo] = None,
        albums: list[Album] = None,
        users: list[User] = None
    ) -> None:
        """Overwrite whole collections (seeding and tests).

        Args:
            photos: New photo collection, or None to leave untouched
            albums: New album collection, or None to leave untouched
            users: New user collection, or None to leave untouched
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        async with self._write_lock:
            if photos is not None:
                await self._save(PHOTOS_FILE, [p.to_document() for p in photos])
            if albums is not None:
                await self._save(ALBUMS_FILE, [a.to_document() for a in albums])
            if users is not None:
                await self._save(USERS_FILE, [u.to_document() for u in users])
