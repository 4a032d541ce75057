"""Abstract catalog storage interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ...domain.models import Album, Photo, User


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Failed to read a collection."""
    pass


class StorageWriteError(StorageError):
    """Failed to persist a change."""
    pass


# Only these photo fields may be changed through update_photo_fields
UPDATABLE_PHOTO_FIELDS = frozenset({"title", "description"})


@dataclass
class StoreConfig:
    """Storage configuration."""
    backend: str  # 'json' or 'document'

    # Flat-file settings
    data_dir: Optional[Path] = None

    # Document store settings
    database_path: Optional[Path] = None

    def __post_init__(self):
        if self.backend == "json" and self.data_dir is None:
            from ...config import DATA_DIR
            self.data_dir = DATA_DIR
        if self.backend == "document" and self.database_path is None:
            from ...config import DATABASE_PATH
            self.database_path = DATABASE_PATH


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a targeted write.

    ``matched`` is False when no document had the requested id.
    ``modified`` is False when the document was found but already in the
    requested state (empty field set, tag already present).
    """
    matched: bool
    modified: bool = False

    @property
    def success(self) -> bool:
        return self.matched


def validate_update_fields(fields: dict) -> dict:
    """Reject keys that are not updatable photo fields."""
    unknown = set(fields) - UPDATABLE_PHOTO_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    return dict(fields)


class CatalogStore(ABC):
    """Abstract interface for catalog storage.

    Implementations:
    - JsonFileStore: photos.json / albums.json / users.json on disk
    - DocumentStore: JSON documents in SQLite

    Stores are constructed unopened. The process entry point calls
    ``open()`` and ``close()`` (or uses ``async with``).
    """

    async def open(self) -> None:
        """Acquire underlying resources."""
        pass

    async def close(self) -> None:
        """Release underlying resources."""
        pass

    async def __aenter__(self) -> "CatalogStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @abstractmethod
    async def get_all_photos(self) -> list[Photo]:
        """Return every photo in storage order."""
        pass

    @abstractmethod
    async def get_all_albums(self) -> list[Album]:
        """Return every album in storage order."""
        pass

    @abstractmethod
    async def get_all_users(self) -> list[User]:
        """Return every user in storage order."""
        pass

    @abstractmethod
    async def find_photo_by_id(self, photo_id: int) -> Optional[Photo]:
        """Get a photo by id, or None."""
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by id, or None."""
        pass

    @abstractmethod
    async def get_albums_by_ids(self, album_ids: Iterable[int]) -> list[Album]:
        """Get albums whose id is in ``album_ids``.

        Unknown ids are ignored. Order follows storage, not the argument.
        """
        pass

    @abstractmethod
    async def find_albums_by_name(self, name: str, case_insensitive: bool = True) -> list[Album]:
        """Get every album whose name equals ``name``.

        Args:
            name: Album name to match exactly
            case_insensitive: Compare with Unicode case folding

        Returns:
            All matching albums (names are not unique)
        """
        pass

    @abstractmethod
    async def get_photos_by_album_ids(self, album_ids: Iterable[int]) -> list[Photo]:
        """Get photos whose ``albums`` intersects ``album_ids``."""
        pass

    @abstractmethod
    async def update_photo_fields(self, photo_id: int, fields: dict) -> WriteResult:
        """Partially update a photo.

        Only the supplied keys change. An empty mapping is a no-op that
        still reports ``matched=True`` for an existing photo.

        Raises:
            ValueError: If a key is not an updatable field
            StorageWriteError: If the write fails
        """
        pass

    @abstractmethod
    async def add_tag_set_wise(self, photo_id: int, tag: str) -> WriteResult:
        """Append ``tag`` unless an equal tag (case-insensitive) is present.

        Raises:
            StorageWriteError: If the write fails
        """
        pass
