"""Catalog entities and the result types handed back to callers.

Photos, albums and users are plain dataclasses built from the stored JSON
documents. Both storage backends produce the same document shape, so
``from_document``/``to_document`` are the only translation points.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

Resolution = Union[str, list, tuple, None]

PHOTO_FIELDS = ("id", "filename", "title", "description", "date",
                "albums", "tags", "owner", "resolution")


@dataclass
class Photo:
    """Stored photo record.

    ``extra`` keeps any keys the catalog does not know about so a
    round-trip through a backend never drops data.
    """
    id: int
    filename: str = ""
    title: str = ""
    description: str = ""
    date: str = ""
    albums: list[int] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    owner: Optional[int] = None
    resolution: Resolution = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: dict) -> "Photo":
        return cls(
            id=doc["id"],
            filename=doc.get("filename", ""),
            title=doc.get("title", ""),
            description=doc.get("description", ""),
            date=doc.get("date", ""),
            albums=list(doc.get("albums") or []),
            tags=list(doc.get("tags") or []),
            owner=doc.get("owner"),
            resolution=doc.get("resolution"),
            extra={k: v for k, v in doc.items() if k not in PHOTO_FIELDS},
        )

    def to_document(self) -> dict:
        doc = dict(self.extra)
        doc.update({
            "id": self.id,
            "filename": self.filename,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "albums": list(self.albums),
            "tags": list(self.tags),
            "resolution": self.resolution,
        })
        # Unowned legacy records stay without an owner key
        if self.owner is not None:
            doc["owner"] = self.owner
        return doc

    def has_tag(self, tag: str) -> bool:
        """Check for a tag using case-insensitive comparison."""
        wanted = tag.casefold()
        return any(existing.casefold() == wanted for existing in self.tags)


@dataclass
class Album:
    id: int
    name: str = ""

    @classmethod
    def from_document(cls, doc: dict) -> "Album":
        return cls(id=doc["id"], name=doc.get("name") or "")

    def to_document(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class User:
    id: int
    username: str
    password: str = field(default="", repr=False)

    @classmethod
    def from_document(cls, doc: dict) -> "User":
        return cls(
            id=doc["id"],
            username=doc.get("username", ""),
            password=doc.get("password", ""),
        )

    def to_document(self) -> dict:
        return {"id": self.id, "username": self.username, "password": self.password}


@dataclass(frozen=True)
class AuthenticatedUser:
    """User identity returned after login. Never carries the credential."""
    id: int
    username: str

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username}


@dataclass(frozen=True)
class PhotoView:
    """Denormalized, read-only projection of a photo.

    Built per request from the photo, its albums and its owner. Never
    written back to storage.
    """
    id: int
    filename: str
    title: str
    description: str
    date: str
    album_names: tuple[str, ...]
    tags: tuple[str, ...]
    resolution: str
    owner_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "filename": self.filename,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "album_names": list(self.album_names),
            "tags": list(self.tags),
            "resolution": self.resolution,
            "owner_name": self.owner_name,
        }


class ErrorKind(str, Enum):
    """Expected, non-exceptional failure outcomes."""
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_INPUT = "invalid_input"
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    STORAGE_CONFLICT = "storage_conflict"


@dataclass
class CatalogResult:
    """Outcome of a catalog operation.

    ``success`` is False exactly when ``error`` is set. Payload fields are
    filled depending on the operation.
    """
    success: bool
    message: str = ""
    error: Optional[ErrorKind] = None
    view: Optional[PhotoView] = None
    photo: Optional[Photo] = None
    photos: list[Photo] = field(default_factory=list)
    albums: list[Album] = field(default_factory=list)
    user: Optional[AuthenticatedUser] = None
    csv: Optional[str] = None

    @classmethod
    def ok(cls, message: str = "", **payload: Any) -> "CatalogResult":
        return cls(success=True, message=message, **payload)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "CatalogResult":
        return cls(success=False, message=message, error=error)


@dataclass(frozen=True)
class AccessDecision:
    """Result of an ownership check.

    ``reason`` is the short caller-facing denial reason; ``kind`` keeps the
    NOT_FOUND/FORBIDDEN distinction for logging and message selection.
    """
    allowed: bool
    reason: str = ""
    kind: Optional[ErrorKind] = None
    photo: Optional[Photo] = None

    @classmethod
    def allow(cls, photo: Photo) -> "AccessDecision":
        return cls(allowed=True, photo=photo)

    @classmethod
    def deny(cls, reason: str, kind: ErrorKind) -> "AccessDecision":
        return cls(allowed=False, reason=reason, kind=kind)
