"""Catalog service - photo lookup, editing, tagging and album listings.

This service encapsulates business logic for:
- Resolving a photo into a denormalized view (album names, owner name)
- Partial title/description updates that skip blank input
- Case-insensitive, duplicate-free tagging
- Listing and exporting the photos of albums matched by name
"""
import dataclasses
import logging
from typing import Optional

from ...domain.formatting import format_photo_date, format_resolution, render_album_csv
from ...domain.models import AccessDecision, CatalogResult, ErrorKind, Photo, PhotoView
from ...infrastructure.storage import CatalogStore
from .access_service import AccessService

logger = logging.getLogger(__name__)

UNKNOWN_OWNER = "Unknown"

INVALID_ID_MESSAGE = "Invalid ID. Please enter a number."
PHOTO_NOT_FOUND_MESSAGE = "Sorry, a photo with that ID could not be found."
FORBIDDEN_MESSAGE = "Access denied. You can only access your own photos."
ALBUM_NOT_FOUND_MESSAGE = "Sorry, an album with that name could not be found."
BLANK_ALBUM_MESSAGE = "Please enter an album name."
BLANK_TAG_MESSAGE = "Please enter a tag that is not blank."


def parse_photo_id(raw) -> Optional[int]:
    """Parse a photo id typed by a user.

    Returns:
        The integer id, or None if ``raw`` is not an integer
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _is_valid_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CatalogService:
    """Service for reading and editing the photo catalog.

    Responsibilities:
    - Photo views joined with album and owner names
    - Title/description updates
    - Tag addition
    - Album listings and CSV export

    Operations that take ``user_id`` are ownership-scoped: the access
    service runs first and a denial returns before any album or user read.
    Expected failures come back as ``CatalogResult``; only
    ``StorageError`` is raised.
    """

    render_album_csv = staticmethod(render_album_csv)

    def __init__(self, store: CatalogStore, access_service: AccessService = None):
        self.store = store
        self.access = access_service or AccessService(store)

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _denied(decision: AccessDecision) -> CatalogResult:
        if decision.kind == ErrorKind.NOT_FOUND:
            return CatalogResult.fail(ErrorKind.NOT_FOUND, PHOTO_NOT_FOUND_MESSAGE)
        return CatalogResult.fail(ErrorKind.FORBIDDEN, FORBIDDEN_MESSAGE)

    async def _load_photo(self, photo_id: int, user_id: Optional[int]):
        """Fetch a photo, through the access check when a user is given.

        Returns:
            Tuple of (photo, None) or (None, failure result)
        """
        if not _is_valid_id(photo_id):
            return None, CatalogResult.fail(ErrorKind.INVALID_INPUT, INVALID_ID_MESSAGE)

        if user_id is not None:
            decision = await self.access.authorize(user_id, photo_id)
            if not decision.allowed:
                return None, self._denied(decision)
            return decision.photo, None

        photo = await self.store.find_photo_by_id(photo_id)
        if photo is None:
            return None, CatalogResult.fail(ErrorKind.NOT_FOUND, PHOTO_NOT_FOUND_MESSAGE)
        return photo, None

    # ========================================================================
    # Photo views
    # ========================================================================

    async def resolve_photo_view(self, photo_id: int, user_id: int = None) -> CatalogResult:
        """Build the denormalized view of a photo.

        Args:
            photo_id: Photo ID
            user_id: Logged-in user, enables the ownership check

        Returns:
            Result with ``view`` set, or NOT_FOUND/FORBIDDEN
        """
        photo, failure = await self._load_photo(photo_id, user_id)
        if failure:
            return failure

        album_names = []
        if photo.albums:
            albums = await self.store.get_albums_by_ids(photo.albums)
            names_by_id = {album.id: album.name for album in albums}
            # Keep the photo's album order; dangling ids are skipped
            album_names = [names_by_id[a] for a in photo.albums if a in names_by_id]

        owner_name = None
        if photo.owner is not None:
            owner = await self.store.find_user_by_id(photo.owner)
            owner_name = owner.username if owner else UNKNOWN_OWNER

        view = PhotoView(
            id=photo.id,
            filename=photo.filename,
            title=photo.title,
            description=photo.description,
            date=format_photo_date(photo.date),
            album_names=tuple(album_names),
            tags=tuple(photo.tags),
            resolution=format_resolution(photo.resolution),
            owner_name=owner_name,
        )
        return CatalogResult.ok(view=view)

    async def get_photo_for_update(self, photo_id: int, user_id: int = None) -> CatalogResult:
        """Get the raw photo so callers can show current values before editing."""
        photo, failure = await self._load_photo(photo_id, user_id)
        if failure:
            return failure
        return CatalogResult.ok(photo=photo)

    # ========================================================================
    # Mutations
    # ========================================================================

    async def update_photo_fields(
        self,
        photo_id: int,
        new_title: Optional[str] = None,
        new_description: Optional[str] = None,
        user_id: int = None
    ) -> CatalogResult:
        """Update a photo's title and/or description.

        None or an empty string leaves a field unchanged. Only fields whose
        value actually differs are sent to storage; an empty change set is
        still a successful no-op.

        Args:
            photo_id: Photo ID
            new_title: Replacement title, or None/"" to keep
            new_description: Replacement description, or None/"" to keep
            user_id: Logged-in user, enables the ownership check

        Returns:
            Result with the updated ``photo``
        """
        for value in (new_title, new_description):
            if value is not None and not isinstance(value, str):
                return CatalogResult.fail(ErrorKind.INVALID_INPUT, "Title and description must be text.")

        photo, failure = await self._load_photo(photo_id, user_id)
        if failure:
            return failure

        fields = {}
        if new_title and new_title != photo.title:
            fields["title"] = new_title
        if new_description and new_description != photo.description:
            fields["description"] = new_description

        write = await self.store.update_photo_fields(photo.id, fields)
        if not write.success:
            logger.warning("Photo %s disappeared before its update was written", photo.id)
            return CatalogResult.fail(
                ErrorKind.STORAGE_CONFLICT, "Error updating photo: it no longer exists."
            )

        if fields:
            logger.info("Updated photo %s fields: %s", photo.id, ", ".join(sorted(fields)))
        return CatalogResult.ok(
            "Photo has been updated successfully!",
            photo=dataclasses.replace(photo, **fields)
        )

    async def add_tag_to_photo(self, photo_id: int, new_tag: str, user_id: int = None) -> CatalogResult:
        """Add a tag to a photo unless an equal tag (any case) is present.

        Args:
            photo_id: Photo ID
            new_tag: Tag text; surrounding whitespace is dropped, case kept
            user_id: Logged-in user, enables the ownership check

        Returns:
            Result with the updated ``photo``, or INVALID_INPUT,
            NOT_FOUND, FORBIDDEN, ALREADY_EXISTS
        """
        if not isinstance(new_tag, str) or not new_tag.strip():
            return CatalogResult.fail(ErrorKind.INVALID_INPUT, BLANK_TAG_MESSAGE)
        tag = new_tag.strip()

        photo, failure = await self._load_photo(photo_id, user_id)
        if failure:
            return failure

        already_exists = CatalogResult.fail(
            ErrorKind.ALREADY_EXISTS, f'The tag "{tag}" already exists on this photo.'
        )
        if photo.has_tag(tag):
            return already_exists

        write = await self.store.add_tag_set_wise(photo.id, tag)
        if not write.success:
            logger.warning("Photo %s disappeared before tag %r was written", photo.id, tag)
            return CatalogResult.fail(
                ErrorKind.STORAGE_CONFLICT, "Error adding tag: the photo no longer exists."
            )
        if not write.modified:
            # Another caller added an equal tag between our read and write
            return already_exists

        logger.info("Tagged photo %s with %r", photo.id, tag)
        return CatalogResult.ok(
            "Tag added successfully!",
            photo=dataclasses.replace(photo, tags=photo.tags + [tag])
        )

    # ========================================================================
    # Albums
    # ========================================================================

    async def list_photos_by_album_name(self, album_name: str) -> CatalogResult:
        """List photos in every album whose name matches, ignoring case.

        Album names are not unique, so all matching albums contribute.

        Args:
            album_name: Album name; surrounding whitespace is dropped

        Returns:
            Result with ``photos`` in storage order and the matched ``albums``
        """
        if not isinstance(album_name, str) or not album_name.strip():
            return CatalogResult.fail(ErrorKind.INVALID_INPUT, BLANK_ALBUM_MESSAGE)

        albums = await self.store.find_albums_by_name(album_name.strip(), case_insensitive=True)
        if not albums:
            return CatalogResult.fail(ErrorKind.NOT_FOUND, ALBUM_NOT_FOUND_MESSAGE)

        photos = await self.store.get_photos_by_album_ids({album.id for album in albums})
        return CatalogResult.ok(photos=photos, albums=albums)

    async def album_csv(self, album_name: str) -> CatalogResult:
        """List an album's photos and render them as CSV."""
        result = await self.list_photos_by_album_name(album_name)
        if result.success:
            result.csv = render_album_csv(result.photos)
        return result
