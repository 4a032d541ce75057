"""Copy a catalog between storage backends."""
import dataclasses
import logging

from ..passwords import hash_password, is_hashed
from .base import CatalogStore
from .document_store import ALBUMS, PHOTOS, USERS, DocumentStore

logger = logging.getLogger(__name__)


async def copy_catalog(
    source: CatalogStore,
    dest: DocumentStore,
    hash_passwords: bool = False
) -> dict[str, int]:
    """Copy users, albums and photos from ``source`` into ``dest``.

    Both stores must already be open. Documents in ``dest`` with the same
    ids are replaced, so the copy can be re-run.

    Args:
        source: Store to read from
        dest: Document store to write into
        hash_passwords: Replace plaintext credentials with bcrypt hashes

    Returns:
        Count of documents written per collection
    """
    users = await source.get_all_users()
    albums = await source.get_all_albums()
    photos = await source.get_all_photos()

    if hash_passwords:
        users = [
            u if is_hashed(u.password) else dataclasses.replace(u, password=hash_password(u.password))
            for u in users
        ]

    counts = {
        USERS: await dest.import_documents(USERS, [u.to_document() for u in users]),
        ALBUMS: await dest.import_documents(ALBUMS, [a.to_document() for a in albums]),
        PHOTOS: await dest.import_documents(PHOTOS, [p.to_document() for p in photos]),
    }
    logger.info(
        "Copied catalog: %d users, %d albums, %d photos",
        counts[USERS], counts[ALBUMS], counts[PHOTOS]
    )
    return counts
