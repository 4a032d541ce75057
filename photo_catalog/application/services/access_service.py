"""Access service - ownership checks and login.

This service encapsulates the access rules for photos:
- A photo is accessible only to the user recorded as its owner
- Unowned legacy photos are not accessible through ownership-scoped operations
- Users log in with username and password
"""
import logging

from ...domain.models import AccessDecision, AuthenticatedUser, CatalogResult, ErrorKind
from ...infrastructure.passwords import verify_password
from ...infrastructure.storage import CatalogStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."


class AccessService:
    """Service for access control.

    Responsibilities:
    - Decide allow/deny for a user and a photo
    - Authenticate users against the user collection
    """

    def __init__(self, store: CatalogStore):
        self.store = store

    async def authorize(self, user_id: int, photo_id: int) -> AccessDecision:
        """Check that a user owns a photo.

        Only the photo is read. On allow, the fetched photo travels with the
        decision so callers need not read it again.

        Args:
            user_id: ID of the logged-in user
            photo_id: ID of the photo

        Returns:
            Allow with the photo, Deny("not found") or Deny("forbidden")
        """
        photo = await self.store.find_photo_by_id(photo_id)

        if photo is None:
            logger.warning("Denied user %s access to photo %s: not found", user_id, photo_id)
            return AccessDecision.deny("not found", ErrorKind.NOT_FOUND)

        if photo.owner != user_id:
            logger.warning(
                "Denied user %s access to photo %s: owned by %s", user_id, photo_id, photo.owner
            )
            return AccessDecision.deny("forbidden", ErrorKind.FORBIDDEN)

        return AccessDecision.allow(photo)

    async def authenticate(self, username: str, password: str) -> CatalogResult:
        """Authenticate user with username and password.

        Args:
            username: Username, matched exactly
            password: Password, matched against the stored credential

        Returns:
            Result carrying the user's id and username (never the password)
        """
        if not isinstance(username, str) or not isinstance(password, str):
            return CatalogResult.fail(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        for user in await self.store.get_all_users():
            if user.username == username and verify_password(password, user.password):
                logger.info("User %s logged in", user.username)
                return CatalogResult.ok(
                    "Login successful.",
                    user=AuthenticatedUser(id=user.id, username=user.username)
                )

        logger.warning("Failed login for username %r", username)
        return CatalogResult.fail(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)
