"""Credential helpers.

Stored user credentials are plaintext in existing catalogs. bcrypt hashes
are recognized by prefix so catalogs can be migrated record by record.
"""
import bcrypt

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_hashed(stored: str) -> bool:
    """Check whether a stored credential is a bcrypt hash."""
    return isinstance(stored, str) and stored.startswith(BCRYPT_PREFIXES)


def hash_password(password: str) -> str:
    """Hash password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        bcrypt hash as text
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, stored: str) -> bool:
    """Verify password against a stored credential.

    Supports both bcrypt hashes and legacy plaintext records.

    Args:
        password: Plain text password
        stored: Stored credential

    Returns:
        True if password matches
    """
    if is_hashed(stored):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            return False

    # Legacy plaintext records compare by exact equality
    return password == stored
