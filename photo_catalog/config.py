"""Application configuration and constants."""
import logging
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Storage backend: "json" (flat files) or "document" (SQLite document store)
STORAGE_BACKEND = os.environ.get("PHOTO_CATALOG_BACKEND", "json").lower()
DATA_DIR = Path(os.environ.get("PHOTO_CATALOG_DATA_DIR", str(BASE_DIR / "data")))
DATABASE_PATH = Path(os.environ.get("PHOTO_CATALOG_DB_PATH", str(BASE_DIR / "catalog.db")))

# Collection file names for the flat-file backend
PHOTOS_FILE = "photos.json"
ALBUMS_FILE = "albums.json"
USERS_FILE = "users.json"

# Logging
LOG_LEVEL = os.environ.get("PHOTO_CATALOG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Session configuration
SESSION_COOKIE = "photo_catalog_session"
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days

# Paths that don't require authentication
PUBLIC_PATHS = {"/login", "/health", "/docs", "/openapi.json"}


def configure_logging(level: str = None) -> None:
    """Configure root logging for an entry point (CLI or web server)."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
