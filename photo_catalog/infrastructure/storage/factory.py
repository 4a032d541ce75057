"""Factory for creating catalog storage backends."""
import os
from pathlib import Path

from ... import config as app_config
from .base import CatalogStore, StoreConfig
from .document_store import DocumentStore
from .json_store import JsonFileStore

BACKENDS = ("json", "document")


def get_store_config(backend: str = None) -> StoreConfig:
    """Get storage configuration from environment variables.

    Environment variables:
    - PHOTO_CATALOG_BACKEND: 'json' (default) or 'document'
    - PHOTO_CATALOG_DATA_DIR: Directory holding the JSON collections
    - PHOTO_CATALOG_DB_PATH: SQLite file for the document store

    Args:
        backend: Override the configured backend
    """
    backend = (backend or app_config.STORAGE_BACKEND).lower()

    if backend == "json":
        data_dir = os.environ.get("PHOTO_CATALOG_DATA_DIR")
        return StoreConfig(
            backend="json",
            data_dir=Path(data_dir) if data_dir else app_config.DATA_DIR
        )

    elif backend == "document":
        db_path = os.environ.get("PHOTO_CATALOG_DB_PATH")
        return StoreConfig(
            backend="document",
            database_path=Path(db_path) if db_path else app_config.DATABASE_PATH
        )

    else:
        raise ValueError(f"Unknown storage backend: {backend}")


def create_store(config: StoreConfig) -> CatalogStore:
    """Create an unopened storage backend from configuration.

    The caller owns the lifecycle: open it, inject it, close it.

    Args:
        config: Storage configuration

    Returns:
        Storage backend instance
    """
    if config.backend == "json":
        return JsonFileStore(config)

    elif config.backend == "document":
        return DocumentStore(config)

    else:
        raise ValueError(f"Unknown storage backend: {config.backend}")
