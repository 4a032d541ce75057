"""Storage abstraction layer for the catalog.

Supports multiple backends: flat JSON files and a SQLite document store.
"""
from .base import (
    CatalogStore,
    StoreConfig,
    StorageError,
    StorageReadError,
    StorageWriteError,
    WriteResult,
)
from .json_store import JsonFileStore
from .document_store import DocumentStore
from .factory import create_store, get_store_config
from .migration import copy_catalog

__all__ = [
    "CatalogStore",
    "StoreConfig",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "WriteResult",
    "JsonFileStore",
    "DocumentStore",
    "create_store",
    "get_store_config",
    "copy_catalog",
]
