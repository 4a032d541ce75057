"""Application services - business logic layer."""

from .access_service import AccessService
from .catalog_service import CatalogService, parse_photo_id

__all__ = [
    "AccessService",
    "CatalogService",
    "parse_photo_id",
]
