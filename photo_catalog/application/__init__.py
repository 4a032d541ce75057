"""Application layer - business logic services.

This layer contains application services that orchestrate domain operations.
Services are independent of HTTP/FastAPI and can be tested in isolation.
"""

from .services.access_service import AccessService
from .services.catalog_service import CatalogService

__all__ = [
    "AccessService",
    "CatalogService",
]
