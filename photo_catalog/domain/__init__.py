# Domain layer - entities, results and pure formatting
"""
Domain layer contains:
- Catalog entities (Photo, Album, User)
- Operation results (CatalogResult, AccessDecision, ErrorKind)
- Pure display formatting (dates, resolutions, CSV)

This layer has no dependencies on storage or presentation.
"""
from .models import (
    Photo,
    Album,
    User,
    AuthenticatedUser,
    PhotoView,
    ErrorKind,
    CatalogResult,
    AccessDecision,
)
from .formatting import CSV_HEADER, format_photo_date, format_resolution, render_album_csv

__all__ = [
    "Photo",
    "Album",
    "User",
    "AuthenticatedUser",
    "PhotoView",
    "ErrorKind",
    "CatalogResult",
    "AccessDecision",
    "CSV_HEADER",
    "format_photo_date",
    "format_resolution",
    "render_album_csv",
]
