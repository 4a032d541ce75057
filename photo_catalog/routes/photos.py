"""Photo routes - view, update and tag a single photo.

All routes are ownership-scoped to the logged-in user.
"""
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..dependencies import get_catalog_service, raise_for_result, require_user
from ..domain.models import Photo

router = APIRouter(tags=["photos"])


class PhotoUpdateInput(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class TagInput(BaseModel):
    tag: str


def _photo_summary(photo: Photo) -> dict:
    return {
        "id": photo.id,
        "title": photo.title,
        "description": photo.description,
        "tags": list(photo.tags),
    }


@router.get("/api/photos/{photo_id}")
async def get_photo(photo_id: int, request: Request):
    """Get the denormalized photo view."""
    user = require_user(request)
    result = await get_catalog_service(request).resolve_photo_view(photo_id, user_id=user.id)
    raise_for_result(result)
    return result.view.to_dict()


@router.patch("/api/photos/{photo_id}")
async def update_photo(photo_id: int, data: PhotoUpdateInput, request: Request):
    """Update title and/or description. Blank values keep the current text."""
    user = require_user(request)
    result = await get_catalog_service(request).update_photo_fields(
        photo_id, data.title, data.description, user_id=user.id
    )
    raise_for_result(result)
    return {"status": "ok", "message": result.message, "photo": _photo_summary(result.photo)}


@router.post("/api/photos/{photo_id}/tags")
async def add_tag(photo_id: int, data: TagInput, request: Request):
    """Add a tag to a photo."""
    user = require_user(request)
    result = await get_catalog_service(request).add_tag_to_photo(photo_id, data.tag, user_id=user.id)
    raise_for_result(result)
    return {"status": "ok", "message": result.message, "photo": _photo_summary(result.photo)}
