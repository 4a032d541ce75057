"""Album routes - photo listings by album name."""
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from ..dependencies import get_catalog_service, raise_for_result, require_user
from ..domain.formatting import format_resolution

router = APIRouter(tags=["albums"])


@router.get("/api/albums/{album_name}/photos")
async def list_album_photos(album_name: str, request: Request):
    """List photos of every album with this name (case-insensitive)."""
    require_user(request)
    result = await get_catalog_service(request).list_photos_by_album_name(album_name)
    raise_for_result(result)
    return {
        "albums": [{"id": a.id, "name": a.name} for a in result.albums],
        "photos": [
            {
                "id": p.id,
                "filename": p.filename,
                "resolution": format_resolution(p.resolution),
                "tags": list(p.tags),
            }
            for p in result.photos
        ],
    }


@router.get("/api/albums/{album_name}/photos.csv")
async def export_album_csv(album_name: str, request: Request):
    """Export an album listing as ``filename,resolution,tags`` CSV."""
    require_user(request)
    result = await get_catalog_service(request).album_csv(album_name)
    raise_for_result(result)
    return PlainTextResponse(result.csv, media_type="text/csv")
