"""Display formatting for catalog records.

Everything here is pure: no storage access, no locale dependence.
"""
from datetime import datetime
from typing import Iterable

from .models import Photo, Resolution

CSV_HEADER = "filename,resolution,tags"

# Fixed English month names so rendering does not follow the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_photo_date(value: str) -> str:
    """Render an ISO-8601 timestamp as ``"January 5, 2025"``.

    The calendar date is taken as written, without timezone conversion.
    Values that do not parse are returned unchanged.
    """
    if value is None or value == "":
        return ""
    if not isinstance(value, str):
        return str(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return value
    return f"{MONTH_NAMES[moment.month - 1]} {moment.day}, {moment.year}"


def format_resolution(resolution: Resolution) -> str:
    """Normalize a stored resolution to ``"<w>x<h>"`` or its string form."""
    if resolution is None:
        return ""
    if isinstance(resolution, (list, tuple)):
        return "x".join(str(part) for part in resolution)
    return str(resolution)


def render_album_csv(photos: Iterable[Photo]) -> str:
    """Render photos as ``filename,resolution,tag1:tag2`` lines under a header.

    Fields are not quoted; commas inside filenames or tags are unsupported.
    """
    lines = [CSV_HEADER]
    for photo in photos:
        tags_text = ":".join(photo.tags)
        lines.append(f"{photo.filename},{format_resolution(photo.resolution)},{tags_text}")
    return "\n".join(lines)
