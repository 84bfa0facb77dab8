"""Export of edited images as timestamped files."""

import mimetypes
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .logger import get_logger
from .images import normalize_media_type
from ..models.schemas import EncodedImage

logger = get_logger(__name__)

# mimetypes maps image/jpeg to .jpe on some platforms
PREFERRED_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def extension_for(media_type: str) -> str:
    """File extension for a media type, defaulting to .png."""
    canonical = normalize_media_type(media_type)
    if canonical in PREFERRED_EXTENSIONS:
        return PREFERRED_EXTENSIONS[canonical]
    return mimetypes.guess_extension(canonical) or ".png"


def export_filename(
    prefix: str,
    media_type: str = "image/png",
    when: Optional[datetime] = None,
) -> str:
    """
    Build <prefix>-edit-<epoch millis><ext>.

    Args:
        prefix: Application prefix
        media_type: Media type of the exported image
        when: Timestamp (defaults to now)
    """
    if when is None:
        when = datetime.now(timezone.utc)
    millis = int(when.timestamp() * 1000)
    return f"{prefix}-edit-{millis}{extension_for(media_type)}"


def save_result(
    image: EncodedImage,
    directory: Path,
    prefix: str,
    when: Optional[datetime] = None,
) -> Path:
    """
    Write a processed image to disk.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / export_filename(prefix, image.media_type, when)
    path.write_bytes(image.payload)

    logger.info(
        f"Exported edit to {path.name}",
        extra={"path": str(path), "size_kb": image.size_bytes / 1024},
    )

    return path
