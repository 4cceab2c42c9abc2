import logging

from fastapi import Response, status

from ..core.exceptions import ImageNotFoundError
from .image_storage import ImageStorage

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
CACHE_CONTROL = "public, max-age=3600"

_SUFFIX_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def guess_content_type(image_id: str) -> str | None:
    lowered = image_id.lower()
    for suffix, content_type in _SUFFIX_TYPES.items():
        if lowered.endswith(suffix):
            return content_type
    return None


def fetch_image(storage: ImageStorage, image_id: str) -> Response:
    """Serve a stored image, answering 404/500 with an empty body on failure."""
    try:
        content = storage.load(image_id)
    except ImageNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    except Exception as exc:
        logger.error("Failed to fetch image %s: %s", image_id, exc)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    media_type = content.content_type or guess_content_type(image_id) or DEFAULT_CONTENT_TYPE
    return Response(
        content=content.data,
        status_code=status.HTTP_200_OK,
        headers={
            "Content-Type": media_type,
            "Cache-Control": CACHE_CONTROL,
            "Content-Length": str(len(content.data)),
        },
    )
