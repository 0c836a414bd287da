import logging
import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from portfolio.api.responses import error_response
from portfolio.dependencies import get_manifest_settings, get_s3_client
from portfolio.exceptions import ObjectNotFoundError, StorageError
from portfolio.logger import events
from portfolio.s3_service import AsyncS3Client
from portfolio.settings import ManifestSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["photos"])

GENERIC_CONTENT_TYPES = {"binary/octet-stream", "application/octet-stream"}


def resolve_media_type(key: str, stored_type: str | None) -> str:
    """Object metadata first, then the extension, then image/jpeg."""
    if stored_type and stored_type not in GENERIC_CONTENT_TYPES:
        return stored_type
    guessed, _ = mimetypes.guess_type(key)
    return guessed or "image/jpeg"


@router.get("/photos", include_in_schema=False)
@router.get("/photos/{path:path}")
async def proxy_photo(
    path: str = "",
    s3_client: AsyncS3Client = Depends(get_s3_client),
    settings: ManifestSettings = Depends(get_manifest_settings),
):
    """Stream a photo from the bucket with long-lived caching headers"""
    key = path.lstrip("/")
    if not key:
        return error_response("Photo path required", status_code=400)

    try:
        stream = await s3_client.open_object(key)
    except ObjectNotFoundError:
        return error_response("Image not found", status_code=404)
    except StorageError as e:
        logger.error(f"[proxy_photo] Error fetching {key}: {e}")
        return error_response("Internal server error")

    headers = {
        "Cache-Control": f"public, max-age={settings.photo_cache_max_age}, immutable",
        "Access-Control-Allow-Origin": "*",
    }
    if stream.etag:
        headers["ETag"] = stream.etag
    if stream.content_length is not None:
        headers["Content-Length"] = str(stream.content_length)

    events.log_event("photo_proxied", key=key)
    return StreamingResponse(
        stream.iter_chunks(),
        media_type=resolve_media_type(key, stream.content_type),
        headers=headers,
    )
