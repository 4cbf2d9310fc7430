import logging
import re
import uuid
from typing import Optional, Tuple
from urllib.parse import urlparse
import cloudinary
import cloudinary.uploader
from app.config import settings
from app.utils.errors import MediaStorageError

logger = logging.getLogger(__name__)

_cloudinary_configured = False
_VERSION_SEGMENT = re.compile(r"^v\d+$")


def _ensure_cloudinary_configured():
    """Ensure Cloudinary is configured"""
    global _cloudinary_configured
    if not _cloudinary_configured:
        if not settings.cloudinary_configured:
            raise MediaStorageError(
                "Cloudinary credentials not configured. Please set CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY, and CLOUDINARY_API_SECRET in .env"
            )
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        _cloudinary_configured = True


def upload_media_to_cloudinary(file_content: bytes, file_name: str, folder: Optional[str] = None) -> dict:
    """
    Upload a media file to Cloudinary
    Returns: {"public_id": "folder/unique_id", "media_url": "https://..."}
    """
    _ensure_cloudinary_configured()
    folder = folder or settings.CLOUDINARY_FOLDER
    try:
        result = cloudinary.uploader.upload(
            file_content,
            public_id=uuid.uuid4().hex,
            folder=folder,
            resource_type="auto",
            filename_override=file_name,
        )
    except Exception as e:
        logger.error(f"Failed to upload media to Cloudinary. FileName={file_name}", exc_info=True)
        raise MediaStorageError(f"Failed to upload file to Cloudinary: {str(e)}") from e

    return {
        "public_id": result["public_id"],
        "media_url": result["secure_url"],
    }


def extract_public_id(media_url: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Derive (public_id, resource_type) from a Cloudinary delivery url:
    https://res.cloudinary.com/<cloud>/<resource_type>/upload/v123/<folder>/<name>.<ext>
    Returns None when the url does not look like one.
    """
    if not media_url:
        return None
    parsed = urlparse(media_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 4 or parts[2] != "upload":
        return None

    resource_type = parts[1]
    rest = parts[3:]
    if rest and _VERSION_SEGMENT.match(rest[0]):
        rest = rest[1:]
    if not rest:
        return None

    public_id = "/".join(rest)
    # Raw files keep their extension as part of the public id
    if resource_type != "raw" and "." in rest[-1]:
        public_id = public_id.rsplit(".", 1)[0]
    return public_id, resource_type


def delete_media_from_cloudinary(media_url: str) -> bool:
    """Delete the blob behind a media url. Failures are logged and reported as False."""
    extracted = extract_public_id(media_url)
    if extracted is None:
        logger.warning(f"Unable to extract the Cloudinary public id from media url. MediaUrl={media_url}")
        return False

    public_id, resource_type = extracted
    try:
        _ensure_cloudinary_configured()
        result = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
    except Exception:
        logger.error(
            f"Error deleting media from Cloudinary. PublicId={public_id}, MediaUrl={media_url}",
            exc_info=True,
        )
        return False
    return result.get("result") == "ok"
