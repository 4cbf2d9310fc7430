"""
Media Download Service - zip archive of every live media asset of a listing case

Each file is fetched over HTTP and written as NNN-<name>. A manifest.txt records
what happened to every asset; one failed file never aborts the archive.
"""
import logging
import re
import tempfile
import zipfile
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import unquote, urlparse
import httpx
from app.config import settings
from app.database.connection import AsyncSessionLocal
from app.repositories import media_asset_repository
from app.services.media_asset_service import load_case_for_media
from app.services.outcomes import ServiceResult, CASE_MEDIA_FORBIDDEN
from app.utils.access_policy import Principal

logger = logging.getLogger(__name__)

# Archives larger than this spill from memory to a temporary file
SPOOL_MAX_SIZE = 16 * 1024 * 1024
CHUNK_SIZE = 64 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def file_name_from_url(media_url: Optional[str]) -> Optional[str]:
    """Last path segment of the url, or None when there is none"""
    if not media_url:
        return None
    parsed = urlparse(media_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    name = unquote(parsed.path.rstrip("/").rsplit("/", 1)[-1])
    return name or None


def sanitize_file_name(name: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", name).strip("._")
    return cleaned or "file"


async def download_listing_case_media_zip(
    listing_case_id: int, principal: Principal, client: Optional[httpx.AsyncClient] = None
) -> ServiceResult:
    """
    Build the archive. On success data is {"zip_stream", "file_name"}; the caller
    owns the stream and must close it.
    """
    logger.info(f"Start downloading the listing case media. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        _, failure = await load_case_for_media(
            session, listing_case_id, principal, CASE_MEDIA_FORBIDDEN, "downloading media assets"
        )
        if failure:
            return failure

        assets = await media_asset_repository.get_media_assets_by_listing_case_id(session, listing_case_id)
        entries = [(asset.id, asset.media_url) for asset in assets]

    manifest_lines = [
        f"GeneratedAtUTC: {datetime.now(timezone.utc).isoformat()}",
        f"ListingCaseId: {listing_case_id}",
        f"TotalAssets: {len(entries)}",
    ]

    zip_stream = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE)
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.MEDIA_DOWNLOAD_TIMEOUT_SECONDS, follow_redirects=True)

    try:
        with zipfile.ZipFile(zip_stream, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
            for index, (media_asset_id, media_url) in enumerate(entries):
                name = file_name_from_url(media_url)
                if name is None:
                    manifest_lines.append(
                        f"[SKIP] Index={index} MediaAssetId={media_asset_id} "
                        f"Reason=FileNameExtractionFailure MediaUrl={media_url}"
                    )
                    logger.warning(
                        f"Skipped the media asset due to the file name extraction error. "
                        f"MediaAssetId={media_asset_id}, MediaUrl={media_url}"
                    )
                    continue

                file_name = f"{index + 1:03d}-{sanitize_file_name(name)}"
                try:
                    async with client.stream("GET", media_url) as response:
                        response.raise_for_status()
                        with archive.open(file_name, mode="w") as entry:
                            async for chunk in response.aiter_bytes(CHUNK_SIZE):
                                entry.write(chunk)
                    manifest_lines.append(f"[SUCCESS] Index={index} MediaAssetId={media_asset_id} MediaUrl={media_url}")
                except httpx.HTTPError as e:
                    manifest_lines.append(
                        f"[FAIL] Index={index} MediaAssetId={media_asset_id} "
                        f"Exception={type(e).__name__}: {e} MediaUrl={media_url}"
                    )
                    logger.error(
                        f"Failed to download the media asset. MediaAssetId={media_asset_id}, MediaUrl={media_url}",
                        exc_info=True,
                    )

            archive.writestr("manifest.txt", "\n".join(manifest_lines) + "\n")
    except Exception:
        zip_stream.close()
        raise
    finally:
        if owns_client:
            await client.aclose()

    zip_stream.seek(0)
    logger.info(f"DownloadListingCaseMediaZip completed. ListingCaseId={listing_case_id}")
    return ServiceResult.success({
        "zip_stream": zip_stream,
        "file_name": f"listing-case-{listing_case_id}-media.zip",
    })
