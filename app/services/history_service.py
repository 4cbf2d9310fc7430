"""
History Service - append-only audit trail for listing cases and media assets

Writes are best-effort: they run in their own session after the primary change has
been committed, and a failure is logged, never raised.
"""
import logging
from datetime import datetime, timezone
from typing import Optional
from app.database.connection import AsyncSessionLocal
from app.models.history import CaseHistory, MediaAssetHistory

logger = logging.getLogger(__name__)


async def insert_history(record) -> None:
    async with AsyncSessionLocal() as session:
        session.add(record)
        await session.commit()


async def log_case_history(
    listing_case_id: int,
    case_title: str,
    change: str,
    description: Optional[str],
    user_id: str,
) -> bool:
    """Append a CaseHistory row. Returns False when the write failed."""
    record = CaseHistory(
        listing_case_id=listing_case_id,
        case_title=case_title or "",
        change=change,
        description=description,
        user_id=user_id,
        occurred_at=datetime.now(timezone.utc),
    )
    try:
        await insert_history(record)
        return True
    except Exception:
        logger.error(
            f"Failed to log listing case history. ListingCaseId={listing_case_id}, "
            f"Change={change}, UserId={user_id}",
            exc_info=True,
        )
        return False


async def log_media_asset_history(
    media_asset_id: int,
    media_url: str,
    listing_case_id: int,
    listing_case_title: str,
    change: str,
    description: Optional[str],
    user_id: str,
) -> bool:
    """Append a MediaAssetHistory row. Returns False when the write failed."""
    record = MediaAssetHistory(
        media_asset_id=media_asset_id,
        media_url=media_url,
        listing_case_id=listing_case_id,
        listing_case_title=listing_case_title or "",
        change=change,
        description=description,
        user_id=user_id,
        occurred_at=datetime.now(timezone.utc),
    )
    try:
        await insert_history(record)
        return True
    except Exception:
        logger.error(
            f"Failed to log media asset history. MediaAssetId={media_asset_id}, "
            f"ListingCaseId={listing_case_id}, Change={change}, UserId={user_id}",
            exc_info=True,
        )
        return False
