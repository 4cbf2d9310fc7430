"""
Media Asset Service - per-listing media with a single hero and client selection

At most one live media asset per listing case carries the hero flag. Demoting the
previous hero and inserting/promoting the new one happen in the same transaction;
the partial unique index on media_assets is the last line of defence.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional
from app.config import settings
from app.database.connection import AsyncSessionLocal
from app.models.enums import MediaType
from app.models.media_asset import MediaAsset
from app.repositories import listing_case_repository, media_asset_repository
from app.services.cloudinary_service import delete_media_from_cloudinary
from app.services.history_service import log_media_asset_history
from app.services.outcomes import (
    ServiceResult,
    INVALID_LISTING_CASE_ID,
    INVALID_MEDIA_ASSET_ID,
    MEDIA_ASSET_FORBIDDEN,
    MEDIA_CREATE_FORBIDDEN,
    CASE_MEDIA_FORBIDDEN,
)
from app.utils.access_policy import Principal, can_access, listing_case_view, media_asset_view
from app.utils.errors import (
    WriteConflictError,
    DELETE_MEDIA_ASSET_FAILED,
    SET_HERO_MEDIA_ASSET_FAILED,
)

logger = logging.getLogger(__name__)


def media_asset_to_dict(media_asset: MediaAsset) -> Dict:
    return {
        "id": media_asset.id,
        "media_type": media_asset.media_type,
        "media_url": media_asset.media_url,
        "uploaded_at": media_asset.uploaded_at.isoformat() if media_asset.uploaded_at else "",
        "is_select": bool(media_asset.is_select),
        "is_hero": bool(media_asset.is_hero),
        "listing_case_id": media_asset.listing_case_id,
        "user_id": media_asset.user_id,
    }


async def load_case_for_media(session, listing_case_id: int, principal: Principal, forbidden_message: str, action: str):
    listing_case = await listing_case_repository.get_listing_case_by_id(session, listing_case_id)
    if listing_case is None:
        logger.warning(
            f"Listing case not found when {action}. ListingCaseId={listing_case_id}, UserId={principal.user_id}"
        )
        return None, ServiceResult.bad_request(INVALID_LISTING_CASE_ID)

    if not can_access(principal, listing_case_view(listing_case)):
        logger.warning(
            f"Authorization failed when {action}. ListingCaseId={listing_case_id}, UserId={principal.user_id}"
        )
        return None, ServiceResult.forbidden(forbidden_message)

    return listing_case, None


async def _demote_current_hero(session, listing_case_id: int, keep_media_asset_id: Optional[int] = None) -> None:
    existing_hero = await media_asset_repository.get_hero_by_listing_case_id(session, listing_case_id)
    if existing_hero is None or existing_hero.id == keep_media_asset_id:
        return

    result = await media_asset_repository.set_hero_flag(session, existing_hero.id, False)
    if result == 0:
        # Hero vanished in the meantime; nothing left to demote
        logger.warning(
            f"Existing hero media was gone before it could be reset. MediaAssetId={existing_hero.id}"
        )
        return
    logger.info(f"Reset the existing hero media's IsHero to false. MediaAssetId={existing_hero.id}")


async def create_media_assets(
    listing_case_id: int,
    media_type: MediaType,
    media_urls: List[str],
    is_hero: bool,
    principal: Principal,
) -> ServiceResult:
    """
    Create one media asset per url. When is_hero is set, the first created asset
    becomes the hero of the listing case.
    """
    logger.info(
        f"Start creating media assets. ListingCaseId={listing_case_id}, "
        f"Count={len(media_urls)}, UserId={principal.user_id}"
    )
    media_type = MediaType(media_type)

    async with AsyncSessionLocal() as session:
        listing_case, failure = await load_case_for_media(
            session, listing_case_id, principal, MEDIA_CREATE_FORBIDDEN, "creating media assets"
        )
        if failure:
            return failure

        case_title = listing_case.title

        if is_hero:
            await _demote_current_hero(session, listing_case_id)

        uploaded_at = datetime.now(timezone.utc)
        assets = [
            MediaAsset(
                media_type=media_type,
                media_url=url,
                uploaded_at=uploaded_at,
                is_select=False,
                is_hero=bool(is_hero) and index == 0,
                is_deleted=False,
                listing_case_id=listing_case_id,
                user_id=principal.user_id,
            )
            for index, url in enumerate(media_urls)
        ]

        await media_asset_repository.add_media_assets(session, assets)
        await session.commit()
        created = [(asset.id, asset.media_url) for asset in assets]

    logger.info(
        f"Media assets added to db. ListingCaseId={listing_case_id}, MediaAssetIds={[i for i, _ in created]}"
    )

    for media_asset_id, media_url in created:
        await log_media_asset_history(
            media_asset_id, media_url, listing_case_id, case_title, "Creation", None, principal.user_id
        )

    logger.info(f"CreateMediaAssets completed. ListingCaseId={listing_case_id}")
    return ServiceResult.success({"media_asset_ids": [media_asset_id for media_asset_id, _ in created]})


async def create_media_asset(
    listing_case_id: int,
    media_type: MediaType,
    media_url: str,
    is_hero: bool,
    principal: Principal,
) -> ServiceResult:
    result = await create_media_assets(listing_case_id, media_type, [media_url], is_hero, principal)
    if result.succeeded:
        result.data = {"media_asset_id": result.data["media_asset_ids"][0]}
    return result


async def delete_media_asset(media_asset_id: int, principal: Principal) -> ServiceResult:
    """Physically delete a media asset, then remove its blob best-effort"""
    logger.info(f"Start deleting the media asset. MediaAssetId={media_asset_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        media_asset = await media_asset_repository.get_media_asset_by_id(session, media_asset_id)
        if media_asset is None:
            logger.warning(
                f"Media asset not found when deleting. MediaAssetId={media_asset_id}, UserId={principal.user_id}"
            )
            return ServiceResult.bad_request(INVALID_MEDIA_ASSET_ID)

        if not can_access(principal, media_asset_view(media_asset)):
            logger.warning(
                f"Authorization failed when deleting the media asset. "
                f"MediaAssetId={media_asset_id}, UserId={principal.user_id}"
            )
            return ServiceResult.forbidden(MEDIA_ASSET_FORBIDDEN)

        media_url = media_asset.media_url
        listing_case_id = media_asset.listing_case_id
        case_title = media_asset.listing_case.title if media_asset.listing_case else ""

        result = await media_asset_repository.delete_media_asset(session, media_asset_id)

        if result == 0:
            await session.rollback()
            logger.error(f"Failed to delete the media asset in db. MediaAssetId={media_asset_id}")
            raise WriteConflictError(DELETE_MEDIA_ASSET_FAILED)

        await session.commit()

    await log_media_asset_history(
        media_asset_id, media_url, listing_case_id, case_title, "Deletion", None, principal.user_id
    )

    if not delete_media_from_cloudinary(media_url):
        logger.warning(
            f"Media asset blob was not removed from storage. MediaAssetId={media_asset_id}, MediaUrl={media_url}"
        )

    logger.info(f"DeleteMediaAsset completed. MediaAssetId={media_asset_id}")
    return ServiceResult.success()


async def get_media_assets_for_listing_case(listing_case_id: int, principal: Principal) -> ServiceResult:
    """Live media of a listing case ordered by media type, then by id"""
    logger.info(f"Start retrieving media assets. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        _, failure = await load_case_for_media(
            session, listing_case_id, principal, CASE_MEDIA_FORBIDDEN, "retrieving media assets"
        )
        if failure:
            return failure

        assets = await media_asset_repository.get_media_assets_by_listing_case_id(session, listing_case_id)
        items = [media_asset_to_dict(asset) for asset in assets]

    logger.info(
        f"GetMediaAssets completed. ListingCaseId={listing_case_id}, MediaAssetIds={[i['id'] for i in items]}"
    )
    return ServiceResult.success(items)


async def set_hero_media(
    media_asset_id: int, principal: Principal, listing_case_id: Optional[int] = None
) -> ServiceResult:
    """
    Make a media asset the hero of its listing case. When listing_case_id is given,
    the asset must belong to that case; otherwise the case is taken from the asset.
    """
    logger.info(
        f"Start setting the hero media. ListingCaseId={listing_case_id}, "
        f"MediaAssetId={media_asset_id}, UserId={principal.user_id}"
    )

    async with AsyncSessionLocal() as session:
        if listing_case_id is not None:
            listing_case, failure = await load_case_for_media(
                session, listing_case_id, principal, CASE_MEDIA_FORBIDDEN, "setting the hero media"
            )
            if failure:
                return failure

            media_asset = await media_asset_repository.get_media_asset_by_id(session, media_asset_id)
            if media_asset is None:
                logger.warning(f"Media asset not found when setting the hero media. MediaAssetId={media_asset_id}")
                return ServiceResult.bad_request(INVALID_MEDIA_ASSET_ID)

            if media_asset.listing_case_id != listing_case_id:
                logger.warning(
                    f"Media asset does not belong to the listing case. "
                    f"ListingCaseId={listing_case_id}, MediaAssetId={media_asset_id}"
                )
                return ServiceResult.bad_request(
                    f"Media Asset {media_asset_id} does not belong to the Listing Case {listing_case_id}."
                )
        else:
            media_asset = await media_asset_repository.get_media_asset_by_id(session, media_asset_id)
            if media_asset is None:
                logger.warning(f"Media asset not found when setting the hero media. MediaAssetId={media_asset_id}")
                return ServiceResult.bad_request(INVALID_MEDIA_ASSET_ID)

            listing_case = media_asset.listing_case
            if not can_access(principal, listing_case_view(listing_case)):
                logger.warning(
                    f"Authorization failed when setting the hero media. "
                    f"ListingCaseId={listing_case.id}, UserId={principal.user_id}"
                )
                return ServiceResult.forbidden(CASE_MEDIA_FORBIDDEN)

        case_id = listing_case.id
        case_title = listing_case.title
        media_url = media_asset.media_url

        await _demote_current_hero(session, case_id, keep_media_asset_id=media_asset_id)

        result = await media_asset_repository.set_hero_flag(session, media_asset_id, True)

        if result == 0:
            await session.rollback()
            logger.error(f"Failed to set the hero media in db. MediaAssetId={media_asset_id}")
            raise WriteConflictError(SET_HERO_MEDIA_ASSET_FAILED)

        await session.commit()

    await log_media_asset_history(
        media_asset_id, media_url, case_id, case_title, "Hero", None, principal.user_id
    )

    logger.info(f"SetHeroMedia completed. ListingCaseId={case_id}, MediaAssetId={media_asset_id}")
    return ServiceResult.success({"listing_case_id": case_id, "media_asset_id": media_asset_id})


async def select_media(
    listing_case_id: int,
    selected_ids: List[int],
    unselected_ids: List[int],
    principal: Principal,
) -> ServiceResult:
    """Batch select/unselect for client curation, capped at MAX_SELECTED_MEDIA"""
    logger.info(f"Start selecting media assets. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    selected = set(selected_ids or [])
    unselected = set(unselected_ids or [])
    all_ids = sorted(selected | unselected)

    async with AsyncSessionLocal() as session:
        listing_case, failure = await load_case_for_media(
            session, listing_case_id, principal, CASE_MEDIA_FORBIDDEN, "selecting media assets"
        )
        if failure:
            return failure

        case_title = listing_case.title
        assets = await media_asset_repository.get_media_assets_by_ids(session, listing_case_id, all_ids)

        if len(assets) != len(all_ids):
            logger.warning(
                f"Unable to find all the media assets when selecting media assets. "
                f"ListingCaseId={listing_case_id}, ExpectedMediaAssetIds={all_ids}, "
                f"ActualMediaAssetIds={[asset.id for asset in assets]}"
            )
            return ServiceResult.bad_request(
                "Unable to find the resource. Please provide valid listing case id or media asset id."
            )

        selected_count = await media_asset_repository.count_selected_media(session, listing_case_id)
        will_increase = sum(1 for asset in assets if asset.id in selected and not asset.is_select)
        will_decrease = sum(1 for asset in assets if asset.id in unselected and asset.is_select)
        total_count = selected_count - will_decrease + will_increase

        if total_count > settings.MAX_SELECTED_MEDIA:
            logger.warning(
                f"The total selected media assets number is greater than {settings.MAX_SELECTED_MEDIA}. "
                f"ListingCaseId={listing_case_id}, TotalSelectedCount={total_count}"
            )
            return ServiceResult.bad_request(
                f"You can select up to {settings.MAX_SELECTED_MEDIA} media assets for a listing case "
                f"to display. Current selection would become {total_count}."
            )

        await media_asset_repository.set_selection(session, sorted(selected), True)
        await media_asset_repository.set_selection(session, sorted(unselected), False)
        await session.commit()

        changes = [
            (asset.id, asset.media_url, "Selection" if asset.id in selected else "Cancel Selection")
            for asset in assets
        ]

    for media_asset_id, media_url, change in changes:
        await log_media_asset_history(
            media_asset_id, media_url, listing_case_id, case_title, change, None, principal.user_id
        )

    logger.info(
        f"SelectMediaBatch completed. ListingCaseId={listing_case_id}, "
        f"Selected={sorted(selected)}, Unselected={sorted(unselected)}, TotalSelectedCount={total_count}"
    )
    return ServiceResult.success({
        "listing_case_id": listing_case_id,
        "selected_ids": sorted(selected),
        "unselected_ids": sorted(unselected),
        "selected_count": total_count,
    })


async def get_final_selected_media(listing_case_id: int, principal: Principal) -> ServiceResult:
    logger.info(f"Start retrieving the final selection. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        _, failure = await load_case_for_media(
            session, listing_case_id, principal, CASE_MEDIA_FORBIDDEN, "retrieving the final selection"
        )
        if failure:
            return failure

        assets = await media_asset_repository.get_selected_media_by_listing_case_id(session, listing_case_id)
        items = [media_asset_to_dict(asset) for asset in assets]

    logger.info(f"GetFinalSelectedMedia completed. ListingCaseId={listing_case_id}, Count={len(items)}")
    return ServiceResult.success(items)
