"""
Media asset queries - every write reports the number of affected rows
"""
from typing import Iterable, List, Optional
from sqlalchemy import select, update, delete, func, case
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.models.media_asset import MediaAsset
from app.models.listing_case import ListingCase
from app.models.enums import MediaType

# Media types sort in declaration order, not alphabetically
_MEDIA_TYPE_ORDER = case(
    {media_type.value: position for position, media_type in enumerate(MediaType)},
    value=MediaAsset.media_type,
    else_=len(MediaType),
)


async def add_media_assets(session: AsyncSession, media_assets: List[MediaAsset]) -> List[MediaAsset]:
    session.add_all(media_assets)
    await session.flush()
    return media_assets


async def get_media_asset_by_id(session: AsyncSession, media_asset_id: int) -> Optional[MediaAsset]:
    """Live media asset of a live listing case, with that case's assignments"""
    stmt = (
        select(MediaAsset)
        .join(ListingCase, MediaAsset.listing_case_id == ListingCase.id)
        .where(
            MediaAsset.id == media_asset_id,
            MediaAsset.is_deleted.is_(False),
            ListingCase.is_deleted.is_(False),
        )
        .options(selectinload(MediaAsset.listing_case).selectinload(ListingCase.agent_assignments))
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_hero_by_listing_case_id(session: AsyncSession, listing_case_id: int) -> Optional[MediaAsset]:
    stmt = (
        select(MediaAsset)
        .where(
            MediaAsset.listing_case_id == listing_case_id,
            MediaAsset.is_hero.is_(True),
            MediaAsset.is_deleted.is_(False),
        )
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def get_media_assets_by_listing_case_id(session: AsyncSession, listing_case_id: int) -> List[MediaAsset]:
    stmt = (
        select(MediaAsset)
        .where(MediaAsset.listing_case_id == listing_case_id, MediaAsset.is_deleted.is_(False))
        .order_by(_MEDIA_TYPE_ORDER, MediaAsset.id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_media_assets_by_ids(
    session: AsyncSession, listing_case_id: int, media_asset_ids: Iterable[int]
) -> List[MediaAsset]:
    stmt = (
        select(MediaAsset)
        .where(
            MediaAsset.listing_case_id == listing_case_id,
            MediaAsset.id.in_(list(media_asset_ids)),
            MediaAsset.is_deleted.is_(False),
        )
        .order_by(MediaAsset.id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def count_selected_media(session: AsyncSession, listing_case_id: int) -> int:
    stmt = select(func.count()).select_from(MediaAsset).where(
        MediaAsset.listing_case_id == listing_case_id,
        MediaAsset.is_select.is_(True),
        MediaAsset.is_deleted.is_(False),
    )
    return (await session.execute(stmt)).scalar_one() or 0


async def get_selected_media_by_listing_case_id(session: AsyncSession, listing_case_id: int) -> List[MediaAsset]:
    stmt = (
        select(MediaAsset)
        .where(
            MediaAsset.listing_case_id == listing_case_id,
            MediaAsset.is_select.is_(True),
            MediaAsset.is_deleted.is_(False),
        )
        .order_by(_MEDIA_TYPE_ORDER, MediaAsset.id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def set_hero_flag(session: AsyncSession, media_asset_id: int, is_hero: bool) -> int:
    stmt = (
        update(MediaAsset)
        .where(MediaAsset.id == media_asset_id, MediaAsset.is_deleted.is_(False))
        .values(is_hero=is_hero)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount


async def set_selection(session: AsyncSession, media_asset_ids: Iterable[int], is_select: bool) -> int:
    ids = list(media_asset_ids)
    if not ids:
        return 0
    stmt = (
        update(MediaAsset)
        .where(MediaAsset.id.in_(ids), MediaAsset.is_deleted.is_(False))
        .values(is_select=is_select)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount


async def delete_media_asset(session: AsyncSession, media_asset_id: int) -> int:
    stmt = (
        delete(MediaAsset)
        .where(MediaAsset.id == media_asset_id)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount
