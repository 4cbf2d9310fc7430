"""
Listing case queries - every write reports the number of affected rows
"""
from typing import Dict, List, Optional, Tuple
from sqlalchemy import select, update, func, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.models.listing_case import ListingCase, AgentListingCase
from app.models.enums import ListingCaseStatus


async def add_listing_case(session: AsyncSession, listing_case: ListingCase) -> ListingCase:
    session.add(listing_case)
    await session.flush()
    return listing_case


async def get_listing_case_by_id(session: AsyncSession, listing_case_id: int) -> Optional[ListingCase]:
    """Live listing case with agent assignments (and agents), contacts eagerly loaded"""
    stmt = (
        select(ListingCase)
        .where(ListingCase.id == listing_case_id, ListingCase.is_deleted.is_(False))
        .options(
            selectinload(ListingCase.agent_assignments).selectinload(AgentListingCase.agent),
            selectinload(ListingCase.case_contacts),
        )
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_listing_cases_for_photography_company(
    session: AsyncSession, user_id: str, page_number: int, page_size: int
) -> Tuple[List[ListingCase], int]:
    conditions = [ListingCase.user_id == user_id, ListingCase.is_deleted.is_(False)]
    return await _paged_listing_cases(session, conditions, page_number, page_size)


async def get_listing_cases_for_agent(
    session: AsyncSession, agent_id: str, page_number: int, page_size: int
) -> Tuple[List[ListingCase], int]:
    assigned = select(AgentListingCase.listing_case_id).where(AgentListingCase.agent_id == agent_id)
    conditions = [ListingCase.id.in_(assigned), ListingCase.is_deleted.is_(False)]
    return await _paged_listing_cases(session, conditions, page_number, page_size)


async def _paged_listing_cases(session, conditions, page_number, page_size):
    count_stmt = select(func.count()).select_from(ListingCase).where(*conditions)
    total = (await session.execute(count_stmt)).scalar_one() or 0

    # Newest first, id as tie-break
    stmt = (
        select(ListingCase)
        .where(*conditions)
        .order_by(desc(ListingCase.created_at), desc(ListingCase.id))
        .offset((page_number - 1) * page_size)
        .limit(page_size)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def update_listing_case(session: AsyncSession, listing_case_id: int, values: Dict) -> int:
    stmt = (
        update(ListingCase)
        .where(ListingCase.id == listing_case_id, ListingCase.is_deleted.is_(False))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    return result.rowcount


async def change_listing_case_status(
    session: AsyncSession, listing_case_id: int, status: ListingCaseStatus
) -> int:
    return await update_listing_case(session, listing_case_id, {"listing_case_status": status})


async def soft_delete_listing_case(session: AsyncSession, listing_case_id: int) -> int:
    return await update_listing_case(session, listing_case_id, {"is_deleted": True})
