"""
Listing Case Service - creation defaults, updates, status changes and soft deletion

Every mutating operation runs the same sequence:
load -> access check -> mutate -> commit -> best-effort history.
"""
import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional, Tuple
from app.database.connection import AsyncSessionLocal
from app.models.listing_case import ListingCase
from app.models.enums import SaleCategory, ListingCaseStatus
from app.repositories import listing_case_repository
from app.services.history_service import log_case_history
from app.services.outcomes import (
    ServiceResult,
    INVALID_LISTING_CASE_ID,
    LISTING_CASE_FORBIDDEN,
)
from app.utils.access_policy import Principal, Role, can_access, listing_case_view
from app.utils.errors import (
    WriteConflictError,
    UPDATE_LISTING_CASE_FAILED,
    CHANGE_LISTING_CASE_STATUS_FAILED,
    DELETE_LISTING_CASE_FAILED,
)

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = (
    "title",
    "description",
    "street",
    "city",
    "state",
    "postcode",
    "longitude",
    "latitude",
    "price",
    "bedrooms",
    "bathrooms",
    "garages",
    "floor_area",
    "property_type",
    "sale_category",
    "listing_case_status",
)
NULLABLE_FIELDS = ("description",)


def _plain(value):
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "value"):
        return value.value
    return value


def listing_case_to_dict(listing_case: ListingCase) -> Dict:
    return {
        "id": listing_case.id,
        "title": listing_case.title,
        "description": listing_case.description,
        "street": listing_case.street,
        "city": listing_case.city,
        "state": listing_case.state,
        "postcode": listing_case.postcode,
        "longitude": float(listing_case.longitude or 0),
        "latitude": float(listing_case.latitude or 0),
        "price": float(listing_case.price or 0),
        "bedrooms": listing_case.bedrooms,
        "bathrooms": listing_case.bathrooms,
        "garages": listing_case.garages,
        "floor_area": listing_case.floor_area,
        "created_at": listing_case.created_at.isoformat() if listing_case.created_at else "",
        "property_type": listing_case.property_type,
        "sale_category": listing_case.sale_category,
        "listing_case_status": listing_case.listing_case_status,
        "user_id": listing_case.user_id,
    }


def _snapshot(listing_case: ListingCase) -> Dict:
    return {field: getattr(listing_case, field) for field in MUTABLE_FIELDS}


async def _load_accessible_listing_case(
    session, listing_case_id: int, principal: Principal, not_found: ServiceResult, action: str
) -> Tuple[Optional[ListingCase], Optional[ServiceResult]]:
    """Shared gate: not found and forbidden come back as outcomes"""
    listing_case = await listing_case_repository.get_listing_case_by_id(session, listing_case_id)
    if listing_case is None:
        logger.warning(
            f"Listing case not found when {action}. ListingCaseId={listing_case_id}, UserId={principal.user_id}"
        )
        return None, not_found

    if not can_access(principal, listing_case_view(listing_case)):
        logger.warning(
            f"Authorization failed when {action}. ListingCaseId={listing_case_id}, UserId={principal.user_id}"
        )
        return None, ServiceResult.forbidden(LISTING_CASE_FORBIDDEN)

    return listing_case, None


async def create_listing_case(request_data: Dict, user_id: str) -> Dict:
    """Create a listing case owned by the calling photography company"""
    logger.info(f"Start creating the listing case. UserId={user_id}")

    async with AsyncSessionLocal() as session:
        listing_case = ListingCase(
            title=request_data["title"],
            description=request_data.get("description"),
            street=request_data["street"],
            city=request_data["city"],
            state=request_data["state"],
            postcode=request_data["postcode"],
            bedrooms=request_data.get("bedrooms", 0),
            bathrooms=request_data.get("bathrooms", 0),
            garages=request_data.get("garages", 0),
            floor_area=request_data["floor_area"],
            property_type=request_data["property_type"],
            longitude=Decimal("0"),
            latitude=Decimal("0"),
            price=Decimal("0"),
            created_at=datetime.now(timezone.utc),
            is_deleted=False,
            sale_category=SaleCategory.FOR_SALE,
            listing_case_status=ListingCaseStatus.CREATED,
            user_id=user_id,
        )

        await listing_case_repository.add_listing_case(session, listing_case)
        await session.commit()
        created = listing_case_to_dict(listing_case)

    logger.info(f"Listing case added to db. ListingCaseId={created['id']}")

    await log_case_history(created["id"], created["title"], "Creation", None, user_id)

    logger.info(f"CreateListingCase completed. ListingCaseId={created['id']}")
    return created


async def get_listing_cases_for_user(principal: Principal, page_number: int = 1, page_size: int = 10) -> ServiceResult:
    """Cases owned by a photography company or assigned to an agent, newest first"""
    logger.info(f"Start retrieving listing cases. UserId={principal.user_id}, UserRole={principal.role_claim}")

    if page_number < 1 or page_size < 1:
        logger.warning(f"Invalid paging when retrieving listing cases. PageNumber={page_number}, PageSize={page_size}")
        return ServiceResult.bad_request("pageNumber and pageSize must be greater than 0.")

    async with AsyncSessionLocal() as session:
        if principal.role is Role.PHOTOGRAPHY_COMPANY:
            cases, total = await listing_case_repository.get_listing_cases_for_photography_company(
                session, principal.user_id, page_number, page_size
            )
        elif principal.role is Role.AGENT:
            cases, total = await listing_case_repository.get_listing_cases_for_agent(
                session, principal.user_id, page_number, page_size
            )
        else:
            logger.warning(f"Invalid role when retrieving listing cases. UserId={principal.user_id}")
            return ServiceResult.bad_request("Invalid user role.")

        items = [listing_case_to_dict(case) for case in cases]

    logger.info(
        f"GetListingCases completed. Total={total}, PageNumber={page_number}, "
        f"PageSize={page_size}, ListingCaseIds={[item['id'] for item in items]}"
    )
    return ServiceResult.success({
        "items": items,
        "total": total,
        "page_number": page_number,
        "page_size": page_size,
    })


async def get_listing_case_detail(listing_case_id: int, principal: Principal) -> ServiceResult:
    logger.info(f"Start retrieving listing case. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        listing_case, failure = await _load_accessible_listing_case(
            session,
            listing_case_id,
            principal,
            ServiceResult.bad_request(INVALID_LISTING_CASE_ID),
            "retrieving the listing case",
        )
        if failure:
            return failure

        agents = [
            {
                "id": assignment.agent.id,
                "agent_first_name": assignment.agent.agent_first_name,
                "agent_last_name": assignment.agent.agent_last_name,
                "avatar_url": assignment.agent.avatar_url,
                "company_name": assignment.agent.company_name,
            }
            for assignment in listing_case.agent_assignments
            if assignment.agent is not None
        ]
        contacts = [
            {
                "id": contact.id,
                "first_name": contact.first_name,
                "last_name": contact.last_name,
                "company_name": contact.company_name,
                "profile_url": contact.profile_url,
                "email": contact.email,
                "phone_number": contact.phone_number,
            }
            for contact in listing_case.case_contacts
        ]

        detail = {
            "listing_case": listing_case_to_dict(listing_case),
            "agents": agents,
            "contacts": contacts,
        }

    logger.info(f"GetListingCaseById completed. ListingCaseId={listing_case_id}")
    return ServiceResult.success(detail)


async def update_listing_case(listing_case_id: int, update_data: Dict, principal: Principal) -> ServiceResult:
    """Field-level overwrite of the mutable attributes (last write wins)"""
    logger.info(f"Start updating the listing case. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        listing_case, failure = await _load_accessible_listing_case(
            session,
            listing_case_id,
            principal,
            ServiceResult.bad_request(INVALID_LISTING_CASE_ID),
            "updating the listing case",
        )
        if failure:
            return failure

        old_snapshot = _snapshot(listing_case)
        changes = {
            key: value
            for key, value in update_data.items()
            if key in MUTABLE_FIELDS and (value is not None or key in NULLABLE_FIELDS)
        }
        new_snapshot = {**old_snapshot, **changes}

        logger.info(f"Updating the listing case. ListingCaseId={listing_case_id}, Fields={sorted(changes)}")

        result = await listing_case_repository.update_listing_case(session, listing_case_id, new_snapshot)

        if result == 0:
            await session.rollback()
            logger.error(f"Failed to update the listing case in db. ListingCaseId={listing_case_id}")
            raise WriteConflictError(UPDATE_LISTING_CASE_FAILED)

        await session.commit()
        updated = {**listing_case_to_dict(listing_case), **{k: _plain(v) for k, v in changes.items()}}

    description = json.dumps(
        {
            "Old": {k: _plain(v) for k, v in old_snapshot.items()},
            "New": {k: _plain(v) for k, v in new_snapshot.items()},
        },
        indent=2,
    )
    await log_case_history(listing_case_id, updated["title"], "Update", description, principal.user_id)

    logger.info(f"UpdateListingCase completed. ListingCaseId={listing_case_id}")
    return ServiceResult.success(updated)


async def change_listing_case_status(
    listing_case_id: int, new_status: ListingCaseStatus, principal: Principal
) -> ServiceResult:
    """
    Move a listing case to any defined status. Transitions are not restricted:
    Created, Pending and Delivered may follow each other in any order.
    """
    logger.info(
        f"Start changing the listing case status. ListingCaseId={listing_case_id}, UserId={principal.user_id}"
    )
    new_status = ListingCaseStatus(new_status)

    async with AsyncSessionLocal() as session:
        listing_case, failure = await _load_accessible_listing_case(
            session,
            listing_case_id,
            principal,
            ServiceResult.invalid_id(INVALID_LISTING_CASE_ID),
            "changing the listing case status",
        )
        if failure:
            return failure

        old_status = ListingCaseStatus(listing_case.listing_case_status)
        title = listing_case.title

        result = await listing_case_repository.change_listing_case_status(session, listing_case_id, new_status)

        if result == 0:
            await session.rollback()
            logger.error(f"Failed to change the listing case status in db. ListingCaseId={listing_case_id}")
            raise WriteConflictError(CHANGE_LISTING_CASE_STATUS_FAILED)

        await session.commit()

    await log_case_history(
        listing_case_id,
        title,
        "StatusUpdate",
        f"{old_status.value} -> {new_status.value}",
        principal.user_id,
    )

    logger.info(
        f"ChangeListingCaseStatus completed. ListingCaseId={listing_case_id}, "
        f"OldStatus={old_status.value}, NewStatus={new_status.value}"
    )
    return ServiceResult.success({
        "listing_case_id": listing_case_id,
        "old_status": old_status,
        "new_status": new_status,
    })


async def delete_listing_case(listing_case_id: int, principal: Principal) -> ServiceResult:
    """Soft delete: the row stays, flagged as deleted"""
    logger.info(f"Start deleting the listing case. ListingCaseId={listing_case_id}, UserId={principal.user_id}")

    async with AsyncSessionLocal() as session:
        listing_case, failure = await _load_accessible_listing_case(
            session,
            listing_case_id,
            principal,
            ServiceResult.invalid_id(INVALID_LISTING_CASE_ID),
            "deleting the listing case",
        )
        if failure:
            return failure

        title = listing_case.title
        result = await listing_case_repository.soft_delete_listing_case(session, listing_case_id)

        if result == 0:
            await session.rollback()
            logger.error(f"Failed to delete the listing case in db. ListingCaseId={listing_case_id}")
            raise WriteConflictError(DELETE_LISTING_CASE_FAILED)

        await session.commit()

    await log_case_history(listing_case_id, title, "Deletion", None, principal.user_id)

    logger.info(f"DeleteListingCase completed. ListingCaseId={listing_case_id}")
    return ServiceResult.success()
