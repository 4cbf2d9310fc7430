from fastapi import APIRouter, Depends, status
from app.schemas.listing_case import (
    ListingCaseCreateRequest,
    ListingCaseUpdateRequest,
    ChangeListingCaseStatusRequest,
    ListingCaseResponse,
    ListingCaseDetailResponse,
    PaginatedListingCasesResponse,
    ChangeListingCaseStatusResponse,
)
from app.services.listing_case_service import (
    create_listing_case,
    get_listing_cases_for_user,
    get_listing_case_detail,
    update_listing_case,
    change_listing_case_status,
    delete_listing_case,
)
from app.utils.access_policy import Principal
from app.utils.dependencies import get_current_principal, require_photography_company
from app.utils.responses import raise_for_outcome

router = APIRouter(prefix="/listings", tags=["Listing Cases"])


@router.post("", response_model=ListingCaseResponse, status_code=status.HTTP_201_CREATED)
async def create_listing_case_endpoint(
    request: ListingCaseCreateRequest,
    principal: Principal = Depends(require_photography_company)
):
    """Create a listing case owned by the current photography company"""
    listing_case = await create_listing_case(request.model_dump(), principal.user_id)
    return ListingCaseResponse(**listing_case)


@router.get("", response_model=PaginatedListingCasesResponse)
async def get_my_listing_cases(
    page_number: int = 1,
    page_size: int = 10,
    principal: Principal = Depends(get_current_principal)
):
    """Owned cases for a photography company, assigned cases for an agent"""
    result = await get_listing_cases_for_user(principal, page_number, page_size)
    raise_for_outcome(result)
    return PaginatedListingCasesResponse(**result.data)


@router.get("/{listing_case_id}", response_model=ListingCaseDetailResponse)
async def get_listing_case(
    listing_case_id: int,
    principal: Principal = Depends(get_current_principal)
):
    result = await get_listing_case_detail(listing_case_id, principal)
    raise_for_outcome(result)
    return ListingCaseDetailResponse(**result.data)


@router.put("/{listing_case_id}", response_model=ListingCaseResponse)
async def update_listing_case_endpoint(
    listing_case_id: int,
    request: ListingCaseUpdateRequest,
    principal: Principal = Depends(get_current_principal)
):
    """Overwrite the fields present in the request"""
    result = await update_listing_case(listing_case_id, request.model_dump(exclude_unset=True), principal)
    raise_for_outcome(result)
    return ListingCaseResponse(**result.data)


@router.patch("/{listing_case_id}/status", response_model=ChangeListingCaseStatusResponse)
async def change_listing_case_status_endpoint(
    listing_case_id: int,
    request: ChangeListingCaseStatusRequest,
    principal: Principal = Depends(get_current_principal)
):
    result = await change_listing_case_status(listing_case_id, request.status, principal)
    raise_for_outcome(result)
    return ChangeListingCaseStatusResponse(**result.data)


@router.delete("/{listing_case_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing_case_endpoint(
    listing_case_id: int,
    principal: Principal = Depends(require_photography_company)
):
    """Soft delete a listing case"""
    result = await delete_listing_case(listing_case_id, principal)
    raise_for_outcome(result)
