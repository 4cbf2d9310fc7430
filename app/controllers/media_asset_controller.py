import logging
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Form, status
from fastapi.responses import StreamingResponse
from typing import List
from app.models.enums import MediaType
from app.schemas.media_asset import (
    MediaAssetCreateRequest,
    MediaAssetsBatchCreateRequest,
    SelectMediaRequest,
    SetHeroMediaRequest,
    MediaAssetResponse,
    CreateMediaAssetResponse,
    CreateMediaAssetsBatchResponse,
    UploadMediaResponse,
    SelectMediaResponse,
    SetHeroMediaResponse,
)
from app.services.cloudinary_service import upload_media_to_cloudinary
from app.services.media_asset_service import (
    create_media_asset,
    create_media_assets,
    delete_media_asset,
    get_media_assets_for_listing_case,
    set_hero_media,
    select_media,
    get_final_selected_media,
)
from app.services.media_download_service import download_listing_case_media_zip, CHUNK_SIZE
from app.utils.access_policy import Principal
from app.utils.dependencies import get_current_principal, require_photography_company
from app.utils.responses import raise_for_outcome

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Media Assets"])


def _iter_stream(stream):
    try:
        for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
            yield chunk
    finally:
        stream.close()


@router.post("/media/upload", response_model=UploadMediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_media_endpoint(
    media_type: MediaType = Form(...),
    files: List[UploadFile] = File(...),
    principal: Principal = Depends(require_photography_company)
):
    """Upload media files to blob storage and return their URLs"""
    if media_type != MediaType.PHOTO and len(files) > 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only photo media type allows multiple files."
        )

    media_urls = []
    for file in files:
        file_content = await file.read()
        if len(file_content) == 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File {file.filename} is empty"
            )
        uploaded = upload_media_to_cloudinary(file_content, file.filename or "media")
        media_urls.append(uploaded["media_url"])

    logger.info(f"Uploaded media files. UserId={principal.user_id}, Count={len(media_urls)}")
    return UploadMediaResponse(media_type=media_type, media_urls=media_urls)


@router.post(
    "/listings/{listing_case_id}/media",
    response_model=CreateMediaAssetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_media_asset_endpoint(
    listing_case_id: int,
    request: MediaAssetCreateRequest,
    principal: Principal = Depends(require_photography_company)
):
    result = await create_media_asset(
        listing_case_id, request.media_type, request.media_url, request.is_hero, principal
    )
    raise_for_outcome(result)
    return CreateMediaAssetResponse(**result.data)


@router.post(
    "/listings/{listing_case_id}/media/batch",
    response_model=CreateMediaAssetsBatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_media_assets_batch_endpoint(
    listing_case_id: int,
    request: MediaAssetsBatchCreateRequest,
    principal: Principal = Depends(require_photography_company)
):
    """Create several media assets of one type; only photos may come in numbers"""
    result = await create_media_assets(
        listing_case_id, request.media_type, request.media_urls, request.is_hero, principal
    )
    raise_for_outcome(result)
    return CreateMediaAssetsBatchResponse(**result.data)


@router.get("/listings/{listing_case_id}/media", response_model=List[MediaAssetResponse])
async def get_listing_case_media(
    listing_case_id: int,
    principal: Principal = Depends(get_current_principal)
):
    """All live media of a listing case, grouped by media type"""
    result = await get_media_assets_for_listing_case(listing_case_id, principal)
    raise_for_outcome(result)
    return [MediaAssetResponse(**asset) for asset in result.data]


@router.delete("/media/{media_asset_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media_asset_endpoint(
    media_asset_id: int,
    principal: Principal = Depends(require_photography_company)
):
    result = await delete_media_asset(media_asset_id, principal)
    raise_for_outcome(result)


@router.put("/listings/{listing_case_id}/hero", response_model=SetHeroMediaResponse)
async def set_listing_case_hero(
    listing_case_id: int,
    request: SetHeroMediaRequest,
    principal: Principal = Depends(get_current_principal)
):
    result = await set_hero_media(request.media_asset_id, principal, listing_case_id=listing_case_id)
    raise_for_outcome(result)
    return SetHeroMediaResponse(**result.data)


@router.patch("/media/{media_asset_id}/hero", response_model=SetHeroMediaResponse)
async def set_media_asset_hero(
    media_asset_id: int,
    principal: Principal = Depends(get_current_principal)
):
    """Make the asset the hero of the listing case it belongs to"""
    result = await set_hero_media(media_asset_id, principal)
    raise_for_outcome(result)
    return SetHeroMediaResponse(**result.data)


@router.put("/listings/{listing_case_id}/media/selection", response_model=SelectMediaResponse)
async def select_media_endpoint(
    listing_case_id: int,
    request: SelectMediaRequest,
    principal: Principal = Depends(get_current_principal)
):
    result = await select_media(
        listing_case_id, request.selected_ids or [], request.unselected_ids or [], principal
    )
    raise_for_outcome(result)
    return SelectMediaResponse(**result.data)


@router.get("/listings/{listing_case_id}/media/selected", response_model=List[MediaAssetResponse])
async def get_final_selection(
    listing_case_id: int,
    principal: Principal = Depends(get_current_principal)
):
    result = await get_final_selected_media(listing_case_id, principal)
    raise_for_outcome(result)
    return [MediaAssetResponse(**asset) for asset in result.data]


@router.get("/listings/{listing_case_id}/media/download")
async def download_listing_case_media(
    listing_case_id: int,
    principal: Principal = Depends(get_current_principal)
):
    """Zip of every live media asset plus manifest.txt"""
    result = await download_listing_case_media_zip(listing_case_id, principal)
    raise_for_outcome(result)
    return StreamingResponse(
        _iter_stream(result.data["zip_stream"]),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{result.data["file_name"]}"'},
    )
