from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from urllib.parse import urlparse
from app.models.enums import MediaType


def _validate_absolute_url(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("MediaUrl is required.")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("MediaUrl must be a valid absolute URL.")
    return value


class MediaAssetCreateRequest(BaseModel):
    media_type: MediaType
    media_url: str
    is_hero: bool = False

    @field_validator("media_url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return _validate_absolute_url(value)


class MediaAssetsBatchCreateRequest(BaseModel):
    media_type: MediaType
    media_urls: List[str] = Field(..., min_length=1)
    # Marks the first url of the batch as the hero
    is_hero: bool = False

    @field_validator("media_urls")
    @classmethod
    def check_urls(cls, urls: List[str]) -> List[str]:
        return [_validate_absolute_url(url) for url in urls]

    @model_validator(mode="after")
    def only_photos_allow_many(self):
        if self.media_type != MediaType.PHOTO and len(self.media_urls) != 1:
            raise ValueError("Only photo media type allows multiple MediaUrls.")
        return self


class SelectMediaRequest(BaseModel):
    selected_ids: Optional[List[int]] = None
    unselected_ids: Optional[List[int]] = None

    @model_validator(mode="after")
    def check_selection(self):
        selected = self.selected_ids or []
        unselected = self.unselected_ids or []

        if not selected and not unselected:
            raise ValueError("At least one media asset must be selected or unselected.")
        if any(media_id <= 0 for media_id in selected + unselected):
            raise ValueError("Media asset ids must be greater than 0.")
        if len(set(selected)) != len(selected):
            raise ValueError("SelectedId contains duplicates.")
        if len(set(unselected)) != len(unselected):
            raise ValueError("UnselectedId contains duplicates.")
        if set(selected) & set(unselected):
            raise ValueError("SelectedId and UnselectedId cannot contain the same media id.")
        return self


class SetHeroMediaRequest(BaseModel):
    media_asset_id: int = Field(..., gt=0)


class MediaAssetResponse(BaseModel):
    id: int
    media_type: MediaType
    media_url: str
    uploaded_at: str
    is_select: bool
    is_hero: bool
    listing_case_id: int
    user_id: str

    class Config:
        from_attributes = True


class CreateMediaAssetResponse(BaseModel):
    media_asset_id: int


class CreateMediaAssetsBatchResponse(BaseModel):
    media_asset_ids: List[int]


class UploadMediaResponse(BaseModel):
    media_type: MediaType
    media_urls: List[str]


class SelectMediaResponse(BaseModel):
    listing_case_id: int
    selected_ids: List[int] = []
    unselected_ids: List[int] = []
    selected_count: int


class SetHeroMediaResponse(BaseModel):
    listing_case_id: int
    media_asset_id: int
