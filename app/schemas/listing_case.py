from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from app.models.enums import PropertyType, SaleCategory, ListingCaseStatus

AUSTRALIAN_STATES = ("NSW", "ACT", "VIC", "QLD", "SA", "WA", "TAS", "NT")
NULLABLE_UPDATE_FIELDS = ("description",)


def _validate_state(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    normalized = value.strip().upper()
    if normalized not in AUSTRALIAN_STATES:
        raise ValueError("Must provide valid Australian state short forms like 'NSW'.")
    return normalized


class ListingCaseCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=255)
    street: str = Field(..., min_length=1, max_length=50)
    city: str = Field(..., min_length=1, max_length=50)
    state: str
    postcode: int = Field(..., ge=1000, le=9999)
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    garages: int = Field(0, ge=0)
    floor_area: float = Field(..., gt=0)
    property_type: PropertyType

    @field_validator("state")
    @classmethod
    def check_state(cls, value):
        return _validate_state(value)


class ListingCaseUpdateRequest(BaseModel):
    """Partial update: only the fields sent are overwritten"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=255)
    street: Optional[str] = Field(None, min_length=1, max_length=50)
    city: Optional[str] = Field(None, min_length=1, max_length=50)
    state: Optional[str] = None
    postcode: Optional[int] = Field(None, ge=1000, le=9999)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    price: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    garages: Optional[int] = Field(None, ge=0)
    floor_area: Optional[float] = Field(None, gt=0)
    property_type: Optional[PropertyType] = None
    sale_category: Optional[SaleCategory] = None
    listing_case_status: Optional[ListingCaseStatus] = None

    @field_validator("state")
    @classmethod
    def check_state(cls, value):
        return _validate_state(value)

    @model_validator(mode="after")
    def check_explicit_nulls(self) -> "ListingCaseUpdateRequest":
        # Only description may be cleared
        cleared = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in NULLABLE_UPDATE_FIELDS
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class ChangeListingCaseStatusRequest(BaseModel):
    status: ListingCaseStatus


class ListingCaseResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    street: str
    city: str
    state: str
    postcode: int
    longitude: float
    latitude: float
    price: float
    bedrooms: int
    bathrooms: int
    garages: int
    floor_area: float
    created_at: str
    property_type: PropertyType
    sale_category: SaleCategory
    listing_case_status: ListingCaseStatus
    user_id: str

    class Config:
        from_attributes = True


class AgentInfo(BaseModel):
    id: str
    agent_first_name: str
    agent_last_name: str
    avatar_url: Optional[str] = None
    company_name: str


class CaseContactResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    company_name: Optional[str] = None
    profile_url: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class ListingCaseDetailResponse(BaseModel):
    listing_case: ListingCaseResponse
    agents: List[AgentInfo] = []
    contacts: List[CaseContactResponse] = []


class PaginatedListingCasesResponse(BaseModel):
    items: List[ListingCaseResponse]
    total: int
    page_number: int
    page_size: int


class ChangeListingCaseStatusResponse(BaseModel):
    listing_case_id: int
    old_status: ListingCaseStatus
    new_status: ListingCaseStatus
