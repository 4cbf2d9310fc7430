import enum


class UserRole(str, enum.Enum):
    AGENT = "Agent"
    PHOTOGRAPHY_COMPANY = "PhotographyCompany"


class PropertyType(str, enum.Enum):
    HOUSE = "House"
    UNIT = "Unit"
    TOWNHOUSE = "Townhouse"
    VILLA = "Villa"
    OTHER = "Other"


class SaleCategory(str, enum.Enum):
    FOR_SALE = "ForSale"
    FOR_RENT = "ForRent"
    AUCTION = "Auction"


class ListingCaseStatus(str, enum.Enum):
    CREATED = "Created"
    PENDING = "Pending"
    DELIVERED = "Delivered"


class MediaType(str, enum.Enum):
    # Declaration order is the listing order of media assets
    PHOTO = "Photo"
    VIDEO = "Video"
    FLOOR_PLAN = "FloorPlan"
    VR_TOUR = "VRTour"


def enum_values(enum_cls):
    """Persist enum values ("ForSale") rather than member names ("FOR_SALE")"""
    return [member.value for member in enum_cls]
