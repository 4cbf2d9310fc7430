# Database models
from app.models.user import User, PhotographyCompany, Agent, AgentPhotographyCompany
from app.models.listing_case import ListingCase, AgentListingCase, CaseContact
from app.models.media_asset import MediaAsset
from app.models.history import CaseHistory, MediaAssetHistory

__all__ = [
    "User",
    "PhotographyCompany",
    "Agent",
    "AgentPhotographyCompany",
    "ListingCase",
    "AgentListingCase",
    "CaseContact",
    "MediaAsset",
    "CaseHistory",
    "MediaAssetHistory",
]
