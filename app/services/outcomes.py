"""
Service outcomes - typed results handed back to the controllers

Not-found and forbidden are outcomes, never exceptions.
"""
import enum
from dataclasses import dataclass
from typing import Any, Optional


class OutcomeStatus(str, enum.Enum):
    SUCCESS = "Success"
    INVALID_ID = "InvalidId"
    BAD_REQUEST = "BadRequest"
    FORBIDDEN = "Forbidden"


INVALID_LISTING_CASE_ID = "Unable to find the resource. Please provide a valid listing case id."
INVALID_MEDIA_ASSET_ID = "Unable to find the resource. Please provide a valid media asset id."
LISTING_CASE_FORBIDDEN = "You are not allowed to access this listing case."
MEDIA_ASSET_FORBIDDEN = "You are not allowed to access this media asset."
MEDIA_CREATE_FORBIDDEN = "You are not allowed to create media asset for this listing case."
CASE_MEDIA_FORBIDDEN = "You are not allowed to access this media assets of this listing case."


@dataclass
class ServiceResult:
    status: OutcomeStatus
    error_message: Optional[str] = None
    data: Any = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @classmethod
    def success(cls, data: Any = None) -> "ServiceResult":
        return cls(OutcomeStatus.SUCCESS, data=data)

    @classmethod
    def invalid_id(cls, message: str) -> "ServiceResult":
        return cls(OutcomeStatus.INVALID_ID, error_message=message)

    @classmethod
    def bad_request(cls, message: str) -> "ServiceResult":
        return cls(OutcomeStatus.BAD_REQUEST, error_message=message)

    @classmethod
    def forbidden(cls, message: str) -> "ServiceResult":
        return cls(OutcomeStatus.FORBIDDEN, error_message=message)
