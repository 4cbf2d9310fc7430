"""Error handling utilities."""


class RecamError(Exception):
    """Base exception for the Recam backend."""
    pass


class WriteConflictError(RecamError):
    """A write that had to affect one row affected none (concurrent delete or similar)."""
    pass


class MediaStorageError(RecamError):
    """Blob storage operation error."""
    pass


UPDATE_LISTING_CASE_FAILED = "Failed to update listing case."
CHANGE_LISTING_CASE_STATUS_FAILED = "Failed to change listing case status."
DELETE_LISTING_CASE_FAILED = "Failed to delete listing case."
DELETE_MEDIA_ASSET_FAILED = "Failed to delete media asset."
SET_HERO_MEDIA_ASSET_FAILED = "Failed to set hero media asset."
