from fastapi import HTTPException, status
from app.services.outcomes import OutcomeStatus, ServiceResult

_OUTCOME_STATUS_CODES = {
    OutcomeStatus.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    OutcomeStatus.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    OutcomeStatus.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


def raise_for_outcome(result: ServiceResult) -> None:
    """Translate a failed service outcome into an HTTPException"""
    if result.succeeded:
        return
    raise HTTPException(
        status_code=_OUTCOME_STATUS_CODES.get(result.status, status.HTTP_400_BAD_REQUEST),
        detail=result.error_message,
    )
