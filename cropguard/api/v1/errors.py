"""
Translation of service errors into HTTP errors.
"""
from fastapi import HTTPException, status

from cropguard.domain.errors import (
    InvalidStatusTransition,
    NotFoundError,
    PositionOccupiedError,
    ValidationError,
)
from cropguard.infrastructure.store_client import ExternalAPIError


def to_http_exception(error: Exception) -> HTTPException:
    """
    Map a known service error to an HTTPException.
    
    Errors not listed here are re-raised by the caller and reach the
    global error handler.
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (PositionOccupiedError, InvalidStatusTransition)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, ExternalAPIError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to reach plot store: {error.message}",
        )
    raise TypeError(f"No HTTP mapping for {type(error).__name__}")


SERVICE_ERRORS = (NotFoundError, ValidationError, InvalidStatusTransition, ExternalAPIError)

COMMON_RESPONSES = {
    429: {"description": "Rate limit exceeded"},
    502: {"description": "Plot store unavailable or failing"},
}
