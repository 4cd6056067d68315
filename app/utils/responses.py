"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.errors import DomainError, ErrorCode, RecordValidationError
from app.schemas.common import StandardResponse, ErrorResponse

ERROR_STATUS = {
    ErrorCode.CONFIGURATION_ERROR: 500,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.EVENT_REFERENCE_NOT_FOUND: 422,
    ErrorCode.EVENT_REFERENCE_CHECK_FAILED: 503,
    ErrorCode.DUPLICATE_SLUG: 409,
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.DATABASE_UNAVAILABLE: 503,
}

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code
    )

def domain_error_response(exc: DomainError) -> JSONResponse:
    """Render a domain error with its code and matching HTTP status"""
    details = exc.errors if isinstance(exc, RecordValidationError) else None
    return error_response(
        message=exc.message,
        error_code=exc.code.value,
        details=details,
        status_code=ERROR_STATUS.get(exc.code, 400)
    )

def rate_limit_error():
    """Create rate limit error"""
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Please try again later."
    )
