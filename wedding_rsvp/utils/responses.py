"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from wedding_rsvp.schemas.common import StandardResponse, ErrorResponse
from wedding_rsvp.services.exceptions import ServiceError

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

def service_error_response(err: ServiceError) -> JSONResponse:
    """Error envelope for a service exception"""
    return error_response(
        message=err.message,
        error_code=err.code,
        details=err.details,
        status_code=err.status_code
    )

def unauthorized_error(message: str = "Unauthorized"):
    """Create unauthorized error"""
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message
    )

def rate_limit_error():
    """Create rate limit error"""
    return error_response(
        message="Too many attempts. Please try again in a minute.",
        error_code="rate_limited",
        status_code=status.HTTP_429_TOO_MANY_REQUESTS
    )
