"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.schemas.common import StandardResponse, ErrorResponse

DEGRADED_HEADER = "X-Data-Degraded"

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200,
    degraded: bool = False
) -> JSONResponse:
    """Create standardized success response

    `degraded` marks a body built from a fallback because storage failed.
    """
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    headers = {DEGRADED_HEADER: "true"} if degraded else None
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code,
        headers=headers
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

def not_found_error(resource: str = "Resource"):
    """Create not found error"""
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource} not found"
    )

def rate_limit_error():
    """Create rate limit error"""
    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Please try again later."
    )
