"""
Module 09D - API Error Handling

Standardized error handling for the API.

AirdropException codes map to HTTP statuses; the response body always
carries the code, message and details of the underlying exception.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import AirdropException, ErrorCodes


logger = logging.getLogger(__name__)


STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.ALREADY_CLAIMED: 409,
    ErrorCodes.INVALID_SIGNATURE: 401,
    ErrorCodes.INVALID_PROOF: 400,
    ErrorCodes.PAYOUT_FAILURE: 502,
    ErrorCodes.REENTRANT_CLAIM: 409,
    ErrorCodes.INPUT_ERROR: 422,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class NotConfiguredError(APIError):
    """No airdrop is being served."""

    def __init__(self, message: str = "No airdrop configured (set AIRDROP_BUNDLE_PATH)"):
        super().__init__(
            code="NOT_CONFIGURED",
            message=message,
            status_code=503,
        )


def status_for(exc: AirdropException) -> int:
    """HTTP status for an airdrop exception; unknown codes are server errors."""
    return STATUS_BY_CODE.get(exc.code, 500)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def airdrop_error_handler(request: Request, exc: AirdropException) -> JSONResponse:
    """Handle AirdropException raised by the core library."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(**exc.to_error_model().model_dump()),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
