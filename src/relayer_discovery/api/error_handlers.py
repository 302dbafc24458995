"""Error handling and response standardization for the API."""

from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from relayer_discovery.domain.exceptions import DiscoveryError
from relayer_discovery.domain.models import ErrorCode

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR_CODE = {
    ErrorCode.STORE_NOT_CONNECTED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.STORE_CONNECTION_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.STORE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.NO_ACTIVE_RELAYER: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ErrorResponse(BaseModel):
    """Body of every error the API returns."""

    error: bool = True
    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None
    correlation_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    path: str


def error_json(
    request: Request,
    code: ErrorCode,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    # The correlation contextvar is already reset here; read it off the request
    body = ErrorResponse(
        code=code,
        message=message,
        details=details,
        correlation_id=getattr(request.state, "correlation_id", None),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def discovery_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Map service exceptions to their HTTP status."""
    if not isinstance(exc, DiscoveryError):
        raise exc

    status_code = STATUS_BY_ERROR_CODE.get(
        exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    logger.error(
        "Request failed",
        error=str(exc),
        code=exc.error_code.value,
        status_code=status_code,
    )
    return error_json(request, exc.error_code, exc.message, status_code, exc.details)


async def unexpected_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        error=str(exc),
        exception_type=type(exc).__name__,
        path=request.url.path,
    )
    return error_json(
        request,
        ErrorCode.INTERNAL_ERROR,
        "An unexpected error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"exception_type": type(exc).__name__},
    )
