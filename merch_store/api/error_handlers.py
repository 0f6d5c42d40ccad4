"""Error Handlers — map wallet failures onto HTTP responses.

Invariants:
    - Every error body has the same envelope: {"error": {code, message, category, severity, ...}}
    - MerchStoreError → its own http_status; 503 also carries Retry-After, since the
      unit of work was rolled back. 504 never does: the deadline may have fired
      after the commit, so the outcome is unknown and a blind retry could apply twice
    - RequestValidationError → 400 VALIDATION_ERROR with one detail per field
    - Anything else → 500 INTERNAL_ERROR, never exposing the exception text

Design Decisions:
    - Rejected transfers (4xx) are routine and logged at warning; 5xx at error
    - The caller id from the domain error's context is logged next to the path
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from merch_store.core.errors import ErrorCategory, ErrorSeverity, MerchStoreError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "1"

_RETRYABLE_STATUSES = frozenset({status.HTTP_503_SERVICE_UNAVAILABLE})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MerchStoreError, handle_wallet_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_wallet_error(request: Request, exc: MerchStoreError) -> JSONResponse:
    logger.log(
        logging.ERROR if exc.http_status >= 500 else logging.WARNING,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
            "operation": exc.context.operation,
        },
    )
    headers = (
        {"Retry-After": RETRY_AFTER_SECONDS}
        if exc.http_status in _RETRYABLE_STATUSES else None
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request to {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }
