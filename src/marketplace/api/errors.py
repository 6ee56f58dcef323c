"""Map domain failures to HTTP responses.

Every error body has the same shape::

    {"error": <code>, "kind": <kind>, "message": ..., "retryable": bool}
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from marketplace.errors import ErrorKind, MarketplaceError

logger = structlog.get_logger(__name__)

STATUS_FOR_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.DEPENDENCY_FAILURE: 500,
}


def _body(code: str, kind: ErrorKind, message: str, retryable: bool = False, **extra) -> dict:
    return {"error": code, "kind": kind.value, "message": message, "retryable": retryable, **extra}


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    status = STATUS_FOR_KIND[exc.kind]
    if status >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.code, **exc.context)
    else:
        logger.info("request_rejected", path=request.url.path, error=exc.code, status=status)
    # Internal details stay in the logs
    message = exc.message if status < 500 else "Internal error, please retry"
    return JSONResponse(status_code=status, content=_body(exc.code, exc.kind, message, exc.retryable))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=_body("InvalidInput", ErrorKind.VALIDATION, "Invalid input", messages=exc.messages),
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=_body("NotFound", ErrorKind.NOT_FOUND, str(exc)))


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.info("concurrent_modification", path=request.url.path)
    return JSONResponse(
        status_code=409,
        content=_body(
            "ConcurrentModification",
            ErrorKind.CONFLICT,
            "The resource was modified by another request",
            retryable=True,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
