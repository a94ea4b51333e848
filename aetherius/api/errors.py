"""
Error responses.

Every error leaves the API as {"message": str}:
- request validation failures -> 400
- unknown ids                   -> 404 (raised by the handlers)
- StorageError                  -> 500
- GenerationError               -> 500
- anything else                 -> 500
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from aetherius.agents import GenerationError
from aetherius.services.storage import StorageError


logger = structlog.get_logger("aetherius.api")

# Validation problems listed in a 400 message
MAX_REPORTED_ERRORS = 3


def error_body(message: str) -> dict[str, str]:
    return {"message": message}


def describe_validation_errors(errors: list[dict]) -> str:
    """Summarize pydantic errors as 'field: problem; field: problem'."""
    parts = []
    for error in errors[:MAX_REPORTED_ERRORS]:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info("request_failed", path=request.url.path, status_code=exc.status_code, reason=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = f"Invalid request data: {describe_validation_errors(exc.errors())}"
    logger.info("request_rejected", path=request.url.path, reason=message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    message = f"Invalid data: {describe_validation_errors(exc.errors())}"
    logger.info("request_rejected", path=request.url.path, reason=message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    await request.app.state.components.audit.log_storage_error(str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Failed to access family data"),
    )


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    logger.error("generation_error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Failed to generate AI response"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    await request.app.state.components.audit.log_error(
        error_type=type(exc).__name__,
        error_message=str(exc),
        details={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, model_validation_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(GenerationError, generation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
