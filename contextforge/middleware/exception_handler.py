"""Exception handlers that turn errors into structured JSON responses.

Every error body has the shape ``{"error", "message", "details"}``.
"""

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import DatabaseError, ForgeException, ValidationError

logger = logging.getLogger(__name__)


async def forge_exception_handler(request: Request, exc: ForgeException) -> JSONResponse:
    """Log a ForgeException and return it in the standard error format."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"ForgeException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query parameters are a 400, not FastAPI's 422."""
    errors = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    return await forge_exception_handler(
        request, ValidationError("Invalid request", errors=jsonable_encoder(errors))
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Unexpected database failures. The driver message is logged, never returned."""
    logger.error(
        "Database error",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    error = DatabaseError(original_error=exc)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
