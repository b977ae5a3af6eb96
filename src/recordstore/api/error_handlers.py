"""
HTTP Error Handlers
Maps classified data-access errors to standard error responses
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from recordstore.api.response_models import ErrorDetail, ErrorResponse
from recordstore.exceptions import DataAccessError, ErrorKind
from recordstore.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

# Store internals are not echoed back to clients for server-side failures
_INTERNAL_KINDS = {ErrorKind.OPERATION_FAILED, ErrorKind.UNKNOWN}


async def data_access_exception_handler(request: Request, exc: DataAccessError) -> JSONResponse:
    """
    Handle DataAccessError and subclasses.

    Args:
        request: FastAPI request
        exc: Classified error raised by a RecordStore

    Returns:
        JSONResponse with the error's status code and body
    """
    logger.info(
        "Data access error returned to client",
        code=exc.code,
        status_code=exc.status_code,
        path=str(request.url),
    )

    if exc.kind in _INTERNAL_KINDS:
        detail = ErrorDetail(code=exc.code, message="An internal error occurred. Please try again later.")
    else:
        detail = ErrorDetail(code=exc.code, message=exc.message, details=exc.details)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=detail).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DataAccessError, data_access_exception_handler)  # type: ignore[arg-type]
