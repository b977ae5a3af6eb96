"""
Store Exception Classification
Maps driver/SQLAlchemy exceptions onto the data-access error taxonomy
"""
from __future__ import annotations

import asyncio
from typing import Any, Optional

from sqlalchemy.exc import DBAPIError, DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from recordstore.exceptions import (
    BadRequestError,
    ConflictError,
    DataAccessError,
    ErrorKind,
    OperationFailedError,
    UnknownDataAccessError,
)

# PostgreSQL SQLSTATE codes, see https://www.postgresql.org/docs/current/errcodes-appendix.html
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

CONNECTION_ERRORS = (DisconnectionError, PoolTimeoutError, OSError, TimeoutError, asyncio.TimeoutError)

# DBAPI classes that, without a vendor code, mean the connection itself failed
CONNECTION_DBAPI_ERRORS = (OperationalError, InterfaceError)

_LOG_LEVELS = {
    ErrorKind.NOT_FOUND: "debug",
    ErrorKind.INVALID_ARGUMENT: "warning",
    ErrorKind.BAD_REQUEST: "warning",
    ErrorKind.CONFLICT: "warning",
    ErrorKind.OPERATION_FAILED: "error",
    ErrorKind.UNKNOWN: "error",
}


def extract_sqlstate(error: DBAPIError) -> Optional[str]:
    """
    Vendor error code of a wrapped driver exception, if any.

    psycopg exposes ``sqlstate``/``pgcode``; SQLAlchemy's asyncpg adapter
    exposes them on the adapted error and keeps the asyncpg error as its cause.
    """
    orig = error.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        for attr in ("sqlstate", "pgcode"):
            code = getattr(candidate, attr, None)
            if isinstance(code, str) and code:
                return code
    return None


def _driver_message(error: DBAPIError) -> str:
    return str(error.orig) if error.orig is not None else str(error)


def map_store_error(error: BaseException) -> DataAccessError:
    """Translate one exception into its taxonomy kind, without logging."""
    if isinstance(error, DataAccessError):
        return error

    if isinstance(error, DBAPIError):
        message = _driver_message(error)
        code = extract_sqlstate(error)
        if error.connection_invalidated or (code is None and isinstance(error, CONNECTION_DBAPI_ERRORS)):
            return OperationFailedError(f"A database connection error occurred: {message}")
        if code is None:
            return OperationFailedError(f"A database error occurred: {message}")
        if code == UNIQUE_VIOLATION:
            return ConflictError(message, details={"sqlstate": code})
        if code == FOREIGN_KEY_VIOLATION:
            return BadRequestError(message, details={"sqlstate": code})
        return OperationFailedError(f"A database error occurred: {message}", details={"sqlstate": code})

    if isinstance(error, CONNECTION_ERRORS):
        return OperationFailedError(f"A database connection error occurred: {error}")

    return UnknownDataAccessError(f"An unknown error occurred: {error}")


def classify_exception(
    error: BaseException,
    *,
    logger: Any,
    table: str,
    operation: str,
    record_id: Optional[str] = None,
    scope: Optional[str] = None,
) -> DataAccessError:
    """
    Classify ``error`` and log it once at a level matching how expected it is.

    The caller raises the returned error (``raise classified from error``).
    """
    classified = map_store_error(error)
    classified.with_details(table=table, operation=operation, id=record_id, scope=scope)

    level = _LOG_LEVELS[classified.kind]
    log_kwargs: dict[str, Any] = {
        "operation": operation,
        "kind": classified.kind.value,
        "error": classified.message,
    }
    if record_id is not None:
        log_kwargs["id"] = record_id
    if scope is not None:
        log_kwargs["scope"] = scope
    if classified is not error:
        log_kwargs["cause"] = type(error).__name__
    if classified.kind is ErrorKind.UNKNOWN:
        log_kwargs["exc_info"] = error

    getattr(logger, level)(f"{operation} on {table} failed", **log_kwargs)
    return classified


__all__ = [
    "UNIQUE_VIOLATION",
    "FOREIGN_KEY_VIOLATION",
    "extract_sqlstate",
    "map_store_error",
    "classify_exception",
]
