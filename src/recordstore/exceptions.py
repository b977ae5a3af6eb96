"""
Data Access Error Taxonomy
Every failure an adapter operation can surface is one of these kinds.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    INVALID_ARGUMENT = "invalid_argument"
    OPERATION_FAILED = "operation_failed"
    UNKNOWN = "unknown"


class DataAccessError(Exception):
    """Base class for classified data-access errors. Callers never see raw driver errors."""
    kind: ErrorKind = ErrorKind.UNKNOWN
    code: str = "data_access_error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str
    details: Optional[Dict[str, Any]]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = code
        self.message = message or self.__class__.__name__
        self.details = details

    def with_details(self, **details: Any) -> "DataAccessError":
        """Merge context into ``details`` without overwriting keys already set."""
        merged = {k: v for k, v in details.items() if v is not None}
        merged.update(self.details or {})
        self.details = merged or None
        return self


class NotFoundError(DataAccessError):
    kind = ErrorKind.NOT_FOUND
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DataAccessError):
    kind = ErrorKind.CONFLICT
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class BadRequestError(DataAccessError):
    kind = ErrorKind.BAD_REQUEST
    code = "bad_request"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidArgumentError(DataAccessError, ValueError):
    kind = ErrorKind.INVALID_ARGUMENT
    code = "invalid_argument"
    status_code = status.HTTP_400_BAD_REQUEST


class OperationFailedError(DataAccessError):
    kind = ErrorKind.OPERATION_FAILED
    code = "operation_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnknownDataAccessError(DataAccessError):
    kind = ErrorKind.UNKNOWN
    code = "unknown_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "ErrorKind",
    "DataAccessError",
    "NotFoundError",
    "ConflictError",
    "BadRequestError",
    "InvalidArgumentError",
    "OperationFailedError",
    "UnknownDataAccessError",
]
