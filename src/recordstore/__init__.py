"""
recordstore - generic data-access adapter
Uniform create/read/update/delete/query over parameterized PostgreSQL
"""

# Domain layer
from recordstore.domain import (
    Failure,
    FromRow,
    Identifiable,
    PaginatedResult,
    Record,
    Result,
    Row,
    Serializable,
    SortOrder,
    Success,
    ToRow,
    capture,
)

# Error taxonomy
from recordstore.exceptions import (
    BadRequestError,
    ConflictError,
    DataAccessError,
    ErrorKind,
    InvalidArgumentError,
    NotFoundError,
    OperationFailedError,
    UnknownDataAccessError,
)

# Infrastructure layer
from recordstore.infrastructure import (
    DatabaseSessionFactory,
    QueryBuilder,
    RecordStore,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

# Configuration
from recordstore.config import Settings, get_settings

__all__ = [
    # Domain
    "Row",
    "ToRow",
    "FromRow",
    "Identifiable",
    "Serializable",
    "Record",
    "SortOrder",
    "PaginatedResult",
    "Result",
    "Success",
    "Failure",
    "capture",
    # Errors
    "ErrorKind",
    "DataAccessError",
    "NotFoundError",
    "ConflictError",
    "BadRequestError",
    "InvalidArgumentError",
    "OperationFailedError",
    "UnknownDataAccessError",
    # Infrastructure
    "RecordStore",
    "QueryBuilder",
    "DatabaseSessionFactory",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Config
    "Settings",
    "get_settings",
]
