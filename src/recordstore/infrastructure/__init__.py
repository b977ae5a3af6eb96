"""
Record Store Infrastructure Layer
Database access and observability
"""
from recordstore.infrastructure.database import (
    DatabaseSessionFactory,
    QueryBuilder,
    RecordStore,
)
from recordstore.infrastructure.observability import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "RecordStore",
    "QueryBuilder",
    "DatabaseSessionFactory",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
