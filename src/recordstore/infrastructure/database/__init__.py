"""
Record Store Database Infrastructure
Query building, CRUD translation, error classification and connections
"""
from recordstore.infrastructure.database.error_mapping import (
    classify_exception,
    extract_sqlstate,
    map_store_error,
)
from recordstore.infrastructure.database.query_builder import (
    BuiltQuery,
    QueryBuilder,
    sanitize_column_name,
    validate_table_name,
)
from recordstore.infrastructure.database.record_store import IMMUTABLE_FIELDS, RecordStore
from recordstore.infrastructure.database.session import DatabaseSessionFactory

__all__ = [
    "BuiltQuery",
    "QueryBuilder",
    "sanitize_column_name",
    "validate_table_name",
    "RecordStore",
    "IMMUTABLE_FIELDS",
    "classify_exception",
    "extract_sqlstate",
    "map_store_error",
    "DatabaseSessionFactory",
]
