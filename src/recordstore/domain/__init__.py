"""
Record Store Domain Layer
Record contracts and result types with no database dependencies
"""
from recordstore.domain.contracts import (
    FromRow,
    Identifiable,
    PaginatedResult,
    Record,
    Row,
    Serializable,
    SortOrder,
    ToRow,
)
from recordstore.domain.result import Failure, Result, Success, capture

__all__ = [
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
]
