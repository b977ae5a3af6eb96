"""
Record Contracts
What a record type must provide to be stored through a RecordStore
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, List, Mapping, Optional, Protocol, TypeVar, Union, runtime_checkable

from recordstore.exceptions import InvalidArgumentError

T = TypeVar("T")
S = TypeVar("S", bound="Serializable")

# Column name -> value, as produced by a serializer and returned by the store
Row = Mapping[str, Any]
ToRow = Callable[[T], Row]
FromRow = Callable[[Row], T]


@runtime_checkable
class Identifiable(Protocol):
    id: str


@runtime_checkable
class Serializable(Protocol):
    """
    Round-trip contract between a record and a table row.

    ``type(x).from_row(x.to_row())`` must reconstruct a value equal to ``x``
    and the keys of ``to_row()`` must be the table's column names.
    """

    def to_row(self) -> Row: ...

    @classmethod
    def from_row(cls: type[S], row: Row) -> S: ...


@runtime_checkable
class Record(Identifiable, Serializable, Protocol):
    """A serializable record with an id; what ``RecordStore.for_model`` accepts."""


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Union["SortOrder", str, None]) -> "SortOrder":
        """Accept an enum member or a case-insensitive ``asc``/``desc``; default is ascending."""
        if value is None:
            return cls.ASC
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidArgumentError(f"Invalid sort order: {value!r}")

    @property
    def sql(self) -> str:
        return "DESC" if self is SortOrder.DESC else "ASC"


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """
    One page of a list/query call.

    ``cursor`` is the id of the last item on the page. It is informational
    only and is not accepted back to resume a listing.
    """

    items: List[T] = field(default_factory=list)
    has_more: bool = False
    cursor: Optional[str] = None


__all__ = [
    "Row",
    "ToRow",
    "FromRow",
    "Identifiable",
    "Serializable",
    "Record",
    "SortOrder",
    "PaginatedResult",
]
