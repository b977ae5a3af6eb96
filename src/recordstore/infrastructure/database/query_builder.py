"""
Dynamic SELECT Construction
Turns a filter map, optional owner scope, sort and page size into one
parameterized statement. No I/O.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Union

from recordstore.domain.contracts import SortOrder
from recordstore.exceptions import BadRequestError, InvalidArgumentError
from recordstore.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_.]+")

IN_SUFFIX = "_in"
CONTAINS_SUFFIX = "_contains"

# Owner scoping is always applied on this column, bound under this name
SCOPE_COLUMN = "user_id"
SCOPE_PARAM = "userId"


class BuiltQuery(NamedTuple):
    sql: str
    params: Dict[str, Any]


def sanitize_column_name(name: str) -> str:
    """
    Validate a column identifier and flatten dotted paths.

    ``category.id`` becomes ``category_id``. Anything outside
    ``[A-Za-z0-9_.]`` is rejected before it can reach SQL text.

    Raises:
        InvalidArgumentError: If the name is not a plain identifier
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.fullmatch(name):
        raise InvalidArgumentError(f"Invalid column name format: {name!r}")
    return name.replace(".", "_")


def validate_table_name(name: str) -> str:
    """Same allow-list as columns, but dots are kept for schema-qualified names."""
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.fullmatch(name):
        raise InvalidArgumentError(f"Invalid table name format: {name!r}")
    return name


def validate_limit(limit: Optional[int]) -> Optional[int]:
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise BadRequestError(f"Limit must be a positive integer, got {limit!r}")
    return limit


class QueryBuilder:
    """
    Builds SELECT statements for a single table.

    Values are always bound as named parameters; only identifiers that
    passed the sanitizer are interpolated. Parameter names (``p0``, ``p1``, ...)
    come from a counter local to each ``build_select`` call, in filter-map
    iteration order.
    """

    def __init__(self, table_name: str) -> None:
        self.table_name = validate_table_name(table_name)

    def build_select(
        self,
        query: Optional[Mapping[str, Any]] = None,
        *,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Union[SortOrder, str, None] = None,
    ) -> BuiltQuery:
        """
        Build ``SELECT * FROM <table> [WHERE ...] [ORDER BY ...] [LIMIT n+1];``

        Args:
            query: Filter map. ``<col>_in`` takes a comma-delimited string (or a
                list/tuple/set) and matches any part; ``<col>_contains`` is a
                case-insensitive substring match; any other key is equality.
            user_id: Owner scope, emitted first as ``user_id = :userId``
            limit: Page size; one extra row is requested to detect more pages
            sort_by: Column to order by
            sort_order: Direction, ascending unless told otherwise

        Returns:
            BuiltQuery with SQL text and bound parameters

        Raises:
            InvalidArgumentError: A filter key or sort column is not an identifier
            BadRequestError: An ``_in`` value has an unusable shape or the limit
                is not a positive integer
        """
        where: List[str] = []
        params: Dict[str, Any] = {}
        counter = 0

        if user_id is not None:
            where.append(f"{SCOPE_COLUMN} = :{SCOPE_PARAM}")
            params[SCOPE_PARAM] = user_id

        for key, value in (query or {}).items():
            if isinstance(key, str) and key.endswith(IN_SUFFIX):
                column = sanitize_column_name(key[: -len(IN_SUFFIX)])
                parts = self._split_in_value(key, value)
                if not parts:
                    logger.debug("Dropping empty IN filter", table=self.table_name, key=key)
                    continue
                names = []
                for part in parts:
                    name = f"p{counter}"
                    counter += 1
                    names.append(f":{name}")
                    params[name] = part
                where.append(f"{column} IN ({', '.join(names)})")
            elif isinstance(key, str) and key.endswith(CONTAINS_SUFFIX):
                column = sanitize_column_name(key[: -len(CONTAINS_SUFFIX)])
                name = f"p{counter}"
                counter += 1
                where.append(f"{column} ILIKE :{name}")
                params[name] = f"%{value}%"
            else:
                column = sanitize_column_name(key)
                name = f"p{counter}"
                counter += 1
                where.append(f"{column} = :{name}")
                params[name] = value

        sql = f"SELECT * FROM {self.table_name}"
        if where:
            sql += " WHERE " + " AND ".join(where)

        if sort_by is not None:
            order = SortOrder.parse(sort_order)
            sql += f" ORDER BY {sanitize_column_name(sort_by)} {order.sql}"

        if validate_limit(limit) is not None:
            sql += f" LIMIT {limit + 1}"

        return BuiltQuery(sql + ";", params)

    @staticmethod
    def _split_in_value(key: str, value: Any) -> List[Any]:
        if isinstance(value, str):
            return value.split(",")
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(value)
        raise BadRequestError(
            f"Filter {key!r} expects a comma-separated string or a collection, got {type(value).__name__}"
        )


__all__ = [
    "BuiltQuery",
    "QueryBuilder",
    "sanitize_column_name",
    "validate_table_name",
    "validate_limit",
    "SCOPE_COLUMN",
    "SCOPE_PARAM",
]
