import logging
import re
from typing import Any, List, Optional

from .config import DataTablesConfig
from .enum import Dialect
from .schema import DataTablesRequest

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
MAX_SANITIZE_LENGTH = 256

_UNSAFE_CHARS = re.compile(r"[\0\x08\x09\x1a\n\r\"'\\%]")
_ESCAPES = {
    "\0": "\\0",
    "\x08": "\\b",
    "\x09": "\\t",
    "\x1a": "\\z",
    "\n": "\\n",
    "\r": "\\r",
}


def _escape(match) -> str:
    char = match.group(0)
    # quotes, backslash and percent are escaped by prefixing a backslash
    return _ESCAPES.get(char, "\\" + char)


def sanitize(value: Any, max_len: int = MAX_SANITIZE_LENGTH) -> Any:
    """
    Escape a value before it is interpolated into SQL text.

    Empty or falsy values are returned unchanged. Non-string values and
    strings longer than ``max_len`` are rejected with None.

    This is string escaping, not parameter binding: it narrows the
    injection surface but does not close it.
    """
    max_len = max_len or MAX_SANITIZE_LENGTH
    if not value:
        return value
    if not isinstance(value, str) or len(value) > max_len:
        return None
    return _UNSAFE_CHARS.sub(_escape, value)


def _sanitize_search(column: Any, value: Any):
    col_name = sanitize(column)
    search_value = sanitize(value)
    if value and search_value is None:
        logger.warning("Dropping search on %r: search value rejected", column)
    if column and col_name is None:
        logger.warning("Dropping search on rejected column name %r", column)
    return col_name, search_value


def build_condition(column: str, value: str, dialect: Dialect) -> str:
    """
    Build a pattern-match predicate for an already sanitized column and value.
    PostgreSQL casts the column to text and matches case-insensitively.
    """
    if dialect == Dialect.POSTGRES:
        return f"CAST({column} AS text) ILIKE '%{value}%'"
    return f"{column} LIKE '%{value}%'"


def column_filter(request: DataTablesRequest, dialect: Dialect) -> List[str]:
    """Predicates for the per-column search boxes."""
    column_conditions = []
    for col in request.columns or []:
        if not col.is_searchable:
            continue
        col_name, value = _sanitize_search(col.name, col.search.value)
        if col_name and value:
            column_conditions.append(build_condition(col_name, value, dialect))
    return column_conditions


def global_filter(config: DataTablesConfig, request: DataTablesRequest) -> List[str]:
    """Predicates matching the global search term against the allow-listed columns."""
    search_conditions = []
    if not config.search_columns or not request.search_value:
        return search_conditions
    for column in config.search_columns:
        col_name, value = _sanitize_search(column, request.search_value)
        if col_name and value:
            search_conditions.append(build_condition(col_name, value, config.dialect))
    return search_conditions


def build_search(config: DataTablesConfig, request: DataTablesRequest) -> str:
    searches = []
    column_conditions = column_filter(request, config.dialect)
    if column_conditions:
        searches.append("(" + " AND ".join(column_conditions) + ")")
    search_conditions = global_filter(config, request)
    if search_conditions:
        searches.append("(" + " OR ".join(search_conditions) + ")")
    return " AND ".join(searches)


def build_date_range(config: DataTablesConfig) -> Optional[str]:
    column = config.date_column_name
    if not column:
        return None
    if config.date_from and config.date_to:
        return (
            f"{column} BETWEEN '{config.date_from.isoformat()}'"
            f" AND '{config.date_to.isoformat()}'"
        )
    if config.date_from:
        return f"{column} >= '{config.date_from.isoformat()}'"
    if config.date_to:
        return f"{column} <= '{config.date_to.isoformat()}'"
    return None


def build_where(config: DataTablesConfig, request: DataTablesRequest) -> str:
    """
    Build the WHERE clause: search predicates, the caller's raw
    ``where_and_sql`` and the date range, each parenthesised and ANDed.
    Returns an empty string when there is nothing to filter on.
    """
    wheres = []
    search = build_search(config, request)
    if search:
        wheres.append(search)
    if config.where_and_sql:
        wheres.append(config.where_and_sql)
    date_range = build_date_range(config)
    if date_range:
        wheres.append(date_range)
    if wheres:
        return " WHERE (" + ") AND (".join(wheres) + ")"
    return ""


def build_order(request: DataTablesRequest) -> str:
    # Only the first sort column is honoured; multi-column sort is not supported.
    if not request.order:
        return ""
    order = request.order[0]
    columns = request.columns or []
    if not 0 <= order.column < len(columns):
        logger.warning("Ignoring order on unknown column index %s", order.column)
        return ""
    col = columns[order.column]
    if not col.is_orderable or not col.name:
        return ""
    return f" ORDER BY {col.name} {order.dir}"


def build_limit(config: DataTablesConfig, request: DataTablesRequest) -> str:
    """
    Build the LIMIT clause. Oracle has no LIMIT; its select statement is
    wrapped in a ROWNUM subquery instead.
    """
    if config.dialect == Dialect.ORACLE:
        return ""
    start = request.start
    if start is None or start < 0:
        return ""
    if request.length is not None and request.length < 0:
        return " "
    length = request.length if request.length and request.length > 0 else DEFAULT_LIMIT
    if config.dialect == Dialect.POSTGRES:
        return f" OFFSET {start} LIMIT {length}"
    return f" LIMIT {start}, {length}"
