import logging
from typing import Any, Optional

from .config import DataTablesConfig
from .enum import Dialect
from .schema import DataTablesRequest, StatementSet, coerce_request
from .utils import build_limit, build_order, build_where, sanitize

logger = logging.getLogger(__name__)


def build_change_schema(config: DataTablesConfig) -> Optional[str]:
    if not config.schema_name:
        return None
    if config.dialect == Dialect.ORACLE:
        return f"ALTER SESSION SET CURRENT_SCHEMA = {config.schema_name}"
    return f"USE {config.schema_name}"


def build_select(config: DataTablesConfig) -> str:
    return f"SELECT {config.select_sql or '*'} FROM {config.source}"


def build_count(config: DataTablesConfig, request: DataTablesRequest) -> str:
    return f"SELECT COUNT({config.count_expression}) FROM {config.source}" + build_where(
        config, request
    )


def paginate_oracle(query: str, request: DataTablesRequest) -> str:
    """Emulate OFFSET/LIMIT on Oracle by numbering rows in a subquery."""
    start, length = request.start, request.length
    if start is None or length is None or start < 0 or length < 0:
        return query
    return (
        f"SELECT * FROM (SELECT a.*, ROWNUM rnum FROM ({query}) a)"
        f" WHERE rnum BETWEEN {start + 1} AND {start + length}"
    )


def build_query(config: DataTablesConfig, request: Any) -> StatementSet:
    """
    Build every statement needed to answer one DataTables request.

    The result depends only on ``config`` and ``request``; nothing is kept
    between calls. A request that is not a well-formed object produces an
    empty ``StatementSet``.
    """
    request_data = coerce_request(request)
    if request_data is None:
        return StatementSet()

    filtered = bool(sanitize(request_data.search_value))

    # recordsTotal and recordsFiltered share the same WHERE clause; the
    # filtered count is only requested when a global search term is present.
    count = build_count(config, request_data)

    query = build_select(config)
    query += build_where(config, request_data)
    query += build_order(request_data)
    query += build_limit(config, request_data)
    if config.dialect == Dialect.ORACLE:
        query = paginate_oracle(query, request_data)

    statements = StatementSet(
        change_schema=build_change_schema(config),
        records_total=count,
        records_filtered=count if filtered else None,
        select=query,
    )
    logger.debug("Built DataTables statements: %s", statements.statements())
    return statements
