# sql_datatables/__init__.py
from .builder import build_change_schema, build_count, build_query, build_select
from .config import DataTablesConfig
from .core import DataTables
from .database import DatabaseBackend, SQLAlchemyBackend
from .enum import Dialect
from .exceptions import BackendError, ConfigurationError, DataTablesError
from .response import extract_response_value, filtered_result, parse_draw, parse_response
from .schema import (
    DataTablesColumn,
    DataTablesOrder,
    DataTablesRequest,
    DataTablesResponse,
    DataTablesSearch,
    StatementSet,
)
from .utils import build_limit, build_order, build_where, sanitize

__version__ = "0.1.0"

__all__ = [
    "DataTables",
    "DataTablesConfig",
    "Dialect",
    "DatabaseBackend",
    "SQLAlchemyBackend",
    "DataTablesRequest",
    "DataTablesResponse",
    "DataTablesColumn",
    "DataTablesOrder",
    "DataTablesSearch",
    "StatementSet",
    "DataTablesError",
    "ConfigurationError",
    "BackendError",
    "build_query",
    "build_select",
    "build_count",
    "build_change_schema",
    "build_where",
    "build_order",
    "build_limit",
    "sanitize",
    "parse_response",
    "parse_draw",
    "extract_response_value",
    "filtered_result",
]
