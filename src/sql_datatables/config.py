# sql_datatables/config.py
from datetime import datetime
from typing import Any, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .enum import Dialect
from .exceptions import ConfigurationError


def _option(name: str, legacy: str, default: Any = None) -> Any:
    # Accept both the pythonic field name and the option name used by
    # node-datatable style configuration objects.
    return Field(default=default, validation_alias=AliasChoices(name, legacy))


class DataTablesConfig(BaseModel):
    """
    Describes one server-side table endpoint.

    A configuration is built once per logical table and is read-only
    afterwards, so a single instance can be shared between concurrent
    requests.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    table_name: Optional[str] = _option("table_name", "sTableName")
    count_column_name: str = _option("count_column_name", "sCountColumnName", "id")
    schema_name: Optional[str] = _option("schema_name", "sDatabaseOrSchema")
    search_columns: Tuple[str, ...] = _option("search_columns", "aSearchColumns", ())
    select_sql: Optional[str] = _option("select_sql", "sSelectSql")
    from_sql: Optional[str] = _option("from_sql", "sFromSql")
    where_and_sql: Optional[str] = _option("where_and_sql", "sWhereAndSql")
    date_column_name: Optional[str] = _option("date_column_name", "sDateColumnName")
    date_from: Optional[datetime] = _option("date_from", "dateFrom")
    date_to: Optional[datetime] = _option("date_to", "dateTo")
    dialect: Dialect = _option("dialect", "dbType", Dialect.MYSQL)
    data_prop: str = _option("data_prop", "sAjaxDataProp", "data")

    @field_validator("count_column_name", mode="before")
    @classmethod
    def default_count_column(cls, value):
        return value or "id"

    @field_validator("search_columns", mode="before")
    @classmethod
    def normalize_search_columns(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("dialect", mode="before")
    @classmethod
    def parse_dialect(cls, value):
        if value is None or value == "":
            return Dialect.MYSQL
        if isinstance(value, Dialect):
            return value
        try:
            return Dialect(str(value).lower())
        except ValueError:
            supported = ", ".join(d.value for d in Dialect)
            raise ConfigurationError(
                f"Unsupported dialect {value!r}, expected one of: {supported}"
            )

    @model_validator(mode="after")
    def check_source(self):
        if not self.table_name and not self.from_sql:
            raise ConfigurationError("Either table_name or from_sql must be set")
        return self

    @property
    def source(self) -> str:
        """Text placed after FROM in every generated statement."""
        return self.from_sql or self.table_name

    @property
    def count_expression(self) -> str:
        # With a custom select list the count column may be ambiguous, so
        # qualify the id by table name.
        if self.select_sql and self.table_name:
            return f"{self.table_name}.id"
        return self.count_column_name
