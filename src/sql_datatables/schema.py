# sql_datatables/schema.py
import logging
from typing import Any, Generic, List, Literal, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _protocol_flag(value):
    # DataTables sends "true"/"false" as strings; JSON clients may send booleans.
    if value is None:
        return "false"
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class DataTablesSearch(BaseModel):
    value: Optional[str] = ""
    regex: Optional[Union[str, bool]] = "false"


class DataTablesColumn(BaseModel):
    data: Optional[Any] = None
    name: Optional[str] = ""
    searchable: str = "false"
    orderable: str = "false"
    search: DataTablesSearch = Field(default_factory=DataTablesSearch)

    @field_validator("searchable", "orderable", mode="before")
    @classmethod
    def normalize_flag(cls, value):
        return _protocol_flag(value)

    @field_validator("search", mode="before")
    @classmethod
    def default_search(cls, value):
        return DataTablesSearch() if value is None else value

    @property
    def is_searchable(self) -> bool:
        return self.searchable == "true"

    @property
    def is_orderable(self) -> bool:
        return self.orderable == "true"


class DataTablesOrder(BaseModel):
    column: int
    dir: Literal["asc", "desc"] = "asc"

    @field_validator("dir", mode="before")
    @classmethod
    def lower_direction(cls, value):
        return value.lower() if isinstance(value, str) else value


class DataTablesRequest(BaseModel):
    draw: Optional[Union[str, int]] = None
    start: Optional[int] = None
    length: Optional[int] = None
    search: Optional[DataTablesSearch] = None
    order: Optional[List[DataTablesOrder]] = []
    columns: Optional[List[DataTablesColumn]] = []

    @field_validator("start", "length", mode="before")
    @classmethod
    def lenient_int(cls, value):
        # Unparseable paging values drop the paging clause, not the request.
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring non-integer paging value %r", value)
            return None

    @property
    def search_value(self) -> str:
        if self.search is None:
            return ""
        return self.search.value or ""


def coerce_request(request: Any) -> Optional[DataTablesRequest]:
    """
    Turn a request model or a plain mapping into a ``DataTablesRequest``.

    Returns None when the request is not a well-formed object; callers treat
    that as "nothing to build" rather than as an error.
    """
    if isinstance(request, DataTablesRequest):
        return request
    if not isinstance(request, Mapping):
        logger.warning("Ignoring DataTables request of type %s", type(request).__name__)
        return None
    try:
        return DataTablesRequest.model_validate(request)
    except ValidationError as exc:
        logger.warning("Ignoring malformed DataTables request: %s", exc.errors())
        return None


class StatementSet(BaseModel):
    change_schema: Optional[str] = None
    records_total: Optional[str] = None
    records_filtered: Optional[str] = None
    select: Optional[str] = None

    def statements(self) -> List[str]:
        """The statements to run, in execution order."""
        return [
            sql
            for sql in (
                self.change_schema,
                self.records_total,
                self.records_filtered,
                self.select,
            )
            if sql
        ]


class DataTablesResponse(BaseModel, Generic[T]):
    draw: int = 0
    recordsTotal: int = 0
    recordsFiltered: int = 0
    data: Optional[T] = None
    error: Optional[str] = None
