import logging
import re
from typing import Any, Dict, Mapping, Optional, Sequence

from pydantic import BaseModel

from .schema import DataTablesRequest, DataTablesResponse

logger = logging.getLogger(__name__)

_CANONICAL_INT = re.compile(r"\s*[+-]?[0-9]+\s*")

# Result keys produced by the caller, in snake_case (StatementSet fields)
# or in the camelCase used by the DataTables protocol.
_RESULT_KEYS = {
    "records_total": "records_total",
    "recordsTotal": "records_total",
    "records_filtered": "records_filtered",
    "recordsFiltered": "records_filtered",
    "select": "select",
}


def parse_draw(draw: Any) -> int:
    """
    Cast the client's draw counter to an int.

    The counter is echoed back, so only canonical integer strings are
    trusted; anything else becomes 0.
    """
    if isinstance(draw, str) and _CANONICAL_INT.fullmatch(draw):
        return int(draw)
    return 0


def _request_draw(request: Any) -> Any:
    if isinstance(request, DataTablesRequest):
        return request.draw
    if isinstance(request, Mapping):
        return request.get("draw")
    return None


def extract_response_value(rows: Any) -> Any:
    """First column of the first row of a count query, or None."""
    if not isinstance(rows, Sequence) or isinstance(rows, (str, bytes)) or not rows:
        return None
    first = rows[0]
    if isinstance(first, Mapping):
        values = list(first.values())
    elif hasattr(first, "_mapping"):
        # sqlalchemy Row
        values = list(first._mapping.values())
    elif isinstance(first, (list, tuple)):
        values = list(first)
    else:
        return None
    return values[0] if values else None


def _count(rows: Any) -> int:
    value = extract_response_value(rows)
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        logger.warning("Unexpected count value %r, using 0", value)
        return 0


def parse_response(results: Any, request: Any = None) -> DataTablesResponse:
    """
    Translate the raw results of a ``StatementSet`` into a DataTables response.

    ``results`` maps ``records_total``, ``records_filtered`` (optional) and
    ``select`` to the rows each statement returned. ``request`` is the
    request the statements were built from; it is only used for its draw
    counter.
    """
    response = DataTablesResponse(draw=parse_draw(_request_draw(request)))
    if not isinstance(results, Mapping):
        return response

    recognized = {}
    for key, value in results.items():
        if key in _RESULT_KEYS:
            recognized[_RESULT_KEYS[key]] = value
    if len(recognized) < 2:
        return response

    response.recordsTotal = response.recordsFiltered = _count(recognized.get("records_total"))
    if recognized.get("records_filtered") is not None:
        response.recordsFiltered = _count(recognized["records_filtered"])
    response.data = recognized.get("select")
    return response


def filtered_result(obj: Any, count: Optional[int] = None, data_prop: str = "data") -> Optional[Dict[str, Any]]:
    """
    Reduced copy of a response for logging.

    Keeps every field, truncates ``data_prop`` to its first ``count`` rows
    (all rows when count is unset or 0) and records the original row count
    under ``aaLength``.
    """
    if obj is None:
        return None
    if isinstance(obj, BaseModel):
        obj = obj.model_dump()
    rows = obj.get(data_prop) or []
    result = {key: value for key, value in obj.items() if key != data_prop}
    result["aaLength"] = len(rows)
    limit = min(max(count, 0), len(rows)) if count else len(rows)
    result[data_prop] = list(rows[:limit])
    return result
