import logging
from typing import Any, Dict, Mapping, Optional, Union

from .builder import build_query
from .config import DataTablesConfig
from .database import DatabaseBackend
from .exceptions import BackendError, ConfigurationError
from .response import filtered_result, parse_response
from .schema import DataTablesRequest, DataTablesResponse, StatementSet

logger = logging.getLogger(__name__)


class DataTables:
    def __init__(
        self,
        config: Union[DataTablesConfig, Mapping[str, Any]],
        db_backend: Optional[DatabaseBackend] = None,
    ):
        """
        Initializes the DataTables processor.

        Args:
            config: Table configuration, or a mapping of its options.
            db_backend: Backend used by ``process`` to run the statements.

        The instance holds no per-request state and can be shared between
        concurrent requests.
        """
        if not isinstance(config, DataTablesConfig):
            config = DataTablesConfig.model_validate(config)
        self.config = config
        self.db_backend = db_backend

    def build_query(self, request_data: Any) -> StatementSet:
        return build_query(self.config, request_data)

    def parse_response(self, results: Any, request_data: Any = None) -> DataTablesResponse:
        return parse_response(results, request_data)

    def filtered_result(self, obj: Any, count: Optional[int] = None) -> Optional[Dict[str, Any]]:
        return filtered_result(obj, count, data_prop=self.config.data_prop)

    async def process(self, request_data: Union[DataTablesRequest, Mapping[str, Any]]) -> DataTablesResponse:
        """
        Processes the DataTables request and returns the response.
        """
        if self.db_backend is None:
            raise ConfigurationError("A database backend is required to process requests")

        statements = self.build_query(request_data)
        if statements.select is None:
            return self.parse_response(None, request_data)

        try:
            # -- Schema Switch --
            if statements.change_schema:
                await self.db_backend.change_schema(statements.change_schema)

            # -- Total Records --
            results = {"records_total": await self.db_backend.execute(statements.records_total)}

            # -- Filtered Records (only when searching) --
            if statements.records_filtered:
                results["records_filtered"] = await self.db_backend.execute(statements.records_filtered)

            # -- Page Of Data --
            results["select"] = await self.db_backend.execute(statements.select)

        except BackendError as exc:
            logger.exception("DataTables query failed: %s", exc.statement)
            response = self.parse_response(None, request_data)
            response.error = str(exc)
            return response

        response = self.parse_response(results, request_data)
        logger.debug("DataTables response: %s", self.filtered_result(response, 5))
        return response
