# sql_datatables/database.py
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from .exceptions import BackendError

logger = logging.getLogger(__name__)


class DatabaseBackend:
    def __init__(self, db_session: Any):
        self.db_session = db_session  # Could be SQLAlchemy, Databases, etc.

    async def change_schema(self, statement: str) -> None:
        """Run the USE / ALTER SESSION statement"""
        raise NotImplementedError

    async def execute(self, statement: str) -> List[Dict[str, Any]]:
        """Run one generated statement and return its rows as mappings"""
        raise NotImplementedError


class SQLAlchemyBackend(DatabaseBackend):  # Specific database backend
    def __init__(self, db_session):
        super().__init__(db_session)

    async def _run(self, statement: str):
        logger.debug("Executing %s", statement)
        try:
            # The statement is complete literal SQL; run it without bind
            # parameter parsing so ":word" in search text stays literal.
            connection = await self.db_session.connection()
            return await connection.exec_driver_sql(statement)
        except SQLAlchemyError as exc:
            raise BackendError(f"Statement failed: {exc}", statement=statement) from exc

    async def change_schema(self, statement: str) -> None:
        await self._run(statement)

    async def execute(self, statement: str) -> List[Dict[str, Any]]:
        result = await self._run(statement)
        return [dict(row) for row in result.mappings()]
