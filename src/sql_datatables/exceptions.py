# sql_datatables/exceptions.py


class DataTablesError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(DataTablesError):
    """Raised when a table configuration cannot be used to build queries."""


class BackendError(DataTablesError):
    """Raised by a database backend when a generated statement fails to run."""

    def __init__(self, message: str, statement: str = None):
        super().__init__(message)
        self.statement = statement
