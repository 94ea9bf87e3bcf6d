"""Pytest configuration and fixtures."""

import pytest

from sql_datatables import DataTablesConfig, DataTablesRequest


def _request(**overrides):
    payload = {
        "draw": "1",
        "columns": [
            {
                "data": "name",
                "name": "name",
                "searchable": "true",
                "orderable": "true",
                "search": {"value": ""},
            },
            {
                "data": "age",
                "name": "age",
                "searchable": "true",
                "orderable": "true",
                "search": {"value": ""},
            },
        ],
        "order": [{"column": 0, "dir": "asc"}],
        "start": 0,
        "length": 10,
        "search": {"value": ""},
    }
    payload.update(overrides)
    return DataTablesRequest.model_validate(payload)


@pytest.fixture
def make_request():
    """Factory for a DataTables request with two searchable, orderable columns."""
    return _request


@pytest.fixture
def users_config():
    """MySQL configuration for a plain users table."""
    return DataTablesConfig(table_name="users")


@pytest.fixture
def postgres_config():
    return DataTablesConfig(
        table_name="users",
        dialect="postgres",
        search_columns=["name", "email"],
    )


@pytest.fixture
def oracle_config():
    return DataTablesConfig(table_name="users", dialect="oracle")
