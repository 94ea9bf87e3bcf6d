"""Tests for sanitizing and the WHERE / ORDER BY / LIMIT composers."""

from datetime import datetime

import pytest

from sql_datatables import DataTablesConfig, build_limit, build_order, build_where, sanitize
from sql_datatables.enum import Dialect
from sql_datatables.utils import DEFAULT_LIMIT, build_condition, column_filter, global_filter


class TestSanitize:
    """Test string escaping of untrusted input."""

    def test_empty_and_falsy_pass_through(self):
        assert sanitize("") == ""
        assert sanitize(None) is None
        assert sanitize(0) == 0

    def test_non_string_is_rejected(self):
        assert sanitize(42) is None
        assert sanitize(["a"]) is None

    def test_length_limit(self):
        assert sanitize("a" * 256) == "a" * 256
        assert sanitize("a" * 257) is None
        assert sanitize("abcd", max_len=3) is None

    def test_safe_string_is_unchanged(self):
        assert sanitize("Ann Smith-Jones 42") == "Ann Smith-Jones 42"
        assert sanitize(sanitize("plain")) == "plain"

    def test_quotes_backslash_and_percent(self):
        assert sanitize("O'Brien") == "O\\'Brien"
        assert sanitize('say "hi"') == 'say \\"hi\\"'
        assert sanitize("a\\b") == "a\\\\b"
        assert sanitize("100%") == "100\\%"

    def test_control_characters(self):
        assert sanitize("a\0b") == "a\\0b"
        assert sanitize("a\x08b") == "a\\bb"
        assert sanitize("a\tb") == "a\\tb"
        assert sanitize("a\x1ab") == "a\\zb"
        assert sanitize("a\nb\rc") == "a\\nb\\rc"

    def test_injection_attempt_is_quoted(self):
        escaped = sanitize("x' OR '1'='1")
        assert "'" not in escaped.replace("\\'", "")


class TestWhere:
    """Test WHERE clause composition."""

    def test_no_predicates(self, users_config, make_request):
        assert build_where(users_config, make_request()) == ""

    def test_like_and_ilike(self):
        assert build_condition("name", "ann", Dialect.MYSQL) == "name LIKE '%ann%'"
        assert build_condition("name", "ann", Dialect.ORACLE) == "name LIKE '%ann%'"
        assert build_condition("name", "ann", Dialect.POSTGRES) == "CAST(name AS text) ILIKE '%ann%'"

    def test_column_search(self, users_config, make_request):
        request = make_request(
            columns=[
                {"name": "name", "searchable": "true", "search": {"value": "ann"}},
                {"name": "age", "searchable": "true", "search": {"value": "3"}},
                {"name": "email", "searchable": "false", "search": {"value": "x"}},
            ]
        )
        assert build_where(users_config, request) == (
            " WHERE ((name LIKE '%ann%' AND age LIKE '%3%'))"
        )

    def test_global_search_requires_search_columns(self, users_config, make_request):
        request = make_request(search={"value": "ann"})
        assert global_filter(users_config, request) == []
        assert build_where(users_config, request) == ""

    def test_global_search(self, postgres_config, make_request):
        request = make_request(search={"value": "ann"})
        assert build_where(postgres_config, request) == (
            " WHERE ((CAST(name AS text) ILIKE '%ann%' OR CAST(email AS text) ILIKE '%ann%'))"
        )

    def test_column_and_global_groups(self, make_request):
        config = DataTablesConfig(table_name="users", search_columns=["email"])
        request = make_request(
            search={"value": "ann"},
            columns=[{"name": "name", "searchable": "true", "search": {"value": "bo"}}],
        )
        assert build_where(config, request) == (
            " WHERE ((name LIKE '%bo%') AND (email LIKE '%ann%'))"
        )

    def test_search_value_is_escaped(self, make_request):
        config = DataTablesConfig(table_name="users", search_columns=["name"])
        request = make_request(search={"value": "O'Brien"})
        assert build_where(config, request) == " WHERE ((name LIKE '%O\\'Brien%'))"

    def test_rejected_search_value_drops_predicate(self, make_request):
        config = DataTablesConfig(table_name="users", search_columns=["name"])
        request = make_request(search={"value": "a" * 300})
        assert build_where(config, request) == ""

    def test_rejected_column_value_drops_predicate(self, users_config, make_request):
        request = make_request(
            columns=[{"name": "name", "searchable": "true", "search": {"value": "x" * 300}}]
        )
        assert column_filter(request, users_config.dialect) == []

    def test_where_and_sql_is_verbatim(self, make_request):
        config = DataTablesConfig(
            table_name="users",
            search_columns=["name"],
            where_and_sql="deleted_at IS NULL",
        )
        request = make_request(search={"value": "ann"})
        assert build_where(config, request) == (
            " WHERE ((name LIKE '%ann%')) AND (deleted_at IS NULL)"
        )

    def test_date_range_between(self, make_request):
        config = DataTablesConfig(
            table_name="users",
            date_column_name="created_at",
            date_from=datetime(2024, 1, 1),
            date_to=datetime(2024, 2, 1, 12, 30),
        )
        assert build_where(config, make_request()) == (
            " WHERE (created_at BETWEEN '2024-01-01T00:00:00' AND '2024-02-01T12:30:00')"
        )

    def test_date_range_one_sided(self, make_request):
        config_from = DataTablesConfig(
            table_name="users", date_column_name="created_at", date_from=datetime(2024, 1, 1)
        )
        config_to = DataTablesConfig(
            table_name="users", date_column_name="created_at", date_to="2024-03-01T00:00:00"
        )
        assert build_where(config_from, make_request()) == (
            " WHERE (created_at >= '2024-01-01T00:00:00')"
        )
        assert build_where(config_to, make_request()) == (
            " WHERE (created_at <= '2024-03-01T00:00:00')"
        )

    def test_date_range_needs_column(self, users_config, make_request):
        config = DataTablesConfig(table_name="users", date_from=datetime(2024, 1, 1))
        assert build_where(config, make_request()) == ""


class TestOrder:
    """Test ORDER BY composition."""

    def test_first_order_only(self, make_request):
        request = make_request(
            order=[{"column": 1, "dir": "desc"}, {"column": 0, "dir": "asc"}]
        )
        assert build_order(request) == " ORDER BY age desc"

    def test_single_orderable_column_desc(self, make_request):
        request = make_request(
            columns=[{"name": "age", "orderable": "true"}],
            order=[{"column": 0, "dir": "desc"}],
        )
        assert build_order(request) == " ORDER BY age desc"

    def test_not_orderable_or_unnamed(self, make_request):
        request = make_request(
            columns=[{"name": "age", "orderable": "false"}, {"name": "", "orderable": "true"}],
            order=[{"column": 0, "dir": "asc"}],
        )
        assert build_order(request) == ""
        request = make_request(
            columns=[{"name": "age", "orderable": "false"}, {"name": "", "orderable": "true"}],
            order=[{"column": 1, "dir": "asc"}],
        )
        assert build_order(request) == ""

    @pytest.mark.parametrize("index", [5, -1])
    def test_unknown_column_index(self, make_request, index):
        request = make_request(order=[{"column": index, "dir": "asc"}])
        assert build_order(request) == ""

    def test_no_order(self, make_request):
        assert build_order(make_request(order=[])) == ""
        assert build_order(make_request(order=None)) == ""


class TestLimit:
    """Test dialect-specific pagination clauses."""

    def test_mysql_and_postgres(self, users_config, postgres_config, make_request):
        request = make_request(start=10, length=20)
        assert build_limit(users_config, request) == " LIMIT 10, 20"
        assert build_limit(postgres_config, request) == " OFFSET 10 LIMIT 20"

    def test_oracle_has_no_limit_clause(self, oracle_config, make_request):
        assert build_limit(oracle_config, make_request(start=10, length=20)) == ""

    def test_default_page_size(self, users_config, make_request):
        assert build_limit(users_config, make_request(length=0)) == f" LIMIT 0, {DEFAULT_LIMIT}"
        assert build_limit(users_config, make_request(length=None)) == " LIMIT 0, 100"

    def test_negative_length_means_all_rows(self, users_config, postgres_config, make_request):
        assert build_limit(users_config, make_request(start=5, length=-1)) == " "
        assert build_limit(postgres_config, make_request(start=5, length=-1)) == " "

    def test_missing_or_negative_start(self, users_config, make_request):
        assert build_limit(users_config, make_request(start=None)) == ""
        assert build_limit(users_config, make_request(start=-1)) == ""

    def test_string_pagination_is_coerced(self, users_config, make_request):
        assert build_limit(users_config, make_request(start="30", length="15")) == " LIMIT 30, 15"
