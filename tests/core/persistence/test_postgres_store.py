"""Tests for PostgresRecordStore against a mocked PostgresClient."""

from unittest.mock import Mock

import pytest

from clients.postgres_client import PostgresClient
from core.exceptions import ConflictError, NotFoundError
from core.persistence import PostgresRecordStore
from core.persistence.postgres import SCHEMA_SQL


@pytest.fixture
def pg():
    return Mock(spec=PostgresClient)


@pytest.fixture
def pg_store(pg):
    return PostgresRecordStore(pg)


class TestReads:

    def test_get_merges_version_into_record(self, pg, pg_store):
        pg.execute_single.return_value = {"data": {"id": "b1", "status": "Pending"}, "version": 3}

        record = pg_store.get("bookings", "b1")

        assert record == {"id": "b1", "status": "Pending", "version": 3}
        assert pg.execute_single.call_args.args[1] == ("bookings", "b1")

    def test_get_missing(self, pg, pg_store):
        pg.execute_single.return_value = None
        assert pg_store.get("bookings", "b1") is None

    def test_query_builds_equality_and_membership(self, pg, pg_store):
        pg.execute.return_value = []

        pg_store.query(
            "bookings",
            {"customer_id": "c1", "status": ["Confirmed", "In Progress"]},
            order_by="created_at",
            descending=True,
            limit=10,
        )

        sql, params = pg.execute.call_args.args
        assert "data->>%s = %s" in sql
        assert "data->>%s = ANY(%s)" in sql
        assert sql.rstrip().endswith("ORDER BY created_at DESC, id DESC LIMIT %s")
        assert params == ("bookings", "customer_id", "c1", "status", ["Confirmed", "In Progress"], 10)

    def test_query_orders_by_json_field(self, pg, pg_store):
        pg.execute.return_value = [{"data": {"id": "a", "name": "A"}, "version": 1}]

        rows = pg_store.query("workers", order_by="name")

        sql, params = pg.execute.call_args.args
        assert "ORDER BY data->>%s ASC, id ASC" in sql
        assert params == ("workers", "name")
        assert rows == [{"id": "a", "name": "A", "version": 1}]

    def test_query_offset_follows_limit(self, pg, pg_store):
        pg.execute.return_value = []

        pg_store.query("bookings", order_by="created_at", descending=True, limit=50, offset=100)

        sql, params = pg.execute.call_args.args
        assert sql.rstrip().endswith("LIMIT %s OFFSET %s")
        assert params[-2:] == (50, 100)

    def test_query_omits_zero_offset(self, pg, pg_store):
        pg.execute.return_value = []

        pg_store.query("bookings", limit=5)

        assert "OFFSET" not in pg.execute.call_args.args[0]


class TestWrites:

    def test_ensure_schema(self, pg, pg_store):
        pg_store.ensure_schema()
        pg.execute.assert_called_once_with(SCHEMA_SQL)

    def test_insert_strips_version(self, pg, pg_store):
        pg.execute_returning.return_value = [{"data": {"id": "b1"}, "version": 1}]

        stored = pg_store.insert("bookings", "b1", {"id": "b1", "version": 7})

        params = pg.execute_returning.call_args.args[1]
        assert params[2] == {"id": "b1"}
        assert stored == {"id": "b1", "version": 1}

    def test_insert_existing_conflicts(self, pg, pg_store):
        pg.execute_returning.return_value = []
        with pytest.raises(ConflictError):
            pg_store.insert("bookings", "b1", {"id": "b1"})

    def test_cas_success(self, pg, pg_store):
        pg.execute_returning.return_value = [{"data": {"id": "b1", "status": "Confirmed"}, "version": 2}]

        stored = pg_store.compare_and_swap("bookings", "b1", 1, {"id": "b1", "status": "Confirmed", "version": 1})

        sql, params = pg.execute_returning.call_args.args
        assert "AND version = %s" in sql
        assert params[-1] == 1
        assert stored["version"] == 2

    def test_cas_stale_version(self, pg, pg_store):
        pg.execute_returning.return_value = []
        pg.execute_single.return_value = {"data": {"id": "b1"}, "version": 2}

        with pytest.raises(ConflictError) as exc_info:
            pg_store.compare_and_swap("bookings", "b1", 1, {"id": "b1"})

        assert exc_info.value.expected_version == 1

    def test_cas_missing_row(self, pg, pg_store):
        pg.execute_returning.return_value = []
        pg.execute_single.return_value = None

        with pytest.raises(NotFoundError):
            pg_store.compare_and_swap("bookings", "b1", 1, {"id": "b1"})

    def test_delete(self, pg, pg_store):
        pg.execute_returning.return_value = [{"id": "w1"}]
        assert pg_store.delete("workers", "w1") is True

        pg.execute_returning.return_value = []
        assert pg_store.delete("workers", "w1") is False
