"""
PostgreSQL record store.

All collections share one JSONB table keyed by (collection, id) with a
version column. compare_and_swap() is a single conditional UPDATE, so the
database decides which of two concurrent writers wins.
"""

import json
import logging
from typing import Any

from clients.postgres_client import PostgresClient
from core.exceptions import ConflictError, NotFoundError
from core.persistence.base import Filters, Record, RecordStore, VERSION_KEY
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS records (
    collection  TEXT        NOT NULL,
    id          TEXT        NOT NULL,
    version     INTEGER     NOT NULL,
    data        JSONB       NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL,
    updated_at  TIMESTAMPTZ NOT NULL,
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS records_collection_created_idx
    ON records (collection, created_at DESC);
"""


def _as_text(value: Any) -> str:
    """Filter values compare against data->>'field', which is always text."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class PostgresRecordStore(RecordStore):
    """Record store over a single JSONB table."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def ensure_schema(self) -> None:
        """Create the records table and index if missing."""
        self.postgres.execute(SCHEMA_SQL)
        logger.info("Record store schema ensured")

    def _with_version(self, row: dict[str, Any]) -> Record:
        record = dict(row["data"])
        record[VERSION_KEY] = row["version"]
        return record

    def get(self, collection: str, record_id: str) -> Record | None:
        row = self.postgres.execute_single(
            "SELECT data, version FROM records WHERE collection = %s AND id = %s",
            (collection, str(record_id))
        )
        if row is None:
            return None
        return self._with_version(row)

    def insert(self, collection: str, record_id: str, record: Record) -> Record:
        now = now_utc()
        data = {k: v for k, v in record.items() if k != VERSION_KEY}
        rows = self.postgres.execute_returning(
            """
            INSERT INTO records (collection, id, version, data, created_at, updated_at)
            VALUES (%s, %s, 1, %s, COALESCE(%s::timestamptz, %s), %s)
            ON CONFLICT (collection, id) DO NOTHING
            RETURNING data, version
            """,
            (collection, str(record_id), data, data.get("created_at"), now, now)
        )
        if not rows:
            raise ConflictError(f"{collection} record {record_id} already exists")
        return self._with_version(rows[0])

    def put(self, collection: str, record_id: str, record: Record) -> Record:
        now = now_utc()
        data = {k: v for k, v in record.items() if k != VERSION_KEY}
        row = self.postgres.execute_returning(
            """
            INSERT INTO records (collection, id, version, data, created_at, updated_at)
            VALUES (%s, %s, 1, %s, COALESCE(%s::timestamptz, %s), %s)
            ON CONFLICT (collection, id) DO UPDATE
            SET data = EXCLUDED.data,
                version = records.version + 1,
                updated_at = EXCLUDED.updated_at
            RETURNING data, version
            """,
            (collection, str(record_id), data, data.get("created_at"), now, now)
        )[0]
        return self._with_version(row)

    def compare_and_swap(
        self,
        collection: str,
        record_id: str,
        expected_version: int,
        record: Record,
    ) -> Record:
        data = {k: v for k, v in record.items() if k != VERSION_KEY}
        rows = self.postgres.execute_returning(
            """
            UPDATE records
            SET data = %s, version = version + 1, updated_at = %s
            WHERE collection = %s AND id = %s AND version = %s
            RETURNING data, version
            """,
            (data, now_utc(), collection, str(record_id), expected_version)
        )
        if rows:
            return self._with_version(rows[0])

        if self.get(collection, record_id) is None:
            raise NotFoundError(f"{collection} record {record_id} not found")

        logger.warning(
            "Stale write on %s/%s: expected version %s",
            collection, record_id, expected_version,
        )
        raise ConflictError(
            f"{collection} record {record_id} was modified concurrently",
            expected_version=expected_version,
        )

    def query(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Record]:
        where = ["collection = %s"]
        params: list[Any] = [collection]

        for field, expected in (filters or {}).items():
            if isinstance(expected, (list, tuple, set, frozenset)):
                where.append("data->>%s = ANY(%s)")
                params.extend([field, [_as_text(v) for v in expected]])
            else:
                where.append("data->>%s = %s")
                params.extend([field, _as_text(expected)])

        sql = f"SELECT data, version FROM records WHERE {' AND '.join(where)}"

        if order_by == "created_at":
            sql += " ORDER BY created_at"
        elif order_by is not None:
            sql += " ORDER BY data->>%s"
            params.append(order_by)
        if order_by is not None:
            direction = "DESC" if descending else "ASC"
            # id breaks ties so OFFSET pages do not overlap
            sql += f" {direction}, id {direction}"

        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)
        if offset:
            sql += " OFFSET %s"
            params.append(offset)

        rows = self.postgres.execute(sql, tuple(params))
        return [self._with_version(row) for row in rows]

    def delete(self, collection: str, record_id: str) -> bool:
        rows = self.postgres.execute_returning(
            "DELETE FROM records WHERE collection = %s AND id = %s RETURNING id",
            (collection, str(record_id))
        )
        return bool(rows)
