"""
In-process record store.

Backs tests and single-process deployments. One lock serialises every
write, which makes compare_and_swap() atomic across threads. Records are
deep-copied on the way in and out so callers never share mutable state with
the store.
"""

import copy
import logging
import threading
from datetime import datetime
from typing import Any

from core.exceptions import ConflictError, NotFoundError
from core.persistence.base import Filters, Record, RecordStore, VERSION_KEY, matches

logger = logging.getLogger(__name__)


def _sort_key(value: Any):
    """Order ISO timestamps chronologically, everything else naturally."""
    if value is None:
        return (0, "")
    if isinstance(value, str):
        try:
            return (1, datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp())
        except ValueError:
            return (2, value)
    return (1, value)


class MemoryRecordStore(RecordStore):
    """Dict-of-dicts record store guarded by a single lock."""

    def __init__(self):
        self._collections: dict[str, dict[str, Record]] = {}
        self._lock = threading.RLock()

    def _bucket(self, collection: str) -> dict[str, Record]:
        return self._collections.setdefault(collection, {})

    def get(self, collection: str, record_id: str) -> Record | None:
        with self._lock:
            record = self._bucket(collection).get(str(record_id))
            return copy.deepcopy(record) if record is not None else None

    def insert(self, collection: str, record_id: str, record: Record) -> Record:
        record_id = str(record_id)
        with self._lock:
            bucket = self._bucket(collection)
            if record_id in bucket:
                raise ConflictError(f"{collection} record {record_id} already exists")
            stored = copy.deepcopy(record)
            stored[VERSION_KEY] = 1
            bucket[record_id] = stored
            return copy.deepcopy(stored)

    def put(self, collection: str, record_id: str, record: Record) -> Record:
        record_id = str(record_id)
        with self._lock:
            bucket = self._bucket(collection)
            previous = bucket.get(record_id)
            stored = copy.deepcopy(record)
            stored[VERSION_KEY] = (previous[VERSION_KEY] + 1) if previous else 1
            bucket[record_id] = stored
            return copy.deepcopy(stored)

    def compare_and_swap(
        self,
        collection: str,
        record_id: str,
        expected_version: int,
        record: Record,
    ) -> Record:
        record_id = str(record_id)
        with self._lock:
            bucket = self._bucket(collection)
            current = bucket.get(record_id)
            if current is None:
                raise NotFoundError(f"{collection} record {record_id} not found")
            if current[VERSION_KEY] != expected_version:
                logger.warning(
                    "Stale write on %s/%s: expected version %s, found %s",
                    collection, record_id, expected_version, current[VERSION_KEY],
                )
                raise ConflictError(
                    f"{collection} record {record_id} was modified concurrently",
                    expected_version=expected_version,
                )
            stored = copy.deepcopy(record)
            stored[VERSION_KEY] = expected_version + 1
            bucket[record_id] = stored
            return copy.deepcopy(stored)

    def query(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Record]:
        with self._lock:
            rows = [
                copy.deepcopy(record)
                for record in self._bucket(collection).values()
                if matches(record, filters)
            ]

        if order_by is not None:
            rows.sort(key=lambda r: _sort_key(r.get(order_by)), reverse=descending)
        if offset:
            rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]
        return rows

    def delete(self, collection: str, record_id: str) -> bool:
        with self._lock:
            return self._bucket(collection).pop(str(record_id), None) is not None

    def clear(self) -> None:
        """Drop every collection."""
        with self._lock:
            self._collections.clear()
