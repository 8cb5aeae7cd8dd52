"""
Record store port.

Bookings, workers, catalog entries, users and audit entries are persisted as
JSON-compatible dicts grouped by collection. The store owns the `version`
key of every record: inserts start at 1 and every write bumps it, so
compare_and_swap() can detect a concurrent writer.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

VERSION_KEY = "version"

Record = dict[str, Any]
Filters = Mapping[str, Any]


def matches(record: Mapping[str, Any], filters: Filters | None) -> bool:
    """
    Whether a record satisfies equality filters.

    A list, tuple, set or frozenset filter value means "field is one of".
    """
    if not filters:
        return True
    for field, expected in filters.items():
        actual = record.get(field)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class RecordStore(ABC):
    """Persistence interface consumed by the booking core."""

    @abstractmethod
    def get(self, collection: str, record_id: str) -> Record | None:
        """Point lookup. Returns None if absent."""

    @abstractmethod
    def insert(self, collection: str, record_id: str, record: Record) -> Record:
        """
        Create a record at version 1.

        Raises:
            ConflictError: If a record with this id already exists
        """

    @abstractmethod
    def put(self, collection: str, record_id: str, record: Record) -> Record:
        """Unconditional create-or-replace. Bumps the version."""

    @abstractmethod
    def compare_and_swap(
        self,
        collection: str,
        record_id: str,
        expected_version: int,
        record: Record,
    ) -> Record:
        """
        Replace a record only if its stored version is still expected_version.

        Returns:
            The stored record, at expected_version + 1

        Raises:
            NotFoundError: If the record no longer exists
            ConflictError: If another writer bumped the version first
        """

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Record]:
        """Filtered scan with optional ordering. Skips `offset` rows, then returns up to `limit`."""

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> bool:
        """Remove a record. True if it existed."""

    def get_many(self, collection: str, record_ids: Iterable[str]) -> dict[str, Record]:
        """Batch point lookup; absent ids are left out of the result."""
        found = {}
        for record_id in record_ids:
            record = self.get(collection, record_id)
            if record is not None:
                found[record_id] = record
        return found
