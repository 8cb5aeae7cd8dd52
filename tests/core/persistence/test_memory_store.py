"""Tests for MemoryRecordStore."""

import threading

import pytest

from core.exceptions import ConflictError, NotFoundError
from core.persistence import MemoryRecordStore, matches


@pytest.fixture
def mem():
    return MemoryRecordStore()


class TestMatches:

    def test_equality(self):
        assert matches({"status": "Pending"}, {"status": "Pending"})
        assert not matches({"status": "Pending"}, {"status": "Confirmed"})

    def test_membership(self):
        assert matches({"status": "Confirmed"}, {"status": ["Confirmed", "In Progress"]})
        assert not matches({"status": "Pending"}, {"status": ("Confirmed",)})

    def test_no_filters_matches_everything(self):
        assert matches({"a": 1}, None)
        assert matches({"a": 1}, {})


class TestWrites:

    def test_insert_sets_version(self, mem):
        stored = mem.insert("bookings", "b1", {"id": "b1", "version": 99})
        assert stored["version"] == 1
        assert mem.get("bookings", "b1")["version"] == 1

    def test_insert_duplicate_conflicts(self, mem):
        mem.insert("bookings", "b1", {"id": "b1"})
        with pytest.raises(ConflictError):
            mem.insert("bookings", "b1", {"id": "b1"})

    def test_put_bumps_version(self, mem):
        mem.put("services", "deep", {"id": "deep"})
        assert mem.put("services", "deep", {"id": "deep"})["version"] == 2

    def test_returned_records_are_copies(self, mem):
        mem.insert("bookings", "b1", {"id": "b1", "tags": ["a"]})

        loaded = mem.get("bookings", "b1")
        loaded["tags"].append("b")

        assert mem.get("bookings", "b1")["tags"] == ["a"]

    def test_delete(self, mem):
        mem.insert("workers", "w1", {"id": "w1"})
        assert mem.delete("workers", "w1") is True
        assert mem.delete("workers", "w1") is False
        assert mem.get("workers", "w1") is None

    def test_get_many_skips_missing(self, mem):
        mem.insert("workers", "w1", {"id": "w1"})
        assert set(mem.get_many("workers", ["w1", "w2"])) == {"w1"}


class TestCompareAndSwap:

    def test_matching_version_writes(self, mem):
        mem.insert("bookings", "b1", {"id": "b1", "status": "Pending"})

        stored = mem.compare_and_swap("bookings", "b1", 1, {"id": "b1", "status": "Confirmed"})

        assert stored["version"] == 2
        assert mem.get("bookings", "b1")["status"] == "Confirmed"

    def test_stale_version_conflicts(self, mem):
        mem.insert("bookings", "b1", {"id": "b1", "status": "Pending"})
        mem.compare_and_swap("bookings", "b1", 1, {"id": "b1", "status": "Confirmed"})

        with pytest.raises(ConflictError) as exc_info:
            mem.compare_and_swap("bookings", "b1", 1, {"id": "b1", "status": "Cancelled"})

        assert exc_info.value.expected_version == 1
        assert mem.get("bookings", "b1")["status"] == "Confirmed"

    def test_missing_record(self, mem):
        with pytest.raises(NotFoundError):
            mem.compare_and_swap("bookings", "nope", 1, {})

    def test_exactly_one_concurrent_writer_wins(self, mem):
        mem.insert("bookings", "b1", {"id": "b1"})
        results = []
        start = threading.Barrier(8)

        def writer(n):
            start.wait(timeout=5)
            try:
                mem.compare_and_swap("bookings", "b1", 1, {"id": "b1", "writer": n})
                results.append(n)
            except ConflictError:
                pass

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 1
        assert mem.get("bookings", "b1")["writer"] == results[0]


class TestQuery:

    @pytest.fixture
    def seeded(self, mem):
        mem.insert("bookings", "old", {"id": "old", "status": "Pending", "created_at": "2026-01-01T08:00:00+00:00"})
        mem.insert("bookings", "new", {"id": "new", "status": "Completed", "created_at": "2026-03-01T08:00:00Z"})
        mem.insert("bookings", "mid", {"id": "mid", "status": "Pending", "created_at": "2026-02-01T08:00:00+00:00"})
        return mem

    def test_filters(self, seeded):
        assert {r["id"] for r in seeded.query("bookings", {"status": "Pending"})} == {"old", "mid"}

    def test_orders_timestamps_chronologically(self, seeded):
        rows = seeded.query("bookings", order_by="created_at", descending=True)
        assert [r["id"] for r in rows] == ["new", "mid", "old"]

    def test_limit(self, seeded):
        rows = seeded.query("bookings", order_by="created_at", limit=2)
        assert [r["id"] for r in rows] == ["old", "mid"]

    def test_offset_pages_past_limit(self, seeded):
        first = seeded.query("bookings", order_by="created_at", limit=2)
        second = seeded.query("bookings", order_by="created_at", limit=2, offset=2)

        assert [r["id"] for r in first + second] == ["old", "mid", "new"]

    def test_offset_beyond_end(self, seeded):
        assert seeded.query("bookings", offset=10) == []

    def test_collections_are_separate(self, seeded):
        assert seeded.query("workers") == []

    def test_clear(self, seeded):
        seeded.clear()
        assert seeded.query("bookings") == []
