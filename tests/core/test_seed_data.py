"""Tests for initial catalog and worker seeding."""

import pytest

from core.config import BookingConfig
from core.exceptions import ValidationError
from core.models import BookingCreate
from core.seed_data import CATALOG, SERVICE_AREAS, WORKERS, seed_database


class TestSeedDatabase:

    def test_loads_catalog_and_workers(self, catalog_service, worker_service, admin):
        counts = seed_database(catalog_service, worker_service, admin)

        assert counts == {"services": len(CATALOG), "workers": len(WORKERS)}
        assert {w.name for w in worker_service.list_all()} == {w.name for w in WORKERS}

    def test_rerun_adds_nothing(self, catalog_service, worker_service, admin):
        seed_database(catalog_service, worker_service, admin)

        counts = seed_database(catalog_service, worker_service, admin)

        assert counts["workers"] == 0
        assert len(worker_service.list_all()) == len(WORKERS)
        assert len(catalog_service.list_all()) == len(CATALOG)

    def test_catalog_ids_unique(self):
        assert len({s.id for s in CATALOG}) == len(CATALOG)


class TestServiceAreas:

    def test_restricted_config_rejects_other_areas(
        self, store, audit, catalog_service, worker_service, event_bus, user_service, customer
    ):
        from core.services.booking_service import BookingService

        bookings = BookingService(
            store, audit, catalog_service, worker_service, event_bus,
            users=user_service, config=BookingConfig(service_areas=SERVICE_AREAS),
        )
        request = dict(service="deep", date="2026-11-02", time="10:00", address="House 1")

        booking = bookings.create(customer.id, BookingCreate(area="dha phase 2 islamabad", **request))
        assert booking.area == "dha phase 2 islamabad"

        with pytest.raises(ValidationError, match="not a service area"):
            bookings.create(customer.id, BookingCreate(area="Gulberg", **request))
