"""
Catalog service for the service catalog (offerings and pricing model).

The catalog is read-only during normal operation. Entries are seeded once;
the lifecycle engine only resolves references against it.
"""

import logging

from core.models import Service, ServiceCreate
from core.persistence import SERVICES, RecordStore
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for service catalog lookups."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get_by_id(self, service_id: str) -> Service | None:
        """
        Get service by catalog id.

        Args:
            service_id: Catalog slug (e.g. 'deep')

        Returns:
            Service if found, None otherwise.
        """
        record = self.store.get(SERVICES, service_id)
        if record is None:
            return None
        return Service.model_validate(record)

    def get_by_name(self, name: str) -> Service | None:
        """Get service by exact display name."""
        records = self.store.query(SERVICES, {"name": name}, limit=1)
        if not records:
            return None
        return Service.model_validate(records[0])

    def resolve(self, ref: str) -> Service | None:
        """
        Resolve a service reference as given by a booking request.

        Bookings may name a service by catalog id or by display name. The id
        wins when both could match.
        """
        ref = (ref or "").strip()
        if not ref:
            return None
        return self.get_by_id(ref) or self.get_by_name(ref)

    def list_all(self) -> list[Service]:
        """
        List the whole catalog.

        Returns:
            Services ordered by display_order, then name
        """
        services = [Service.model_validate(r) for r in self.store.query(SERVICES)]
        return sorted(services, key=lambda s: (s.display_order, s.name))

    def seed(self, entries: list[ServiceCreate]) -> list[Service]:
        """
        Load catalog entries, replacing any with the same id.

        Safe to run repeatedly; the original created_at is kept on re-seed.

        Args:
            entries: Catalog entries to load

        Returns:
            Stored services in the order given
        """
        seeded = []
        for entry in entries:
            existing = self.get_by_id(entry.id)
            created_at = existing.created_at if existing else now_utc()
            service = Service(**entry.model_dump(), created_at=created_at)
            self.store.put(SERVICES, service.id, service.model_dump(mode="json"))
            seeded.append(service)

        logger.info("Seeded %d catalog entries", len(seeded))
        return seeded
