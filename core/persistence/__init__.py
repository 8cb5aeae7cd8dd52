"""Record store port and its adapters."""

from core.persistence.base import RecordStore, Record, VERSION_KEY, matches
from core.persistence.memory import MemoryRecordStore
from core.persistence.postgres import PostgresRecordStore

BOOKINGS = "bookings"
WORKERS = "workers"
SERVICES = "services"
USERS = "users"
AUDIT_LOG = "audit_log"
