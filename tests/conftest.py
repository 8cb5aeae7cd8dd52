"""Shared test fixtures for the booking engine test suite.

Core tests run against MemoryRecordStore, so nothing here needs a database,
Valkey or Vault.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock
from uuid import UUID

from dotenv import load_dotenv

# Load .env before anything reads the environment
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

import clients.vault_client as vault_module
vault_module.reset_cache()

from auth.config import DEFAULT_ADMIN_EMAIL
from clients.valkey_client import ValkeyClient
from core.audit import AuditLogger
from core.config import BookingConfig
from core.event_bus import EventBus
from core.models import Actor, BookingCreate, Role, UserCreate, WorkerCreate
from core.persistence import MemoryRecordStore
from core.seed_data import CATALOG
from core.services.booking_service import BookingService
from core.services.catalog_service import CatalogService
from core.services.user_service import UserService
from core.services.worker_service import WorkerService
from utils.user_context import user_context, clear_current_user_id


# =============================================================================
# TEST USER CONSTANTS
# =============================================================================

ADMIN_ID = UUID("00000000-0000-0000-0000-0000000000a1")
CUSTOMER_ID = UUID("00000000-0000-0000-0000-000000000001")
CUSTOMER_B_ID = UUID("00000000-0000-0000-0000-000000000002")

CUSTOMER_EMAIL = "ali.khan@example.com"
CUSTOMER_B_EMAIL = "sara.ahmed@example.com"


# =============================================================================
# USER CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_user_context():
    """Ensure clean user context before and after each test."""
    clear_current_user_id()
    yield
    clear_current_user_id()


@pytest.fixture
def as_customer():
    """Run the test body as the primary customer."""
    with user_context(CUSTOMER_ID):
        yield CUSTOMER_ID


# =============================================================================
# STORE & SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def store():
    return MemoryRecordStore()


@pytest.fixture
def audit(store):
    return AuditLogger(store)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def published(event_bus):
    """Every event published during the test, in order."""
    events = []
    event_bus.subscribe_all(events.append)
    return events


@pytest.fixture
def booking_config():
    return BookingConfig()


@pytest.fixture
def catalog_service(store):
    catalog = CatalogService(store)
    catalog.seed(CATALOG)
    return catalog


@pytest.fixture
def worker_service(store, audit):
    return WorkerService(store, audit)


@pytest.fixture
def user_service(store, audit):
    return UserService(store, audit, DEFAULT_ADMIN_EMAIL)


@pytest.fixture
def booking_service(store, audit, catalog_service, worker_service, event_bus, user_service, booking_config):
    return BookingService(
        store, audit, catalog_service, worker_service, event_bus,
        users=user_service, config=booking_config,
    )


# =============================================================================
# ACTORS
# =============================================================================


@pytest.fixture
def admin_user(user_service):
    return user_service.register(ADMIN_ID, UserCreate(name="Admin", email=DEFAULT_ADMIN_EMAIL))


@pytest.fixture
def customer_user(user_service):
    return user_service.register(
        CUSTOMER_ID,
        UserCreate(name="Ali Khan", email=CUSTOMER_EMAIL, phone="0300-1234567", address="House 12"),
    )


@pytest.fixture
def customer_b_user(user_service):
    return user_service.register(CUSTOMER_B_ID, UserCreate(name="Sara Ahmed", email=CUSTOMER_B_EMAIL))


@pytest.fixture
def admin(admin_user) -> Actor:
    return Actor(id=admin_user.id, role=Role.ADMIN)


@pytest.fixture
def customer(customer_user) -> Actor:
    return Actor(id=customer_user.id, role=Role.CUSTOMER)


@pytest.fixture
def customer_b(customer_b_user) -> Actor:
    return Actor(id=customer_b_user.id, role=Role.CUSTOMER)


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================


@pytest.fixture
def worker(worker_service, admin):
    return worker_service.create(
        WorkerCreate(name="Aisha K.", specialty="Deep Cleaning", rating=4.9),
        admin,
    )


@pytest.fixture
def booking_request() -> BookingCreate:
    return BookingCreate(
        service="Deep Cleaning",
        date="2026-11-02",
        time="10:00",
        area="DHA Phase 2",
        address="House 12, Street 4",
    )


@pytest.fixture
def pending_booking(booking_service, customer, booking_request):
    return booking_service.create(customer.id, booking_request)


@pytest.fixture
def confirmed_booking(booking_service, pending_booking, admin):
    return booking_service.accept(pending_booking.id, admin)


@pytest.fixture
def in_progress_booking(booking_service, confirmed_booking, worker, admin):
    return booking_service.assign_worker(confirmed_booking.id, worker.id, admin)


@pytest.fixture
def completed_booking(booking_service, in_progress_booking, admin):
    return booking_service.complete(in_progress_booking.id, admin)


# =============================================================================
# VALKEY
# =============================================================================


@pytest.fixture
def valkey():
    """Valkey mock backed by a dict."""
    data = {}
    mock = Mock(spec=ValkeyClient)
    mock.set_json.side_effect = lambda key, value, expire_seconds=None: data.__setitem__(key, value)
    mock.get_json.side_effect = lambda key: data.get(key)
    mock.delete.side_effect = lambda key: data.pop(key, None) is not None
    mock.data = data
    return mock
