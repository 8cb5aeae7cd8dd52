"""API test fixtures: TestClients per role over in-memory services."""

from datetime import timedelta
from unittest.mock import Mock
from uuid import UUID

import pytest
from starlette.testclient import TestClient

from auth.config import DEFAULT_ADMIN_EMAIL
from auth.exceptions import SessionExpiredError
from auth.session import SessionManager
from auth.types import Session
from core.models import UserCreate, WorkerCreate
from core.persistence import MemoryRecordStore
from core.seed_data import CATALOG
from main import SYSTEM_ACTOR, build_services, create_app
from utils.timezone import now_utc

API_ADMIN_ID = UUID("00000000-0000-0000-0000-00000000aa01")
API_CUSTOMER_ID = UUID("00000000-0000-0000-0000-00000000cc01")
API_CUSTOMER_B_ID = UUID("00000000-0000-0000-0000-00000000cc02")
API_STRANGER_ID = UUID("00000000-0000-0000-0000-00000000dd01")

TOKENS = {
    "admin-token": API_ADMIN_ID,
    "customer-token": API_CUSTOMER_ID,
    "customer-b-token": API_CUSTOMER_B_ID,
    "stranger-token": API_STRANGER_ID,
}


# =============================================================================
# SERVICES
# =============================================================================


@pytest.fixture
def api_services():
    services = build_services(MemoryRecordStore())
    services["catalog"].seed(CATALOG)

    users = services["user"]
    users.register(API_ADMIN_ID, UserCreate(name="Admin", email=DEFAULT_ADMIN_EMAIL))
    users.register(API_CUSTOMER_ID, UserCreate(name="Ali Khan", email="ali@example.com", phone="0300-1111111"))
    users.register(API_CUSTOMER_B_ID, UserCreate(name="Sara Ahmed", email="sara@example.com"))
    return services


@pytest.fixture
def api_worker(api_services):
    return api_services["worker"].create(WorkerCreate(name="Zahid M.", specialty="On-Site Ironing"), SYSTEM_ACTOR)


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def mock_session_manager():
    def validate(token):
        if token not in TOKENS:
            raise SessionExpiredError("Session not found or expired")
        now = now_utc()
        return Session(
            token=token,
            user_id=TOKENS[token],
            created_at=now,
            expires_at=now + timedelta(hours=24),
            last_activity_at=now,
        )

    mock = Mock(spec=SessionManager)
    mock.validate_session.side_effect = validate
    return mock


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(api_services, mock_session_manager):
    return create_app(api_services, mock_session_manager)


def _client(app, token=None):
    c = TestClient(app, raise_server_exceptions=False)
    if token:
        c.cookies.set("session_token", token)
    return c


@pytest.fixture
def admin_client(app):
    return _client(app, "admin-token")


@pytest.fixture
def customer_client(app):
    return _client(app, "customer-token")


@pytest.fixture
def customer_b_client(app):
    return _client(app, "customer-b-token")


@pytest.fixture
def stranger_client(app):
    """Authenticated session with no user profile behind it."""
    return _client(app, "stranger-token")


@pytest.fixture
def unauthed_client(app):
    return _client(app)


# =============================================================================
# HELPERS
# =============================================================================


@pytest.fixture
def act():
    """POST an action and return the response."""
    def _act(client, domain, action, data=None):
        return client.post("/api/actions", json={"domain": domain, "action": action, "data": data or {}})
    return _act


@pytest.fixture
def booking_payload():
    return {
        "service": "Deep Cleaning",
        "date": "2026-11-02",
        "time": "10:00",
        "area": "DHA Phase 2",
        "address": "House 1",
    }


@pytest.fixture
def created_booking(customer_client, act, booking_payload):
    response = act(customer_client, "booking", "create", booking_payload)
    assert response.status_code == 200
    return response.json()["data"]


@pytest.fixture
def api_customer_id():
    return API_CUSTOMER_ID


@pytest.fixture
def api_customer_b_id():
    return API_CUSTOMER_B_ID
