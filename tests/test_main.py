"""Tests for service wiring in main.py."""

from concurrent.futures import Future
from unittest.mock import Mock
from uuid import uuid4

from clients.email_client import EmailGatewayClient
from core.models import BookingCreate, UserCreate
from core.persistence import MemoryRecordStore
from core.seed_data import CATALOG
from main import SYSTEM_ACTOR, build_services


class ImmediateExecutor:
    """Runs submitted work inline."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        future.set_result(fn(*args, **kwargs))
        return future


def _book(services):
    customer_id = uuid4()
    services["user"].register(customer_id, UserCreate(name="Ali Khan", email="ali@example.com"))
    services["catalog"].seed(CATALOG)
    return services["booking"].create(customer_id, BookingCreate(
        service="regular", date="2026-11-02", time="09:30", area="F-7", address="House 3",
    ))


class TestBuildServices:

    def test_wires_all_services(self):
        services = build_services(MemoryRecordStore())

        assert set(services) == {"audit", "event_bus", "catalog", "worker", "user", "booking", "gate"}

    def test_no_notifications_without_client(self):
        services = build_services(MemoryRecordStore())
        assert services["event_bus"]._subscribers == {}

    def test_notifications_delivered(self):
        email = Mock(spec=EmailGatewayClient)
        services = build_services(MemoryRecordStore(), email_client=email, executor=ImmediateExecutor())

        booking = _book(services)

        email.send_email.assert_called_once()
        assert email.send_email.call_args.kwargs["to"] == "ali@example.com"
        assert email.send_email.call_args.kwargs["reference"] == str(booking.id)

    def test_system_actor_is_admin(self):
        assert SYSTEM_ACTOR.is_admin
