"""
Application wiring.

Run with:
    uvicorn main:create_production_app --factory

build_services() assembles the engine over any RecordStore; create_app()
puts the HTTP surface on top. create_production_app() pulls secrets from
Vault and connects Postgres, Valkey and the email gateway.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from auth.access_gate import AccessGate
from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.security_middleware import AuthMiddleware
from auth.service import AuthService
from auth.session import SessionManager
from clients.email_client import EmailGatewayClient
from core.audit import AuditLogger
from core.config import BookingConfig
from core.event_bus import EventBus
from core.handlers.booking_notification_handler import handle_booking_event
from core.models import Actor, Role
from core.persistence import RecordStore
from core.seed_data import SERVICE_AREAS, seed_database
from core.services.booking_service import BookingService
from core.services.catalog_service import CatalogService
from core.services.user_service import UserService
from core.services.worker_service import WorkerService

logger = logging.getLogger(__name__)

# Attributed to seeding and other start-up writes.
SYSTEM_ACTOR = Actor(id=UUID(int=0), role=Role.ADMIN)


def build_services(
    store: RecordStore,
    auth_config: AuthConfig | None = None,
    booking_config: BookingConfig | None = None,
    email_client: EmailGatewayClient | None = None,
    executor: Executor | None = None,
) -> dict:
    """
    Wire the engine and its collaborators over a record store.

    Notifications are subscribed only when both an email client and an
    executor are given.

    Returns:
        Dict of services keyed by domain, plus 'event_bus' and 'gate'
    """
    auth_config = auth_config or AuthConfig()
    booking_config = booking_config or BookingConfig()

    audit = AuditLogger(store)
    event_bus = EventBus()
    catalog = CatalogService(store)
    workers = WorkerService(store, audit)
    users = UserService(store, audit, auth_config.admin_email)
    bookings = BookingService(
        store, audit, catalog, workers, event_bus, users=users, config=booking_config
    )

    if email_client is not None and executor is not None:
        event_bus.subscribe_all(handle_booking_event(
            email_client, executor, booking_config.admin_notification_email
        ))

    return {
        "audit": audit,
        "event_bus": event_bus,
        "catalog": catalog,
        "worker": workers,
        "user": users,
        "booking": bookings,
        "gate": AccessGate(users),
    }


def create_app(
    services: dict,
    session_manager: SessionManager,
    auth_config: AuthConfig | None = None,
    auth_service: AuthService | None = None,
    lifespan=None,
) -> FastAPI:
    """
    Build the FastAPI app around already-wired services.

    The /auth routes (registration and magic link sign-in) are mounted only
    when an AuthService is given.
    """
    auth_config = auth_config or AuthConfig()

    app = FastAPI(title="Booking Service", lifespan=lifespan)
    register_error_handlers(app)

    # Starlette runs the last-added middleware first
    app.add_middleware(
        AuthMiddleware,
        session_manager=session_manager,
        cookie_name=auth_config.session_cookie_name,
    )
    app.add_middleware(RequestIDMiddleware)

    gate = services["gate"]
    app.include_router(create_data_router(services, gate), prefix="/api")
    app.include_router(create_actions_router(services, gate), prefix="/api")
    if auth_service is not None:
        app.include_router(create_auth_router(auth_service, auth_config), prefix="/auth")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def create_production_app() -> FastAPI:
    """Connect to real infrastructure using secrets from Vault."""
    from clients.postgres_client import PostgresClient
    from clients.valkey_client import ValkeyClient
    from clients.vault_client import get_database_url, get_email_config, get_valkey_url
    from core.persistence import PostgresRecordStore

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    auth_config = AuthConfig()
    booking_config = BookingConfig(service_areas=SERVICE_AREAS)

    postgres = PostgresClient(get_database_url())
    store = PostgresRecordStore(postgres)
    store.ensure_schema()

    valkey = ValkeyClient(get_valkey_url())
    session_manager = SessionManager(valkey, auth_config)
    email_client = EmailGatewayClient(**get_email_config())

    executor = ThreadPoolExecutor(
        max_workers=booking_config.notification_workers,
        thread_name_prefix="notify",
    )
    services = build_services(
        store,
        auth_config=auth_config,
        booking_config=booking_config,
        email_client=email_client,
        executor=executor,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        counts = seed_database(services["catalog"], services["worker"], SYSTEM_ACTOR)
        logger.info("Booking service started (%s)", counts)
        yield
        executor.shutdown(wait=True)
        valkey.close()
        postgres.close()
        logger.info("Booking service stopped")

    auth_service = AuthService(auth_config, services["user"], session_manager, valkey, email_client)

    return create_app(services, session_manager, auth_config, auth_service=auth_service, lifespan=lifespan)
