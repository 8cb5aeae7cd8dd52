"""GET /api/data: unified read endpoint."""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from api.base import success_response
from api.middleware import request_id_of
from auth.access_gate import AccessGate
from core.exceptions import NotAuthorizedError, NotFoundError, ValidationError
from core.models import AdminFilter, BookingCategory


VALID_TYPES = {"bookings", "workers", "services", "me"}


def create_data_router(services: dict, gate: AccessGate) -> APIRouter:
    router = APIRouter()

    booking_svc = services["booking"]
    worker_svc = services["worker"]
    catalog_svc = services["catalog"]
    user_svc = services["user"]

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        customer_id: str | None = Query(None),
        category: str | None = Query(None),
        filter: str | None = Query(None),
        limit: int = Query(50, ge=1, le=500),
        offset: int = Query(0, ge=0),
    ):
        if type is None:
            raise ValidationError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValidationError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        actor = gate.current_actor()

        if type == "bookings":
            data = _handle_bookings(booking_svc, actor, id, customer_id, category, filter, limit, offset)
        elif type == "workers":
            data = _handle_workers(worker_svc, id)
        elif type == "services":
            data = [s.model_dump(mode="json") for s in catalog_svc.list_all()]
        else:
            user = user_svc.get_by_id(actor.id)
            data = user.model_dump(mode="json") if user else None

        return success_response(data, request_id_of(request)).model_dump(mode="json")

    return router


def _booking_view(booking_svc, booking) -> dict:
    data = booking.model_dump(mode="json")
    data["worker_label"] = booking_svc.describe_worker(booking)
    return data


def _handle_bookings(booking_svc, actor, id, customer_id, category, filter, limit, offset):
    if id:
        booking = booking_svc.get_for_actor(UUID(id), actor)
        return _booking_view(booking_svc, booking)

    wanted_category = BookingCategory(category) if category else None

    if not actor.is_admin:
        if customer_id and UUID(customer_id) != actor.id:
            raise NotAuthorizedError("Customers may only list their own bookings")
        bookings = booking_svc.list_for_customer(actor.id, wanted_category, limit, offset)
    elif customer_id:
        bookings = booking_svc.list_for_customer(UUID(customer_id), wanted_category, limit, offset)
    elif wanted_category:
        bookings = booking_svc.list_by_category(wanted_category, limit, offset)
    else:
        bookings = booking_svc.list_for_admin(AdminFilter(filter or "all"), limit, offset)

    return [_booking_view(booking_svc, b) for b in bookings]


def _handle_workers(worker_svc, id):
    if id:
        worker = worker_svc.get_by_id(UUID(id))
        if worker is None:
            raise NotFoundError(f"Worker {id} not found")
        return worker.model_dump(mode="json")

    return [w.model_dump(mode="json") for w in worker_svc.list_all()]
