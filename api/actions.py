"""POST /api/actions: unified mutation endpoint."""

from uuid import UUID

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from api.middleware import request_id_of
from auth.access_gate import AccessGate
from core.exceptions import NotFoundError, ValidationError
from core.models import Actor, BookingCreate, UserUpdate, WorkerCreate


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict = {}


def _uuid(data: dict, key: str) -> UUID:
    value = data.get(key)
    if not value:
        raise ValidationError(f"'{key}' is required")
    try:
        return UUID(str(value))
    except ValueError as e:
        raise ValidationError(f"'{key}' is not a valid id: {value}") from e


def create_actions_router(services: dict, gate: AccessGate) -> APIRouter:
    router = APIRouter()

    handlers = {
        "booking": BookingHandler(services["booking"]),
        "worker": WorkerHandler(services["worker"]),
        "profile": ProfileHandler(services["user"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValidationError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValidationError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        actor = gate.current_actor()
        method = getattr(handler, f"_handle_{body.action}")
        result = method(dict(body.data), actor)
        return success_response(result, request_id_of(request)).model_dump(mode="json")

    return router


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class BookingHandler:
    ALLOWED_ACTIONS = {"create", "accept", "reject", "assign_worker", "complete", "cancel"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict, actor: Actor):
        booking = self.service.create(actor.id, BookingCreate(**data))
        return booking.model_dump(mode="json")

    def _handle_accept(self, data: dict, actor: Actor):
        booking = self.service.accept(_uuid(data, "id"), actor, data.get("notes"))
        return booking.model_dump(mode="json")

    def _handle_reject(self, data: dict, actor: Actor):
        booking = self.service.reject(_uuid(data, "id"), actor, data.get("notes"))
        return booking.model_dump(mode="json")

    def _handle_assign_worker(self, data: dict, actor: Actor):
        booking = self.service.assign_worker(
            _uuid(data, "id"), _uuid(data, "worker_id"), actor, data.get("notes")
        )
        return booking.model_dump(mode="json")

    def _handle_complete(self, data: dict, actor: Actor):
        booking = self.service.complete(_uuid(data, "id"), actor, data.get("notes"))
        return booking.model_dump(mode="json")

    def _handle_cancel(self, data: dict, actor: Actor):
        booking = self.service.cancel(_uuid(data, "id"), actor)
        return booking.model_dump(mode="json")


class WorkerHandler:
    ALLOWED_ACTIONS = {"create", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict, actor: Actor):
        worker = self.service.create(WorkerCreate(**data), actor)
        return worker.model_dump(mode="json")

    def _handle_delete(self, data: dict, actor: Actor):
        worker_id = _uuid(data, "id")
        deleted = self.service.delete(worker_id, actor)
        if not deleted:
            raise NotFoundError(f"Worker {worker_id} not found")
        return {"deleted": True}


class ProfileHandler:
    ALLOWED_ACTIONS = {"update"}

    def __init__(self, service):
        self.service = service

    def _handle_update(self, data: dict, actor: Actor):
        user = self.service.update_profile(actor.id, UserUpdate(**data))
        return user.model_dump(mode="json")
