"""Tests for RequestIDMiddleware."""

import pytest
from uuid import UUID
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.testclient import TestClient

from api.middleware import RequestIDMiddleware, request_id_of


@pytest.fixture
def rid_client():
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def endpoint(request: Request):
        return JSONResponse({"request_id": request_id_of(request)})

    return TestClient(app)


class TestRequestIDMiddleware:

    def test_generates_id(self, rid_client):
        response = rid_client.get("/test")

        UUID(response.headers["X-Request-ID"])
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    def test_keeps_client_id(self, rid_client):
        response = rid_client.get("/test", headers={"X-Request-ID": "upstream-7"})

        assert response.headers["X-Request-ID"] == "upstream-7"
        assert response.json()["request_id"] == "upstream-7"

    def test_unique_per_request(self, rid_client):
        first = rid_client.get("/test").headers["X-Request-ID"]
        second = rid_client.get("/test").headers["X-Request-ID"]
        assert first != second
