"""Unit tests for the application entry point and error mapping."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from channel_delivery.delivery.orchestrator import DeliveryOrchestrator
from channel_delivery.errors import TransportError
from channel_delivery.gateways.base import DeliveryGateway
from channel_delivery.handlers.business import get_orchestrator, router
from channel_delivery.main import app, register_exception_handlers, startup_event


def test_health_check():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["backend"] in ("DIRECT", "BRIDGE")
    assert "version" in data


def test_unexpected_error_maps_to_500():
    orchestrator = MagicMock(spec=DeliveryOrchestrator)
    orchestrator.generate_credentials.side_effect = RuntimeError("unexpected")

    bare_app = FastAPI()
    bare_app.include_router(router)
    register_exception_handlers(bare_app)
    bare_app.dependency_overrides[get_orchestrator] = lambda: orchestrator

    response = TestClient(bare_app, raise_server_exceptions=False).get(
        "/api/credentials", params={"user_ref": "user-1"}
    )

    assert response.status_code == 500
    assert response.json() == {
        "error": {"code": 500, "message": "Internal server error", "type": "internal_error"}
    }


@pytest.mark.asyncio
async def test_startup_closes_gateway_when_backend_unreachable():
    gateway = MagicMock(spec=DeliveryGateway)
    gateway.name = "bridge"
    gateway.start.side_effect = TransportError("Message bus unreachable")

    with patch("channel_delivery.main.build_gateway", return_value=gateway):
        with pytest.raises(TransportError):
            await startup_event()

    gateway.close.assert_awaited_once()
