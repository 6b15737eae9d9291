"""
Module: test_business.py
Description: Unit tests for the business HTTP endpoints.

Tests the routes on a bare FastAPI app with the service error handlers
and dependency overrides for the orchestrator and gateway.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from channel_delivery.delivery.orchestrator import DeliveryOrchestrator
from channel_delivery.errors import DecodeError, TransportError
from channel_delivery.gateways.base import DeliveryGateway
from channel_delivery.handlers.business import get_gateway, get_orchestrator, router
from channel_delivery.main import register_exception_handlers
from channel_delivery.models.domain import Credentials, PendingEvent


@pytest.fixture
def orchestrator():
    mock = MagicMock(spec=DeliveryOrchestrator)
    mock.schedule_delivery.return_value = "corr-1"
    return mock


@pytest.fixture
def gateway():
    return MagicMock(spec=DeliveryGateway)


@pytest.fixture
def client(orchestrator, gateway):
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_gateway] = lambda: gateway
    return TestClient(app)


class TestCredentialsEndpoint:
    """Test cases for GET /api/credentials."""

    def test_credentials_issued(self, client, orchestrator):
        orchestrator.generate_credentials.return_value = Credentials(channel_ref="c1", channel_secret="s1")

        response = client.get("/api/credentials", params={"user_ref": "user-1"})

        assert response.status_code == 200
        assert response.json() == {"channelRef": "c1", "channelSecret": "s1"}
        orchestrator.generate_credentials.assert_awaited_once_with("user-1")

    def test_credentials_absent(self, client, orchestrator):
        orchestrator.generate_credentials.return_value = None

        response = client.get("/api/credentials", params={"user_ref": "user-1"})

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "http_exception"

    @pytest.mark.parametrize("error", [TransportError("timeout"), DecodeError("bad body")])
    def test_provider_failure(self, client, orchestrator, error):
        orchestrator.generate_credentials.side_effect = error

        response = client.get("/api/credentials", params={"user_ref": "user-1"})

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "upstream_error"

    def test_missing_user_ref(self, client, orchestrator):
        response = client.get("/api/credentials")

        assert response.status_code == 400
        orchestrator.generate_credentials.assert_not_called()


class TestBusinessEndpoint:
    """Test cases for GET /api/business."""

    def test_single_event_accepted(self, client, orchestrator):
        response = client.get("/api/business", params={
            "delay": "0",
            "channel_ref": "ch-1",
            "user_ref": "user-1",
            "correlation_id": "corr-1",
        })

        assert response.status_code == 202
        assert response.json()["status"] == "accepted"
        assert response.json()["correlation_id"] == "corr-1"

        delay, channel_ref, user_ref, correlation_id, events = orchestrator.schedule_delivery.call_args.args
        assert (delay, channel_ref, user_ref, correlation_id) == ("0", "ch-1", "user-1", "corr-1")
        assert [e.event_name for e in events] == ["businessEvent"]
        assert events[0].title == "process after 0"

    def test_two_events_accepted(self, client, orchestrator):
        response = client.get("/api/business", params={
            "delay": "100",
            "channel_ref": "ch-1",
            "user_ref": "user-1",
            "events": 2,
        })

        assert response.status_code == 202
        events = orchestrator.schedule_delivery.call_args.args[4]
        assert [e.severity for e in events] == ["INFO", "SUCCESS"]

    def test_generated_correlation_is_shared_with_presets(self, client, orchestrator):
        client.get("/api/business", params={"delay": "0", "channel_ref": "ch-1"})

        correlation_id = orchestrator.schedule_delivery.call_args.args[3]
        events = orchestrator.schedule_delivery.call_args.args[4]
        assert correlation_id
        assert events[0].detail == f"response for id:{correlation_id}"

    def test_malformed_delay(self, client, orchestrator):
        response = client.get("/api/business", params={"delay": "abc", "channel_ref": "ch-1"})

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"
        orchestrator.schedule_delivery.assert_not_called()

    @pytest.mark.parametrize("delay", ["9" * 400, "9" * 5000], ids=["400-digits", "5000-digits"])
    def test_oversized_delay(self, client, orchestrator, delay):
        response = client.get("/api/business", params={"delay": delay, "channel_ref": "ch-1"})

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"
        orchestrator.schedule_delivery.assert_not_called()

    def test_unsupported_event_count(self, client, orchestrator):
        response = client.get("/api/business", params={"delay": "0", "channel_ref": "ch-1", "events": 3})

        assert response.status_code == 400
        orchestrator.schedule_delivery.assert_not_called()


class TestDeliveriesEndpoint:
    """Test cases for POST /api/deliveries."""

    def test_schedule_events(self, client, orchestrator):
        body = {
            "delay": 1000,
            "channel_ref": "ch-1",
            "user_ref": "user-1",
            "events": [
                {"code": "100", "title": "t", "detail": "d", "severity": "INFO", "event_name": "first"},
                {"code": "200", "title": "t", "detail": "d", "severity": "SUCCESS", "eventName": "second"},
            ],
        }

        response = client.post("/api/deliveries", json=body)

        assert response.status_code == 202
        delay, channel_ref, user_ref, correlation_id, events = orchestrator.schedule_delivery.call_args.args
        assert delay == 1000
        assert channel_ref == "ch-1"
        assert correlation_id is None
        assert all(isinstance(e, PendingEvent) for e in events)
        assert [e.event_name for e in events] == ["first", "second"]

    def test_invalid_body(self, client, orchestrator):
        response = client.post("/api/deliveries", json={"delay": 0})

        assert response.status_code == 400
        orchestrator.schedule_delivery.assert_not_called()


class TestRawEndpoint:
    """Test cases for POST /api/raw/{message_type}."""

    def test_raw_published(self, client, gateway):
        response = client.post("/api/raw/custom.type", json={"k": "v"})

        assert response.status_code == 202
        gateway.deliver_raw.assert_awaited_once_with("custom.type", {"k": "v"})

    def test_raw_not_supported(self, client, gateway):
        gateway.deliver_raw.side_effect = NotImplementedError("DirectGateway does not support raw delivery")

        response = client.post("/api/raw/custom.type", json={"k": "v"})

        assert response.status_code == 501

    def test_raw_bus_failure(self, client, gateway):
        gateway.deliver_raw.side_effect = TransportError("bus down")

        response = client.post("/api/raw/custom.type", json={"k": "v"})

        assert response.status_code == 502
