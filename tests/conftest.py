"""
Module: conftest.py
Description: Shared pytest fixtures for delivery service tests.

Provides test settings, sample domain objects, a recording gateway
that stands in for a real backend, a running scheduler, and moto-backed
Secrets Manager for the secret loader.
"""

import asyncio
import json
import random
import time
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import boto3
import pytest
import pytest_asyncio
from moto import mock_aws

from channel_delivery.bus.publisher import EventPublisher
from channel_delivery.config.settings import Settings
from channel_delivery.delivery.scheduler import DeliveryScheduler
from channel_delivery.errors import TransportError
from channel_delivery.gateways.base import DeliveryGateway
from channel_delivery.gateways.http import RestConsumer, create_http_client
from channel_delivery.models.domain import (
    ConnectionConfig,
    Credentials,
    DeliverMessage,
    Message,
    PendingEvent,
)

PROVIDER_URL = "http://provider.test"


class RecordingGateway(DeliveryGateway):
    """
    In-memory gateway that records every call.

    Each delivery is recorded with its start and finish times so tests
    can check ordering. Positions listed in fail_on raise TransportError
    after being recorded.
    """

    name = "recording"

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        fail_on: Optional[set] = None,
        latency: float = 0.0
    ):
        self.credentials = credentials
        self.fail_on = fail_on or set()
        self.latency = latency
        self.credential_calls: List[str] = []
        self.deliveries: List[Dict[str, Any]] = []

    async def generate_credentials(self, user_identifier: str) -> Optional[Credentials]:
        self.credential_calls.append(user_identifier)
        return self.credentials

    async def deliver_message(self, channel_ref: str, user_ref: str, message: DeliverMessage) -> None:
        position = len(self.deliveries)
        record = {
            "channel_ref": channel_ref,
            "user_ref": user_ref,
            "message": message,
            "started": time.monotonic(),
        }
        self.deliveries.append(record)
        if self.latency:
            await asyncio.sleep(self.latency)
        record["finished"] = time.monotonic()
        if position in self.fail_on:
            raise TransportError("stub delivery failure")


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables .env loading and points the provider at a stub host.
    """
    return Settings(
        _env_file=None,
        app_name="channel-delivery-test",
        base_url=PROVIDER_URL,
        timeout_ms=1000,
        max_jitter_ms=0,
        worker_count=2,
    )


@pytest.fixture
def sample_message():
    return Message(code="100", title="process after 0", detail="response for id:corr-1", severity="INFO")


@pytest.fixture
def sample_deliver_message(sample_message):
    return DeliverMessage(
        channel_ref="ch-1",
        message_id="msg-1",
        correlation_id="corr-1",
        event_name="businessEvent",
        message_data=sample_message,
    )


@pytest.fixture
def event_a():
    return PendingEvent(
        code="100",
        title="started",
        detail="Your request is being processed",
        severity="INFO",
        event_name="process.started",
    )


@pytest.fixture
def event_b():
    return PendingEvent(
        code="200",
        title="completed",
        detail="Your request has been processed",
        severity="SUCCESS",
        event_name="process.completed",
    )


@pytest.fixture
def connection_config():
    return ConnectionConfig(
        host="bus.internal",
        port=5671,
        username="svc",
        password="s3cret",
        virtual_host="/delivery",
        tls_enabled=True,
    )


@pytest.fixture
def recording_gateway():
    return RecordingGateway(credentials=Credentials(channel_ref="c1", channel_secret="s1"))


@pytest.fixture
def gateway_factory():
    """Provide the RecordingGateway class for tests needing custom behaviour."""
    return RecordingGateway


@pytest_asyncio.fixture
async def scheduler():
    """Provide a started scheduler, stopped after the test."""
    delivery_scheduler = DeliveryScheduler(worker_count=2)
    delivery_scheduler.start()
    yield delivery_scheduler
    await delivery_scheduler.stop()


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials so boto3 never reaches a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def secrets_client(aws_credentials):
    """
    Provide a moto-backed Secrets Manager client.

    Secrets created through it are visible to any boto3 client built
    while the fixture is active.
    """
    with mock_aws():
        yield boto3.client("secretsmanager", region_name="us-east-1")


@pytest.fixture
def bus_secret():
    """Typical bus connection secret payload."""
    return {
        "hostname": "bus.internal",
        "port": "5671",
        "username": "svc",
        "password": "s3cret",
        "virtualhost": "/delivery",
        "ssl": True,
    }


@pytest.fixture
def put_secret(secrets_client):
    """Store a payload (dict or raw string) as a SecretString."""

    def _put(name: str, payload: Any) -> None:
        secret_string = payload if isinstance(payload, str) else json.dumps(payload)
        secrets_client.create_secret(Name=name, SecretString=secret_string)

    return _put


@pytest_asyncio.fixture
async def consumer():
    """RestConsumer bound to the stub provider, closed after the test."""
    rest_consumer = RestConsumer(create_http_client(PROVIDER_URL, 1000))
    yield rest_consumer
    await rest_consumer.aclose()


@pytest.fixture
def publisher():
    """EventPublisher double with awaitable methods."""
    return AsyncMock(spec=EventPublisher)


@pytest.fixture
def seeded_rng():
    return random.Random(42)
