"""
Module: bridge.py
Description: Message-bus bridge delivery backend.

Credentials are still provisioned over HTTP, through the bridge
endpoint and its header contract. Messages are wrapped in a
request/reply envelope, enveloped again as a CloudEvent and published
to the bus. A publish only means the local bus client accepted the
event; delivery to the channel happens later, outside this process.

Key Components:
- BridgeGateway: DeliveryGateway over RestConsumer + EventPublisher
- generate_document_number(): Synthetic document id for provisioning
- REPLY_EVENT_TYPE: Type tag of published reply events

Dependencies: pydantic, random, uuid
Author: Channel Delivery Team
"""

import random
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import uuid4

from channel_delivery.bus.publisher import EventPublisher
from channel_delivery.errors import ValidationError
from channel_delivery.gateways.base import DeliveryGateway, require_identifier
from channel_delivery.gateways.http import RestConsumer
from channel_delivery.models.domain import Credentials, DeliverMessage
from channel_delivery.models.wire import BridgeCredentialsResponse, BridgeEnvelope, CloudEvent
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

REPLY_EVENT_TYPE = "ch-ms-async-callback.svp.reply"
CHANNEL_PATH = "/ext/channel"
DOCUMENT_TYPE = "CC"


def generate_document_number(rng: random.Random) -> str:
    """
    Generate an 8 to 10 digit decimal document number.

    The bridge provider requires a document id header; the value is not
    stored or validated anywhere.
    """
    length = rng.randint(8, 10)
    return "".join(str(rng.randrange(10)) for _ in range(length))


class BridgeGateway(DeliveryGateway):
    """
    Delivery backend that publishes reply events to a message bus.

    Attributes:
        consumer: Shared RestConsumer for the bridge provisioning endpoint
        publisher: Shared EventPublisher
        application_ref: Application reference sent when provisioning
        event_source: CloudEvent source attribute
    """

    name = "bridge"

    def __init__(
        self,
        consumer: RestConsumer,
        publisher: EventPublisher,
        application_ref: str,
        event_source: str,
        rng: Optional[random.Random] = None
    ):
        if not application_ref or not isinstance(application_ref, str):
            raise ValueError("application_ref must be a non-empty string")

        self.consumer = consumer
        self.publisher = publisher
        self.application_ref = application_ref
        self.event_source = event_source
        self.rng = rng or random.Random()

    async def start(self) -> None:
        await self.publisher.connect()

    async def close(self) -> None:
        await self.publisher.close()
        await self.consumer.aclose()

    async def generate_credentials(self, user_identifier: str) -> Optional[Credentials]:
        """
        Provision a channel through POST /ext/channel.

        Identifiers travel as headers; the body is empty.

        Raises:
            DecodeError: If the response has no usable result
        """
        user_ref = require_identifier(user_identifier, "user_identifier")
        headers = {
            'application-id': self.application_ref,
            'session-tracker': user_ref,
            'document-id': generate_document_number(self.rng),
            'document-type': DOCUMENT_TYPE,
        }

        response = await self.consumer.post(CHANNEL_PATH, headers=headers)
        dto = self.consumer.decode(response, BridgeCredentialsResponse)
        if dto is None:
            logger.info("Bridge returned no credentials", user_ref=user_ref)
            return None

        logger.info(
            "Credentials generated through bridge",
            user_ref=user_ref,
            channel_ref=dto.result.channel_ref
        )
        return dto.result.to_domain()

    def build_event(self, user_ref: str, message: DeliverMessage) -> CloudEvent:
        """Wrap a message in the bridge envelope and a CloudEvent."""
        return CloudEvent(
            id=str(uuid4()),
            source=self.event_source,
            type=REPLY_EVENT_TYPE,
            time=datetime.now(timezone.utc),
            data=BridgeEnvelope.from_message(user_ref, message).to_wire(),
        )

    async def deliver_message(
        self,
        channel_ref: str,
        user_ref: str,
        message: DeliverMessage
    ) -> None:
        event = self.build_event(user_ref, message)
        await self.publisher.publish(event.type, event.to_wire(), message_id=event.id)

        logger.info(
            "Reply event published",
            channel_ref=channel_ref,
            event_id=event.id,
            message_id=message.message_id,
            event_name=message.event_name
        )

    async def deliver_raw(self, message_type: str, payload: Mapping[str, Any]) -> None:
        """Publish a payload as-is, routed by its message type."""
        if not message_type or not isinstance(message_type, str):
            raise ValidationError("message_type must be a non-empty string")
        if not isinstance(payload, Mapping):
            raise ValidationError("payload must be a mapping")

        await self.publisher.publish(message_type, dict(payload))
