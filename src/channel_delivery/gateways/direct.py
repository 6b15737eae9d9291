"""
Module: direct.py
Description: Direct HTTP delivery backend.

Each operation is a single synchronous call-and-map against the channel
provider: provisioning posts to /create, delivery posts the snake_case
message to /deliver_message.
"""

from typing import Optional

from channel_delivery.gateways.base import DeliveryGateway, require_identifier
from channel_delivery.gateways.http import RestConsumer
from channel_delivery.models.domain import Credentials, DeliverMessage
from channel_delivery.models.wire import CredentialsDTO, CredentialsRequest, DeliverMessageDTO
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

CREATE_PATH = "/create"
DELIVER_PATH = "/deliver_message"


class DirectGateway(DeliveryGateway):
    """
    Delivery backend that calls the channel provider over HTTP.

    Attributes:
        consumer: Shared RestConsumer
        application_ref: Application reference sent when provisioning
    """

    name = "direct"

    def __init__(self, consumer: RestConsumer, application_ref: str):
        if not application_ref or not isinstance(application_ref, str):
            raise ValueError("application_ref must be a non-empty string")

        self.consumer = consumer
        self.application_ref = application_ref

    async def generate_credentials(self, user_identifier: str) -> Optional[Credentials]:
        """
        Provision a channel through POST /create.

        Args:
            user_identifier: User the channel is created for

        Returns:
            Issued credentials, or None if the provider returned no body
        """
        user_ref = require_identifier(user_identifier, "user_identifier")
        body = CredentialsRequest(application_ref=self.application_ref, user_ref=user_ref)

        response = await self.consumer.post(CREATE_PATH, json=body.model_dump())
        dto = self.consumer.decode(response, CredentialsDTO)
        if dto is None:
            logger.info("Provider returned no credentials", user_ref=user_ref)
            return None

        logger.info(
            "Credentials generated",
            user_ref=user_ref,
            channel_ref=dto.channel_ref
        )
        return dto.to_domain()

    async def deliver_message(
        self,
        channel_ref: str,
        user_ref: str,
        message: DeliverMessage
    ) -> None:
        """
        Deliver a message through POST /deliver_message.

        The response body is discarded; any 2xx status is success.
        """
        await self.consumer.post(DELIVER_PATH, json=DeliverMessageDTO.from_domain(message).to_wire())

        logger.info(
            "Message delivered",
            channel_ref=channel_ref,
            message_id=message.message_id,
            event_name=message.event_name
        )

    async def close(self) -> None:
        await self.consumer.aclose()
