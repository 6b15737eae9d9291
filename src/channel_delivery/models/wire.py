"""
Module: wire.py
Description: Wire-format models exchanged with channel providers.

Providers speak snake_case JSON while the internal model is camelCase.
Inbound models accept both spellings so responses from either convention
map losslessly.

Key Components:
- CredentialsRequest: Direct provisioning request body
- CredentialsDTO / BridgeCredentialsResponse: Provisioning responses
- DeliverMessageDTO: Direct delivery request body
- BridgeEnvelope: request/reply envelope published by the bridge backend
- CloudEvent: Typed event wrapper published to the message bus

Dependencies: pydantic, datetime, typing
Author: Channel Delivery Team
"""

from datetime import datetime
from typing import Any, Dict

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from channel_delivery.models.domain import Credentials, DeliverMessage, Message


def _snake_or_camel(name: str) -> AliasChoices:
    return AliasChoices(name, to_camel(name))


class CredentialsRequest(BaseModel):
    """Body of the direct provisioning call."""

    application_ref: str
    user_ref: str


class CredentialsDTO(BaseModel):
    """Provisioning response, snake_case with camelCase fallback."""

    channel_ref: str = Field(..., min_length=1, validation_alias=_snake_or_camel("channel_ref"))
    channel_secret: str = Field(..., min_length=1, validation_alias=_snake_or_camel("channel_secret"))

    def to_domain(self) -> Credentials:
        return Credentials(channel_ref=self.channel_ref, channel_secret=self.channel_secret)


class BridgeCredentialsResponse(BaseModel):
    """Provisioning response of the bridge endpoint: {"result": {...}}."""

    result: CredentialsDTO


class DeliverMessageDTO(BaseModel):
    """
    Delivery body sent to the direct provider.

    Serializes to snake_case field names. Parsing accepts snake_case or
    camelCase, so a DTO read back from either form maps to the same
    DeliverMessage.
    """

    model_config = ConfigDict(frozen=True)

    channel_ref: str = Field(..., validation_alias=_snake_or_camel("channel_ref"))
    message_id: str = Field(..., validation_alias=_snake_or_camel("message_id"))
    correlation_id: str = Field(..., validation_alias=_snake_or_camel("correlation_id"))
    message_data: Message = Field(..., validation_alias=_snake_or_camel("message_data"))
    event_name: str = Field(..., validation_alias=_snake_or_camel("event_name"))

    @classmethod
    def from_domain(cls, message: DeliverMessage) -> "DeliverMessageDTO":
        return cls(
            channel_ref=message.channel_ref,
            message_id=message.message_id,
            correlation_id=message.correlation_id,
            message_data=message.message_data,
            event_name=message.event_name,
        )

    def to_domain(self) -> DeliverMessage:
        return DeliverMessage(
            channel_ref=self.channel_ref,
            message_id=self.message_id,
            correlation_id=self.correlation_id,
            message_data=self.message_data,
            event_name=self.event_name,
        )

    def to_wire(self) -> Dict[str, Any]:
        """Return the snake_case JSON body."""
        return self.model_dump(mode="json")


class BridgeRequest(BaseModel):
    """Request half of the bridge envelope."""

    headers: Dict[str, str] = Field(default_factory=dict)
    body: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def for_user(cls, user_ref: str) -> "BridgeRequest":
        return cls(headers={"session-tracker": user_ref})


class BridgeReply(BaseModel):
    """Reply half of the bridge envelope (camelCase on the bus)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    channel_ref: str
    message_id: str
    correlation_id: str
    event_name: str
    message_data: Message


class BridgeEnvelope(BaseModel):
    """Envelope carried as the data of a bridge CloudEvent."""

    request: BridgeRequest
    reply: BridgeReply

    @classmethod
    def from_message(cls, user_ref: str, message: DeliverMessage) -> "BridgeEnvelope":
        return cls(
            request=BridgeRequest.for_user(user_ref),
            reply=BridgeReply(
                channel_ref=message.channel_ref,
                message_id=message.message_id,
                correlation_id=message.correlation_id,
                event_name=message.event_name,
                message_data=message.message_data,
            ),
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CloudEvent(BaseModel):
    """
    CloudEvents 1.0 structured-mode event.

    Attributes:
        id: Unique event identifier
        source: URI identifying the producer
        type: Event type tag, also used as the routing key
        time: Creation timestamp (UTC)
        datacontenttype: Media type of data
        data: Event payload
    """

    specversion: str = "1.0"
    id: str
    source: str
    type: str
    time: datetime
    datacontenttype: str = "application/json"
    data: Dict[str, Any]

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
