"""
Module: domain.py
Description: Domain models for channel credentials and notifications.

All domain values are immutable once constructed. Their JSON shape is
camelCase (dump with by_alias=True) and they accept either camelCase or
snake_case field names on input.

Key Components:
- Credentials: Channel reference and secret issued for a user
- Message: Single notification payload
- DeliverMessage: Message addressed to a channel within one flow
- PendingEvent: One element of a scheduled event sequence
- ConnectionConfig: Message bus connection parameters (bridge only)

Dependencies: pydantic
Author: Channel Delivery Team
"""

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Frozen model with camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Credentials(DomainModel):
    """
    Credentials issued for a channel session.

    Attributes:
        channel_ref: Provider-managed channel identifier
        channel_secret: Secret the client uses to open the channel
    """

    channel_ref: str = Field(..., min_length=1)
    channel_secret: str = Field(..., min_length=1)


class Message(DomainModel):
    """Notification payload delivered to a channel."""

    code: str
    title: str
    detail: str
    severity: str


class DeliverMessage(DomainModel):
    """
    A message addressed to a channel.

    Attributes:
        channel_ref: Destination channel
        message_id: Unique identifier of this delivery
        correlation_id: Identifier shared by every delivery of one flow
        event_name: Name of the event the channel subscribes to
        message_data: Notification payload
    """

    channel_ref: str
    message_id: str
    correlation_id: str
    event_name: str
    message_data: Message


class PendingEvent(DomainModel):
    """An event waiting to be delivered as part of a scheduled sequence."""

    code: str
    title: str
    detail: str
    severity: str
    event_name: str = Field(..., min_length=1)

    def to_message(self) -> Message:
        return Message(
            code=self.code,
            title=self.title,
            detail=self.detail,
            severity=self.severity,
        )


class ConnectionConfig(DomainModel):
    """
    Message bus connection parameters loaded from the secret store.

    The password is a SecretStr so it never appears in logs or reprs.
    """

    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, lt=65536)
    username: str = Field(..., min_length=1)
    password: SecretStr
    virtual_host: str = Field(default="/")
    tls_enabled: bool = Field(default=False)
