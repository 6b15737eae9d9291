"""Delivery gateway contract implemented by every backend."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from channel_delivery.errors import ValidationError
from channel_delivery.models.domain import Credentials, DeliverMessage


class DeliveryGateway(ABC):
    """Base class for channel delivery backends.

    A process runs exactly one backend, chosen at startup. Each operation
    performs a single outbound network call and never retries.
    """

    name = "abstract"

    async def start(self) -> None:
        """Open long-lived connections. No-op by default."""

    async def close(self) -> None:
        """Release shared clients. No-op by default."""

    @abstractmethod
    async def generate_credentials(self, user_identifier: str) -> Optional[Credentials]:
        """Provision a channel for a user.

        Returns None when the provider answers successfully with no body.
        Raises ValidationError, TransportError or DecodeError.
        """

    @abstractmethod
    async def deliver_message(
        self, channel_ref: str, user_ref: str, message: DeliverMessage
    ) -> None:
        """Send one message to a channel. Raises TransportError on failure."""

    async def deliver_raw(self, message_type: str, payload: Mapping[str, Any]) -> None:
        """Publish an arbitrary tagged payload.

        Only message-bus backends support this.
        """
        raise NotImplementedError(f"{type(self).__name__} does not support raw delivery")


def require_identifier(value: str, field: str) -> str:
    """Return value stripped, or raise ValidationError when blank."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string")
    return value.strip()
