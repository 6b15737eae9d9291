"""
Module: publisher.py
Description: AMQP event publisher for the bridge backend.

Publishes JSON events to a topic exchange over a single robust
connection shared by every delivery. Publishing is fire-and-forget:
success means the broker client accepted the message, not that a
subscriber received it.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aio_pika
from aio_pika.exceptions import AMQPError

from channel_delivery.errors import TransportError
from channel_delivery.models.domain import ConnectionConfig
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)


class EventPublisher:
    """
    Message bus publisher for bridge events.

    Holds one connection, one channel and the declared exchange for the
    lifetime of the process.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        exchange_name: str = "domainEvents",
        timeout_seconds: float = 5.0
    ):
        """
        Initialize the publisher.

        Args:
            config: Connection parameters loaded from the secret store
            exchange_name: Topic exchange events are published to
            timeout_seconds: Timeout for connecting and publishing
        """
        if not exchange_name or not isinstance(exchange_name, str):
            raise ValueError("exchange_name must be a non-empty string")

        self.config = config
        self.exchange_name = exchange_name
        self.timeout = timeout_seconds
        self._connection = None
        self._channel = None
        self._exchange = None

        logger.info(
            "Event publisher initialized",
            host=config.host,
            port=config.port,
            virtual_host=config.virtual_host,
            exchange=exchange_name
        )

    @property
    def connected(self) -> bool:
        return self._exchange is not None

    async def connect(self) -> None:
        """
        Open the connection and declare the exchange.

        Raises:
            TransportError: If the broker cannot be reached
        """
        if self.connected:
            return

        try:
            self._connection = await aio_pika.connect_robust(
                host=self.config.host,
                port=self.config.port,
                login=self.config.username,
                password=self.config.password.get_secret_value(),
                virtualhost=self.config.virtual_host,
                ssl=self.config.tls_enabled,
                timeout=self.timeout
            )
            self._channel = await self._connection.channel()
            self._exchange = await self._channel.declare_exchange(
                self.exchange_name,
                aio_pika.ExchangeType.TOPIC,
                durable=True
            )
        except (AMQPError, OSError, asyncio.TimeoutError) as e:
            logger.error(
                "Failed to connect to message bus",
                host=self.config.host,
                port=self.config.port,
                error=str(e),
                error_type=type(e).__name__
            )
            await self.close()
            raise TransportError(f"Message bus unreachable: {e}") from e

        logger.info(
            "Connected to message bus",
            host=self.config.host,
            exchange=self.exchange_name
        )

    async def publish(
        self,
        routing_key: str,
        body: Dict[str, Any],
        message_id: Optional[str] = None
    ) -> None:
        """
        Publish a JSON body to the exchange.

        Args:
            routing_key: Routing key (the event type)
            body: JSON-serializable payload
            message_id: Optional AMQP message id

        Raises:
            TransportError: If not connected or the broker rejects the publish
            ValueError: If parameters are invalid
        """
        if not routing_key or not isinstance(routing_key, str):
            raise ValueError("routing_key must be a non-empty string")
        if not isinstance(body, dict):
            raise ValueError("body must be a dictionary")
        if not self.connected:
            raise TransportError("Event publisher is not connected")

        message = aio_pika.Message(
            body=json.dumps(body).encode("utf-8"),
            content_type="application/json",
            message_id=message_id,
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT
        )

        try:
            await self._exchange.publish(
                message,
                routing_key=routing_key,
                timeout=self.timeout
            )
        except (AMQPError, OSError, asyncio.TimeoutError) as e:
            logger.warning(
                "Failed to publish event",
                routing_key=routing_key,
                message_id=message_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise TransportError(f"Publish failed for {routing_key}: {e}") from e

        logger.info(
            "Event published",
            routing_key=routing_key,
            message_id=message_id,
            exchange=self.exchange_name
        )

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        connection = self._connection
        self._connection = None
        self._channel = None
        self._exchange = None
        if connection is not None and not connection.is_closed:
            await connection.close()
            logger.info("Message bus connection closed", host=self.config.host)
