"""
Package: gateways
Description: Delivery backends and the startup factory that selects one.

build_gateway() reads the backend mode once and returns a single
concrete DeliveryGateway; nothing switches backends per call.
"""

import random
from typing import Optional

from channel_delivery.bus.publisher import EventPublisher
from channel_delivery.config.settings import BackendMode, Settings
from channel_delivery.errors import ConfigError
from channel_delivery.gateways.base import DeliveryGateway
from channel_delivery.gateways.bridge import BridgeGateway
from channel_delivery.gateways.direct import DirectGateway
from channel_delivery.gateways.http import RestConsumer, create_http_client
from channel_delivery.secret_store.loader import SecretConfigLoader
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

__all__ = [
    "BridgeGateway",
    "DeliveryGateway",
    "DirectGateway",
    "build_gateway",
]


def build_gateway(
    settings: Settings,
    secret_loader: Optional[SecretConfigLoader] = None,
    rng: Optional[random.Random] = None
) -> DeliveryGateway:
    """
    Build the delivery backend selected by settings.backend_mode.

    In BRIDGE mode the bus connection is loaded from the secret store
    before anything else is created; a missing or malformed secret stops
    construction.

    Args:
        settings: Application settings
        secret_loader: Loader to use instead of one built from settings
        rng: Random source for the bridge document number

    Returns:
        The configured DeliveryGateway

    Raises:
        ConfigError: If BRIDGE mode has no usable secret
    """
    if settings.backend_mode is BackendMode.DIRECT:
        consumer = RestConsumer(create_http_client(settings.provisioning_url, settings.timeout_ms))
        logger.info("Direct backend selected", base_url=settings.provisioning_url)
        return DirectGateway(consumer, application_ref=settings.app_name)

    if not settings.secret_name:
        raise ConfigError("secret_name is required when backend_mode is BRIDGE")

    loader = secret_loader or SecretConfigLoader(
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint
    )
    connection = loader.load(settings.secret_name)

    publisher = EventPublisher(
        connection,
        exchange_name=settings.bus_exchange,
        timeout_seconds=settings.timeout_ms / 1000
    )
    consumer = RestConsumer(create_http_client(settings.provisioning_url, settings.timeout_ms))

    logger.info(
        "Bridge backend selected",
        base_url=settings.provisioning_url,
        exchange=settings.bus_exchange
    )
    return BridgeGateway(
        consumer,
        publisher,
        application_ref=settings.app_name,
        event_source=settings.event_source,
        rng=rng
    )
