"""
Module: errors.py
Description: Exception taxonomy for the delivery service.

Key Components:
- DeliveryError: Base class for every error raised by this package
- ValidationError: Bad caller input, raised before anything is scheduled
- TransportError: Network, timeout or non-2xx failure reaching a backend
- DecodeError: Malformed or incomplete provider response
- ConfigError: Missing or malformed startup configuration (fatal)

Author: Channel Delivery Team
"""


class DeliveryError(Exception):
    """Base class for delivery service errors."""


class ValidationError(DeliveryError):
    """Caller input is malformed or missing required identifiers."""


class TransportError(DeliveryError):
    """A backend could not be reached or rejected the call."""


class DecodeError(DeliveryError):
    """A backend responded with a body that cannot be mapped."""


class ConfigError(DeliveryError):
    """Startup configuration is missing or malformed."""
