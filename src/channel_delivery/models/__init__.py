"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains the data models used by the delivery service:
- domain: Credentials, Message, DeliverMessage, PendingEvent, ConnectionConfig
- wire: Provider DTOs, bridge envelope and CloudEvent
- request/response: HTTP API models
"""

from .domain import ConnectionConfig, Credentials, DeliverMessage, Message, PendingEvent
from .request import ScheduleDeliveryRequest
from .response import AcceptedResponse, CredentialsResponse

__all__ = [
    "ConnectionConfig",
    "Credentials",
    "DeliverMessage",
    "Message",
    "PendingEvent",
    "ScheduleDeliveryRequest",
    "AcceptedResponse",
    "CredentialsResponse",
]
