"""
Module: request.py
Description: API request models for the delivery service.

Key Components:
- ScheduleDeliveryRequest: Body of POST /api/deliveries

Dependencies: pydantic, typing
Author: Channel Delivery Team
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from channel_delivery.models.domain import PendingEvent


class ScheduleDeliveryRequest(BaseModel):
    """
    Request model for scheduling a delayed delivery.

    The delay is kept as given (integer or string) so the orchestrator
    applies a single parsing rule to every entry point.

    Attributes:
        delay: Delay in milliseconds before the first event is delivered
        channel_ref: Destination channel
        user_ref: User the channel belongs to
        correlation_id: Optional correlation id shared by all events
        events: Ordered events to deliver
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    delay: Union[int, str] = Field(..., description="Delay in milliseconds")
    channel_ref: str = Field(..., description="Destination channel reference")
    user_ref: str = Field(default="", description="User reference")
    correlation_id: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Correlation id shared by every event (generated when omitted)"
    )
    events: List[PendingEvent] = Field(..., description="Events to deliver, in order")
