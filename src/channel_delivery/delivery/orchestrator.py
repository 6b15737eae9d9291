"""
Module: orchestrator.py
Description: Business flow for credentials and delayed deliveries.

The orchestrator validates input, then hands a deferred job to the
DeliveryScheduler and returns at once. The job delivers the events
strictly in order through the active DeliveryGateway. The second
event onwards is re-submitted to the scheduler after a random jitter.

Deliveries are fire-and-forget. Once accepted, the caller never learns
the outcome: a failed event is logged, the rest of its sequence is
abandoned, and nothing is retried.

Key Components:
- DeliveryOrchestrator: generate_credentials(), schedule_delivery()
- parse_delay(): Delay validation shared by every entry point

Dependencies: random, uuid, structlog
Author: Channel Delivery Team
"""

import random
from typing import Any, Optional, Sequence, Tuple
from uuid import uuid4

import structlog

from channel_delivery.delivery.scheduler import DeliveryScheduler
from channel_delivery.errors import DeliveryError, ValidationError
from channel_delivery.gateways.base import DeliveryGateway, require_identifier
from channel_delivery.models.domain import Credentials, DeliverMessage, PendingEvent
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

# 30 days
MAX_DELAY_MS = 30 * 24 * 60 * 60 * 1000
_MAX_DELAY_DIGITS = len(str(MAX_DELAY_MS))


def parse_delay(delay: Any) -> int:
    """
    Parse a delay in milliseconds.

    Args:
        delay: Non-negative int, or a string of decimal digits

    Returns:
        Delay in milliseconds

    Raises:
        ValidationError: If the delay is malformed, negative or above
            MAX_DELAY_MS
    """
    if isinstance(delay, bool):
        raise ValidationError("delay must be a non-negative integer of milliseconds")
    if isinstance(delay, int):
        value = delay
    elif isinstance(delay, str) and delay.strip().isdecimal():
        digits = delay.strip().lstrip("0") or "0"
        if len(digits) > _MAX_DELAY_DIGITS:
            raise ValidationError(f"delay must not exceed {MAX_DELAY_MS} milliseconds")
        value = int(digits)
    else:
        raise ValidationError(f"delay must be a non-negative integer of milliseconds, got {delay!r}")

    if value < 0:
        raise ValidationError("delay must not be negative")
    if value > MAX_DELAY_MS:
        raise ValidationError(f"delay must not exceed {MAX_DELAY_MS} milliseconds")
    return value


class DeliveryOrchestrator:
    """
    Coordinates credential issuing and delayed event delivery.

    Attributes:
        gateway: Active delivery backend
        scheduler: Worker pool running deferred jobs
        max_jitter_ms: Upper bound of the pause after the first event
    """

    def __init__(
        self,
        gateway: DeliveryGateway,
        scheduler: DeliveryScheduler,
        max_jitter_ms: int = 10000,
        rng: Optional[random.Random] = None
    ):
        if max_jitter_ms < 0:
            raise ValueError("max_jitter_ms must not be negative")

        self.gateway = gateway
        self.scheduler = scheduler
        self.max_jitter_ms = max_jitter_ms
        self.rng = rng or random.Random()

    async def generate_credentials(self, user_identifier: str) -> Optional[Credentials]:
        """Issue credentials through the active gateway; errors propagate unchanged."""
        require_identifier(user_identifier, "user_identifier")
        return await self.gateway.generate_credentials(user_identifier)

    def schedule_delivery(
        self,
        delay: Any,
        channel_ref: str,
        user_ref: str,
        correlation_id: Optional[str],
        events: Sequence[PendingEvent]
    ) -> str:
        """
        Schedule events for delivery after a delay.

        Returns as soon as the job is scheduled. The outcome of the
        delivery is only reported in the logs.

        Args:
            delay: Delay in milliseconds (int or digit string)
            channel_ref: Destination channel
            user_ref: User the channel belongs to
            correlation_id: Shared correlation id; generated when empty
            events: Events to deliver, in order

        Returns:
            The correlation id used for every event

        Raises:
            ValidationError: If the delay, channel or events are invalid
        """
        delay_ms = parse_delay(delay)
        channel_ref = require_identifier(channel_ref, "channel_ref")
        if not events:
            raise ValidationError("events must contain at least one event")
        if not all(isinstance(event, PendingEvent) for event in events):
            raise ValidationError("events must be PendingEvent instances")

        correlation_id = correlation_id or str(uuid4())
        sequence = tuple(events)
        user_ref = user_ref or ""

        async def job() -> None:
            await self._deliver_sequence(channel_ref, user_ref, correlation_id, sequence)

        self.scheduler.submit(job, delay_seconds=delay_ms / 1000)

        logger.info(
            "Delivery scheduled",
            channel_ref=channel_ref,
            correlation_id=correlation_id,
            delay_ms=delay_ms,
            event_count=len(sequence)
        )
        return correlation_id

    def _jitter_seconds(self) -> float:
        return self.rng.randint(0, self.max_jitter_ms) / 1000

    async def _deliver_sequence(
        self,
        channel_ref: str,
        user_ref: str,
        correlation_id: str,
        events: Tuple[PendingEvent, ...],
        start: int = 0
    ) -> None:
        """
        Deliver events[start:] in order.

        After the first event the rest of the sequence is handed back to
        the scheduler with the jitter as its delay, so no worker sits idle
        during the pause.
        """
        with structlog.contextvars.bound_contextvars(
            correlation_id=correlation_id,
            channel_ref=channel_ref
        ):
            for index in range(start, len(events)):
                if index == 1 and start == 0:
                    self._resume_after_jitter(channel_ref, user_ref, correlation_id, events)
                    return

                event = events[index]
                message = DeliverMessage(
                    channel_ref=channel_ref,
                    message_id=str(uuid4()),
                    correlation_id=correlation_id,
                    event_name=event.event_name,
                    message_data=event.to_message(),
                )

                try:
                    await self.gateway.deliver_message(channel_ref, user_ref, message)
                except DeliveryError as e:
                    logger.error(
                        "Delivery failed, abandoning remaining events",
                        message_id=message.message_id,
                        event_name=event.event_name,
                        position=index + 1,
                        abandoned=len(events) - index - 1,
                        error=str(e),
                        error_type=type(e).__name__
                    )
                    return

                logger.info(
                    "Event delivered",
                    message_id=message.message_id,
                    event_name=event.event_name,
                    position=index + 1,
                    total=len(events)
                )

            logger.info("All events delivered", total=len(events))

    def _resume_after_jitter(
        self,
        channel_ref: str,
        user_ref: str,
        correlation_id: str,
        events: Tuple[PendingEvent, ...]
    ) -> None:
        jitter = self._jitter_seconds()

        async def resume() -> None:
            await self._deliver_sequence(channel_ref, user_ref, correlation_id, events, start=1)

        self.scheduler.submit(resume, delay_seconds=jitter)
        logger.debug("Waiting before next event", jitter_ms=int(jitter * 1000))
