"""Ready-made event sequences used by the business endpoints."""

from typing import List, Union

from channel_delivery.models.domain import PendingEvent

BUSINESS_EVENT = "businessEvent"
PROCESS_STARTED_EVENT = "ch-ms-async-callback.svp.p2p"
PROCESS_COMPLETED_EVENT = "ch-ms-async-callback.svp.p2m"


def business_event(delay: Union[int, str], correlation_id: str) -> List[PendingEvent]:
    """Single informational event reporting the elapsed delay."""
    return [
        PendingEvent(
            code="100",
            title=f"process after {delay}",
            detail=f"response for id:{correlation_id}",
            severity="INFO",
            event_name=BUSINESS_EVENT,
        )
    ]


def process_events(correlation_id: str) -> List[PendingEvent]:
    """Two events: the request started processing, then it completed."""
    return [
        PendingEvent(
            code="100",
            title=PROCESS_STARTED_EVENT,
            detail=f"Your request is being processed - correlation: {correlation_id}",
            severity="INFO",
            event_name=PROCESS_STARTED_EVENT,
        ),
        PendingEvent(
            code="200",
            title=PROCESS_COMPLETED_EVENT,
            detail=f"Your request has been successfully processed - correlation: {correlation_id}",
            severity="SUCCESS",
            event_name=PROCESS_COMPLETED_EVENT,
        ),
    ]
