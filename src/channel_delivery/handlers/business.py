"""
Module: business.py
Description: HTTP endpoints for credentials and delayed deliveries.

Implements the upstream contract of the delivery service:
- GET /api/credentials: Issue channel credentials (200, or 404 when absent)
- GET /api/business: Schedule a preset business flow (202)
- POST /api/deliveries: Schedule arbitrary events (202)
- POST /api/raw/{message_type}: Publish a raw payload (202, 501 if unsupported)

Scheduling endpoints only report acceptance; delivery outcomes are
never returned to the caller.

Dependencies: FastAPI, typing
Author: Channel Delivery Team
"""

from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi import status as status_codes

from channel_delivery.config.settings import settings
from channel_delivery.delivery.orchestrator import DeliveryOrchestrator, parse_delay
from channel_delivery.delivery.presets import business_event, process_events
from channel_delivery.gateways.base import DeliveryGateway
from channel_delivery.models.request import ScheduleDeliveryRequest
from channel_delivery.models.response import AcceptedResponse, CredentialsResponse
from channel_delivery.utils.logger import get_logger

router = APIRouter(prefix="/api", tags=["business"])
logger = get_logger(__name__)


def get_orchestrator(request: Request) -> DeliveryOrchestrator:
    """
    Dependency to get the delivery orchestrator.

    The orchestrator is built once at startup and stored on app.state.
    """
    return request.app.state.orchestrator


def get_gateway(request: Request) -> DeliveryGateway:
    """Dependency to get the active delivery gateway."""
    return request.app.state.gateway


@router.get("/credentials", response_model=CredentialsResponse, response_model_by_alias=True)
async def generate_credentials(
    user_ref: str,
    orchestrator: DeliveryOrchestrator = Depends(get_orchestrator)
) -> CredentialsResponse:
    """
    Issue channel credentials for a user.

    Example:
        GET /api/credentials?user_ref=user-1

        Response (200 OK):
        {"channelRef": "c1", "channelSecret": "s1"}
    """
    credentials = await orchestrator.generate_credentials(user_ref)
    if credentials is None:
        logger.warning("No credentials returned", user_ref=user_ref)
        raise HTTPException(
            status_code=status_codes.HTTP_404_NOT_FOUND,
            detail="Credentials not found"
        )

    return CredentialsResponse.from_domain(credentials)


@router.get("/business", status_code=status_codes.HTTP_202_ACCEPTED, response_model=AcceptedResponse)
async def business_flow(
    delay: Optional[str] = None,
    channel_ref: str = "",
    user_ref: str = "",
    correlation_id: Optional[str] = None,
    events: int = 1,
    orchestrator: DeliveryOrchestrator = Depends(get_orchestrator)
) -> AcceptedResponse:
    """
    Schedule a preset business flow.

    events=1 delivers a single business event; events=2 delivers a
    "processing" event followed by a "processed" event.

    Example:
        GET /api/business?delay=5000&channel_ref=ch-1&user_ref=user-1&events=2

        Response (202 Accepted):
        {"status": "accepted", "correlation_id": "...", "message": "Delivery scheduled"}
    """
    if events not in (1, 2):
        raise HTTPException(
            status_code=status_codes.HTTP_400_BAD_REQUEST,
            detail="events must be 1 or 2"
        )

    delay = settings.default_delay_ms if delay is None else delay
    parse_delay(delay)

    # Preset titles and details embed the correlation id
    correlation_id = correlation_id or str(uuid4())
    if events == 1:
        pending = business_event(delay, correlation_id)
    else:
        pending = process_events(correlation_id)

    correlation_id = orchestrator.schedule_delivery(
        delay, channel_ref, user_ref, correlation_id, pending
    )

    return AcceptedResponse(correlation_id=correlation_id, message="Delivery scheduled")


@router.post("/deliveries", status_code=status_codes.HTTP_202_ACCEPTED, response_model=AcceptedResponse)
async def schedule_delivery(
    request: ScheduleDeliveryRequest,
    orchestrator: DeliveryOrchestrator = Depends(get_orchestrator)
) -> AcceptedResponse:
    """
    Schedule arbitrary events for delayed delivery.

    Example:
        POST /api/deliveries
        {
            "delay": 1000,
            "channel_ref": "ch-1",
            "user_ref": "user-1",
            "events": [{"code": "100", "title": "t", "detail": "d",
                        "severity": "INFO", "event_name": "businessEvent"}]
        }
    """
    correlation_id = orchestrator.schedule_delivery(
        request.delay,
        request.channel_ref,
        request.user_ref,
        request.correlation_id,
        request.events
    )

    return AcceptedResponse(correlation_id=correlation_id, message="Delivery scheduled")


@router.post("/raw/{message_type}", status_code=status_codes.HTTP_202_ACCEPTED, response_model=AcceptedResponse)
async def deliver_raw(
    message_type: str,
    payload: Dict[str, Any] = Body(...),
    gateway: DeliveryGateway = Depends(get_gateway)
) -> AcceptedResponse:
    """Publish a raw payload tagged with its message type (bridge backend only)."""
    try:
        await gateway.deliver_raw(message_type, payload)
    except NotImplementedError as e:
        raise HTTPException(
            status_code=status_codes.HTTP_501_NOT_IMPLEMENTED,
            detail=str(e)
        ) from e

    logger.info("Raw payload published", message_type=message_type)
    return AcceptedResponse(message=f"Published {message_type}")
