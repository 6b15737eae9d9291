"""
Module: response.py
Description: API response models for the delivery service.

Key Components:
- CredentialsResponse: Credentials returned by GET /api/credentials
- AcceptedResponse: Acknowledgement for scheduled or published work

Dependencies: pydantic
Author: Channel Delivery Team
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from channel_delivery.models.domain import Credentials


class CredentialsResponse(BaseModel):
    """Channel credentials, serialized camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    channel_ref: str
    channel_secret: str

    @classmethod
    def from_domain(cls, credentials: Credentials) -> "CredentialsResponse":
        return cls(
            channel_ref=credentials.channel_ref,
            channel_secret=credentials.channel_secret,
        )


class AcceptedResponse(BaseModel):
    """
    Acknowledgement that work was accepted.

    Only acceptance is reported; the outcome of a scheduled delivery is
    never returned to the caller.
    """

    status: str = Field(default="accepted")
    correlation_id: Optional[str] = Field(default=None)
    message: str
