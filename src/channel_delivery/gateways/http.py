"""
Module: http.py
Description: Shared HTTP client for calls to channel providers.

Wraps one httpx.AsyncClient per process. Every provider call goes
through post(), which applies the configured timeout and turns httpx
failures into TransportError; decode() maps response bodies into
wire models and turns mapping failures into DecodeError.

Key Components:
- create_http_client(): Pooled AsyncClient with base URL and timeout
- RestConsumer: POST and decode helpers with structured logging

Dependencies: httpx, pydantic
Author: Channel Delivery Team
"""

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from channel_delivery.errors import DecodeError, TransportError
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_http_client(base_url: str, timeout_ms: int) -> httpx.AsyncClient:
    """
    Create the pooled HTTP client used for every provider call.

    Args:
        base_url: Provider base URL
        timeout_ms: Connect/read/write/pool timeout in milliseconds

    Returns:
        Configured httpx.AsyncClient

    Raises:
        ValueError: If base_url is invalid
    """
    if not base_url or not isinstance(base_url, str):
        raise ValueError("base_url must be a non-empty string")
    if not base_url.startswith(('http://', 'https://')):
        raise ValueError("base_url must be a valid HTTP/HTTPS URL")

    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout_ms / 1000),
        headers={'Content-Type': 'application/json'}
    )


class RestConsumer:
    """
    HTTP client for a channel provider.

    Attributes:
        client: Shared httpx.AsyncClient
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

        logger.info(
            "Rest consumer initialized",
            base_url=str(client.base_url)
        )

    async def post(
        self,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """
        POST to the provider and require a 2xx response.

        Args:
            path: Path relative to the base URL
            json: Optional JSON body
            headers: Optional extra headers

        Returns:
            The successful response

        Raises:
            TransportError: On timeout, network error or non-2xx status
        """
        logger.debug("Calling provider", path=path)

        try:
            response = await self.client.post(path, json=json, headers=headers)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            logger.warning(
                "Provider call timeout",
                path=path,
                base_url=str(self.client.base_url)
            )
            raise TransportError(f"Timeout calling {path}") from e

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Provider call HTTP error",
                path=path,
                status_code=e.response.status_code,
                response=e.response.text[:500]  # Truncate large responses
            )
            raise TransportError(
                f"Provider returned {e.response.status_code} for {path}"
            ) from e

        except httpx.HTTPError as e:
            logger.warning(
                "Provider call network error",
                path=path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise TransportError(f"Network error calling {path}: {e}") from e

        logger.info(
            "Provider call succeeded",
            path=path,
            status_code=response.status_code,
            response_time_ms=response.elapsed.total_seconds() * 1000
        )

        return response

    @staticmethod
    def decode(response: httpx.Response, model: Type[ModelT]) -> Optional[ModelT]:
        """
        Map a response body into a wire model.

        Args:
            response: Successful provider response
            model: Pydantic model to validate the body against

        Returns:
            The parsed model, or None when the body is empty

        Raises:
            DecodeError: If the body is not JSON or lacks required fields
        """
        if not response.content.strip():
            return None

        try:
            return model.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.warning(
                "Provider response could not be decoded",
                url=str(response.request.url),
                model=model.__name__,
                error=str(e)
            )
            raise DecodeError(f"Unexpected response for {model.__name__}") from e

    async def aclose(self) -> None:
        await self.client.aclose()
