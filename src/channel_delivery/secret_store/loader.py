"""
Module: loader.py
Description: Message bus connection configuration from AWS Secrets Manager.

Resolves a named secret into the connection parameters used by the
bridge backend. Loading happens once, while the backend is built; any
problem with the secret stops the bridge backend from starting.

Key Components:
- SecretConfigLoader: Fetches a secret and maps it to ConnectionConfig
- get_secret(): Raw flat key-value payload of a secret
- load(): Validated ConnectionConfig

Dependencies: boto3, botocore, pydantic, json
Author: Channel Delivery Team
"""

import json
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from channel_delivery.errors import ConfigError
from channel_delivery.models.domain import ConnectionConfig
from channel_delivery.utils.logger import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no", ""}


class SecretConfigLoader:
    """
    Loads bus connection settings from a Secrets Manager secret.

    The secret is a flat JSON object:

        {"hostname": "...", "port": "5671", "username": "...",
         "password": "...", "virtualhost": "/", "ssl": true}

    `host` is accepted in place of `hostname`; `port` may be a string or a
    number; `virtualhost` defaults to "/" and `ssl` to false.
    """

    def __init__(
        self,
        region_name: str,
        endpoint_url: Optional[str] = None,
        client: Any = None
    ):
        """
        Initialize the loader.

        Args:
            region_name: AWS region of the secret store
            endpoint_url: Optional endpoint override
            client: Pre-built secretsmanager client (takes precedence)
        """
        if client is None:
            client = boto3.client(
                'secretsmanager',
                region_name=region_name,
                endpoint_url=endpoint_url or None
            )

        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self.client = client

        logger.info(
            "Secret config loader initialized",
            region_name=region_name,
            endpoint_url=endpoint_url
        )

    def get_secret(self, secret_name: str) -> Dict[str, Any]:
        """
        Fetch a secret and parse it as a JSON object.

        Args:
            secret_name: Name or ARN of the secret

        Returns:
            Flat key-value payload (possibly empty)

        Raises:
            ConfigError: If the secret cannot be fetched or is not a JSON object
        """
        try:
            response = self.client.get_secret_value(SecretId=secret_name)
        except ClientError as e:
            logger.error(
                "Failed to fetch secret",
                secret_name=secret_name,
                error_code=e.response['Error']['Code'],
                error_message=e.response['Error']['Message']
            )
            raise ConfigError(f"Secret not found or unreadable: {secret_name}") from e
        except BotoCoreError as e:
            logger.error(
                "Unexpected error fetching secret",
                secret_name=secret_name,
                error=str(e)
            )
            raise ConfigError(f"Secret store unavailable: {secret_name}") from e

        raw = response.get('SecretString')
        if not raw:
            return {}

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Secret is not valid JSON: {secret_name}") from e

        if not isinstance(payload, dict):
            raise ConfigError(f"Secret must be a JSON object: {secret_name}")

        return payload

    def load(self, secret_name: str) -> ConnectionConfig:
        """
        Load the bus connection configuration held in a secret.

        Args:
            secret_name: Name or ARN of the secret

        Returns:
            Validated ConnectionConfig

        Raises:
            ConfigError: If the secret is absent, empty or missing required keys
        """
        if not secret_name or not isinstance(secret_name, str):
            raise ConfigError("secret_name must be a non-empty string")

        secret = self.get_secret(secret_name)
        if not secret:
            raise ConfigError(f"Secret not found or empty: {secret_name}")

        # Key names only; values include credentials
        logger.info(
            "Loading bus connection from secret",
            secret_name=secret_name,
            keys=sorted(secret.keys())
        )

        try:
            config = ConnectionConfig(
                host=secret.get('hostname') or secret.get('host'),
                port=_parse_port(secret.get('port')),
                username=secret.get('username'),
                password=secret.get('password'),
                virtual_host=secret.get('virtualhost') or "/",
                tls_enabled=_parse_flag(secret.get('ssl', False))
            )
        except (PydanticValidationError, ValueError) as e:
            logger.error(
                "Secret is missing required bus connection keys",
                secret_name=secret_name,
                error=str(e)
            )
            raise ConfigError(f"Secret has invalid bus connection settings: {secret_name}") from e

        logger.info(
            "Bus connection loaded",
            secret_name=secret_name,
            host=config.host,
            port=config.port,
            virtual_host=config.virtual_host,
            tls_enabled=config.tls_enabled
        )

        return config


def _parse_port(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError("port is required")
    return int(str(value).strip())


def _parse_flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"ssl must be a boolean, got {value!r}")
