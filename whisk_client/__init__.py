"""PenguinWhisk client: lifecycle management for OpenWhisk actions."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from whisk_client.client import WhiskClient
from whisk_client.config import ClientConfig
from whisk_client.errors import (
    BadRequest,
    ConfigurationError,
    Conflict,
    InvalidPayload,
    NotFound,
    TransportError,
    Unauthorized,
    Unavailable,
    ValidationError,
    WhiskError,
)
from whisk_client.models import (
    Action,
    ActionSummary,
    Activation,
    Archive,
    Completed,
    Failed,
    InlineSource,
    InvocationResult,
    InvocationState,
    Submitted,
    TimedOut,
)
from whisk_client.services.encoder import build_archive
from whisk_client.utils.parameters import merge_parameters

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logging.getLogger(__name__).addHandler(logging.NullHandler())


def configure_logging(level: str = 'INFO') -> None:
    """Attach a stream handler with the standard format to the client logger.

    Args:
        level: Logging level name.
    """
    logger = logging.getLogger(__name__)
    logger.setLevel(level.upper())
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


def create_client(
    config: Optional[ClientConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> WhiskClient:
    """Create and configure a client.

    Args:
        config: Configuration to use. Defaults to ``ClientConfig.from_env()``.
        transport: Optional httpx transport replacing the network.

    Returns:
        Configured client instance.
    """
    if config is None:
        config = ClientConfig.from_env()

    logging.getLogger(__name__).setLevel(config.log_level.upper())
    return WhiskClient(config, transport=transport)


__all__ = [
    'WhiskClient',
    'ClientConfig',
    'create_client',
    'configure_logging',
    'build_archive',
    'merge_parameters',
    # Models
    'Action',
    'ActionSummary',
    'Activation',
    'Archive',
    'InlineSource',
    'InvocationResult',
    'InvocationState',
    'Submitted',
    'Completed',
    'Failed',
    'TimedOut',
    # Errors
    'WhiskError',
    'ConfigurationError',
    'ValidationError',
    'InvalidPayload',
    'NotFound',
    'Conflict',
    'BadRequest',
    'Unauthorized',
    'Unavailable',
    'TransportError',
]
