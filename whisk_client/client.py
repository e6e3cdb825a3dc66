"""Client facade bundling the action and activation resources."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from whisk_client.api import Actions, Activations
from whisk_client.config import ClientConfig
from whisk_client.services.invocation import InvocationService
from whisk_client.services.transport import TransportGateway

logger = logging.getLogger(__name__)


class WhiskClient:
    """
    Entry point for the PenguinWhisk client.

    Attributes:
        config: Client configuration.
        actions: Action lifecycle operations.
        activations: Activation record access.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Explicit client configuration.
            transport: Optional httpx transport replacing the network.
            http_client: Optional pre-built httpx client.
        """
        self.config = config
        self.transport = TransportGateway(config, transport=transport, http_client=http_client)
        invocations = InvocationService(self.transport)
        self.actions = Actions(self.transport, invocations)
        self.activations = Activations(self.transport, invocations)
        logger.info(
            f"Client initialized: host={config.base_url}, namespace={config.namespace}"
        )

    def invoke(self, name: str, parameters: Any = None, **kwargs: Any):
        """Shortcut for :meth:`Actions.invoke`."""
        return self.actions.invoke(name, parameters, **kwargs)

    def close(self) -> None:
        """Release pooled connections."""
        self.transport.close()

    def __enter__(self) -> WhiskClient:
        return self

    def __exit__(self, *args) -> None:
        self.close()
