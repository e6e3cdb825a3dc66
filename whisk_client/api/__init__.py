"""OpenWhisk REST API resources.

Exposes the action and activation resources used by the client.
"""

from __future__ import annotations

from whisk_client.api.actions import Actions
from whisk_client.api.activations import Activations

__all__ = ['Actions', 'Activations']
