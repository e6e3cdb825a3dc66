"""Services package for the PenguinWhisk client.

This package provides the payload encoder, the transport gateway and the
invocation protocol the public API is built on.
"""

from __future__ import annotations

from whisk_client.services.encoder import build_archive, encode, read_manifest
from whisk_client.services.invocation import InvocationService
from whisk_client.services.transport import TransportGateway

__all__ = [
    'build_archive',
    'encode',
    'read_manifest',
    'InvocationService',
    'TransportGateway',
]
