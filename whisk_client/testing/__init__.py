"""In-memory OpenWhisk control plane for tests.

Requires the ``testing`` extra (Flask).
"""

from whisk_client.testing.controller import ControllerState, create_controller
from whisk_client.testing.runtime import ActionRuntime, execute

__all__ = ['ActionRuntime', 'ControllerState', 'create_controller', 'execute']
