"""
OpenWhisk entity models used by the client.

All models are plain dataclasses built fresh per call; the client keeps no
references to them once a call returns.
"""

from .action import Action, ActionSummary, Exec, Limits
from .activation import (
    Activation,
    ActivationResponse,
    Completed,
    Failed,
    InvocationResult,
    InvocationState,
    Submitted,
    TimedOut,
    from_activation,
)
from .encoding import Archive, Encoding, InlineSource

__all__ = [
    'Action',
    'ActionSummary',
    'Exec',
    'Limits',
    'Activation',
    'ActivationResponse',
    'InvocationResult',
    'InvocationState',
    'Submitted',
    'Completed',
    'Failed',
    'TimedOut',
    'from_activation',
    'Archive',
    'Encoding',
    'InlineSource',
]
