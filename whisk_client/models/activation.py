"""Activation records and invocation outcomes.

An invocation ends in exactly one of four states:

- ``Submitted``: non-blocking call accepted, only the activation id is known.
- ``Completed``: the activation finished and ``response.success`` is true.
- ``Failed``: the activation finished and ``response.success`` is false.
- ``TimedOut``: a blocking call outlived the server wait window; only the
  activation id is known and the activation may still complete later.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class InvocationState(str, enum.Enum):
    """Terminal states of an invocation, from the caller's point of view."""

    SUBMITTED = 'submitted'
    COMPLETED = 'completed'
    FAILED = 'failed'
    TIMED_OUT = 'timed_out'


@dataclass
class ActivationResponse:
    """The ``response`` section of an activation record."""

    success: bool
    result: Any = None
    status: Optional[str] = None


@dataclass
class Activation:
    """Execution record of one invocation."""

    activation_id: Optional[str]
    namespace: Optional[str]
    name: Optional[str]
    response: ActivationResponse
    version: Optional[str] = None
    subject: Optional[str] = None
    start: Optional[int] = None
    end: Optional[int] = None
    duration: Optional[int] = None
    status_code: Optional[int] = None
    logs: List[str] = field(default_factory=list)
    annotations: List[Dict[str, Any]] = field(default_factory=list)
    cause: Optional[str] = None


@dataclass
class InvocationResult:
    """Base class for invocation outcomes."""

    activation_id: Optional[str]

    state = InvocationState.SUBMITTED

    @property
    def done(self) -> bool:
        return self.state in (InvocationState.COMPLETED, InvocationState.FAILED)


@dataclass
class Submitted(InvocationResult):
    """Non-blocking invocation accepted."""

    state = InvocationState.SUBMITTED


@dataclass
class TimedOut(InvocationResult):
    """Blocking invocation outlived the wait window; poll with the id."""

    state = InvocationState.TIMED_OUT


@dataclass
class _Finished(InvocationResult):
    activation: Activation = None

    @property
    def response(self) -> ActivationResponse:
        return self.activation.response

    @property
    def result(self) -> Any:
        return self.activation.response.result


@dataclass
class Completed(_Finished):
    """Activation finished successfully."""

    state = InvocationState.COMPLETED


@dataclass
class Failed(_Finished):
    """Activation finished with an application or developer error."""

    state = InvocationState.FAILED

    @property
    def error(self) -> Any:
        result = self.activation.response.result
        if isinstance(result, dict) and 'error' in result:
            return result['error']
        return result


def from_activation(activation: Activation) -> InvocationResult:
    """Classify a finished activation as ``Completed`` or ``Failed``."""
    if activation.response.success:
        return Completed(activation_id=activation.activation_id, activation=activation)
    return Failed(activation_id=activation.activation_id, activation=activation)
