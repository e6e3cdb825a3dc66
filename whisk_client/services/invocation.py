"""
OpenWhisk Invocation Protocol.

Coordinates action invocations from the client side:
- Non-blocking submissions (activation id only)
- Blocking submissions with server-side wait window
- Short-poll waiting on activation records after a timed-out blocking call
- Correlation of outcomes by activation id

Outcome Flow:
1. invoke() -> POST /namespaces/{ns}/actions/{name}?blocking=...
2. 202 + activationId        -> Submitted (non-blocking) or TimedOut (blocking)
3. 200 + activation record   -> Completed / Failed by response.success
4. 502 + activation record   -> Failed (application error)
5. Optional: TimedOut + wait -> poll /activations/{id} until found or deadline
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Optional

from whisk_client.errors import NotFound, TransportError, Unavailable, WhiskError
from whisk_client.models import (
    Activation,
    ActivationResponse,
    InvocationResult,
    Submitted,
    TimedOut,
    from_activation,
)
from whisk_client.utils.parameters import normalize_params_annotations
from whisk_client.utils.serializers import (
    QualifiedName,
    deserialize_activation,
    is_activation_record,
    resolve_qualified_name,
)

if TYPE_CHECKING:
    from whisk_client.services.transport import TransportGateway

logger = logging.getLogger(__name__)


class InvocationService:
    """
    Submit invocations and correlate their outcomes.

    Stateless: every call builds its own request and returns a fresh
    :class:`InvocationResult`. Concurrent invocations of one action are told
    apart only by activation id; no ordering between their completions is
    assumed.
    """

    def __init__(self, transport: TransportGateway) -> None:
        """
        Initialize the invocation service.

        Args:
            transport: Gateway used for all HTTP exchanges.
        """
        self.transport = transport
        self.config = transport.config

    def invoke(
        self,
        name: str,
        parameters: Any = None,
        blocking: bool = False,
        namespace: Optional[str] = None,
        result_only: bool = False,
        wait: Optional[float] = None,
    ) -> InvocationResult:
        """
        Invoke an action.

        Args:
            name: Action name in any accepted qualified form.
            parameters: Invocation parameters (mapping or ``[{key, value}]``).
            blocking: Wait for the activation within the server wait window.
            namespace: Namespace override.
            result_only: Ask the server for the bare result (blocking only).
            wait: Seconds to keep polling for the activation after a
                blocking call timed out server-side. ``None`` disables polling.

        Returns:
            Submitted when ``blocking`` is false; otherwise Completed, Failed
            or TimedOut.

        Raises:
            WhiskError: Submission failed (NotFound, BadRequest, Unavailable,
                TransportError, ...).
        """
        qname = resolve_qualified_name(name, namespace, self.config.namespace)
        payload = normalize_params_annotations(parameters)

        logger.info(
            f"Invoking action {qname.fqn}, "
            f"blocking={blocking}, result_only={result_only}"
        )

        try:
            data = self.transport.namespace_call(
                'POST',
                qname.namespace,
                'actions',
                qname.path_name,
                body=payload,
                params={'blocking': blocking, 'result': result_only and blocking},
                timeout=self.transport.timeout_for(blocking=blocking),
                resource=qname.fqn,
            )
        except Unavailable as e:
            # Application errors come back as 502 with the full activation
            if blocking and is_activation_record(e.body):
                activation = deserialize_activation(e.body)
                logger.info(
                    f"Activation {activation.activation_id} of {qname.fqn} "
                    f"failed: {activation.response.status}"
                )
                return from_activation(activation)
            if blocking and result_only and e.status_code == 502 and isinstance(e.body, dict):
                return _result_only(qname, e.body, success=False)
            raise

        if not blocking:
            activation_id = _activation_id(data, qname)
            logger.info(f"Submitted activation {activation_id} for {qname.fqn}")
            return Submitted(activation_id=activation_id)

        if is_activation_record(data):
            activation = deserialize_activation(data)
            logger.info(
                f"Activation {activation.activation_id} of {qname.fqn} finished, "
                f"success={activation.response.success}"
            )
            return from_activation(activation)

        if result_only and not _is_bare_id(data):
            return _result_only(qname, data)

        activation_id = _activation_id(data, qname)
        logger.warning(
            f"Blocking invocation of {qname.fqn} exceeded the server wait window, "
            f"activation {activation_id} still pending"
        )

        if wait is not None:
            return self.wait_for_activation(activation_id, namespace=qname.namespace, timeout=wait)
        return TimedOut(activation_id=activation_id)

    def wait_for_activation(
        self,
        activation_id: str,
        namespace: Optional[str] = None,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> InvocationResult:
        """
        Wait for an activation record to appear.

        Polls the activation endpoint; a 404 means the activation has not
        completed yet.

        Args:
            activation_id: Activation to wait for.
            namespace: Namespace of the activation.
            timeout: Maximum wait in seconds; defaults to the blocking timeout.
            poll_interval: Seconds between polls; defaults to the configured
                interval.

        Returns:
            Completed or Failed once the record exists, TimedOut otherwise.

        Raises:
            TransportError, Unavailable: A poll failed. The error carries
                ``activation_id`` so the caller can keep polling later.
        """
        ns = namespace or self.config.namespace
        timeout_sec = self.config.blocking_timeout if timeout is None else timeout
        interval = poll_interval or self.config.poll_interval

        logger.info(
            f"Waiting for result of activation {activation_id}, "
            f"timeout={timeout_sec}s"
        )

        deadline = time.monotonic() + timeout_sec
        while True:
            try:
                data = self.transport.namespace_call(
                    'GET',
                    ns,
                    'activations',
                    activation_id,
                    resource=activation_id,
                )
            except NotFound:
                data = None
            except (TransportError, Unavailable) as e:
                e.activation_id = activation_id
                raise

            if data is not None:
                activation = deserialize_activation(data)
                return from_activation(activation)

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            # Sleep before retry
            time.sleep(min(interval, remaining))

        logger.warning(f"Activation {activation_id} not available after {timeout_sec}s")
        return TimedOut(activation_id=activation_id)


def _is_bare_id(data: Any) -> bool:
    return isinstance(data, dict) and set(data) == {'activationId'}


def _activation_id(data: Any, qname: QualifiedName) -> str:
    if isinstance(data, dict) and data.get('activationId'):
        return data['activationId']
    raise WhiskError(
        f"Invocation of {qname.fqn} returned no activation id",
        namespace=qname.namespace,
        resource=qname.fqn,
        body=data,
    )


def _result_only(qname: QualifiedName, data: Any, success: bool = True) -> InvocationResult:
    activation = Activation(
        activation_id=None,
        namespace=qname.namespace,
        name=qname.path_name,
        response=ActivationResponse(
            success=success,
            result=data,
            status='success' if success else 'application error',
        ),
    )
    return from_activation(activation)
