"""
OpenWhisk Activations API client.

Activations are execution records created when actions are invoked.

Endpoints:
    GET /api/v1/namespaces/{namespace}/activations
    GET /api/v1/namespaces/{namespace}/activations/{activationId}
    GET /api/v1/namespaces/{namespace}/activations/{activationId}/logs
    GET /api/v1/namespaces/{namespace}/activations/{activationId}/result
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from whisk_client.errors import ValidationError
from whisk_client.models import Activation, ActivationResponse, InvocationResult
from whisk_client.services.invocation import InvocationService
from whisk_client.services.transport import TransportGateway
from whisk_client.utils.serializers import deserialize_activation, deserialize_response
from whisk_client.utils.validators import validate_namespace_name

logger = logging.getLogger(__name__)


class Activations:
    """Read access to activation records."""

    def __init__(self, transport: TransportGateway, invocations: Optional[InvocationService] = None) -> None:
        self.transport = transport
        self.config = transport.config
        self.invocations = invocations or InvocationService(transport)

    def list(
        self,
        namespace: Optional[str] = None,
        name: Optional[str] = None,
        limit: int = 30,
        skip: int = 0,
        since: Optional[int] = None,
        upto: Optional[int] = None,
        docs: bool = False,
    ) -> List[Activation]:
        """
        List activations, most recent first.

        Args:
            namespace: Namespace to list; defaults to the configured one.
            name: Only activations of this action.
            limit: Maximum number of records (1-200).
            skip: Number of records to skip.
            since: Only activations started at or after this epoch-ms time.
            upto: Only activations started at or before this epoch-ms time.
            docs: Include full records (logs, annotations).
        """
        if limit < 1 or limit > 200:
            raise ValidationError('limit must be between 1 and 200', field='limit')
        if skip < 0:
            raise ValidationError('skip must be non-negative', field='skip')

        ns = namespace or self.config.namespace
        validate_namespace_name(ns)

        data = self.transport.namespace_call(
            'GET',
            ns,
            'activations',
            params={
                'name': name,
                'limit': limit,
                'skip': skip,
                'since': since,
                'upto': upto,
                'docs': docs,
            },
        )
        # Some deployments wrap the list in a paging envelope
        if isinstance(data, dict):
            data = data.get('activations', [])
        return [deserialize_activation(item) for item in data or []]

    def get(self, activation_id: str, namespace: Optional[str] = None) -> Activation:
        """
        Get a full activation record.

        Raises:
            NotFound: If the activation does not exist (yet).
        """
        ns = self._namespace(activation_id, namespace)
        data = self.transport.namespace_call('GET', ns, 'activations', activation_id)
        return deserialize_activation(data)

    def result(self, activation_id: str, namespace: Optional[str] = None) -> ActivationResponse:
        """Get only the ``response`` section of an activation."""
        ns = self._namespace(activation_id, namespace)
        data = self.transport.namespace_call(
            'GET', ns, 'activations', f'{activation_id}/result', resource=activation_id
        )
        return deserialize_response(data)

    def logs(self, activation_id: str, namespace: Optional[str] = None) -> List[str]:
        """Get the log lines of an activation."""
        ns = self._namespace(activation_id, namespace)
        data: Any = self.transport.namespace_call(
            'GET', ns, 'activations', f'{activation_id}/logs', resource=activation_id
        )
        if isinstance(data, dict):
            data = data.get('logs', [])
        return list(data or [])

    def wait(
        self,
        activation_id: str,
        namespace: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> InvocationResult:
        """Poll until the activation completes or ``timeout`` elapses."""
        return self.invocations.wait_for_activation(activation_id, namespace=namespace, timeout=timeout)

    def _namespace(self, activation_id: str, namespace: Optional[str]) -> str:
        if not activation_id:
            raise ValidationError('activation_id cannot be empty', field='activation_id')
        ns = namespace or self.config.namespace
        validate_namespace_name(ns)
        return ns
