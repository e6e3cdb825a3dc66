"""
OpenWhisk Actions API client.

Client side of the OpenWhisk REST API for managing actions.

API Endpoints:
    GET    /api/v1/namespaces/{namespace}/actions
    GET    /api/v1/namespaces/{namespace}/actions/{actionName}
    GET    /api/v1/namespaces/{namespace}/actions/{packageName}/{actionName}
    PUT    /api/v1/namespaces/{namespace}/actions/{actionName}?overwrite=false|true
    DELETE /api/v1/namespaces/{namespace}/actions/{actionName}
    POST   /api/v1/namespaces/{namespace}/actions/{actionName}?blocking=true&result=true

Update semantics:
    update() reads the current action first and never creates one. Fields
    that are not passed stay unchanged remotely. Parameters and annotations
    are merged: new keys override, existing keys are kept. Pass
    replace_parameters=True to send exactly the given parameter set.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from whisk_client.errors import InvalidPayload
from whisk_client.models import Action, ActionSummary, Exec, InvocationResult, Limits
from whisk_client.services.encoder import Source, encode
from whisk_client.services.invocation import InvocationService
from whisk_client.services.transport import TransportGateway
from whisk_client.utils.parameters import KeyValues, merge_parameters, to_parameter_list
from whisk_client.utils.serializers import (
    deserialize_action,
    deserialize_action_summary,
    resolve_qualified_name,
)
from whisk_client.utils.validators import (
    validate_exec_kind,
    validate_limits,
    validate_namespace_name,
    validate_parameters,
)

logger = logging.getLogger(__name__)


class Actions:
    """
    Lifecycle operations on actions.

    Every method is an independent request/response exchange; instances hold
    only the shared transport.
    """

    def __init__(self, transport: TransportGateway, invocations: Optional[InvocationService] = None) -> None:
        self.transport = transport
        self.config = transport.config
        self.invocations = invocations or InvocationService(transport)

    def list(
        self,
        namespace: Optional[str] = None,
        limit: int = 30,
        skip: int = 0,
    ) -> List[ActionSummary]:
        """
        List actions in a namespace.

        Args:
            namespace: Namespace to list; defaults to the configured one.
            limit: Maximum number of actions to return.
            skip: Number of actions to skip.

        Returns:
            Fully materialized list of action summaries.
        """
        ns = namespace or self.config.namespace
        validate_namespace_name(ns)

        data = self.transport.namespace_call(
            'GET', ns, 'actions', params={'limit': limit, 'skip': skip}
        )
        summaries = [deserialize_action_summary(item) for item in data or []]
        logger.info(f"Listed {len(summaries)} action(s) in namespace {ns}")
        return summaries

    def get(self, name: str, namespace: Optional[str] = None, code: bool = True) -> Action:
        """
        Get an action.

        Args:
            name: Action name in any accepted qualified form.
            namespace: Namespace override.
            code: Include the action code in the response.

        Returns:
            The action.

        Raises:
            NotFound: If the action does not exist.
        """
        qname = resolve_qualified_name(name, namespace, self.config.namespace)
        data = self.transport.namespace_call(
            'GET',
            qname.namespace,
            'actions',
            qname.path_name,
            params={'code': code},
            resource=qname.fqn,
        )
        return deserialize_action(data)

    def create(
        self,
        name: str,
        source: Source,
        parameters: KeyValues = None,
        limits: Optional[Mapping[str, int] | Limits] = None,
        namespace: Optional[str] = None,
        kind: Optional[str] = None,
        main: Optional[str] = None,
        annotations: KeyValues = None,
        version: Optional[str] = None,
        publish: Optional[bool] = None,
    ) -> Action:
        """
        Create an action. Never overwrites an existing one.

        Args:
            name: Action name in any accepted qualified form.
            source: Inline code (str), archive bytes, or an encoding instance.
            parameters: Default parameters.
            limits: Resource limits (timeout, memory, logs, concurrency).
            namespace: Namespace override.
            kind: Runtime kind; the configured default when omitted.
            main: Entry function name.
            annotations: Action annotations.
            version: Semantic version.
            publish: Whether the action is shared.

        Returns:
            The created action as stored by the control plane.

        Raises:
            InvalidPayload: Source is absent, empty, or of an unsupported kind.
            Conflict: An action with that name already exists.
        """
        if source is None:
            raise InvalidPayload('Action source is required: inline code or archive bytes', field='exec')

        qname = resolve_qualified_name(name, namespace, self.config.namespace)
        body = self._build_body(
            source=source,
            kind=kind,
            main=main,
            parameters=to_parameter_list(parameters),
            annotations=to_parameter_list(annotations),
            limits=limits,
            version=version,
            publish=publish,
        )

        logger.info(f"Creating action {qname.fqn}")
        data = self.transport.namespace_call(
            'PUT',
            qname.namespace,
            'actions',
            qname.path_name,
            body=body,
            params={'overwrite': False},
            resource=qname.fqn,
        )
        return deserialize_action(data)

    def update(
        self,
        name: str,
        source: Source = None,
        parameters: KeyValues = None,
        limits: Optional[Mapping[str, int] | Limits] = None,
        namespace: Optional[str] = None,
        kind: Optional[str] = None,
        main: Optional[str] = None,
        annotations: KeyValues = None,
        version: Optional[str] = None,
        publish: Optional[bool] = None,
        replace_parameters: bool = False,
    ) -> Action:
        """
        Partially update an existing action.

        Args:
            name: Action name in any accepted qualified form.
            source: New code or archive; the current exec is kept if omitted.
            parameters: Parameters merged over the current ones.
            limits: Limits merged over the current ones.
            namespace: Namespace override.
            kind: Runtime kind. With a new source, defaults to the current
                kind; without one, the current code is re-sent under this kind.
            main: Entry function name; re-sends the current code when given
                without a source.
            annotations: Annotations merged over the current ones.
            version: New version.
            publish: New publish flag.
            replace_parameters: Send ``parameters`` as the complete set
                instead of merging.

        Returns:
            The updated action.

        Raises:
            NotFound: If the action does not exist.
        """
        qname = resolve_qualified_name(name, namespace, self.config.namespace)
        retarget = source is None and (kind is not None or main is not None)
        # Changing kind or main alone re-sends the current code
        current = self.get(qname.fqn, code=retarget)

        if replace_parameters:
            merged_params = to_parameter_list(parameters)
        elif parameters is not None:
            merged_params = merge_parameters(current.parameters, parameters)
        else:
            merged_params = None

        merged_annotations = (
            merge_parameters(current.annotations, annotations) if annotations is not None else None
        )

        merged_limits = None
        if limits is not None:
            merged_limits = current.limits.to_dict()
            merged_limits.update(_limits_dict(limits))

        body = self._build_body(
            source=source,
            kind=(kind or getattr(source, 'kind', None) or current.exec.kind) if source is not None else None,
            main=main,
            parameters=merged_params,
            annotations=merged_annotations,
            limits=merged_limits,
            version=version,
            publish=publish,
        )
        if retarget:
            body['exec'] = _retarget_exec(current.exec, kind, main)

        logger.info(f"Updating action {qname.fqn} fields={sorted(body)}")
        data = self.transport.namespace_call(
            'PUT',
            qname.namespace,
            'actions',
            qname.path_name,
            body=body,
            params={'overwrite': True},
            resource=qname.fqn,
        )
        return deserialize_action(data)

    def delete(self, name: str, namespace: Optional[str] = None) -> None:
        """
        Delete an action.

        Not idempotent: deleting a missing action raises NotFound. Callers
        that want idempotence catch that error.

        Raises:
            NotFound: If the action does not exist.
        """
        qname = resolve_qualified_name(name, namespace, self.config.namespace)
        logger.info(f"Deleting action {qname.fqn}")
        self.transport.namespace_call(
            'DELETE',
            qname.namespace,
            'actions',
            qname.path_name,
            resource=qname.fqn,
        )

    def invoke(
        self,
        name: str,
        parameters: KeyValues = None,
        blocking: bool = False,
        namespace: Optional[str] = None,
        result_only: bool = False,
        wait: Optional[float] = None,
    ) -> InvocationResult:
        """
        Invoke an action. See :meth:`InvocationService.invoke`.
        """
        return self.invocations.invoke(
            name,
            parameters=parameters,
            blocking=blocking,
            namespace=namespace,
            result_only=result_only,
            wait=wait,
        )

    def _build_body(
        self,
        source: Source,
        kind: Optional[str],
        main: Optional[str],
        parameters: Optional[List[Dict[str, Any]]],
        annotations: Optional[List[Dict[str, Any]]],
        limits: Optional[Mapping[str, int] | Limits],
        version: Optional[str],
        publish: Optional[bool],
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {}

        if source is not None:
            body['exec'] = encode(source, kind=kind, main=main, default_kind=self.config.default_kind)

        if parameters is not None:
            validate_parameters(parameters)
            body['parameters'] = parameters

        if annotations is not None:
            validate_parameters(annotations, field='annotations')
            body['annotations'] = annotations

        if limits is not None:
            limits_data = _limits_dict(limits)
            validate_limits(limits_data)
            body['limits'] = limits_data

        if version is not None:
            body['version'] = version

        if publish is not None:
            body['publish'] = publish

        return body


def _retarget_exec(current: Exec, kind: Optional[str], main: Optional[str]) -> Dict[str, Any]:
    if kind is not None:
        validate_exec_kind(kind)
    exec_data = replace(
        current,
        kind=kind or current.kind,
        main=main or current.main,
    ).to_dict()
    if not exec_data.get('code') and not exec_data.get('image'):
        raise InvalidPayload(
            'Current action has no code to re-send; pass a source together with kind or main',
            field='exec',
        )
    return exec_data


def _limits_dict(limits: Mapping[str, int] | Limits) -> Dict[str, int]:
    if isinstance(limits, Limits):
        return limits.to_dict()
    return dict(limits)
