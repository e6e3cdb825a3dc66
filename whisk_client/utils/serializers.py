"""Serialization utilities for OpenWhisk entities.

Converts control plane JSON documents to client models and resolves
qualified entity names into request paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from whisk_client.config import DEFAULT_NAMESPACE
from whisk_client.errors import ValidationError
from whisk_client.models import (
    Action,
    ActionSummary,
    Activation,
    ActivationResponse,
    Exec,
    Limits,
)
from whisk_client.utils.validators import validate_entity_name, validate_namespace_name


@dataclass(frozen=True)
class QualifiedName:
    """Resolved ``/namespace/[package/]name`` reference."""

    namespace: str
    package: str | None
    name: str

    @property
    def path_name(self) -> str:
        """Name as it appears after the collection segment of a path."""
        if self.package:
            return f'{self.package}/{self.name}'
        return self.name

    @property
    def fqn(self) -> str:
        return build_fqn(self.namespace, self.package, self.name)


def build_fqn(namespace: str, package: str | None, name: str) -> str:
    """Build fully qualified name for OpenWhisk entity.

    Args:
        namespace: Namespace name.
        package: Optional package name.
        name: Entity name.

    Returns:
        Fully qualified name in format: /namespace/[package/]name
    """
    if package:
        return f'/{namespace}/{package}/{name}'
    return f'/{namespace}/{name}'


def parse_fqn(fqn: str) -> tuple[str, str | None, str]:
    """Parse fully qualified name into components.

    Args:
        fqn: Fully qualified name (e.g., '/namespace/action' or '/namespace/pkg/action').

    Returns:
        Tuple of (namespace, package, name) where package may be None.

    Raises:
        ValidationError: If the name does not have two or three segments.
    """
    parts = fqn.strip('/').split('/')

    if len(parts) == 2:
        return parts[0], None, parts[1]
    elif len(parts) == 3:
        return parts[0], parts[1], parts[2]
    else:
        raise ValidationError(f'Invalid fully qualified name: {fqn}', field='name')


def resolve_qualified_name(
    name: str,
    namespace: str | None = None,
    default_namespace: str = DEFAULT_NAMESPACE,
) -> QualifiedName:
    """Resolve any accepted name form into a :class:`QualifiedName`.

    Accepted forms:
        ``action``, ``package/action``, ``/namespace/action`` and
        ``/namespace/package/action``.

    The namespace is taken from, in order: the ``namespace`` argument, the
    namespace embedded in a fully qualified name, ``default_namespace``.

    Raises:
        ValidationError: If the name is malformed.
    """
    if not name or not name.strip('/'):
        raise ValidationError('name cannot be empty', field='name')

    if name.startswith('/'):
        embedded_ns, package, action = parse_fqn(name)
    else:
        parts = name.split('/')
        if len(parts) == 1:
            embedded_ns, package, action = None, None, parts[0]
        elif len(parts) == 2:
            embedded_ns, package, action = None, parts[0], parts[1]
        else:
            raise ValidationError(f'Invalid action name: {name}', field='name')

    resolved_ns = namespace or embedded_ns or default_namespace

    validate_namespace_name(resolved_ns)
    if package is not None:
        validate_entity_name(package, field='package')
    validate_entity_name(action)

    return QualifiedName(namespace=resolved_ns, package=package, name=action)


def namespace_path(namespace: str, collection: str, name: str | None = None) -> str:
    """Build a namespace-scoped resource path.

    ``/namespaces/{namespace}/{collection}[/{name}]`` with each segment
    percent-encoded; the package separator in ``name`` stays literal.
    """
    path = f'/namespaces/{quote(namespace, safe="")}/{collection}'
    if name:
        path += '/' + '/'.join(quote(part, safe='') for part in name.split('/'))
    return path


def deserialize_limits(data: dict[str, Any] | None) -> Limits:
    data = data or {}
    defaults = Limits()
    return Limits(
        timeout=data.get('timeout', defaults.timeout),
        memory=data.get('memory', defaults.memory),
        logs=data.get('logs', defaults.logs),
        concurrency=data.get('concurrency', defaults.concurrency),
    )


def deserialize_action(data: dict[str, Any]) -> Action:
    """Convert an action document to an :class:`Action`.

    Args:
        data: Action document as returned by the control plane.

    Returns:
        Action model.
    """
    exec_data = data.get('exec') or {}
    return Action(
        namespace=data.get('namespace', ''),
        name=data.get('name', ''),
        exec=Exec(
            kind=exec_data.get('kind', ''),
            code=exec_data.get('code'),
            binary=bool(exec_data.get('binary', False)),
            main=exec_data.get('main'),
            image=exec_data.get('image'),
        ),
        version=data.get('version', '0.0.1'),
        publish=bool(data.get('publish', False)),
        parameters=list(data.get('parameters') or []),
        annotations=list(data.get('annotations') or []),
        limits=deserialize_limits(data.get('limits')),
        updated=data.get('updated'),
    )


def deserialize_action_summary(data: dict[str, Any]) -> ActionSummary:
    """Convert a list entry to an :class:`ActionSummary`."""
    exec_data = data.get('exec') or {}
    return ActionSummary(
        namespace=data.get('namespace', ''),
        name=data.get('name', ''),
        version=data.get('version', '0.0.1'),
        publish=bool(data.get('publish', False)),
        annotations=list(data.get('annotations') or []),
        binary=bool(exec_data.get('binary', False)),
        updated=data.get('updated'),
    )


def deserialize_response(data: dict[str, Any] | None) -> ActivationResponse:
    data = data or {}
    return ActivationResponse(
        success=bool(data.get('success', False)),
        result=data.get('result'),
        status=data.get('status'),
    )


def deserialize_activation(data: dict[str, Any]) -> Activation:
    """Convert an activation document to an :class:`Activation`.

    Args:
        data: Activation document.

    Returns:
        Activation model.
    """
    annotations = data.get('annotations') or []
    if isinstance(annotations, dict):
        annotations = [{'key': k, 'value': v} for k, v in annotations.items()]

    return Activation(
        activation_id=data.get('activationId'),
        namespace=data.get('namespace'),
        name=data.get('name'),
        response=deserialize_response(data.get('response')),
        version=data.get('version'),
        subject=data.get('subject'),
        start=data.get('start'),
        end=data.get('end'),
        duration=data.get('duration'),
        status_code=data.get('statusCode'),
        logs=list(data.get('logs') or []),
        annotations=annotations,
        cause=data.get('cause'),
    )


def is_activation_record(data: Any) -> bool:
    """True if ``data`` looks like a full activation record, not a bare id."""
    return isinstance(data, dict) and 'activationId' in data and 'response' in data
