"""Client-side validation for OpenWhisk entities.

Implements OpenWhisk naming rules and resource limits so that obviously
invalid requests fail before they reach the control plane.
"""

from __future__ import annotations

import json
import re
from typing import Any

from whisk_client.errors import InvalidPayload, ValidationError

# OpenWhisk naming rules
ENTITY_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_@.\-][a-zA-Z0-9_@.\- ]*$')
MAX_NAME_LENGTH = 256
MAX_ACTION_CODE_SIZE = 48 * 1024 * 1024  # 48 MB
MAX_PARAMETER_SIZE = 1 * 1024 * 1024  # 1 MB

# Exec kinds: <family>:<version|default>, or blackbox for custom images.
# Whether a given runtime version is installed is decided by the control plane.
EXEC_KIND_PATTERN = re.compile(r'^[a-z][a-z0-9]*:(default|\d+(\.\d+)*)$')
BLACKBOX_KIND = 'blackbox'


def validate_entity_name(name: str, field: str = 'name') -> None:
    """Validate a single OpenWhisk entity name segment.

    OpenWhisk naming rules:
    - Must match pattern: [a-zA-Z0-9_@.-][a-zA-Z0-9_@.- ]*
    - Maximum length: 256 characters
    - Cannot be empty

    Args:
        name: Entity name to validate.
        field: Field name for error messages.

    Raises:
        ValidationError: If name is invalid.
    """
    if not name:
        raise ValidationError(f'{field} cannot be empty', field=field)

    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f'{field} exceeds maximum length of {MAX_NAME_LENGTH} characters',
            field=field,
        )

    if not ENTITY_NAME_PATTERN.match(name):
        raise ValidationError(
            f'{field} must contain only letters, numbers, spaces and characters: _ @ . -',
            field=field,
        )


def validate_namespace_name(name: str) -> None:
    """Validate namespace name.

    Namespace names follow the same rules as entity names.

    Args:
        name: Namespace name to validate.

    Raises:
        ValidationError: If name is invalid.
    """
    validate_entity_name(name, field='namespace')


def validate_action_code(code: str | bytes) -> None:
    """Validate encoded action code size.

    Args:
        code: Action code content, text or base64 text.

    Raises:
        InvalidPayload: If code is empty or exceeds the size limit.
    """
    if not code:
        raise InvalidPayload('Action code cannot be empty', field='exec.code')

    code_size = len(code.encode('utf-8')) if isinstance(code, str) else len(code)
    if code_size > MAX_ACTION_CODE_SIZE:
        size_mb = code_size / (1024 * 1024)
        max_mb = MAX_ACTION_CODE_SIZE / (1024 * 1024)
        raise InvalidPayload(
            f'Action code size ({size_mb:.2f} MB) exceeds '
            f'maximum size of {max_mb} MB',
            field='exec.code',
        )


def validate_exec_kind(kind: str) -> None:
    """Validate action exec kind.

    Args:
        kind: Exec kind (e.g., 'nodejs:6', 'python:3.11', 'java:default').

    Raises:
        InvalidPayload: If kind is empty or malformed.
    """
    if not kind:
        raise InvalidPayload('Exec kind cannot be empty', field='exec.kind')

    if kind != BLACKBOX_KIND and not EXEC_KIND_PATTERN.match(kind):
        raise InvalidPayload(
            f'Malformed exec kind: {kind}. Expected <runtime>:<version>, '
            f'<runtime>:default or {BLACKBOX_KIND}',
            field='exec.kind',
        )


def validate_parameters(parameters: list[dict[str, Any]], field: str = 'parameters') -> None:
    """Validate serialized parameter size.

    Args:
        parameters: Parameter list in ``[{key, value}]`` form.
        field: Field name for error messages.

    Raises:
        ValidationError: If the list is not JSON-serializable or exceeds
            the size limit.
    """
    if not parameters:
        return

    try:
        param_size = len(json.dumps(parameters).encode('utf-8'))
    except (TypeError, ValueError) as e:
        raise ValidationError(f'{field} must be JSON-serializable: {e}', field=field) from e

    if param_size > MAX_PARAMETER_SIZE:
        size_kb = param_size / 1024
        max_kb = MAX_PARAMETER_SIZE / 1024
        raise ValidationError(
            f'{field} size ({size_kb:.2f} KB) exceeds '
            f'maximum size of {max_kb} KB',
            field=field,
        )


def validate_limits(limits: dict[str, Any]) -> None:
    """Validate resource limits.

    Args:
        limits: Limits dictionary (timeout, memory, logs, concurrency).

    Raises:
        ValidationError: If limits are invalid.
    """
    if not limits:
        return

    unknown = set(limits) - {'timeout', 'memory', 'logs', 'concurrency'}
    if unknown:
        raise ValidationError(
            f'Unknown limits: {", ".join(sorted(unknown))}',
            field='limits',
        )

    # Validate timeout (milliseconds)
    if 'timeout' in limits:
        timeout = limits['timeout']
        if not isinstance(timeout, int) or timeout < 100 or timeout > 600000:
            raise ValidationError(
                'Timeout must be between 100ms and 600000ms (10 minutes)',
                field='limits.timeout',
            )

    # Validate memory (MB)
    if 'memory' in limits:
        memory = limits['memory']
        if not isinstance(memory, int) or memory < 128 or memory > 2048:
            raise ValidationError(
                'Memory must be between 128MB and 2048MB',
                field='limits.memory',
            )

    # Validate logs (MB)
    if 'logs' in limits:
        logs = limits['logs']
        if not isinstance(logs, int) or logs < 0 or logs > 10:
            raise ValidationError(
                'Logs must be between 0MB and 10MB',
                field='limits.logs',
            )

    if 'concurrency' in limits:
        concurrency = limits['concurrency']
        if not isinstance(concurrency, int) or concurrency < 1 or concurrency > 500:
            raise ValidationError(
                'Concurrency must be between 1 and 500',
                field='limits.concurrency',
            )
