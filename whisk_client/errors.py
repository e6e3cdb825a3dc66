"""Error taxonomy for the PenguinWhisk client.

Every operation either returns a value or raises a subclass of
:class:`WhiskError`. Errors carry enough context (namespace, resource,
HTTP status, activation id) for the caller to decide whether to retry;
the client itself never retries.
"""

from __future__ import annotations

from typing import Any


class WhiskError(Exception):
    """Base class for all client errors."""

    retryable = False

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        namespace: str | None = None,
        resource: str | None = None,
        body: Any = None,
        activation_id: str | None = None,
    ):
        """Initialize client error.

        Args:
            message: Error message.
            status_code: HTTP status code returned by the control plane.
            namespace: Namespace the request was scoped to.
            resource: Qualified name of the entity involved.
            body: Parsed response body, if any.
            activation_id: Activation id already known when the error occurred.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.namespace = namespace
        self.resource = resource
        self.body = body
        self.activation_id = activation_id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary format.

        Returns:
            Dictionary with error details.
        """
        result: dict[str, Any] = {
            'error': self.message,
            'type': type(self).__name__,
            'retryable': self.retryable,
        }
        if self.status_code is not None:
            result['code'] = self.status_code
        if self.namespace:
            result['namespace'] = self.namespace
        if self.resource:
            result['resource'] = self.resource
        if self.activation_id:
            result['activationId'] = self.activation_id
        return result


class ConfigurationError(WhiskError):
    """Missing or malformed client configuration."""


class ValidationError(WhiskError):
    """Client-side validation failure, raised before any request is sent."""

    def __init__(self, message: str, field: str | None = None, **kwargs: Any):
        """Initialize validation error.

        Args:
            message: Error message.
            field: Field name that failed validation.
            **kwargs: Context forwarded to :class:`WhiskError`.
        """
        super().__init__(message, **kwargs)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result['field'] = self.field
        return result


class InvalidPayload(ValidationError):
    """Action source is absent, empty, oversized or of an unsupported kind."""


class NotFound(WhiskError):
    """The entity does not exist (HTTP 404)."""


class Conflict(WhiskError):
    """The entity already exists (HTTP 409)."""


class BadRequest(WhiskError):
    """The control plane rejected the request (HTTP 4xx)."""


class Unauthorized(BadRequest):
    """Credentials were rejected (HTTP 401/403)."""


class Unavailable(WhiskError):
    """The control plane is unavailable or timed out (HTTP 408/5xx)."""

    retryable = True


class TransportError(WhiskError):
    """Network-level failure: timeout, refused or reset connection."""

    retryable = True


__all__ = [
    'WhiskError',
    'ConfigurationError',
    'ValidationError',
    'InvalidPayload',
    'NotFound',
    'Conflict',
    'BadRequest',
    'Unauthorized',
    'Unavailable',
    'TransportError',
]
