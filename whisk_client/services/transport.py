"""
Transport gateway for the OpenWhisk REST API.

Issues authenticated HTTP requests against namespace-scoped endpoints and
maps response status codes onto the client error taxonomy:

    2xx       -> parsed JSON body (None when empty)
    404       -> NotFound
    409       -> Conflict
    408, 5xx  -> Unavailable
    401, 403  -> Unauthorized
    other 4xx -> BadRequest
    network   -> TransportError

Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from whisk_client.config import ClientConfig
from whisk_client.errors import (
    BadRequest,
    Conflict,
    NotFound,
    TransportError,
    Unauthorized,
    Unavailable,
    WhiskError,
)
from whisk_client.utils.serializers import namespace_path

logger = logging.getLogger(__name__)

USER_AGENT = "penguinwhisk-client/1.0.0"


class TransportGateway:
    """
    Thin, stateless HTTP layer over an ``httpx.Client``.

    The underlying client owns connection pooling and is safe to share
    between threads; the gateway itself keeps no per-call state.

    Attributes:
        config: Client configuration.
        http: The httpx client used for all requests.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            config: Client configuration.
            transport: Optional httpx transport (e.g. ``httpx.WSGITransport``
                or ``httpx.MockTransport``) used instead of the network.
            http_client: Pre-built httpx client; ``transport`` is ignored
                when given.
        """
        self.config = config
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(
            base_url=config.base_url,
            auth=httpx.BasicAuth(*config.credentials),
            headers={
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=httpx.Timeout(config.request_timeout, connect=config.connect_timeout),
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client if this gateway created it."""
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> TransportGateway:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def timeout_for(self, blocking: bool = False) -> httpx.Timeout:
        """Request timeout for ordinary or blocking calls."""
        seconds = self.config.blocking_timeout if blocking else self.config.request_timeout
        return httpx.Timeout(seconds, connect=self.config.connect_timeout)

    def call(
        self,
        method: str,
        path: str,
        namespace: Optional[str] = None,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[httpx.Timeout] = None,
        resource: Optional[str] = None,
    ) -> Any:
        """
        Perform one HTTP exchange.

        Args:
            method: HTTP method.
            path: Resource path relative to the API root
                (see :func:`namespace_path`).
            namespace: Namespace the path is scoped to, for error context.
            body: JSON-serializable request body.
            params: Query string parameters; booleans are sent as
                'true'/'false'.
            timeout: Per-request timeout override.
            resource: Qualified entity name, for error context.

        Returns:
            Parsed JSON body, or None for an empty body.

        Raises:
            WhiskError: Subclass matching the status code or network failure.
        """
        query = _encode_query(params)
        start = time.monotonic()

        request_kwargs: Dict[str, Any] = {"json": body, "params": query}
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        logger.debug(f"Request: {method} {path} params={query}")
        try:
            response = self.http.request(method, path, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {path}: {e}")
            raise TransportError(
                f"{method} {path} timed out: {e}",
                namespace=namespace,
                resource=resource,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {path}: {e}")
            raise TransportError(
                f"{method} {path} failed: {e}",
                namespace=namespace,
                resource=resource,
            ) from e

        duration = time.monotonic() - start
        logger.debug(
            f"Response: {method} {path} [{response.status_code}] in {duration:.3f}s"
        )

        payload = _parse_body(response)
        if response.is_success:
            return payload

        raise error_for_status(
            response.status_code,
            payload,
            method=method,
            path=path,
            namespace=namespace,
            resource=resource,
        )

    def namespace_call(
        self,
        method: str,
        namespace: str,
        collection: str,
        name: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        """Shortcut for :meth:`call` on ``/namespaces/{namespace}/{collection}[/{name}]``."""
        path = namespace_path(namespace, collection, name)
        kwargs.setdefault("resource", name)
        return self.call(method, path, namespace=namespace, **kwargs)


def error_for_status(
    status_code: int,
    payload: Any,
    method: str = "",
    path: str = "",
    namespace: Optional[str] = None,
    resource: Optional[str] = None,
) -> WhiskError:
    """
    Build the error matching an unsuccessful HTTP status.

    Args:
        status_code: HTTP status code.
        payload: Parsed response body.
        method: HTTP method, for the message.
        path: Request path, for the message.
        namespace: Namespace, for error context.
        resource: Qualified entity name, for error context.

    Returns:
        Error instance (not raised).
    """
    if status_code == 404:
        error_class = NotFound
    elif status_code == 409:
        error_class = Conflict
    elif status_code == 408 or status_code >= 500:
        error_class = Unavailable
    elif status_code in (401, 403):
        error_class = Unauthorized
    else:
        error_class = BadRequest

    detail = _error_detail(payload) or httpx.codes.get_reason_phrase(status_code)
    message = f"{method} {path} returned {status_code}: {detail}".strip()

    return error_class(
        message,
        status_code=status_code,
        namespace=namespace,
        resource=resource,
        body=payload,
        activation_id=payload.get("activationId") if isinstance(payload, dict) else None,
    )


def _encode_query(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    query = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query[key] = value
    return query


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def _error_detail(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        return payload.get("error") or payload.get("message")
    if isinstance(payload, str):
        return payload.strip() or None
    return None
