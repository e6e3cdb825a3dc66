"""Client configuration for the PenguinWhisk client."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from whisk_client.errors import ConfigurationError

# Environment variable names used by OpenWhisk tooling
ENV_API_KEY = "__OW_API_KEY"
ENV_API_HOST = "__OW_API_HOST"
ENV_NAMESPACE = "__OW_NAMESPACE"

DEFAULT_NAMESPACE = "_"
DEFAULT_KIND = "nodejs:default"


@dataclass(frozen=True)
class ClientConfig:
    """Explicit client configuration.

    Attributes:
        api_key: Credential pair in ``uuid:key`` form, sent as Basic auth.
        api_host: Control plane host, with or without scheme.
        namespace: Default namespace for calls that do not name one.
        default_kind: Runtime kind used when an action source declares none.
        request_timeout: Timeout in seconds for ordinary CRUD calls.
        blocking_timeout: Timeout in seconds for blocking invocations.
            Must exceed the server-side wait window (60s by default).
        connect_timeout: Timeout in seconds for establishing connections.
        poll_interval: Seconds between activation polls.
        api_path: Path prefix of the REST API.
        log_level: Level applied by :func:`whisk_client.configure_logging`.
    """

    api_key: str
    api_host: str
    namespace: str = DEFAULT_NAMESPACE
    default_kind: str = DEFAULT_KIND
    request_timeout: float = 30.0
    blocking_timeout: float = 75.0
    connect_timeout: float = 10.0
    poll_interval: float = 0.5
    api_path: str = "/api/v1"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If a value is missing or out of range.
        """
        if not self.api_key or ":" not in self.api_key:
            raise ConfigurationError("api_key must be of the form 'uuid:key'")

        if not self.api_host:
            raise ConfigurationError("api_host is required")

        if not self.namespace:
            raise ConfigurationError("namespace cannot be empty")

        for name in ("request_timeout", "blocking_timeout", "connect_timeout", "poll_interval"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")

        if self.blocking_timeout < self.request_timeout:
            raise ConfigurationError(
                "blocking_timeout must not be shorter than request_timeout"
            )

    @property
    def base_url(self) -> str:
        """Base URL of the REST API, defaulting to HTTPS when no scheme is given."""
        host = self.api_host.rstrip("/")
        if "://" not in host:
            host = f"https://{host}"
        return f"{host}{self.api_path}"

    @property
    def credentials(self) -> tuple[str, str]:
        """Split ``api_key`` into the Basic auth (username, password) pair."""
        username, password = self.api_key.split(":", 1)
        return username, password

    def with_overrides(self, **changes) -> ClientConfig:
        """Return a copy of this configuration with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """Load configuration from ``__OW_*`` environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If a mandatory variable is missing or a
                numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ

        missing = [key for key in (ENV_API_KEY, ENV_API_HOST, ENV_NAMESPACE) if not env.get(key)]
        if missing:
            raise ConfigurationError(
                f"Missing environment parameter(s): {', '.join(missing)}"
            )

        try:
            return cls(
                api_key=env[ENV_API_KEY],
                api_host=env[ENV_API_HOST],
                namespace=env[ENV_NAMESPACE],
                default_kind=env.get("__OW_DEFAULT_KIND", DEFAULT_KIND),
                request_timeout=float(env.get("__OW_REQUEST_TIMEOUT", "30")),
                blocking_timeout=float(env.get("__OW_BLOCKING_TIMEOUT", "75")),
                poll_interval=float(env.get("__OW_POLL_INTERVAL", "0.5")),
                log_level=env.get("__OW_LOG_LEVEL", "INFO"),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric configuration value: {e}") from e
