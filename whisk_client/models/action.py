"""Action models for OpenWhisk serverless functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Limits:
    """Per-action resource limits."""

    timeout: int = 60000  # ms
    memory: int = 256  # MB
    logs: int = 10  # MB
    concurrency: int = 1

    def to_dict(self) -> Dict[str, int]:
        return {
            'timeout': self.timeout,
            'memory': self.memory,
            'logs': self.logs,
            'concurrency': self.concurrency,
        }


@dataclass
class Exec:
    """Executable representation as returned by the control plane."""

    kind: str
    code: Optional[str] = None
    binary: bool = False
    main: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'kind': self.kind, 'binary': self.binary}
        if self.code is not None:
            data['code'] = self.code
        if self.main:
            data['main'] = self.main
        if self.image:
            data['image'] = self.image
        return data


@dataclass
class Action:
    """A deployed action.

    ``parameters`` and ``annotations`` keep the OpenWhisk ``[{key, value}]``
    list form so they compare stably against what the server returns.
    """

    namespace: str
    name: str
    exec: Exec
    version: str = '0.0.1'
    publish: bool = False
    parameters: List[Dict[str, Any]] = field(default_factory=list)
    annotations: List[Dict[str, Any]] = field(default_factory=list)
    limits: Limits = field(default_factory=Limits)
    updated: Optional[int] = None

    @property
    def package(self) -> Optional[str]:
        """Package qualifier, parsed from a ``namespace/package`` namespace field."""
        _, _, package = self.namespace.partition('/')
        return package or None

    @property
    def fqn(self) -> str:
        return f'/{self.namespace}/{self.name}'

    def parameter_dict(self) -> Dict[str, Any]:
        return {item['key']: item.get('value') for item in self.parameters}


@dataclass
class ActionSummary:
    """Action metadata as returned by list calls (no code)."""

    namespace: str
    name: str
    version: str = '0.0.1'
    publish: bool = False
    annotations: List[Dict[str, Any]] = field(default_factory=list)
    binary: bool = False
    updated: Optional[int] = None

    @property
    def fqn(self) -> str:
        return f'/{self.namespace}/{self.name}'
