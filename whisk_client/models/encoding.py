"""Source encodings for action deployment.

Exactly one variant is active per action version.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class InlineSource:
    """Raw source text deployed as-is."""

    code: str
    kind: Optional[str] = None
    main: Optional[str] = None


@dataclass(frozen=True)
class Archive:
    """Pre-built zip bundle, transmitted base64-encoded."""

    data: bytes
    kind: Optional[str] = None
    main: Optional[str] = None


Encoding = Union[InlineSource, Archive]
