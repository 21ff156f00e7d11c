"""Request-side data contracts for the authorization policy.

  - OutgoingRequest — copy-on-write request value passed through policy steps
  - UrlClass        — PUBLIC / SECURE_NO_LOGOUT / SECURE
  - TokenState      — read-only snapshot of the external token store
  - SessionKind     — ADMIN / STANDARD
  - Success/Failure — the two ResponseOutcome variants
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import httpx


class UrlClass(str, Enum):
    """Classification of a request target.

    PUBLIC:           no bearer token; exempt from automatic sign-out.
    SECURE_NO_LOGOUT: bearer token attached; a 401 never signs the user out.
    SECURE:           bearer token attached; full failure classification.
    """

    PUBLIC = "PUBLIC"
    SECURE_NO_LOGOUT = "SECURE_NO_LOGOUT"
    SECURE = "SECURE"


class SessionKind(str, Enum):
    """Kind of the active session. Influences failure handling only."""

    ADMIN = "ADMIN"
    STANDARD = "STANDARD"


@dataclass(frozen=True)
class OutgoingRequest:
    """An HTTP request on its way to the backend.

    Immutable: ``with_header()`` returns a new instance holding its own copy of
    the headers, so no policy step can mutate the caller's original request.
    Header names are case-insensitive (``httpx.Headers``).
    """

    url: str
    method: str = "GET"
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None

    def __post_init__(self) -> None:
        # Always hold a private copy, whatever mapping the caller passed in.
        object.__setattr__(self, "headers", httpx.Headers(self.headers))
        object.__setattr__(self, "method", self.method.upper())

    def with_header(self, name: str, value: str) -> "OutgoingRequest":
        """Return a copy with ``name`` set to ``value`` (replacing any existing value)."""
        headers = httpx.Headers(self.headers)
        headers[name] = value
        return dataclasses.replace(self, headers=headers)

    def header_values(self, name: str) -> list[str]:
        """All values present for ``name`` (case-insensitive)."""
        return self.headers.get_list(name)


@dataclass(frozen=True)
class TokenState:
    """Snapshot of the external token store taken at decision time."""

    token_value: Optional[str] = None
    is_expired: bool = False

    @property
    def has_valid_token(self) -> bool:
        """True when a non-empty token is present and not expired."""
        return bool(self.token_value) and not self.is_expired


@dataclass(frozen=True)
class Success:
    """Successful response outcome; ``body`` is the received response."""

    body: Any = None


@dataclass(frozen=True)
class Failure:
    """Failed response outcome.

    ``status_code is None`` models a network-layer failure: no HTTP response
    was produced at all (connection refused, timeout, protocol error).
    """

    status_code: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def is_network_failure(self) -> bool:
        return self.status_code is None


ResponseOutcome = Union[Success, Failure]
