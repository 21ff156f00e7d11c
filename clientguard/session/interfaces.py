"""External collaborator interfaces consumed by the policy layer.

The core never creates, stores or refreshes credentials. It only reads the
current token, asks whether it is expired, asks whether the session is an
administrative one, and (on a genuine auth failure) asks for a sign-out.

@runtime_checkable enables isinstance(obj, TokenProvider) structural checks.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Read-only view of the token store."""

    def current_token(self) -> Optional[str]:
        """Return the current access token, or None when signed out."""
        ...

    def is_expired(self, token: str) -> bool:
        """Return True if ``token`` must not be sent anymore."""
        ...


@runtime_checkable
class SessionInspector(Protocol):
    def is_admin_session(self) -> bool:
        """Return True for administrative sessions (never auto-signed-out)."""
        ...


@runtime_checkable
class SessionTerminator(Protocol):
    def sign_out(self) -> None:
        """Clear credentials and trigger navigation to the sign-in page.

        Called at most once per failed request. Implementations must not raise.
        """
        ...
