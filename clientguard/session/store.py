"""In-memory session store.

``InMemorySessionStore`` implements all three collaborator interfaces
(TokenProvider, SessionInspector, SessionTerminator) for single-process
clients, scripts and tests. Browser or desktop front-ends plug in their own
storage instead.

``jwt_is_expired()`` reads the ``exp`` claim with PyJWT. The signature is NOT
verified: the client only decides whether a token is worth sending, and the
server remains the authority on its validity.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import jwt

from clientguard.models.request import SessionKind, TokenState
from clientguard.session.interfaces import SessionInspector, TokenProvider
from clientguard.utils.logger import get_logger

logger = get_logger(__name__)


def jwt_is_expired(token: str, leeway_s: float = 0.0) -> bool:
    """Return True unless ``token`` is a JWT whose ``exp`` is still in the future.

    Undecodable tokens and tokens without a numeric ``exp`` claim count as
    expired. ``leeway_s`` treats tokens expiring within that many seconds as
    already expired.
    """
    if not token:
        return True
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return True

    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return True
    return not exp > time.time() + leeway_s


class InMemorySessionStore:
    """Holds one access token and an admin flag in process memory.

    Args:
        expiry_check: Token → expired? Defaults to ``jwt_is_expired``.
        on_sign_out:  Called after credentials are cleared, e.g. to navigate
                      to the sign-in page. Exceptions from it are logged, not
                      propagated.
    """

    def __init__(
        self,
        expiry_check: Callable[[str], bool] = jwt_is_expired,
        on_sign_out: Optional[Callable[[], None]] = None,
    ) -> None:
        self._token: Optional[str] = None
        self._admin = False
        self._expiry_check = expiry_check
        self._on_sign_out = on_sign_out
        self.sign_out_count = 0

    # ── Mutation (owned by the sign-in flow, not the policy) ──────────────────

    def set_token(self, token: str, admin: bool = False) -> None:
        self._token = token
        self._admin = admin

    def clear(self) -> None:
        self._token = None
        self._admin = False

    # ── TokenProvider ─────────────────────────────────────────────────────────

    def current_token(self) -> Optional[str]:
        return self._token

    def is_expired(self, token: str) -> bool:
        return self._expiry_check(token)

    # ── SessionInspector ──────────────────────────────────────────────────────

    def is_admin_session(self) -> bool:
        return self._admin and bool(self._token)

    # ── SessionTerminator ─────────────────────────────────────────────────────

    def sign_out(self) -> None:
        self.clear()
        self.sign_out_count += 1
        logger.info("Session terminated — credentials cleared")
        if self._on_sign_out is not None:
            try:
                self._on_sign_out()
            except Exception as exc:  # noqa: BLE001
                logger.error("on_sign_out callback failed", error=str(exc))


def snapshot_token_state(provider: TokenProvider) -> TokenState:
    """Read the provider once and freeze the result for a single request."""
    token = provider.current_token()
    if not token:
        return TokenState(token_value=None, is_expired=False)
    return TokenState(token_value=token, is_expired=provider.is_expired(token))


def snapshot_session_kind(inspector: SessionInspector) -> SessionKind:
    return SessionKind.ADMIN if inspector.is_admin_session() else SessionKind.STANDARD
