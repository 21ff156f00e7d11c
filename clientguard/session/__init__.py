"""ClientGuard session collaborators.

Public API:
  - TokenProvider / SessionInspector / SessionTerminator — Protocols (interfaces.py)
  - InMemorySessionStore — reference implementation of all three (store.py)
  - jwt_is_expired()     — PyJWT-based expiry check (store.py)
  - snapshot_token_state() / snapshot_session_kind() — per-request snapshots
"""

from __future__ import annotations

from clientguard.session.interfaces import (
    SessionInspector,
    SessionTerminator,
    TokenProvider,
)
from clientguard.session.store import (
    InMemorySessionStore,
    jwt_is_expired,
    snapshot_session_kind,
    snapshot_token_state,
)

__all__ = [
    "InMemorySessionStore",
    "SessionInspector",
    "SessionTerminator",
    "TokenProvider",
    "jwt_is_expired",
    "snapshot_session_kind",
    "snapshot_token_state",
]
