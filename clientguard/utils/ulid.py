"""ULID generation for request correlation.

Every request dispatched by ``AuthorizedClient`` gets a fresh ULID that is bound
as the structlog ``request_id`` for the lifetime of that request, so the
authorization decision and any failure classification can be correlated.

Uses the ``python-ulid`` library. Do not hand-roll ULID generation.
"""

from __future__ import annotations

from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID as a 26-character uppercase string.

    Returns:
        str: Crockford Base32 ULID, charset ``[0-9A-HJKMNP-TV-Z]``, exactly 26 chars.
    """
    return str(ULID())
