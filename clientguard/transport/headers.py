"""Outgoing-header helpers and error-body parsing.

  - apply_security_headers(): adds the OWASP header set to requests aimed at
    the configured API base URL. Requests to any other origin are untouched.
  - extract_error_message(): pulls the server's error message out of a JSON
    error body for failure classification.

Header constants defined here are imported by client.py so there is a single
source of truth.
"""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlsplit

import httpx

from clientguard.constants import AUTHORIZATION_HEADER
from clientguard.models.request import OutgoingRequest

# ─── Constants ────────────────────────────────────────────────────────────────

DEFAULT_SECURITY_HEADERS: Mapping[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "X-API-Version": "1.0",
}

# Never set or overridden by the security-header step; owned by RequestPolicy.
_PROTECTED_HEADERS: frozenset[str] = frozenset({AUTHORIZATION_HEADER.lower()})

# ─── Public API ───────────────────────────────────────────────────────────────


def apply_security_headers(
    request: OutgoingRequest,
    api_url: str,
    headers: Mapping[str, str] = DEFAULT_SECURITY_HEADERS,
    protected: frozenset[str] = _PROTECTED_HEADERS,
) -> OutgoingRequest:
    """Return ``request`` with the security headers added.

    Rules:
      1. Only URLs on ``api_url``'s scheme, host and port, and under its
         path, are touched; third-party origins (including lookalikes such
         as ``api_url`` + ``.evil.net``) never receive them.
      2. Headers already present on the request win (caller values are kept).
      3. Names in ``protected`` (Authorization, the tenant header) are skipped.

    Args:
        request:   Request produced by ``RequestPolicy.authorize()``.
        api_url:   Configured API base URL.
        headers:   Header set to add.
        protected: Lower-cased header names this step must never write.

    Returns:
        A new OutgoingRequest, or ``request`` itself when nothing applies.
    """
    if not api_url or not _is_under(request.url, api_url):
        return request

    result = request
    for name, value in headers.items():
        if name.lower() in protected or name in result.headers:
            continue
        result = result.with_header(name, value)
    return result


def _is_under(url: str, api_url: str) -> bool:
    """True if ``url`` has ``api_url``'s origin and a path at or below its path."""
    try:
        target = urlsplit(url)
        base = urlsplit(api_url)
        same_origin = (
            base.hostname is not None
            and target.scheme.lower() == base.scheme.lower()
            and target.hostname == base.hostname
            and target.port == base.port
        )
    except ValueError:
        return False
    if not same_origin:
        return False
    prefix = base.path.rstrip("/")
    return not prefix or target.path == prefix or target.path.startswith(prefix + "/")


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """Return the error message carried by a JSON error body, if any.

    Recognised shapes::

        {"message": "..."}
        {"error": {"message": "..."}}
        {"error": "..."}

    Returns None for non-JSON bodies and any other shape. Never raises.
    """
    try:
        body = response.json()
    except (ValueError, UnicodeDecodeError, httpx.ResponseNotRead):
        return None

    if not isinstance(body, dict):
        return None

    message = body.get("message")
    if isinstance(message, str):
        return message

    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str):
        return error
    return None
