"""ClientGuard transport package.

Wires the authorization policy onto an httpx.AsyncClient:

  - client.py  — AuthorizedClient, create_http_client(), response_outcome()
  - headers.py — apply_security_headers(), extract_error_message()
"""

from __future__ import annotations

from clientguard.transport.client import (
    AuthorizedClient,
    create_http_client,
    response_outcome,
)
from clientguard.transport.headers import (
    DEFAULT_SECURITY_HEADERS,
    apply_security_headers,
    extract_error_message,
)

__all__ = [
    "DEFAULT_SECURITY_HEADERS",
    "AuthorizedClient",
    "apply_security_headers",
    "create_http_client",
    "extract_error_message",
    "response_outcome",
]
