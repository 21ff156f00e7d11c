"""Shared constants for ClientGuard.

Default policy lists, header names and validation thresholds live here.
No magic strings or numbers in other modules — import from here.
Every list below is a default only; config.py lets deployments replace them.
"""

# ─── URL classification defaults ─────────────────────────────────────────────

# Requests whose URL contains any of these substrings are PUBLIC: no bearer
# token is attached and no automatic sign-out logic is applied to failures.
# Covers the multi-step login flow (credentials, then OTP validation) plus
# static assets and localization bundles.
DEFAULT_PUBLIC_URL_SUBSTRINGS: tuple[str, ...] = (
    "/api/v1/login",
    "/api/v1/login/validate",
    "/assets/",
    "/i18n/",
)

# Optional endpoints with known backend 401 flakiness. Token is still attached,
# but a 401 from these never signs the user out.
DEFAULT_NO_LOGOUT_ON_401_SUBSTRINGS: tuple[str, ...] = (
    "/api/v1/ports",
)

# ─── Headers ─────────────────────────────────────────────────────────────────

# Tenant identifier sent on every request, PUBLIC included. Not secret material.
DEFAULT_TENANT_HEADER_NAME: str = "Fineract-Platform-TenantId"
DEFAULT_TENANT_HEADER_VALUE: str = "default"

AUTHORIZATION_HEADER: str = "Authorization"
BEARER_PREFIX: str = "Bearer "

# ─── Failure classification ──────────────────────────────────────────────────

# Substrings of a 401 error message treated as evidence of a genuinely invalid
# session. Matched case-insensitively. A 401 without one of these is treated
# as a backend defect and never signs the user out.
DEFAULT_AUTH_FAILURE_PHRASES: tuple[str, ...] = (
    "invalid token",
    "expired token",
    "unauthorized",
    "session expired",
)

HTTP_UNAUTHORIZED: int = 401

# ─── Transport ───────────────────────────────────────────────────────────────

DEFAULT_API_URL: str = "http://localhost:3000/api"
DEFAULT_TIMEOUT_S: float = 30.0
DEFAULT_MAX_CONNECTIONS: int = 100
DEFAULT_KEEPALIVE_EXPIRY_S: float = 30.0

# ─── Validation thresholds ───────────────────────────────────────────────────

PASSWORD_MIN_LENGTH: int = 8
# Valid passwords at or above this length are rated "strong", else "medium".
PASSWORD_STRONG_LENGTH: int = 12

# Random bytes per CSP nonce (hex-encoded → 32 characters).
NONCE_BYTES: int = 16
