"""Async HTTP client that enforces the request authorization policy.

``AuthorizedClient.send()`` is where the pure policy meets the network:

  before send:
    - snapshot TokenState and SessionKind from the session collaborators
    - RequestPolicy.authorize() → tenant header, conditional bearer token,
      failure handler
    - security headers for requests aimed at the configured API base URL

  on failure (non-PUBLIC requests only):
    - httpx.TransportError        → Failure(status_code=None)   network failure
    - HTTP 4xx/5xx response       → Failure(status_code, message from JSON body)
    - classify the failure, log the Decision, call sign_out() exactly once for
      SIGN_OUT, then re-raise the ORIGINAL exception so the caller still shows
      an error

  PUBLIC failures are re-raised with no decision at all. 1xx-3xx responses
  are returned as-is (redirects are not followed). There are no retries.
  Cancellation (asyncio.CancelledError) propagates untouched and produces no
  decision.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from clientguard.config import Config, TransportConfig
from clientguard.constants import (
    AUTHORIZATION_HEADER,
    DEFAULT_KEEPALIVE_EXPIRY_S,
)
from clientguard.models.decision import Decision, FailureKind
from clientguard.models.request import Failure, OutgoingRequest, ResponseOutcome, Success
from clientguard.policy.interceptor import Authorization, RequestPolicy
from clientguard.session.interfaces import (
    SessionInspector,
    SessionTerminator,
    TokenProvider,
)
from clientguard.session.store import snapshot_session_kind, snapshot_token_state
from clientguard.transport.headers import (
    DEFAULT_SECURITY_HEADERS,
    apply_security_headers,
    extract_error_message,
)
from clientguard.utils.logger import get_logger, reset_request_id, set_request_id
from clientguard.utils.ulid import generate_ulid

logger = get_logger(__name__)

# (log level, message) per failure kind. Token values are never logged.
_DECISION_LOG: dict[FailureKind, tuple[str, str]] = {
    FailureKind.NETWORK_FAILURE: ("info", "Network error — connection failed"),
    FailureKind.AUTH_FAILURE: ("warning", "Authentication failure detected — signing out"),
    FailureKind.BACKEND_ANOMALY_401: (
        "warning",
        "401 received but not an auth failure — treating as backend issue",
    ),
    FailureKind.ADMIN_BYPASSED_401: ("info", "Admin session — ignoring 401 from backend API"),
    FailureKind.EXEMPT_BYPASSED_401: ("info", "401 from no-logout endpoint — not signing out"),
    FailureKind.OTHER_HTTP_FAILURE: ("info", "Request failed"),
}


# ─── httpx.AsyncClient factory ────────────────────────────────────────────────


def create_http_client(config: Optional[TransportConfig] = None) -> httpx.AsyncClient:
    """Create the shared httpx.AsyncClient with connection pooling configured.

    Create once per application and reuse; never instantiate per request.
    """
    config = config or TransportConfig()
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_connections,
            keepalive_expiry=DEFAULT_KEEPALIVE_EXPIRY_S,
        ),
        timeout=httpx.Timeout(config.timeout_s),
        follow_redirects=False,  # surface 3xx to the caller; do not resolve
    )


def response_outcome(response: httpx.Response) -> ResponseOutcome:
    """Map a received response to ``Success`` (1xx-3xx) or ``Failure`` (4xx/5xx).

    A Failure carries the status code and the message from a JSON error body;
    a Success carries the response itself as its body.
    """
    if response.is_error:
        return Failure(response.status_code, extract_error_message(response))
    return Success(response)


# ─── AuthorizedClient ─────────────────────────────────────────────────────────


class AuthorizedClient:
    """Sends OutgoingRequests through the authorization policy.

    Args:
        http_client:      Shared httpx.AsyncClient (see ``create_http_client``).
        policy:           RequestPolicy deciding headers and failure handling.
        tokens:           TokenProvider read before each request.
        session:          SessionInspector read before each request.
        terminator:       SessionTerminator invoked on SIGN_OUT decisions.
        api_url:          API base URL; relative paths are joined onto it and
                          security headers only go to URLs under it.
        security_headers: Header set for API requests; None disables the step.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        policy: RequestPolicy,
        tokens: TokenProvider,
        session: SessionInspector,
        terminator: SessionTerminator,
        api_url: str = "",
        security_headers: Optional[Mapping[str, str]] = DEFAULT_SECURITY_HEADERS,
    ) -> None:
        self.http_client = http_client
        self.policy = policy
        self.tokens = tokens
        self.session = session
        self.terminator = terminator
        self.api_url = api_url.rstrip("/")
        self.security_headers = security_headers
        self._protected_headers = frozenset(
            {AUTHORIZATION_HEADER.lower(), policy.tenant_header_name.lower()}
        )

    @classmethod
    def from_config(
        cls,
        config: Config,
        store: Any,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "AuthorizedClient":
        """Build a client whose three session collaborators are all ``store``."""
        return cls(
            http_client=http_client or create_http_client(config.transport),
            policy=RequestPolicy.from_config(config.policy),
            tokens=store,
            session=store,
            terminator=store,
            api_url=config.transport.api_url,
            security_headers=(
                DEFAULT_SECURITY_HEADERS if config.transport.security_headers_enabled else None
            ),
        )

    async def __aenter__(self) -> "AuthorizedClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    # ── Request preparation ──────────────────────────────────────────────────

    def resolve_url(self, path_or_url: str) -> str:
        """Join a relative path onto ``api_url``; absolute URLs pass through."""
        if "://" in path_or_url or not self.api_url:
            return path_or_url
        return f"{self.api_url}/{path_or_url.lstrip('/')}"

    def prepare(self, request: OutgoingRequest) -> Authorization:
        """Run the before-send policy steps without dispatching anything."""
        token_state = snapshot_token_state(self.tokens)
        session_kind = snapshot_session_kind(self.session)
        auth = self.policy.authorize(request, token_state, session_kind)

        if self.security_headers is not None:
            secured = apply_security_headers(
                auth.request,
                self.api_url,
                self.security_headers,
                protected=self._protected_headers,
            )
            auth = auth._replace(request=secured)

        logger.debug(
            "Request authorized",
            method=auth.request.method,
            url=auth.request.url,
            url_class=auth.url_class.value,
            session_kind=session_kind.value,
            token_attached=AUTHORIZATION_HEADER in auth.request.headers,
        )
        return auth

    def _build_httpx_request(self, request: OutgoingRequest) -> httpx.Request:
        kwargs: dict[str, Any] = {}
        if isinstance(request.body, (bytes, str)):
            kwargs["content"] = request.body
        elif request.body is not None:
            kwargs["json"] = request.body
        return self.http_client.build_request(
            request.method, request.url, headers=request.headers, **kwargs
        )

    # ── Failure handling ──────────────────────────────────────────────────────

    def handle_failure(self, auth: Authorization, failure: Failure) -> Optional[Decision]:
        """Classify ``failure`` and act on the decision.

        Returns None for PUBLIC requests, which have no failure handler.
        """
        if auth.on_failure is None:
            logger.debug(
                "Public request failed — surfaced to caller",
                url=auth.request.url,
                status_code=failure.status_code,
            )
            return None

        decision = auth.on_failure(failure)
        level, message = _DECISION_LOG[decision.kind]
        getattr(logger, level)(
            message,
            url=auth.request.url,
            status_code=decision.status_code,
            url_class=decision.url_class.value,
            decision=decision.action.value,
            failure_kind=decision.kind.value,
        )

        if decision.signs_out:
            self.terminator.sign_out()
        return decision

    # ── Dispatch ──────────────────────────────────────────────────────────────

    async def send(self, request: OutgoingRequest) -> httpx.Response:
        """Authorize and dispatch ``request``.

        Returns:
            The httpx.Response for any status below 400.

        Raises:
            httpx.TransportError:  Network-layer failure, re-raised unchanged.
            httpx.HTTPStatusError: 4xx/5xx response, after the failure decision
                                   (and sign-out, if any) has been applied.
        """
        request_id_token = set_request_id(generate_ulid())
        try:
            auth = self.prepare(request)
            try:
                response = await self.http_client.send(self._build_httpx_request(auth.request))
            except httpx.TransportError as exc:
                self.handle_failure(auth, Failure(None, str(exc) or type(exc).__name__))
                raise

            outcome = response_outcome(response)
            if isinstance(outcome, Failure):
                self.handle_failure(auth, outcome)
                raise httpx.HTTPStatusError(
                    f"{response.status_code} {response.reason_phrase} for {auth.request.url}",
                    request=response.request,
                    response=response,
                )
            return response
        finally:
            reset_request_id(request_id_token)

    async def request(
        self,
        method: str,
        path_or_url: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        outgoing = OutgoingRequest(
            url=self.resolve_url(path_or_url),
            method=method,
            headers=httpx.Headers(headers or {}),
            body=body,
        )
        return await self.send(outgoing)

    async def get(self, path_or_url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path_or_url, **kwargs)

    async def post(self, path_or_url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path_or_url, **kwargs)

    async def put(self, path_or_url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path_or_url, **kwargs)

    async def delete(self, path_or_url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path_or_url, **kwargs)
