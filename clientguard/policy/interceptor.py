"""Request authorization policy.

``RequestPolicy.authorize()`` is the single before-send entry point. It turns a
caller's ``OutgoingRequest`` into the request that actually goes on the wire and
hands back the failure handler for that request class:

  1. Classify the URL (``UrlClassifier``).
  2. Set the tenant header on EVERY request, PUBLIC included. The tenant id is
     not secret material and is exempt from token gating.
  3. PUBLIC → return with the tenant header only and ``on_failure=None``.
     Login and OTP flows handle their own errors and are never subject to the
     automatic sign-out policy.
  4. SECURE / SECURE_NO_LOGOUT → attach ``Authorization: Bearer <token>`` iff
     the token is present and not expired. A missing or expired token does NOT
     block the request; the server rejects unauthenticated calls.
  5. Install ``on_failure`` bound to the URL class and session kind.

Token state and session kind are explicit parameters; this module never reads
ambient session state and never mutates the caller's request.
"""

from __future__ import annotations

import functools
from typing import Callable, Iterable, NamedTuple, Optional

from clientguard.config import PolicyConfig
from clientguard.constants import (
    AUTHORIZATION_HEADER,
    BEARER_PREFIX,
    DEFAULT_AUTH_FAILURE_PHRASES,
    DEFAULT_TENANT_HEADER_NAME,
    DEFAULT_TENANT_HEADER_VALUE,
)
from clientguard.models.decision import Decision
from clientguard.models.request import (
    Failure,
    OutgoingRequest,
    SessionKind,
    TokenState,
    UrlClass,
)
from clientguard.policy.classifier import UrlClassifier
from clientguard.policy.failure import classify_failure

FailureHandler = Callable[[Failure], Decision]


class Authorization(NamedTuple):
    """Result of ``RequestPolicy.authorize()``.

    Fields:
        request:    The request to dispatch (a new object; the input is untouched).
        url_class:  Class assigned to the request.
        on_failure: Failure → Decision for non-PUBLIC requests; None for PUBLIC.
    """

    request: OutgoingRequest
    url_class: UrlClass
    on_failure: Optional[FailureHandler]


class RequestPolicy:
    """Decides per request whether and how to attach credentials."""

    def __init__(
        self,
        classifier: Optional[UrlClassifier] = None,
        tenant_header_name: str = DEFAULT_TENANT_HEADER_NAME,
        tenant_header_value: str = DEFAULT_TENANT_HEADER_VALUE,
        auth_failure_phrases: Iterable[str] = DEFAULT_AUTH_FAILURE_PHRASES,
    ) -> None:
        self.classifier = classifier or UrlClassifier()
        self.tenant_header_name = tenant_header_name
        self.tenant_header_value = tenant_header_value
        self.auth_failure_phrases = tuple(auth_failure_phrases)

    @classmethod
    def from_config(cls, config: PolicyConfig) -> "RequestPolicy":
        return cls(
            classifier=UrlClassifier.from_config(config),
            tenant_header_name=config.tenant_header_name,
            tenant_header_value=config.tenant_header_value,
            auth_failure_phrases=config.auth_failure_phrases,
        )

    def authorize(
        self,
        request: OutgoingRequest,
        token_state: TokenState,
        session_kind: SessionKind,
    ) -> Authorization:
        """Produce the outgoing request and its failure handler.

        Args:
            request:      Caller's request. Never mutated.
            token_state:  Snapshot of the token store at decision time.
            session_kind: Snapshot of the session kind at decision time.

        Returns:
            Authorization(request, url_class, on_failure).
        """
        url_class = self.classifier.classify(request.url)
        outgoing = request.with_header(self.tenant_header_name, self.tenant_header_value)

        if url_class is UrlClass.PUBLIC:
            return Authorization(outgoing, url_class, None)

        if token_state.has_valid_token:
            outgoing = outgoing.with_header(
                AUTHORIZATION_HEADER, BEARER_PREFIX + token_state.token_value
            )

        on_failure = functools.partial(
            classify_failure,
            url_class=url_class,
            session_kind=session_kind,
            phrases=self.auth_failure_phrases,
        )
        return Authorization(outgoing, url_class, on_failure)
