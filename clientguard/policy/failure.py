"""Failure classification for non-PUBLIC requests.

``classify_failure()`` is a pure decision function: no logging, no I/O, no
session access. It is a total function over its inputs and returns a
``Decision``; the transport layer logs the decision and performs the sign-out.

State machine (first matching row wins):

    status_code   session   url_class          message phrase   → action / kind
    ───────────   ───────   ─────────────────  ──────────────   ─────────────────────────────
    None          any       any                any              PASS_THROUGH / NETWORK_FAILURE
    401           ADMIN     any                any              PASS_THROUGH / ADMIN_BYPASSED_401
    401           STANDARD  SECURE_NO_LOGOUT   any              PASS_THROUGH / EXEMPT_BYPASSED_401
    401           STANDARD  SECURE             matched          SIGN_OUT     / AUTH_FAILURE
    401           STANDARD  SECURE             not matched      PASS_THROUGH / BACKEND_ANOMALY_401
    other         any       any                any              PASS_THROUGH / OTHER_HTTP_FAILURE

PUBLIC requests never get a failure handler from ``authorize()``. Should one be
classified anyway, it can never produce SIGN_OUT.
"""

from __future__ import annotations

from typing import Iterable, Optional

from clientguard.constants import DEFAULT_AUTH_FAILURE_PHRASES, HTTP_UNAUTHORIZED
from clientguard.models.decision import Decision, DecisionAction, FailureKind
from clientguard.models.request import Failure, SessionKind, UrlClass


def matches_auth_failure(
    message: Optional[str],
    phrases: Iterable[str] = DEFAULT_AUTH_FAILURE_PHRASES,
) -> bool:
    """True if ``message`` contains any auth-failure phrase (case-insensitive)."""
    if not message:
        return False
    folded = message.casefold()
    return any(phrase.casefold() in folded for phrase in phrases if phrase)


def classify_failure(
    failure: Failure,
    url_class: UrlClass,
    session_kind: SessionKind,
    phrases: Iterable[str] = DEFAULT_AUTH_FAILURE_PHRASES,
) -> Decision:
    """Decide whether a failed request should terminate the session.

    Args:
        failure:      The failure observed for the request.
        url_class:    Class the request was assigned before dispatch.
        session_kind: Session kind snapshotted before dispatch.
        phrases:      Auth-failure phrases to look for in the error message.

    Returns:
        A Decision. Only AUTH_FAILURE carries SIGN_OUT.
    """
    status = failure.status_code

    def _pass(kind: FailureKind) -> Decision:
        return Decision(
            action=DecisionAction.PASS_THROUGH,
            kind=kind,
            url_class=url_class,
            status_code=status,
        )

    if status is None:
        return _pass(FailureKind.NETWORK_FAILURE)

    if status != HTTP_UNAUTHORIZED:
        return _pass(FailureKind.OTHER_HTTP_FAILURE)

    if session_kind is SessionKind.ADMIN:
        return _pass(FailureKind.ADMIN_BYPASSED_401)

    if url_class is UrlClass.SECURE_NO_LOGOUT:
        return _pass(FailureKind.EXEMPT_BYPASSED_401)

    if url_class is UrlClass.PUBLIC:
        return _pass(FailureKind.BACKEND_ANOMALY_401)

    if matches_auth_failure(failure.error_message, phrases):
        return Decision(
            action=DecisionAction.SIGN_OUT,
            kind=FailureKind.AUTH_FAILURE,
            url_class=url_class,
            status_code=status,
        )

    return _pass(FailureKind.BACKEND_ANOMALY_401)
