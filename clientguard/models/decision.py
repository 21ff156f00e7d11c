"""Failure-classification result types.

A ``Decision`` is the output of the pure ``classify_failure()`` function.
It names WHAT happened (``FailureKind``) and WHAT to do (``DecisionAction``);
acting on it (logging, signing out) is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from clientguard.models.request import UrlClass


class DecisionAction(str, Enum):
    SIGN_OUT = "SIGN_OUT"
    PASS_THROUGH = "PASS_THROUGH"


class FailureKind(str, Enum):
    """Error taxonomy for failed non-PUBLIC requests.

    Only AUTH_FAILURE terminates the session. Every other kind is surfaced to
    the caller unchanged.
    """

    NETWORK_FAILURE = "NETWORK_FAILURE"
    AUTH_FAILURE = "AUTH_FAILURE"
    BACKEND_ANOMALY_401 = "BACKEND_ANOMALY_401"
    ADMIN_BYPASSED_401 = "ADMIN_BYPASSED_401"
    EXEMPT_BYPASSED_401 = "EXEMPT_BYPASSED_401"
    OTHER_HTTP_FAILURE = "OTHER_HTTP_FAILURE"


@dataclass(frozen=True)
class Decision:
    """Outcome of classifying one failed request.

    Fields:
        action:      SIGN_OUT or PASS_THROUGH.
        kind:        Which branch of the classification produced the action.
        url_class:   Class of the request that failed.
        status_code: HTTP status of the failure (None for network failures).
    """

    action: DecisionAction
    kind: FailureKind
    url_class: UrlClass
    status_code: Optional[int] = None

    @property
    def signs_out(self) -> bool:
        return self.action is DecisionAction.SIGN_OUT
