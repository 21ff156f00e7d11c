"""ClientGuard models package.

Defines the shared data contracts used across the policy and validation layers:

  - request.py  — OutgoingRequest, UrlClass, TokenState, SessionKind, Success, Failure
  - decision.py — Decision, DecisionAction, FailureKind (failure classification)
  - verdict.py  — ValidationVerdict, ValidationFailureKind, PasswordStrength
"""

from clientguard.models.decision import Decision, DecisionAction, FailureKind
from clientguard.models.request import (
    Failure,
    OutgoingRequest,
    ResponseOutcome,
    SessionKind,
    Success,
    TokenState,
    UrlClass,
)
from clientguard.models.verdict import (
    PasswordStrength,
    StrengthLevel,
    ValidationFailureKind,
    ValidationVerdict,
)

__all__ = [
    "Decision",
    "DecisionAction",
    "Failure",
    "FailureKind",
    "OutgoingRequest",
    "PasswordStrength",
    "ResponseOutcome",
    "SessionKind",
    "StrengthLevel",
    "Success",
    "TokenState",
    "UrlClass",
    "ValidationFailureKind",
    "ValidationVerdict",
]
