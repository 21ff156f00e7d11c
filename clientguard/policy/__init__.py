"""ClientGuard request authorization policy.

Public API:
  - UrlClassifier       — URL → UrlClass
  - RequestPolicy       — before-send authorize() producing an Authorization
  - Authorization       — (request, url_class, on_failure)
  - classify_failure()  — pure Failure → Decision state machine
  - matches_auth_failure()
"""

from __future__ import annotations

from clientguard.policy.classifier import UrlClassifier
from clientguard.policy.failure import classify_failure, matches_auth_failure
from clientguard.policy.interceptor import Authorization, FailureHandler, RequestPolicy

__all__ = [
    "Authorization",
    "FailureHandler",
    "RequestPolicy",
    "UrlClassifier",
    "classify_failure",
    "matches_auth_failure",
]
