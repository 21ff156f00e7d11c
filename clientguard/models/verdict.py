"""Validation and sanitization result types.

Validation failures are returned as data, never raised, so form layers can
render field-level messages without interrupting control flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ValidationFailureKind(str, Enum):
    """Reason a ValidationVerdict is invalid. Values double as message keys."""

    REQUIRED = "required"
    EMAIL = "email"
    STRONG_PASSWORD = "strongPassword"
    PHONE_NUMBER = "phoneNumber"
    URL = "url"
    ALPHANUMERIC = "alphanumeric"
    SQL_INJECTION = "sqlInjection"
    XSS = "xss"
    UNSAFE_FILE_NAME = "unsafeFileName"
    CREDIT_CARD = "creditCard"
    DATE_RANGE = "dateRange"
    NUMERIC_RANGE = "numericRange"
    STRING_LENGTH = "stringLength"
    WHITELIST = "whitelist"
    NO_HTML = "noHtml"
    PATTERN = "pattern"
    WHITESPACE = "whitespace"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class ValidationVerdict:
    """Result of one validator call. Produced fresh per call, never mutated.

    Fields:
        is_valid:     True when the value passed.
        failure_kind: Why it failed (None when valid).
        details:      Extra context for message construction: the offending
                      ``value`` plus bounds such as ``min``/``max``.
    """

    is_valid: bool
    failure_kind: Optional[ValidationFailureKind] = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls) -> "ValidationVerdict":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, kind: ValidationFailureKind, **details: Any) -> "ValidationVerdict":
        return cls(is_valid=False, failure_kind=kind, details=details)

    def __bool__(self) -> bool:
        return self.is_valid


class StrengthLevel(str, Enum):
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


@dataclass(frozen=True)
class PasswordStrength:
    """Outcome of ``password_strength()``.

    ``issues`` holds one human-readable string per failed check, in check order.
    """

    is_valid: bool
    strength: StrengthLevel
    issues: tuple[str, ...] = ()
