"""Password strength rating."""

from __future__ import annotations

from clientguard.constants import PASSWORD_MIN_LENGTH, PASSWORD_STRONG_LENGTH
from clientguard.models.verdict import PasswordStrength, StrengthLevel
from clientguard.patterns.definitions import (
    PASSWORD_DIGIT,
    PASSWORD_LOWERCASE,
    PASSWORD_SPECIAL,
    PASSWORD_UPPERCASE,
)
from clientguard.patterns.matcher import engine_text

# (check, issue) pairs in reporting order.
_CLASS_CHECKS = (
    (PASSWORD_LOWERCASE, "Password must contain lowercase letters"),
    (PASSWORD_UPPERCASE, "Password must contain uppercase letters"),
    (PASSWORD_DIGIT, "Password must contain numbers"),
    (PASSWORD_SPECIAL, "Password must contain special characters"),
)


def password_strength(password: str) -> PasswordStrength:
    """Rate ``password`` and list every failed requirement.

    Requirements: at least PASSWORD_MIN_LENGTH characters plus lowercase,
    uppercase, digit and special-character classes. A valid password is
    ``strong`` at PASSWORD_STRONG_LENGTH characters or more, else ``medium``;
    an invalid one is always ``weak``.

    >>> password_strength("Ab1!aaaa").strength.value
    'medium'
    """
    password = engine_text(password or "")
    issues: list[str] = []

    if len(password) < PASSWORD_MIN_LENGTH:
        issues.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    for pattern, issue in _CLASS_CHECKS:
        if not pattern.search(password):
            issues.append(issue)

    is_valid = not issues
    if not is_valid:
        strength = StrengthLevel.WEAK
    elif len(password) >= PASSWORD_STRONG_LENGTH:
        strength = StrengthLevel.STRONG
    else:
        strength = StrengthLevel.MEDIUM

    return PasswordStrength(is_valid=is_valid, strength=strength, issues=tuple(issues))
