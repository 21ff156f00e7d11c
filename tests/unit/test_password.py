"""Unit tests for password_strength()."""

from __future__ import annotations

import pytest

from clientguard.models.verdict import StrengthLevel
from clientguard.sanitizer.password import password_strength


class TestRating:
    def test_medium_at_minimum_length(self) -> None:
        result = password_strength("Ab1!aaaa")
        assert result.is_valid is True
        assert result.strength is StrengthLevel.MEDIUM
        assert result.issues == ()

    def test_strong_at_twelve_characters(self) -> None:
        result = password_strength("Ab1!aaaaaaaa")
        assert result.is_valid is True
        assert result.strength is StrengthLevel.STRONG

    def test_long_but_missing_class_is_weak(self) -> None:
        result = password_strength("abcdefghijklmnop1!")
        assert result.is_valid is False
        assert result.strength is StrengthLevel.WEAK
        assert result.issues == ("Password must contain uppercase letters",)


class TestIssues:
    def test_empty_password_lists_everything(self) -> None:
        result = password_strength("")
        assert result.strength is StrengthLevel.WEAK
        assert result.issues == (
            "Password must be at least 8 characters long",
            "Password must contain lowercase letters",
            "Password must contain uppercase letters",
            "Password must contain numbers",
            "Password must contain special characters",
        )

    def test_none_treated_as_empty(self) -> None:
        assert password_strength(None).is_valid is False  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "password, issue",
        [
            ("Ab1!aaa", "Password must be at least 8 characters long"),
            ("AB1!AAAA", "Password must contain lowercase letters"),
            ("Abc!aaaa", "Password must contain numbers"),
            ("Ab1aaaaa", "Password must contain special characters"),
        ],
    )
    def test_single_issue(self, password: str, issue: str) -> None:
        assert password_strength(password).issues == (issue,)

    def test_underscore_is_not_special(self) -> None:
        assert "Password must contain special characters" in password_strength(
            "Ab1_aaaa"
        ).issues


def test_lone_surrogate_rated_without_raising() -> None:
    result = password_strength("Ab1!aaa\ud800")
    assert result.is_valid is True
    assert result.strength is StrengthLevel.MEDIUM
