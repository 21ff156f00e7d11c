"""Unit tests for InMemorySessionStore, jwt_is_expired() and the snapshots."""

from __future__ import annotations

import time

import jwt
import pytest

from clientguard.models.request import SessionKind
from clientguard.session import (
    InMemorySessionStore,
    SessionInspector,
    SessionTerminator,
    TokenProvider,
    jwt_is_expired,
    snapshot_session_kind,
    snapshot_token_state,
)

SECRET = "test-secret-not-used-for-verification"


def _token(**claims) -> str:
    return jwt.encode(claims, SECRET, algorithm="HS256")


class TestJwtIsExpired:
    def test_future_exp_is_valid(self) -> None:
        assert jwt_is_expired(_token(exp=int(time.time()) + 3600)) is False

    def test_past_exp_is_expired(self) -> None:
        assert jwt_is_expired(_token(exp=int(time.time()) - 10)) is True

    def test_missing_exp_is_expired(self) -> None:
        assert jwt_is_expired(_token(sub="user")) is True

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_undecodable_is_expired(self, token: str) -> None:
        assert jwt_is_expired(token) is True

    def test_leeway(self) -> None:
        token = _token(exp=int(time.time()) + 30)
        assert jwt_is_expired(token) is False
        assert jwt_is_expired(token, leeway_s=60) is True

    def test_signature_not_verified(self) -> None:
        token = jwt.encode(
            {"exp": int(time.time()) + 3600},
            "a-different-signing-key-of-adequate-length",
            algorithm="HS256",
        )
        assert jwt_is_expired(token) is False


class TestInMemorySessionStore:
    def test_implements_all_protocols(self) -> None:
        store = InMemorySessionStore()
        assert isinstance(store, TokenProvider)
        assert isinstance(store, SessionInspector)
        assert isinstance(store, SessionTerminator)

    def test_set_and_read_token(self) -> None:
        store = InMemorySessionStore(expiry_check=lambda t: False)
        store.set_token("tok")
        assert store.current_token() == "tok"
        assert store.is_expired("tok") is False
        assert store.is_admin_session() is False

    def test_admin_requires_token(self) -> None:
        store = InMemorySessionStore()
        store.set_token("tok", admin=True)
        assert store.is_admin_session() is True
        store.clear()
        assert store.is_admin_session() is False

    def test_sign_out_clears_and_counts(self) -> None:
        calls: list[str] = []
        store = InMemorySessionStore(on_sign_out=lambda: calls.append("redirect"))
        store.set_token("tok", admin=True)
        store.sign_out()
        assert store.current_token() is None
        assert store.is_admin_session() is False
        assert store.sign_out_count == 1
        assert calls == ["redirect"]

    def test_sign_out_callback_error_is_contained(self) -> None:
        def _boom() -> None:
            raise RuntimeError("navigation failed")

        store = InMemorySessionStore(on_sign_out=_boom)
        store.set_token("tok")
        store.sign_out()
        assert store.current_token() is None
        assert store.sign_out_count == 1


class TestSnapshots:
    def test_no_token(self) -> None:
        state = snapshot_token_state(InMemorySessionStore())
        assert state.token_value is None
        assert state.has_valid_token is False

    def test_expired_token(self) -> None:
        store = InMemorySessionStore(expiry_check=lambda t: True)
        store.set_token("tok")
        state = snapshot_token_state(store)
        assert state.token_value == "tok"
        assert state.is_expired is True
        assert state.has_valid_token is False

    def test_valid_jwt(self) -> None:
        store = InMemorySessionStore()
        store.set_token(_token(exp=int(time.time()) + 3600))
        assert snapshot_token_state(store).has_valid_token is True

    def test_session_kind(self) -> None:
        store = InMemorySessionStore()
        assert snapshot_session_kind(store) is SessionKind.STANDARD
        store.set_token("tok", admin=True)
        assert snapshot_session_kind(store) is SessionKind.ADMIN
