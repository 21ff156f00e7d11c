"""Unit tests for apply_security_headers() and extract_error_message()."""

from __future__ import annotations

import httpx
import pytest

from clientguard.models.request import OutgoingRequest
from clientguard.transport.headers import (
    DEFAULT_SECURITY_HEADERS,
    apply_security_headers,
    extract_error_message,
)

API = "https://bank.example.com/api"


class TestApplySecurityHeaders:
    def test_api_request_gets_full_set(self) -> None:
        request = OutgoingRequest(url=API + "/v1/clients")
        secured = apply_security_headers(request, API)
        for name, value in DEFAULT_SECURITY_HEADERS.items():
            assert secured.headers[name] == value

    def test_third_party_untouched(self) -> None:
        request = OutgoingRequest(url="https://cdn.other.com/lib.js")
        assert apply_security_headers(request, API) is request

    @pytest.mark.parametrize(
        "url",
        [
            "https://bank.example.com.evil.net/api/v1/x",
            "https://bank.example.com/apiary/v1",
            "http://bank.example.com/api/v1/x",
            "https://bank.example.com:8443/api/v1/x",
            "https://evil.net/?next=https://bank.example.com/api",
        ],
    )
    def test_lookalike_urls_untouched(self, url: str) -> None:
        request = OutgoingRequest(url=url)
        assert apply_security_headers(request, API) is request

    @pytest.mark.parametrize(
        "url",
        [
            "https://bank.example.com/api",
            "https://BANK.example.com/api/v1?q=1",
        ],
    )
    def test_base_url_and_host_case(self, url: str) -> None:
        secured = apply_security_headers(OutgoingRequest(url=url), API + "/")
        assert secured.headers["X-Frame-Options"] == "DENY"

    def test_empty_api_url_disables(self) -> None:
        request = OutgoingRequest(url=API + "/v1/clients")
        assert apply_security_headers(request, "") is request

    def test_caller_value_wins(self) -> None:
        request = OutgoingRequest(url=API + "/v1/x", headers={"cache-control": "max-age=60"})
        secured = apply_security_headers(request, API)
        assert secured.header_values("Cache-Control") == ["max-age=60"]

    def test_protected_headers_never_written(self) -> None:
        request = OutgoingRequest(url=API + "/v1/x")
        secured = apply_security_headers(
            request,
            API,
            headers={"Authorization": "Bearer injected", "X-Tenant": "evil", "X-A": "1"},
            protected=frozenset({"authorization", "x-tenant"}),
        )
        assert "Authorization" not in secured.headers
        assert "X-Tenant" not in secured.headers
        assert secured.headers["X-A"] == "1"

    def test_original_request_not_mutated(self) -> None:
        request = OutgoingRequest(url=API + "/v1/x")
        apply_security_headers(request, API)
        assert "X-Frame-Options" not in request.headers


def _response(status: int = 401, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", API), **kwargs)


class TestExtractErrorMessage:
    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"message": "Invalid token"}, "Invalid token"),
            ({"error": {"message": "Session expired"}}, "Session expired"),
            ({"error": "Unauthorized"}, "Unauthorized"),
            ({"detail": "nope"}, None),
            ({"message": 42}, None),
            (["Invalid token"], None),
        ],
    )
    def test_json_shapes(self, body, expected) -> None:
        assert extract_error_message(_response(json=body)) == expected

    def test_non_json_body(self) -> None:
        assert extract_error_message(_response(text="<html>401</html>")) is None

    def test_empty_body(self) -> None:
        assert extract_error_message(_response()) is None

    def test_invalid_utf8(self) -> None:
        response = _response(
            content=b"\xff\xfe{", headers={"content-type": "application/json"}
        )
        assert extract_error_message(response) is None
