"""Unit tests for the structlog processors and ULID request ids."""

from __future__ import annotations

import re

from clientguard.utils.logger import (
    add_request_id,
    add_timestamp,
    clear_request_id,
    request_id_var,
    reset_request_id,
    set_request_id,
)
from clientguard.utils.ulid import generate_ulid

ULID_PATTERN = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


class TestRequestIdProcessor:
    def test_added_when_set(self) -> None:
        set_request_id("01HXYZ")
        try:
            event = add_request_id(None, "info", {"event": "x"})
        finally:
            clear_request_id()
        assert event["request_id"] == "01HXYZ"

    def test_absent_when_cleared(self) -> None:
        clear_request_id()
        assert "request_id" not in add_request_id(None, "info", {"event": "x"})
        assert request_id_var.get() is None

    def test_reset_restores_outer_id(self) -> None:
        outer = set_request_id("01OUTER")
        inner = set_request_id("01INNER")
        reset_request_id(inner)
        assert request_id_var.get() == "01OUTER"
        reset_request_id(outer)
        assert request_id_var.get() is None

    def test_timestamp(self) -> None:
        assert isinstance(add_timestamp(None, "info", {})["timestamp"], float)


class TestUlid:
    def test_format(self) -> None:
        assert ULID_PATTERN.match(generate_ulid())

    def test_unique(self) -> None:
        assert len({generate_ulid() for _ in range(100)}) == 100
