"""Tests for dolphin.transport -- header parsing and the httpx-backed transport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from dolphin.exceptions import ConnectionError_
from dolphin.models import Envelope
from dolphin.transport import HttpxTransport, parse_header_lines

URL = "https://api.test/v2/droplets"
HEADERS = ["Content-type: application/json", "Authorization: Bearer abc123"]


def _transport(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)))


# ------------------------------------------------------------------ #
# parse_header_lines
# ------------------------------------------------------------------ #


class TestParseHeaderLines:
    def test_name_value_pairs(self) -> None:
        parsed = parse_header_lines(HEADERS)
        assert parsed["content-type"] == "application/json"
        assert parsed["Authorization"] == "Bearer abc123"

    def test_whitespace_is_stripped(self) -> None:
        parsed = parse_header_lines(["  X-Trace :   42  "])
        assert parsed["X-Trace"] == "42"

    def test_value_may_contain_colons(self) -> None:
        parsed = parse_header_lines(["X-Url: https://example.com:8443/a"])
        assert parsed["X-Url"] == "https://example.com:8443/a"

    def test_later_line_overrides_earlier(self) -> None:
        parsed = parse_header_lines(["Content-type: application/json", "content-type: text/plain"])
        assert parsed["Content-Type"] == "text/plain"

    def test_line_without_colon_raises(self) -> None:
        with pytest.raises(ValueError, match="Malformed header"):
            parse_header_lines(["no separator here"])


# ------------------------------------------------------------------ #
# HttpxTransport
# ------------------------------------------------------------------ #


class TestHttpxTransport:
    def test_get_returns_envelope(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, text='{"droplets": []}')

        with _transport(handler) as transport:
            env = transport.get(URL, HEADERS)

        assert env == Envelope(code=200, body='{"droplets": []}')
        assert seen == {"method": "GET", "url": URL, "auth": "Bearer abc123"}

    def test_post_sends_json_body(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(202, text='{"droplet": {"id": 7}}')

        with _transport(handler) as transport:
            env = transport.post(URL, {"name": "web-1", "tags": ["a"]}, HEADERS)

        assert env.code == 202
        assert seen == {"method": "POST", "body": {"name": "web-1", "tags": ["a"]}}

    def test_delete_with_empty_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            return httpx.Response(204)

        with _transport(handler) as transport:
            env = transport.delete(f"{URL}/7", HEADERS)

        assert env == Envelope(code=204, body="")

    def test_error_status_is_not_raised(self) -> None:
        """Non-2xx codes are returned in the envelope for the client to judge."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text='{"id": "not_found"}')

        with _transport(handler) as transport:
            env = transport.get(URL, HEADERS)

        assert env.code == 404
        assert "not_found" in env.body

    def test_connect_error_is_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _transport(handler) as transport:
            with pytest.raises(ConnectionError_, match="connection refused") as exc_info:
                transport.get(URL, HEADERS)

        assert exc_info.value.exit_code == 6

    def test_timeout_is_mapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with _transport(handler) as transport:
            with pytest.raises(ConnectionError_):
                transport.get(URL, HEADERS)

    def test_close_is_idempotent(self) -> None:
        transport = _transport(lambda request: httpx.Response(200))
        transport.close()
        transport.close()
