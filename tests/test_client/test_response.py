"""Tests for dolphin.client.response -- lenient body decoding."""

from __future__ import annotations

from dolphin.client.response import decode_body, extract_key
from dolphin.models import Envelope


class TestDecodeBody:
    def test_object_is_decoded(self) -> None:
        env = Envelope(code=200, body='{"droplets": [{"id": 1}]}')
        assert decode_body(env) == {"droplets": [{"id": 1}]}

    def test_empty_body_is_none(self) -> None:
        assert decode_body(Envelope(code=204, body="")) is None

    def test_invalid_json_is_none(self) -> None:
        assert decode_body(Envelope(code=200, body="<html>oops</html>")) is None

    def test_non_object_document_is_none(self) -> None:
        assert decode_body(Envelope(code=200, body="[1, 2, 3]")) is None
        assert decode_body(Envelope(code=200, body='"text"')) is None

    def test_status_code_is_ignored(self) -> None:
        """Decoding looks only at the body; status checks happen elsewhere."""
        env = Envelope(code=500, body='{"id": "server_error"}')
        assert decode_body(env) == {"id": "server_error"}


class TestExtractKey:
    def test_present_key(self) -> None:
        env = Envelope(code=200, body='{"regions": [{"slug": "fra1"}]}')
        assert extract_key(env, "regions") == [{"slug": "fra1"}]

    def test_missing_key_is_none(self) -> None:
        env = Envelope(code=200, body='{"meta": {"total": 0}}')
        assert extract_key(env, "regions") is None

    def test_undecodable_body_is_none(self) -> None:
        assert extract_key(Envelope(code=200, body="not json"), "regions") is None

    def test_falsy_value_is_returned_as_is(self) -> None:
        env = Envelope(code=200, body='{"droplets": []}')
        assert extract_key(env, "droplets") == []
