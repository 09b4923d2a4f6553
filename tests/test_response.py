"""
Tests for decoding transport outcomes.
"""

import pytest

from hookline_filter.response import (
    DecodeResult,
    ResponseOutcome,
    TransportFailure,
    decode,
    is_json_response,
)


class TestDecodeSuccess:
    def test_text_body_is_returned_verbatim(self):
        result = decode(ResponseOutcome(200, {}, "Bom dia"))
        assert not result.failed
        assert result.value == "Bom dia"

    def test_json_body_is_parsed(self):
        result = decode(ResponseOutcome(200, {"content-type": "application/json"}, '{"id": 10}'))
        assert result.value == {"id": 10}

    def test_json_detection_is_case_insensitive(self):
        outcome = ResponseOutcome(
            201, {"Content-Type": "Application/JSON; charset=utf-8"}, "[1, 2]"
        )
        assert is_json_response(outcome)
        assert decode(outcome).value == [1, 2]

    def test_json_looking_body_without_json_content_type_stays_text(self):
        result = decode(ResponseOutcome(200, {"content-type": "text/plain"}, '{"id": 10}'))
        assert result.value == '{"id": 10}'

    @pytest.mark.parametrize("status", [200, 204, 299])
    def test_2xx_is_success(self, status):
        assert not decode(ResponseOutcome(status, {}, "")).failed


class TestDecodeFailure:
    @pytest.mark.parametrize("status", [199, 300, 404, 500])
    def test_non_2xx_fails(self, status):
        result = decode(ResponseOutcome(status, {}, "whatever"))
        assert result.failed
        assert result.reason == f"http_status_{status}"

    def test_invalid_json_fails(self):
        result = decode(ResponseOutcome(200, {"content-type": "application/json"}, "{nope"))
        assert result.failed
        assert result.reason.startswith("json_parse_error")

    def test_empty_json_body_fails(self):
        assert decode(ResponseOutcome(200, {"content-type": "application/json"}, "")).failed

    def test_head_response_is_not_parsed(self):
        outcome = ResponseOutcome(200, {"content-type": "application/json"}, "")
        assert decode(outcome, "head") == DecodeResult(value="")

    def test_transport_failure(self):
        result = decode(TransportFailure("ConnectError: refused"))
        assert result.failed
        assert "refused" in result.reason
