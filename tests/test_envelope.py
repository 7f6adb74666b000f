"""Tests for bucket_console/envelope.py"""

import json

import pytest

from bucket_console.envelope import (
    MESSAGE_SOURCES,
    NO_MESSAGE_CONTENT,
    REQUEST_ID_SOURCES,
    unwrap,
)
from bucket_console.errors import EnvelopeError
from tests.fakes import sns_body


class TestUnwrap:
    def test_double_encoded_payload(self):
        env = unwrap({"MessageId": "m-1", "Body": sns_body({"message": "hi", "requestId": "r1"})}, 0)
        assert env.message_id == "m-1"
        assert env.timestamp == "2023-01-01T00:00:00Z"
        assert env.payload == {"message": "hi", "requestId": "r1"}
        assert json.loads(env.raw_message) == env.payload

    def test_missing_message_id_uses_batch_index(self):
        env = unwrap({"Body": sns_body({})}, 4)
        assert env.message_id == "msg-4"

    def test_missing_timestamp_uses_now(self):
        env = unwrap({"MessageId": "m", "Body": json.dumps({"Message": "{}"})}, 0)
        assert env.timestamp.endswith("Z")
        assert env.timestamp.startswith("20")

    def test_non_string_timestamp_uses_now(self):
        body = json.dumps({"Message": "{}", "Timestamp": 1672531200})
        env = unwrap({"MessageId": "m", "Body": body}, 0)
        assert isinstance(env.timestamp, str)
        assert env.timestamp.endswith("Z")

    def test_deeply_nested_inner_json_is_empty_payload(self):
        env = unwrap({"MessageId": "m", "Body": sns_body("[" * 100000)}, 0)
        assert env.payload == {}

    def test_invalid_inner_json_degrades_to_empty_payload(self):
        env = unwrap({"MessageId": "m", "Body": sns_body("plain text, not json")}, 0)
        assert env.payload == {}
        assert env.raw_message == "plain text, not json"

    def test_non_object_inner_json_is_empty_payload(self):
        env = unwrap({"MessageId": "m", "Body": sns_body("[1, 2, 3]")}, 0)
        assert env.payload == {}

    def test_missing_inner_message(self):
        env = unwrap({"MessageId": "m", "Body": json.dumps({"Timestamp": "t"})}, 0)
        assert env.payload == {}
        assert env.raw_message is None


class TestUnwrapErrors:
    @pytest.mark.parametrize("body", ["not json {", "[1, 2]", "42", "", None, "[" * 100000])
    def test_bad_outer_body_raises(self, body):
        with pytest.raises(EnvelopeError):
            unwrap({"MessageId": "m", "Body": body}, 0)


class TestPrecedence:
    def test_payload_message_wins(self):
        env = unwrap({"Body": sns_body({"message": "from payload"})}, 0)
        assert env.first_of(MESSAGE_SOURCES, NO_MESSAGE_CONTENT) == "from payload"

    def test_falls_back_to_raw_envelope_message(self):
        env = unwrap({"Body": sns_body("raw text")}, 0)
        assert env.first_of(MESSAGE_SOURCES, NO_MESSAGE_CONTENT) == "raw text"

    def test_falls_back_to_literal(self):
        env = unwrap({"Body": json.dumps({"Timestamp": "t"})}, 0)
        assert env.first_of(MESSAGE_SOURCES, NO_MESSAGE_CONTENT) == "No message content"

    def test_request_id_falls_back_to_envelope_message_id(self):
        env = unwrap({"Body": sns_body({}, message_id="sns-42")}, 0)
        assert env.first_of(REQUEST_ID_SOURCES, "unknown") == "sns-42"
