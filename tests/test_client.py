from __future__ import annotations

import pytest
import requests

from conftest import FakeResponse, gemini_error, gemini_reply
from tablescan.errors import (
    AuthError,
    EmptyResultError,
    ResponseFormatError,
    TransportError,
    UnknownExtractionError,
)
from tablescan.image.encoding import EncodedPayload
from tablescan.llm.client import GeminiTableClient, classify_error
from tablescan.llm.prompts import TABLE_RESPONSE_SCHEMA

PAYLOAD = EncodedPayload(data="aGVsbG8=", mime_type="image/jpeg")
ROWS = [["Name", "Qty", "Price"], ["Bolt", "5", "2.50"]]


@pytest.fixture
def client(app_config) -> GeminiTableClient:
    return GeminiTableClient(app_config.gemini)


class TestRequest:
    def test_sends_single_request_with_schema(self, client, fake_post):
        post = fake_post(FakeResponse(200, gemini_reply(ROWS)))
        client.extract(PAYLOAD, "abc123")

        assert len(post.calls) == 1
        url, kwargs = post.calls[0]
        assert url == "https://gemini.test/v1beta/models/gemini-test:generateContent"
        assert kwargs["headers"]["x-goog-api-key"] == "abc123"

        body = kwargs["json"]
        inline = body["contents"][0]["parts"][1]["inline_data"]
        assert inline == {"mime_type": "image/jpeg", "data": "aGVsbG8="}
        generation = body["generationConfig"]
        assert generation["responseMimeType"] == "application/json"
        assert generation["responseSchema"] == TABLE_RESPONSE_SCHEMA
        assert generation["responseSchema"]["items"]["items"] == {"type": "STRING"}

    def test_uses_configured_timeout(self, client, fake_post):
        post = fake_post(FakeResponse(200, gemini_reply(ROWS)))
        client.extract(PAYLOAD, "abc123")
        assert post.calls[0][1]["timeout"] == client.config.timeout


class TestSuccess:
    def test_returns_table(self, client, fake_post):
        fake_post(FakeResponse(200, gemini_reply(ROWS)))
        table = client.extract(PAYLOAD, "abc123")
        assert table.rows == ROWS

    def test_ragged_rows_are_kept(self, client, fake_post):
        rows = [["A", "B", "C"], ["1"], ["1", "2"]]
        fake_post(FakeResponse(200, gemini_reply(rows)))
        assert client.extract(PAYLOAD, "k").rows == rows

    def test_joins_multiple_text_parts(self, client, fake_post):
        reply = {
            "candidates": [
                {"content": {"parts": [{"text": '[["a", '}, {"text": '"b"]]'}]}}
            ]
        }
        fake_post(FakeResponse(200, reply))
        assert client.extract(PAYLOAD, "k").rows == [["a", "b"]]


class TestEmptyResult:
    def test_zero_rows(self, client, fake_post):
        fake_post(FakeResponse(200, gemini_reply([])))
        with pytest.raises(EmptyResultError):
            client.extract(PAYLOAD, "k")

    def test_no_candidates(self, client, fake_post):
        fake_post(FakeResponse(200, {"candidates": []}))
        with pytest.raises(EmptyResultError):
            client.extract(PAYLOAD, "k")

    def test_blocked_prompt_is_transport_error(self, client, fake_post):
        fake_post(FakeResponse(200, {"promptFeedback": {"blockReason": "SAFETY"}}))
        with pytest.raises(TransportError, match="SAFETY"):
            client.extract(PAYLOAD, "k")


class TestErrors:
    def test_invalid_key_message_is_auth_error(self, client, fake_post):
        fake_post(FakeResponse(400, gemini_error("API key not valid. Please pass a valid API key.")))
        with pytest.raises(AuthError):
            client.extract(PAYLOAD, "bad")

    def test_invalid_key_reason_is_auth_error(self, client, fake_post):
        fake_post(FakeResponse(400, gemini_error("Request rejected", reason="API_KEY_INVALID")))
        with pytest.raises(AuthError):
            client.extract(PAYLOAD, "bad")

    def test_other_remote_error_keeps_message(self, client, fake_post):
        fake_post(FakeResponse(503, gemini_error("The model is overloaded.", code=503)))
        with pytest.raises(TransportError) as exc_info:
            client.extract(PAYLOAD, "k")
        assert not isinstance(exc_info.value, AuthError)
        assert exc_info.value.message == "The model is overloaded."
        assert exc_info.value.details["status_code"] == 503

    def test_null_error_details_are_ignored(self, client, fake_post):
        body = {"error": {"code": 500, "message": "Internal error", "details": None}}
        fake_post(FakeResponse(500, body))
        with pytest.raises(TransportError, match="Internal error"):
            client.extract(PAYLOAD, "k")

    def test_non_json_error_body_uses_text(self, client, fake_post):
        fake_post(FakeResponse(502, None, text="Bad Gateway"))
        with pytest.raises(TransportError, match="Bad Gateway"):
            client.extract(PAYLOAD, "k")

    def test_empty_error_body_is_unknown(self, client, fake_post):
        fake_post(FakeResponse(500, None, text=""))
        with pytest.raises(UnknownExtractionError):
            client.extract(PAYLOAD, "k")

    def test_connection_error(self, client, fake_post):
        post = fake_post(exc=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(TransportError, match="Failed to connect"):
            client.extract(PAYLOAD, "k")
        assert len(post.calls) == 1

    def test_timeout_is_not_retried(self, client, fake_post):
        post = fake_post(exc=requests.exceptions.ReadTimeout())
        with pytest.raises(TransportError, match="timed out"):
            client.extract(PAYLOAD, "k")
        assert len(post.calls) == 1

    def test_unparseable_model_output(self, client, fake_post):
        reply = {"candidates": [{"content": {"parts": [{"text": "I see a table of bolts."}]}}]}
        fake_post(FakeResponse(200, reply))
        with pytest.raises(ResponseFormatError):
            client.extract(PAYLOAD, "k")


class TestClassifyError:
    @pytest.mark.parametrize(
        "message",
        ["API key not valid.", "api key not valid", "Error: API KEY NOT VALID. Please retry"],
    )
    def test_auth_signal_any_case(self, message):
        assert isinstance(classify_error(message), AuthError)

    def test_message_without_signal(self):
        error = classify_error("quota exceeded")
        assert type(error) is TransportError
        assert error.message == "quota exceeded"

    def test_no_message(self):
        assert isinstance(classify_error(None), UnknownExtractionError)
        assert isinstance(classify_error(""), UnknownExtractionError)
