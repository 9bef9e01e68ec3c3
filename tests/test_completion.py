from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from prompt_summarizer.common.errors import CompletionAPIError
from prompt_summarizer.common.templates import GenerationConfig
from prompt_summarizer.serve.completion import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
    CompletionClient,
)


class _Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, body: Any = None, content: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    def payload(self, i: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[i].content)


def _ok(text: str) -> dict[str, Any]:
    return {
        "choices": [{"message": {"role": "assistant", "content": text}, "index": 0}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 3, "total_tokens": 13},
    }


def _client(rec: _Recorder, **kwargs: Any) -> CompletionClient:
    return CompletionClient("sk-test", transport=httpx.MockTransport(rec), **kwargs)


def test_generate_returns_message_content() -> None:
    rec = _Recorder(body=_ok("A fox."))
    assert _client(rec).generate("Summarize: The quick brown fox") == "A fox."


def test_generate_sends_system_and_user_turns() -> None:
    rec = _Recorder(body=_ok("ok"))
    _client(rec).generate("Summarize: hi")
    req = rec.requests[0]
    assert req.method == "POST"
    assert str(req.url) == "https://api.openai.com/v1/chat/completions"
    assert req.headers["Authorization"] == "Bearer sk-test"
    assert rec.payload()["messages"] == [
        {"role": "system", "content": DEFAULT_SYSTEM_PROMPT},
        {"role": "user", "content": "Summarize: hi"},
    ]


def test_generate_uses_defaults_for_absent_config() -> None:
    rec = _Recorder(body=_ok("ok"))
    _client(rec).generate("p", GenerationConfig())
    payload = rec.payload()
    assert payload["model"] == DEFAULT_MODEL
    assert payload["temperature"] == DEFAULT_TEMPERATURE
    assert payload["max_tokens"] == DEFAULT_MAX_TOKENS


def test_generate_applies_config_values() -> None:
    rec = _Recorder(body=_ok("ok"))
    _client(rec).generate("p", GenerationConfig(model="gpt-4o-mini", temperature=0.0, max_tokens=32))
    payload = rec.payload()
    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == 0.0
    assert payload["max_tokens"] == 32


def test_custom_base_url_and_system_prompt() -> None:
    rec = _Recorder(body=_ok("ok"))
    client = _client(rec, base_url="http://localhost:8001/v1", system_prompt="Be brief.")
    client.generate("p")
    assert str(rec.requests[0].url) == "http://localhost:8001/v1/chat/completions"
    assert rec.payload()["messages"][0]["content"] == "Be brief."


def test_quota_error_is_flagged() -> None:
    rec = _Recorder(
        status_code=429,
        body={
            "error": {
                "message": "You exceeded your current quota.",
                "type": "insufficient_quota",
                "param": None,
                "code": "insufficient_quota",
            }
        },
    )
    with pytest.raises(CompletionAPIError) as ei:
        _client(rec).generate("p")
    assert ei.value.is_quota_exceeded
    assert ei.value.status_code == 429
    assert str(ei.value) == "You exceeded your current quota."
    assert len(rec.requests) == 1


def test_other_api_error_is_not_quota() -> None:
    rec = _Recorder(
        status_code=401,
        body={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error", "code": "invalid_api_key"}},
    )
    with pytest.raises(CompletionAPIError) as ei:
        _client(rec).generate("p")
    assert not ei.value.is_quota_exceeded
    assert ei.value.code == "invalid_api_key"


def test_non_json_error_body() -> None:
    rec = _Recorder(status_code=502, content=b"<html>Bad Gateway</html>")
    with pytest.raises(CompletionAPIError, match="HTTP 502"):
        _client(rec).generate("p")


def test_malformed_success_body() -> None:
    rec = _Recorder(body={"choices": []})
    with pytest.raises(CompletionAPIError, match="Malformed"):
        _client(rec).generate("p")


def test_transport_error_propagates_untouched() -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = CompletionClient("sk-test", transport=httpx.MockTransport(boom))
    with pytest.raises(httpx.ConnectError):
        client.generate("p")
