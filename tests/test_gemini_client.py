from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from techdocs_generator.common.errors import GenerationError, InvalidApiKeyError


def test_generate_success_with_usage(make_client, gemini_payload) -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_payload("Hello", 42))

    result = asyncio.run(make_client(handler).generate("write docs"))
    assert result.text == "Hello"
    assert result.total_tokens == 42
    assert seen["url"].endswith("/models/gemini-2.5-flash:generateContent")
    assert seen["key"] == "test-key"
    assert seen["body"] == {"contents": [{"parts": [{"text": "write docs"}]}]}


def test_generate_without_usage_metadata(make_client, gemini_payload) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=gemini_payload("Hi", None))

    result = asyncio.run(make_client(handler).generate("p"))
    assert result.text == "Hi"
    assert result.total_tokens is None


def test_invalid_api_key_body(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key.", "status": "INVALID_ARGUMENT"}}
        return httpx.Response(400, json=body)

    with pytest.raises(InvalidApiKeyError) as exc:
        asyncio.run(make_client(handler).generate("p"))
    assert exc.value.user_message == "Invalid API Key. Please check your configuration."


def test_invalid_api_key_exception_message(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("API key not valid")

    with pytest.raises(InvalidApiKeyError):
        asyncio.run(make_client(handler).generate("p"))


def test_network_failure_is_generic(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network timeout", request=request)

    with pytest.raises(GenerationError) as exc:
        asyncio.run(make_client(handler).generate("p"))
    assert not isinstance(exc.value, InvalidApiKeyError)
    assert exc.value.user_message == "Failed to generate content from the API. Please try again."
    assert "network timeout" not in str(exc.value)


def test_server_error_and_malformed_body_are_generic(make_client) -> None:
    def server_error(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"code": 500, "message": "internal"}})

    def empty(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": []})

    for handler in (server_error, empty):
        with pytest.raises(GenerationError) as exc:
            asyncio.run(make_client(handler).generate("p"))
        assert exc.value.user_message == "Failed to generate content from the API. Please try again."


def test_missing_key_warns_but_still_calls(make_client, gemini_payload, caplog: pytest.LogCaptureFixture) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=gemini_payload())

    with caplog.at_level(logging.WARNING, logger="techdocs.client.gemini"):
        asyncio.run(make_client(handler, api_key=None).generate("p"))
    assert len(calls) == 1
    assert any("API key is not set" in r.getMessage() for r in caplog.records)
