from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from techdocs_generator.client.gemini import GeminiClient
from techdocs_generator.common.config import Settings

_ENV_VARS = (
    "GEMINI_API_KEY",
    "API_KEY",
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "GEMINI_TIMEOUT",
    "LOG_LEVEL",
    "TECHDOCS_CONFIG",
    "TECHDOCS_HOST",
    "TECHDOCS_PORT",
)


def gemini_payload(text: str = "Hello", total_tokens: int | None = 42) -> dict[str, Any]:
    data: dict[str, Any] = {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP", "index": 0}
        ],
    }
    if total_tokens is not None:
        data["usageMetadata"] = {"promptTokenCount": 30, "totalTokenCount": total_tokens}
    return data


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_client() -> Callable[..., GeminiClient]:
    """Build a GeminiClient whose HTTP traffic goes to `handler`."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], api_key: str | None = "test-key") -> GeminiClient:
        return GeminiClient(Settings(api_key=api_key), transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture(name="gemini_payload")
def _gemini_payload_fixture() -> Callable[..., dict[str, Any]]:
    return gemini_payload
