"""Async client for the Gemini generateContent REST endpoint.

One request per call: no retries, no streaming. Failures are collapsed into
GenerationError subclasses whose message is safe to show to users.
"""
from __future__ import annotations
import logging
import time
from typing import Any

import httpx

from techdocs_generator.common.config import Settings
from techdocs_generator.common.errors import GenerationError, InvalidApiKeyError
from techdocs_generator.common.schema import GenerationSuccess

LOGGER = logging.getLogger("techdocs.client.gemini")

INVALID_KEY_INDICATOR = "API key not valid"


def _error_detail(exc: Exception) -> str:
    """Best-effort description of a failure, including the API error body."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
            message = body.get("error", {}).get("message")
        except Exception:
            message = None
        return f"HTTP {exc.response.status_code}: {message or exc.response.text}"
    return str(exc)


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate.

    Raises:
        ValueError: If the payload carries no text.
    """
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback")
        raise ValueError(f"response has no candidates (promptFeedback={feedback})")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [p["text"] for p in parts if isinstance(p, dict) and p.get("text")]
    if not texts:
        raise ValueError(f"candidate has no text (finishReason={candidates[0].get('finishReason')})")
    return "".join(texts)


class GeminiClient:
    """
    Wraps the single "generate text from prompt" call.

    Args:
        settings: Credential, model, endpoint and timeout.
        transport: Optional httpx transport, used by tests to stub the API.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/models/{self.settings.model}:generateContent"

    async def generate(self, prompt: str) -> GenerationSuccess:
        """
        Generate text for a finished prompt.

        Args:
            prompt: Prompt built by the template registry.

        Returns:
            Generated text and total token count when the API reports one.

        Raises:
            InvalidApiKeyError: The API rejected the credential.
            GenerationError: Any other failure.
        """
        if not self.settings.api_key:
            LOGGER.warning("API key is not set (GEMINI_API_KEY / API_KEY); the request will likely fail")

        headers = {"x-goog-api-key": self.settings.api_key or ""}
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        start = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport) as client:
                r = await client.post(self.url, headers=headers, json=payload)
                r.raise_for_status()
                data = r.json()
            text = _extract_text(data)
        except Exception as e:
            detail = _error_detail(e)
            LOGGER.error("Error generating documentation: %s", detail)
            if INVALID_KEY_INDICATOR in detail:
                raise InvalidApiKeyError() from e
            raise GenerationError() from e

        usage = data.get("usageMetadata") or {}
        total = usage.get("totalTokenCount")
        LOGGER.info(
            "Generated %s chars in %sms (model=%s tokens=%s)",
            len(text),
            int((time.time() - start) * 1000),
            self.settings.model,
            total,
        )
        return GenerationSuccess(text=text, total_tokens=int(total) if total is not None else None)
