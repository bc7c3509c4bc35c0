"""
Client for the external text-generation provider (Gemini).

One request per call, bounded by a timeout; callers decide how to degrade.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Protocol

import httpx
import structlog

from mindwork.core.config import Settings

logger = structlog.get_logger()


class GenAIClientError(Exception):
    """Base exception for text-generation client errors."""


class GenAIConfigError(GenAIClientError):
    """Raised when the provider API key is not configured."""


class GenAITransportError(GenAIClientError):
    """Raised when the request cannot be delivered or times out."""


class GenAIStatusError(GenAIClientError):
    """Raised when the provider answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GenAIEmptyResponseError(GenAIClientError):
    """Raised when the provider answers without any candidate text."""


@dataclass(slots=True)
class GenAIResponse:
    """Parsed provider response."""

    text: str
    model: str
    latency_ms: int
    finish_reason: str


class TextGenerationClientProtocol(Protocol):
    """Protocol for the text-generation client (allows mocking)."""

    async def generate(self, prompt: str) -> GenAIResponse:
        """Send a single-turn prompt and return the generated text."""
        ...


class GeminiClient:
    """Async Gemini generateContent client."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = settings.gemini_api_key
        self.base_url = settings.gemini_base_url.rstrip("/")
        self.model = settings.gemini_model
        self.timeout = settings.genai_timeout_seconds
        self._transport = transport

    async def generate(self, prompt: str) -> GenAIResponse:
        if not self.api_key:
            raise GenAIConfigError("GEMINI_API_KEY not configured")

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        url = f"{self.base_url}/models/{self.model}:generateContent"

        start_time = datetime.now(UTC)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            await logger.awarning("genai_timeout", timeout_seconds=self.timeout)
            raise GenAITransportError(f"Request timed out after {self.timeout}s") from exc
        except httpx.RequestError as exc:
            await logger.awarning("genai_request_error", error=str(exc))
            raise GenAITransportError(f"Request failed: {exc}") from exc

        latency_ms = int((datetime.now(UTC) - start_time).total_seconds() * 1000)

        if not response.is_success:
            await logger.awarning(
                "genai_status_error",
                status_code=response.status_code,
                latency_ms=latency_ms,
            )
            raise GenAIStatusError(
                f"Provider returned {response.status_code}",
                status_code=response.status_code,
                body=response.text[:500],
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GenAIEmptyResponseError("Provider returned a non-JSON body") from exc
        return self._parse_response(data, latency_ms)

    def _parse_response(self, data: Any, latency_ms: int) -> GenAIResponse:
        # Any shape other than {candidates: [{content: {parts: [{text}]}}]} counts as empty
        if not isinstance(data, dict):
            raise GenAIEmptyResponseError("Provider returned an unexpected body")
        candidates = data.get("candidates")
        first = candidates[0] if isinstance(candidates, list) and candidates else {}
        if not isinstance(first, dict):
            first = {}
        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        text = "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

        if not text.strip():
            raise GenAIEmptyResponseError("Provider returned no text")

        return GenAIResponse(
            text=text,
            model=data.get("modelVersion", self.model),
            latency_ms=latency_ms,
            finish_reason=first.get("finishReason", "unknown"),
        )
