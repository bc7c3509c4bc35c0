"""Shared library helpers."""

from mindwork.libs.genai_client import (
    GeminiClient,
    GenAIClientError,
    GenAIConfigError,
    GenAIEmptyResponseError,
    GenAIResponse,
    GenAIStatusError,
    GenAITransportError,
    TextGenerationClientProtocol,
)

__all__ = [
    "GeminiClient",
    "GenAIClientError",
    "GenAIConfigError",
    "GenAIEmptyResponseError",
    "GenAIResponse",
    "GenAIStatusError",
    "GenAITransportError",
    "TextGenerationClientProtocol",
]
