from __future__ import annotations  # Re-export llm_gateway public API

from .envelope import STRATEGIES, extract_text, matching_strategy
from .llm_gateway import (
    GenerationClient,
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    PromptRequest,
    ServiceError,
    TransportError,
)

__all__ = [
    "GenerationClient",
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "PromptRequest",
    "STRATEGIES",
    "ServiceError",
    "TransportError",
    "extract_text",
    "matching_strategy",
]
