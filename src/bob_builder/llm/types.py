"""Shared LLM data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


@dataclass
class LLMRequest:
    intent: str
    prompt: str
    system: str
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: int
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResult:
    text: str
    provider: str
    model: str
    tokens_in: int = 0
    tokens_out: int = 0
    latency_ms: int = 0
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ImageRequest:
    prompt: str
    negative: str
    width: int
    height: int
    cfg: float
    steps: int
    sampler: str | None
    seeds: List[int]
    allow_text: bool
    model: str = ""
    timeout_seconds: int = 60


class FallbackState(str, Enum):
    TRYING = "trying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass
class FallbackOutcome:
    state: FallbackState
    output: Any = None
    provider: str | None = None
    model: str | None = None
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is FallbackState.SUCCEEDED


class ProviderError(RuntimeError):
    """Provider failed to return a valid generation."""

    def __init__(self, message: str, provider: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider


class CredentialMissing(ProviderError):
    """The provider has no API key configured."""


class ProviderHTTPError(ProviderError):
    """Non-2xx response, or the request never completed."""

    def __init__(self, message: str, provider: str = "", status_code: int | None = None) -> None:
        super().__init__(message, provider)
        self.status_code = status_code


class QuotaExceeded(ProviderHTTPError):
    """HTTP 429 from the provider."""

    def __init__(self, message: str = "", provider: str = "") -> None:
        detail = f"HTTP 429 quota exceeded: {message}" if message else "HTTP 429 quota exceeded"
        super().__init__(detail, provider, status_code=429)


class ProviderEmptyResponse(ProviderError):
    """The call succeeded but carried no completion text."""
