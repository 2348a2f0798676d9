"""OpenAI Responses API provider."""

from __future__ import annotations

import time
from typing import Any

import openai

from ..types import (
    CredentialMissing,
    LLMRequest,
    LLMResult,
    ProviderEmptyResponse,
    ProviderHTTPError,
    QuotaExceeded,
)


class OpenAIProvider:
    name = "openai"

    def __init__(self, api_key: str | None, client: Any = None) -> None:
        self._client = client
        if self._client is None and api_key:
            self._client = openai.OpenAI(api_key=api_key, max_retries=0)

    def generate(self, request: LLMRequest) -> LLMResult:
        if self._client is None:
            raise CredentialMissing("OPENAI_API_KEY missing", self.name)

        start = time.perf_counter()
        try:
            response = self._client.responses.create(
                model=request.model,
                temperature=request.temperature,
                max_output_tokens=request.max_tokens,
                input=[
                    {"role": "system", "content": request.system},
                    {"role": "user", "content": request.prompt},
                ],
                timeout=request.timeout_seconds,
            )
        except openai.RateLimitError as exc:
            raise QuotaExceeded(str(exc), self.name) from exc
        except openai.APIStatusError as exc:
            raise ProviderHTTPError(
                f"HTTP {exc.status_code}: {exc.message}", self.name, status_code=exc.status_code
            ) from exc
        except openai.APIError as exc:
            raise ProviderHTTPError(str(exc), self.name) from exc

        latency_ms = int((time.perf_counter() - start) * 1000)
        text = getattr(response, "output_text", "") or ""
        if not text.strip():
            raise ProviderEmptyResponse("OpenAI empty response", self.name)

        usage = getattr(response, "usage", None)
        tokens_in = int(getattr(usage, "input_tokens", 0) or 0)
        tokens_out = int(getattr(usage, "output_tokens", 0) or 0)

        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=request.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            raw={"id": getattr(response, "id", None)},
        )
