"""Anthropic Messages API provider."""

from __future__ import annotations

import time

from ..types import CredentialMissing, LLMRequest, LLMResult, ProviderEmptyResponse
from .base import post_json

DEFAULT_URL = "https://api.anthropic.com/v1/messages"


class AnthropicProvider:
    name = "anthropic"

    def __init__(self, api_key: str | None, url: str = DEFAULT_URL) -> None:
        self._api_key = api_key
        self._url = url

    def generate(self, request: LLMRequest) -> LLMResult:
        if not self._api_key:
            raise CredentialMissing("ANTHROPIC_API_KEY missing", self.name)

        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        payload = {
            "model": request.model,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "system": request.system,
            "messages": [{"role": "user", "content": request.prompt}],
        }

        start = time.perf_counter()
        data = post_json(self.name, self._url, payload, request.timeout_seconds, headers=headers)
        latency_ms = int((time.perf_counter() - start) * 1000)

        content = data.get("content", [])
        text = ""
        if content and isinstance(content, list):
            text = "".join(
                item.get("text", "")
                for item in content
                if isinstance(item, dict) and item.get("type") == "text"
            )
        if not text.strip():
            raise ProviderEmptyResponse("Anthropic empty response", self.name)

        usage = data.get("usage", {})
        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=request.model,
            tokens_in=int(usage.get("input_tokens", 0) or 0),
            tokens_out=int(usage.get("output_tokens", 0) or 0),
            latency_ms=latency_ms,
            raw={"id": data.get("id")},
        )
