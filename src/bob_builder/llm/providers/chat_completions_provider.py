"""OpenAI-compatible chat completions providers (Lovable gateway, Together, Groq)."""

from __future__ import annotations

import time

from ..types import CredentialMissing, LLMRequest, LLMResult, ProviderEmptyResponse
from .base import post_json


class ChatCompletionsProvider:
    def __init__(self, name: str, url: str, api_key: str | None) -> None:
        self.name = name
        self._url = url
        self._api_key = api_key

    def generate(self, request: LLMRequest) -> LLMResult:
        if not self._api_key:
            raise CredentialMissing(f"{self.name} API key missing", self.name)

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": request.model,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "messages": [
                {"role": "system", "content": request.system},
                {"role": "user", "content": request.prompt},
            ],
        }

        start = time.perf_counter()
        data = post_json(self.name, self._url, payload, request.timeout_seconds, headers=headers)
        latency_ms = int((time.perf_counter() - start) * 1000)

        text = ""
        choices = data.get("choices") or []
        if choices and isinstance(choices[0], dict):
            text = (choices[0].get("message") or {}).get("content") or ""
        if not text.strip():
            raise ProviderEmptyResponse(f"{self.name} empty response", self.name)

        usage = data.get("usage") or {}
        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=data.get("model") or request.model,
            tokens_in=int(usage.get("prompt_tokens", 0) or 0),
            tokens_out=int(usage.get("completion_tokens", 0) or 0),
            latency_ms=latency_ms,
            raw={"id": data.get("id")},
        )
