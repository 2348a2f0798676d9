"""Google Gemini REST provider."""

from __future__ import annotations

import time

from ..types import CredentialMissing, LLMRequest, LLMResult, ProviderEmptyResponse
from .base import post_json

DEFAULT_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider:
    name = "gemini"

    def __init__(self, api_key: str | None, base_url: str = DEFAULT_URL) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def generate(self, request: LLMRequest) -> LLMResult:
        if not self._api_key:
            raise CredentialMissing("GEMINI_API_KEY/GOOGLE_API_KEY missing", self.name)

        url = f"{self._base_url}/{request.model}:generateContent"
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        payload = {
            "system_instruction": {"parts": [{"text": request.system}]},
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
            },
        }

        start = time.perf_counter()
        data = post_json(self.name, url, payload, request.timeout_seconds, headers=headers)
        latency_ms = int((time.perf_counter() - start) * 1000)

        candidates = data.get("candidates", [])
        text = ""
        if candidates:
            parts = candidates[0].get("content", {}).get("parts", [])
            text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise ProviderEmptyResponse("Gemini empty response", self.name)

        usage = data.get("usageMetadata", {})
        tokens_in = int(usage.get("promptTokenCount", 0) or 0)
        tokens_out = int(usage.get("candidatesTokenCount", 0) or 0)

        return LLMResult(
            text=text.strip(),
            provider=self.name,
            model=request.model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            latency_ms=latency_ms,
            raw={"responseId": data.get("responseId")},
        )
