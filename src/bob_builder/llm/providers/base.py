"""LLM provider interface and shared HTTP helpers."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol

import requests

from ..types import ImageRequest, LLMRequest, LLMResult, ProviderHTTPError, QuotaExceeded


class LLMProvider(Protocol):
    name: str

    def generate(self, request: LLMRequest) -> LLMResult:
        ...


class ImageProvider(Protocol):
    name: str

    def render(self, request: ImageRequest) -> List[Dict[str, Any]]:
        ...


def check_response(res: requests.Response, provider: str) -> None:
    """Raises the matching ProviderHTTPError subtype for a non-2xx response."""
    if res.ok:
        return
    body = (res.text or "")[:200]
    if res.status_code == 429:
        raise QuotaExceeded(body, provider)
    raise ProviderHTTPError(f"HTTP {res.status_code}: {body}", provider, status_code=res.status_code)


def post_json(
    provider: str,
    url: str,
    payload: Dict[str, Any],
    timeout_seconds: int,
    headers: Dict[str, str] | None = None,
) -> Dict[str, Any]:
    try:
        res = requests.post(url, headers=headers, json=payload, timeout=timeout_seconds)
    except requests.Timeout as exc:
        raise ProviderHTTPError(f"timed out after {timeout_seconds}s", provider) from exc
    except requests.RequestException as exc:
        raise ProviderHTTPError(str(exc), provider) from exc

    check_response(res, provider)
    try:
        return res.json()
    except ValueError as exc:
        raise ProviderHTTPError(f"invalid JSON body: {exc}", provider, status_code=res.status_code) from exc
