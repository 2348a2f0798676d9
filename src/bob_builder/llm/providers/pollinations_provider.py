"""Pollinations image provider: one GET per seed, returned as data URLs."""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List
from urllib.parse import quote

import requests

from ..types import ImageRequest, ProviderEmptyResponse, ProviderError, ProviderHTTPError
from .base import check_response

DEFAULT_URL = "https://image.pollinations.ai/prompt"

logger = logging.getLogger(__name__)


class PollinationsProvider:
    name = "pollinations"

    def __init__(self, api_key: str | None = None, base_url: str = DEFAULT_URL) -> None:
        # Pollinations works anonymously; a token only lifts rate limits.
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def _render_seed(self, request: ImageRequest, seed: int) -> Dict[str, Any]:
        url = f"{self._base_url}/{quote(request.prompt, safe='')}"
        params = {
            "width": request.width,
            "height": request.height,
            "seed": seed,
            "nologo": "true",
        }
        if request.model and request.model != "default":
            params["model"] = request.model
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else None

        try:
            res = requests.get(url, params=params, headers=headers, timeout=request.timeout_seconds)
        except requests.RequestException as exc:
            raise ProviderHTTPError(str(exc), self.name) from exc
        check_response(res, self.name)
        if not res.content:
            raise ProviderEmptyResponse(f"empty image body for seed {seed}", self.name)

        content_type = (res.headers.get("content-type") or "image/jpeg").split(";")[0].strip()
        encoded = base64.b64encode(res.content).decode("ascii")
        return {"dataUrl": f"data:{content_type};base64,{encoded}", "seed": seed}

    def render(self, request: ImageRequest) -> List[Dict[str, Any]]:
        images: List[Dict[str, Any]] = []
        last_error: ProviderError | None = None
        for seed in request.seeds:
            try:
                images.append(self._render_seed(request, seed))
            except ProviderError as exc:
                logger.warning("Pollinations render failed for seed %s: %s", seed, exc)
                last_error = exc

        if not images:
            if last_error is not None:
                raise last_error
            raise ProviderEmptyResponse("no seeds to render", self.name)
        return images
