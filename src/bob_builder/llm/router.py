"""Intent-based provider routing with ordered fallback."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from ..config import ProviderCredentials, llm_params, parse_route, provider_url
from ..prompts import PromptPair
from .providers.anthropic_provider import AnthropicProvider
from .providers.chat_completions_provider import ChatCompletionsProvider
from .providers.gemini_provider import GeminiProvider
from .providers.openai_provider import OpenAIProvider
from .providers.pollinations_provider import PollinationsProvider
from .types import FallbackOutcome, FallbackState, LLMRequest, LLMResult

logger = logging.getLogger(__name__)


def default_providers(config: Dict[str, Any], credentials: ProviderCredentials) -> Dict[str, Any]:
    """Builds every known adapter; ones without a key fail at call time."""
    providers = [
        ChatCompletionsProvider("lovable", provider_url(config, "lovable"), credentials.lovable),
        GeminiProvider(credentials.gemini, provider_url(config, "gemini")),
        OpenAIProvider(credentials.openai),
        AnthropicProvider(credentials.anthropic, provider_url(config, "anthropic")),
        ChatCompletionsProvider("together", provider_url(config, "together"), credentials.together),
        ChatCompletionsProvider("groq", provider_url(config, "groq"), credentials.groq),
        PollinationsProvider(credentials.pollinations, provider_url(config, "pollinations")),
    ]
    return {provider.name: provider for provider in providers}


class LLMRouter:
    def __init__(
        self,
        config: Dict[str, Any],
        credentials: ProviderCredentials | None = None,
        providers: Mapping[str, Any] | None = None,
    ) -> None:
        self.config = config
        if providers is None:
            providers = default_providers(config, credentials or ProviderCredentials.from_env())
        self.providers = dict(providers)

    def routes_for_intent(self, intent: str) -> list[str]:
        return [str(r) for r in self.config.get("routing", {}).get(intent, [])]

    def _estimate_cost(self, provider: str, model: str, tokens_in: int, tokens_out: int) -> float:
        key = f"{provider}:{model}"
        pricing = self.config.get("pricing", {}).get(key)
        if not pricing:
            return 0.0
        in_price = float(pricing.get("input_per_1k", 0.0))
        out_price = float(pricing.get("output_per_1k", 0.0))
        return ((tokens_in / 1000.0) * in_price) + ((tokens_out / 1000.0) * out_price)

    def run(self, intent: str, attempt: Callable[[Any, str], Any]) -> FallbackOutcome:
        """Tries each route in order until `attempt(provider, model)` returns.

        `attempt` performs the call and the parse; any exception it raises
        counts as that provider's failure and moves on to the next route.
        """
        routes = self.routes_for_intent(intent)
        errors: list[str] = []

        for index, route in enumerate(routes):
            try:
                provider_name, model = parse_route(route)
            except ValueError as exc:
                logger.warning("%s: skipping route: %s", intent, exc)
                errors.append(f"{route}: invalid route")
                continue
            provider = self.providers.get(provider_name)
            if provider is None:
                errors.append(f"{provider_name}: provider not available")
                continue

            logger.debug("%s: trying route %d/%d %s", intent, index + 1, len(routes), route)
            try:
                output = attempt(provider, model)
            except Exception as exc:
                logger.warning("%s: %s failed: %s", intent, route, exc)
                errors.append(f"{provider_name}: {exc}")
                continue

            return FallbackOutcome(
                state=FallbackState.SUCCEEDED,
                output=output,
                provider=provider_name,
                model=model,
                errors=errors,
            )

        return FallbackOutcome(state=FallbackState.EXHAUSTED, errors=errors)

    def complete(
        self,
        intent: str,
        prompt: PromptPair,
        parse: Callable[[str], Dict[str, Any]],
        meta: Dict[str, Any] | None = None,
    ) -> FallbackOutcome:
        params = llm_params(self.config, intent)

        def attempt(provider: Any, model: str) -> Dict[str, Any]:
            result: LLMResult = provider.generate(
                LLMRequest(
                    intent=intent,
                    prompt=prompt.user,
                    system=prompt.system,
                    model=model,
                    temperature=params["temperature"],
                    max_tokens=params["max_tokens"],
                    timeout_seconds=params["timeout_seconds"],
                    meta=meta or {},
                )
            )
            output = parse(result.text)
            logger.info(
                "%s generated by %s:%s in %dms (tokens %d/%d, ~$%.5f)",
                intent,
                result.provider,
                result.model,
                result.latency_ms,
                result.tokens_in,
                result.tokens_out,
                self._estimate_cost(result.provider, result.model, result.tokens_in, result.tokens_out),
            )
            return output

        return self.run(intent, attempt)
