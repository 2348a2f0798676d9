"""Configuration loading and defaults."""

from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

_TEXT_ROUTES = [
    "gemini:gemini-1.5-flash-latest",
    "lovable:google/gemini-2.5-flash",
    "openai:gpt-4o-mini",
    "together:meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
    "groq:llama-3.1-70b-versatile",
]

DEFAULT_SETTINGS: Dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8000,
    },
    "logging": {
        "level": "INFO",
    },
    "routing": {
        "assumption": list(_TEXT_ROUTES),
        "hypothesis": list(_TEXT_ROUTES),
        "mom_test": [
            "lovable:google/gemini-2.5-flash",
            "gemini:gemini-1.5-flash-latest",
            "openai:gpt-4o-mini",
            "together:meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
            "groq:llama-3.1-70b-versatile",
        ],
        "image": [
            "pollinations:flux",
        ],
    },
    "llm": {
        "temperature": 0.7,
        "max_tokens": 800,
        "timeout_seconds": 30,
    },
    "intents": {
        "mom_test": {"max_tokens": 2000},
        "image": {"timeout_seconds": 60},
    },
    "providers": {
        "lovable": {"url": "https://ai.gateway.lovable.dev/v1/chat/completions"},
        "together": {"url": "https://api.together.xyz/v1/chat/completions"},
        "groq": {"url": "https://api.groq.com/openai/v1/chat/completions"},
        "gemini": {"url": "https://generativelanguage.googleapis.com/v1beta/models"},
        "anthropic": {"url": "https://api.anthropic.com/v1/messages"},
        "pollinations": {"url": "https://image.pollinations.ai/prompt"},
    },
    "pricing": {
        "openai:gpt-4o-mini": {"input_per_1k": 0.00015, "output_per_1k": 0.0006},
        "gemini:gemini-1.5-flash-latest": {"input_per_1k": 0.000075, "output_per_1k": 0.0003},
        "anthropic:claude-3-5-haiku-latest": {"input_per_1k": 0.0008, "output_per_1k": 0.004},
        "groq:llama-3.1-70b-versatile": {"input_per_1k": 0.00059, "output_per_1k": 0.00079},
        "together:meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo": {
            "input_per_1k": 0.00088,
            "output_per_1k": 0.00088,
        },
    },
}

# Environment variable names per provider, first match wins.
CREDENTIAL_ENV: Dict[str, tuple[str, ...]] = {
    "lovable": ("LOVABLE_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "together": ("TOGETHER_API_KEY",),
    "groq": ("GROQ_API_KEY",),
    "pollinations": ("POLLINATIONS_API_KEY",),
}


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys handed to provider adapters. A missing key is not an error here."""

    lovable: str | None = None
    gemini: str | None = None
    openai: str | None = None
    anthropic: str | None = None
    together: str | None = None
    groq: str | None = None
    pollinations: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProviderCredentials":
        env = os.environ if environ is None else environ
        values: Dict[str, str | None] = {}
        for provider, names in CREDENTIAL_ENV.items():
            values[provider] = next((env[name] for name in names if env.get(name)), None)
        return cls(**values)

    def get(self, provider: str) -> str | None:
        return getattr(self, provider, None)

    def configured(self) -> Dict[str, bool]:
        return {provider: bool(self.get(provider)) for provider in CREDENTIAL_ENV}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(settings_path: str = "config/settings.yaml") -> Dict[str, Any]:
    """Loads settings.yaml and merges it onto defaults."""
    merged = deepcopy(DEFAULT_SETTINGS)
    config_path = Path(settings_path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}
        merged = _deep_merge(merged, user_cfg)
    return merged


def parse_route(route: str) -> tuple[str, str]:
    """Parses 'provider:model' route strings."""
    if ":" not in route:
        raise ValueError(f"Invalid route format: {route}")
    provider, model = route.split(":", 1)
    return provider.strip(), model.strip()


def llm_params(config: Dict[str, Any], intent: str) -> Dict[str, Any]:
    """Generation parameters for an intent: global `llm` values with `intents.<intent>` overrides."""
    params = dict(config.get("llm", {}))
    params.update(config.get("intents", {}).get(intent, {}))
    return {
        "temperature": float(params.get("temperature", 0.7)),
        "max_tokens": int(params.get("max_tokens", 800)),
        "timeout_seconds": int(params.get("timeout_seconds", 30)),
    }


def provider_url(config: Dict[str, Any], provider: str) -> str:
    url = config.get("providers", {}).get(provider, {}).get("url")
    if not url:
        url = DEFAULT_SETTINGS["providers"][provider]["url"]
    return str(url)
