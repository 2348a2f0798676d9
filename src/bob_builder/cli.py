"""Command line: serve the API, inspect providers, or run a single generation."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv
from pydantic import ValidationError

from .config import ProviderCredentials, load_settings
from .errors import UpstreamInputMissing
from .llm.router import LLMRouter
from .pipeline import generate_business_image, generate_leap_of_faith, generate_mom_test
from .schemas import ImageInputs, LeapOfFaithInputs, MomTestInputs

logger = logging.getLogger(__name__)

INTENT_CHOICES = ("leap-of-faith", "mom-test", "business-image")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bob the Business Builder generation service")
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings.yaml")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the HTTP API (default)")
    subparsers.add_parser("providers", help="Show which providers have credentials")
    gen = subparsers.add_parser("generate", help="Run one generation and print the JSON result")
    gen.add_argument("intent", choices=INTENT_CHOICES)
    gen.add_argument("--input", dest="input_path", help="JSON file with the request body (default: stdin)")
    return parser


def _configure_logging(config: Dict[str, Any]) -> None:
    level = str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_body(input_path: str | None) -> Dict[str, Any]:
    if input_path:
        text = Path(input_path).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()
    return json.loads(text or "{}")


def run_generate(router: LLMRouter, intent: str, body: Dict[str, Any]) -> Dict[str, Any]:
    if intent == "leap-of-faith":
        return generate_leap_of_faith(router, LeapOfFaithInputs.model_validate(body))
    if intent == "mom-test":
        return generate_mom_test(router, MomTestInputs.model_validate(body))
    return generate_business_image(router, ImageInputs.model_validate(body))


def main(argv: List[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    command = args.command or "serve"

    config = load_settings(args.settings)
    _configure_logging(config)
    credentials = ProviderCredentials.from_env()

    if command == "providers":
        for name, active in credentials.configured().items():
            print(f"- {name}: {'configured' if active else 'missing'}")
        for intent, routes in config.get("routing", {}).items():
            print(f"{intent}: {' -> '.join(routes)}")
        return 0

    if command == "generate":
        router = LLMRouter(config, credentials=credentials)
        try:
            result = run_generate(router, args.intent, _read_body(args.input_path))
        except (json.JSONDecodeError, ValidationError, UpstreamInputMissing) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    import uvicorn

    from .api import create_app

    logger.info("Providers active: %s", credentials.configured())
    server = config.get("server", {})
    uvicorn.run(
        create_app(config=config, credentials=credentials),
        host=str(server.get("host", "0.0.0.0")),
        port=int(server.get("port", 8000)),
    )
    return 0
