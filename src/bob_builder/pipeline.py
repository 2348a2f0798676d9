"""Pure orchestration functions: inputs -> prompt -> provider chain -> output or backup."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List

from . import offline
from .config import llm_params
from .images import STYLE_PRESETS, aspect_size, build_seeds, clamp
from .llm.router import LLMRouter
from .llm.types import FallbackOutcome, ImageRequest
from .parsing import parse, validate_structured
from .prompts import ASSUMPTION, HYPOTHESIS, IMAGE, MOM_TEST, build_image_prompt, build_prompt
from .schemas import ImageInputs, LeapOfFaithInputs, MomTestInputs

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_COUNT = 3
MAX_IMAGE_COUNT = 6


def _with_backup(intent: str, outcome: FallbackOutcome, backup: Dict[str, Any]) -> Dict[str, Any]:
    if outcome.succeeded:
        return outcome.output
    logger.warning("%s: all %d provider route(s) failed, using offline backup", intent, len(outcome.errors))
    annotated = dict(backup)
    annotated["_warning"] = offline.WARNING
    annotated["_errors"] = list(outcome.errors)
    return annotated


def generate_text(router: LLMRouter, intent: str, inputs) -> Dict[str, Any]:
    """Runs one text intent. Raises UpstreamInputMissing before any provider call."""
    prompt = build_prompt(intent, inputs)
    outcome = router.complete(intent, prompt, lambda text: parse(intent, text))
    if outcome.succeeded:
        return outcome.output
    return _with_backup(intent, outcome, offline.generate(intent, inputs))


def generate_leap_of_faith(router: LLMRouter, inputs: LeapOfFaithInputs) -> Dict[str, Any]:
    intent = HYPOTHESIS if inputs.circle_type == "hypothesis" else ASSUMPTION
    return generate_text(router, intent, inputs)


def generate_mom_test(router: LLMRouter, inputs: MomTestInputs) -> Dict[str, Any]:
    return generate_text(router, MOM_TEST, inputs)


def resolve_image_settings(inputs: ImageInputs, now_ms: int | None = None) -> Dict[str, Any]:
    """The exact render settings reported back as `used`."""
    image_prompt = build_image_prompt(inputs)
    preset = STYLE_PRESETS[image_prompt.style]
    size = aspect_size(inputs.aspect)
    n = clamp(inputs.n if inputs.n is not None else DEFAULT_IMAGE_COUNT, 1, MAX_IMAGE_COUNT)
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    seeds: List[int] = build_seeds(inputs.seed, inputs.user_id, n, now_ms)
    return {
        "prompt": image_prompt.prompt,
        "negative": image_prompt.negative,
        "width": size["width"],
        "height": size["height"],
        "cfg": preset["cfg"],
        "steps": preset["steps"],
        "sampler": preset["sampler"],
        "allowText": image_prompt.allow_text,
        "seeds": seeds,
    }


def generate_business_image(
    router: LLMRouter,
    inputs: ImageInputs,
    now_ms: int | None = None,
) -> Dict[str, Any]:
    used = resolve_image_settings(inputs, now_ms=now_ms)
    timeout_seconds = llm_params(router.config, IMAGE)["timeout_seconds"]

    def attempt(provider: Any, model: str) -> Dict[str, Any]:
        images = provider.render(
            ImageRequest(
                prompt=used["prompt"],
                negative=used["negative"],
                width=used["width"],
                height=used["height"],
                cfg=used["cfg"],
                steps=used["steps"],
                sampler=used["sampler"],
                seeds=list(used["seeds"]),
                allow_text=used["allowText"],
                model=model,
                timeout_seconds=timeout_seconds,
            )
        )
        return validate_structured(IMAGE, {"images": images, "used": used})

    outcome = router.run(IMAGE, attempt)
    return _with_backup(IMAGE, outcome, offline.generate(IMAGE, inputs, used=used))
