"""Deterministic backup content used when every provider has failed.

Each generator satisfies the same contract as a live result, so the caller
always gets usable output.
"""

from __future__ import annotations

import base64
from html import escape
from typing import Any, Dict, List

from .prompts import (
    ASSUMPTION,
    HYPOTHESIS,
    IMAGE,
    MOM_TEST,
    NEEDS_ASSUMPTIONS_MESSAGE,
    sanitize,
    sanitize_lines,
)
from .schemas import ImageInputs, LeapOfFaithInputs, MomTestInputs

MAX_SEGMENT_WORDS = 8
MAX_HYPOTHESES = 3

WARNING = "LLM providers unavailable; using offline backup."


def extract_segment(text: str, max_words: int = MAX_SEGMENT_WORDS) -> str:
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + "..."


def backup_assumptions(inputs: LeapOfFaithInputs) -> Dict[str, Any]:
    customer = extract_segment(sanitize(inputs.customer, "the target customer"))
    problem = extract_segment(sanitize(inputs.problem, "this problem"))
    solution = extract_segment(sanitize(inputs.solution, "the proposed solution"))
    return {
        "assumptions": [
            f"[LOFA #1]: {customer} experience {problem} frequently enough to actively seek a solution",
            f"[LOFA #2]: {customer} are willing to change their current behavior or pay to adopt {solution}",
            f"[LOFA #3]: {solution} addresses {problem} better than the alternatives customers use today",
        ]
    }


def backup_hypotheses(inputs: LeapOfFaithInputs) -> Dict[str, Any]:
    lofas = sanitize_lines(inputs.leap_of_faith_results)[:MAX_HYPOTHESES]
    if not lofas:
        return {"assumptions": [NEEDS_ASSUMPTIONS_MESSAGE]}
    customer = extract_segment(sanitize(inputs.customer, "the target customers"))
    return {
        "assumptions": [
            f"Hypothesis {i} (from LOFA {i}): We believe that {customer} will actively seek and adopt "
            "the solution because they face this problem regularly and current alternatives are insufficient."
            for i in range(1, len(lofas) + 1)
        ]
    }


# (q, assumption_tag, why_it_works, signal template, priority)
_MOM_TEST_QUESTIONS = [
    (
        "Tell me about the last time you ran into this problem.",
        "Demand",
        "Anchors on a real past event instead of opinions.",
        "{audience} recall a specific, recent incident in detail",
        1,
    ),
    (
        "How do you currently handle this, step by step?",
        "Value",
        "Reveals the existing workflow without pitching anything.",
        "{audience} describe a workaround they built or pay for",
        1,
    ),
    (
        "How often did this come up in the past month?",
        "Demand",
        "Frequency questions are answerable from memory.",
        "{audience} name a concrete, recurring frequency",
        1,
    ),
    (
        "How much time did the last occurrence cost you?",
        "Value",
        "Quantifies pain with facts, not hypotheticals.",
        "{audience} give hours or days lost, unprompted",
        2,
    ),
    (
        "What have you spent on tools or services to deal with this?",
        "Monetization",
        "Past spend is stronger evidence than stated willingness to pay.",
        "{audience} already have budget allocated to the problem",
        1,
    ),
    (
        "Where did you last look for help with this?",
        "Acquisition",
        "Uncovers real discovery channels without leading.",
        "{audience} name specific communities, searches, or referrals",
        3,
    ),
    (
        "Who else is involved when deciding how to solve this?",
        "Monetization",
        "Maps the decision process and stakeholders.",
        "{audience} identify a clear decision maker and approver",
        2,
    ),
    (
        "What made you stick with your current approach instead of switching?",
        "Retention",
        "Surfaces switching costs and lock-in from past behavior.",
        "{audience} mention past switches or evaluations they abandoned",
        2,
    ),
    (
        "What happened the last time this went unresolved?",
        "Value",
        "Measures impact and priority through consequences.",
        "{audience} describe lost money, clients, or reputation",
        2,
    ),
    (
        "What prompted you to start looking for a better way?",
        "Growth",
        "Identifies the purchase trigger from lived experience.",
        "{audience} point to a specific triggering event",
        3,
    ),
]


def backup_mom_test(inputs: MomTestInputs) -> Dict[str, Any]:
    audience = sanitize(inputs.audience, "your target customers")
    short_audience = extract_segment(audience, 6)
    category = sanitize(inputs.assumption_category, "Demand")
    questions: List[Dict[str, Any]] = [
        {
            "q": q,
            "assumption_tag": tag,
            "why_it_works": why,
            "signal_to_listen_for": signal.format(audience=short_audience),
            "priority": priority,
        }
        for q, tag, why, signal, priority in _MOM_TEST_QUESTIONS
    ]
    return {
        "assumption_category": category,
        "hypothesis": sanitize(inputs.hypothesis, "Not provided"),
        "audience": audience,
        "questions": questions,
    }


def placeholder_image(idea: str, seed: int, width: int, height: int) -> Dict[str, Any]:
    """A flat SVG card standing in for a rendered concept image."""
    hue = seed % 360
    label = escape(extract_segment(idea, 6))
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<rect width="100%" height="100%" fill="hsl({hue},35%,88%)"/>'
        f'<circle cx="50%" cy="42%" r="{min(width, height) // 6}" fill="hsl({hue},55%,55%)"/>'
        f'<text x="50%" y="78%" font-family="sans-serif" font-size="{max(width // 32, 12)}" '
        f'text-anchor="middle" fill="#333">{label}</text>'
        "</svg>"
    )
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return {"dataUrl": f"data:image/svg+xml;base64,{encoded}", "seed": seed}


def backup_images(inputs: ImageInputs, used: Dict[str, Any]) -> Dict[str, Any]:
    idea = sanitize(inputs.idea, "a new product or service")
    images = [placeholder_image(idea, seed, used["width"], used["height"]) for seed in used["seeds"]]
    return {"images": images, "used": used}


def generate(intent: str, inputs, used: Dict[str, Any] | None = None) -> Dict[str, Any]:
    if intent == ASSUMPTION:
        return backup_assumptions(inputs)
    if intent == HYPOTHESIS:
        return backup_hypotheses(inputs)
    if intent == MOM_TEST:
        return backup_mom_test(inputs)
    if intent == IMAGE:
        if used is None:
            raise ValueError("image backup needs the resolved render settings")
        return backup_images(inputs, used)
    raise ValueError(f"Unknown intent '{intent}'")
