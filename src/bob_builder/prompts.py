"""Prompt builders for each generation intent."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List

from .errors import UpstreamInputMissing
from .images import preset_name
from .schemas import ImageInputs, LeapOfFaithInputs, MomTestInputs

ASSUMPTION = "assumption"
HYPOTHESIS = "hypothesis"
MOM_TEST = "mom_test"
IMAGE = "image"

TEXT_INTENTS = (ASSUMPTION, HYPOTHESIS, MOM_TEST)

NEEDS_ASSUMPTIONS_MESSAGE = "Please generate Leap of Faith Assumptions first before creating hypotheses."

NOT_PROVIDED = "Not provided"

_URL_RE = re.compile(r"https?://\S+")
_EMOJI_RE = re.compile(r"[\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF\uFE0F\u200D]")

NEGATIVE_BASE = (
    "blurry, low-res, extra fingers, mangled hands, deformed limbs, distorted face, "
    "watermark, logo, wrong proportions, oversaturated, noisy, text artifacts, jpeg artifacts, "
    "unrealistic anatomy"
)


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


@dataclass(frozen=True)
class ImagePrompt:
    prompt: str
    negative: str
    allow_text: bool
    style: str


def sanitize(text: str | None, default: str = "") -> str:
    """Drops URLs and emoji, collapses whitespace, and substitutes `default` when empty."""
    cleaned = _URL_RE.sub("", text or "")
    cleaned = _EMOJI_RE.sub("", cleaned)
    cleaned = " ".join(cleaned.split())
    return cleaned or default


def sanitize_lines(lines: Iterable[str]) -> List[str]:
    return [line for line in (sanitize(item) for item in lines) if line]


LOFA_SYSTEM = """Agent & Task Design Prompt: Generate Leap of Faith Assumptions

Role: Lean Startup Strategist

Goal: Identify the most critical Leap of Faith Assumptions (LOFAs) that underpin a founder's CPS logic, focusing on those that could cause the business to fail if proven false.

Backstory: You are an expert in hypothesis-driven entrepreneurship with a deep understanding of Eric Ries' Lean Startup methodology. You help early-stage founders break their business ideas down into testable assumptions, translating abstract ideas into clear, falsifiable leaps of faith that can be validated through customer discovery.

Task: Extract Leap of Faith Assumptions from CPS

The user provides a CPS (Customer-Problem-Solution) statement. Extract 2-3 Leap of Faith Assumptions that, if proven wrong, would significantly jeopardize the viability of the idea. Focus on beliefs about customer behavior, willingness to pay, problem relevance, or the effectiveness of the solution.

Steps:
1. Identify who the customer is, what problem they are believed to have, and what solution is proposed
2. Determine the implicit assumptions the founder is making for the solution to work
3. Pick the riskiest beliefs that must be true
4. Phrase each as a falsifiable belief that interviews or experiments can validate or invalidate

Expected output, one assumption per line and nothing else:
[LOFA #1]: [assumption]
[LOFA #2]: [assumption]
[LOFA #3]: [assumption]"""

HYPOTHESIS_SYSTEM = """Agent Prompt: Generate Hypotheses from Leap of Faith Assumptions

Role: Hypothesis Framer for Startup Validation

You are an expert in hypothesis-driven product validation. You take high-level Leap of Faith Assumptions and refine them into specific, falsifiable hypotheses that guide customer discovery interviews and experiments. You do not interview users; you only write structured hypotheses.

Task: Create Testable Hypotheses from Leap of Faith Assumptions

You will receive 2-3 Leap of Faith Assumptions. Convert each into a clear, falsifiable hypothesis that real-world interaction can validate or invalidate.

Steps:
1. Read each Leap of Faith Assumption carefully
2. Ask what the world would look like if it were true, and how real user behavior could test it
3. Rewrite it using the format: We believe that [customer segment] will [specific behavior] because [reason or pain point]

Expected output, one hypothesis per line and nothing else:
Hypothesis 1 (from LOFA 1): We believe that [customer segment] will [behavior] because [reason].
Hypothesis 2 (from LOFA 2): We believe that [customer segment] will [behavior] because [reason].
Hypothesis 3 (optional): We believe that [customer segment] will [behavior] because [reason]."""

MOM_TEST_SYSTEM = """You are a startup discovery assistant specializing in The Mom Test methodology. Generate interview questions that follow these strict principles:

RULES (Mom Test checklist):
1. Do NOT ask "Would you use/buy this?", "How much would you pay?", or "Do you like my idea?"
2. Avoid future hypotheticals ("Would you...", "Will you..."). Prefer past/present specifics ("Tell me about the last time...", "How do you currently...")
3. Avoid leading or pitching. No solution words, no features, no selling
4. Ask about frequency, recency, workarounds, budget/spend, decision process, stakeholders, alternatives, switching costs, and priority
5. Questions must be short (at most 18 words), clear, neutral, and answerable from memory
6. Aim for who, what, when, where, how often, how much, who else

Return ONLY valid JSON with exactly this structure (no markdown, no extra text):
{
  "assumption_category": "<echoed category>",
  "hypothesis": "<echoed hypothesis>",
  "audience": "<echoed or inferred audience>",
  "questions": [
    {
      "q": "<interview question>",
      "assumption_tag": "<Demand|Value|Monetization|Acquisition|Retention|Growth|Feasibility>",
      "why_it_works": "<1 short line referencing Mom Test principle>",
      "signal_to_listen_for": "<what strong evidence sounds like>",
      "priority": 1 | 2 | 3
    }
  ]
}"""


def _cps_block(inputs: LeapOfFaithInputs) -> str:
    return (
        f"Customer: {sanitize(inputs.customer, 'the target customer')}\n"
        f"Problem: {sanitize(inputs.problem, 'an unspecified problem')}\n"
        f"Solution: {sanitize(inputs.solution, 'the proposed solution')}"
    )


def build_assumption_prompt(inputs: LeapOfFaithInputs) -> PromptPair:
    user = (
        "Based on this CPS statement:\n"
        f"{_cps_block(inputs)}\n\n"
        "Generate 2-3 Leap of Faith Assumptions using the exact format specified in the task "
        "definition above. Focus on assumptions that, if proven wrong, would significantly "
        "jeopardize the viability of the idea."
    )
    return PromptPair(system=LOFA_SYSTEM, user=user)


def build_hypothesis_prompt(inputs: LeapOfFaithInputs) -> PromptPair:
    assumptions = sanitize_lines(inputs.leap_of_faith_results)
    if not assumptions:
        raise UpstreamInputMissing(NEEDS_ASSUMPTIONS_MESSAGE)

    joined = "\n".join(assumptions)
    user = (
        "Based on these Leap of Faith Assumptions:\n"
        f"{joined}\n\n"
        "And this CPS context:\n"
        f"{_cps_block(inputs)}\n\n"
        "Convert each Leap of Faith Assumption into testable hypotheses using the exact format "
        "specified above. Make each hypothesis falsifiable and testable through real-world interaction."
    )
    return PromptPair(system=HYPOTHESIS_SYSTEM, user=user)


def build_mom_test_prompt(inputs: MomTestInputs) -> PromptPair:
    category = sanitize(inputs.assumption_category, "Demand")
    user = (
        "Generate exactly 10 Mom Test interview questions for this startup:\n\n"
        "INPUTS:\n"
        f"- Business Idea: {sanitize(inputs.idea, 'a new product or service')}\n"
        f"- Founder Motivation: {sanitize(inputs.passion, NOT_PROVIDED)}\n"
        f"- Founder Credibility: {sanitize(inputs.qualified, NOT_PROVIDED)}\n"
        f"- Target Audience: {sanitize(inputs.audience, 'the intended customer')}\n"
        f"- Assumption Category: {category}\n"
        f"- Hypothesis: {sanitize(inputs.hypothesis, NOT_PROVIDED)}\n"
        f"- Context: {sanitize(inputs.context, NOT_PROVIDED)}\n\n"
        "REQUIREMENTS:\n"
        "- Generate exactly 10 questions\n"
        "- Each question must be at most 18 words\n"
        "- No pitching, no hypotheticals, no leading questions\n"
        f"- Tie each question to the {category} assumption and hypothesis\n"
        "- Spread across: problem discovery, current workflow, frequency/recency, spend/budget, "
        "alternatives, decision maker, switching cost, impact/priority, purchase trigger, "
        "channel discovery (if relevant)\n"
        "- Return ONLY valid JSON matching the schema above"
    )
    return PromptPair(system=MOM_TEST_SYSTEM, user=user)


def build_prompt(intent: str, inputs) -> PromptPair:
    if intent == ASSUMPTION:
        return build_assumption_prompt(inputs)
    if intent == HYPOTHESIS:
        return build_hypothesis_prompt(inputs)
    if intent == MOM_TEST:
        return build_mom_test_prompt(inputs)
    raise ValueError(f"No text prompt for intent '{intent}'")


def build_image_prompt(inputs: ImageInputs, brand: str = "YourBrand") -> ImagePrompt:
    style = preset_name(inputs.style_preset)
    subject = sanitize(inputs.idea, "a new product or service")
    audience = sanitize(inputs.audience, "the intended customer")
    qualified = sanitize(inputs.qualified)
    passion = sanitize(inputs.passion)
    allow_text = bool(inputs.allow_text)

    lines = [
        f"You are generating brand-safe, high-quality images for {brand}.",
        f"Render a concept visual for: {subject}",
        f"Audience: {audience}",
    ]
    if qualified:
        lines.append(f"Founder credibility: {qualified}.")
    if passion:
        lines.append(f"Motivation: {passion}.")
    lines.append(
        f"Style: {style}; center framing, clean background; soft studio lighting; "
        "Palette: soft neutrals with one accent color."
    )
    lines.append("Photorealistic where applicable, sharp focus, consistent perspective, clean background.")
    if not allow_text:
        lines.append("Do not render any text, letters, logos, or watermarks.")

    if allow_text:
        negative = NEGATIVE_BASE.replace(", logo", "", 1)
    else:
        negative = f"{NEGATIVE_BASE}, text, letters, wordmark"

    return ImagePrompt(prompt="\n".join(lines), negative=negative, allow_text=allow_text, style=style)
