import pytest

from bob_builder.errors import UpstreamInputMissing
from bob_builder.prompts import (
    NEEDS_ASSUMPTIONS_MESSAGE,
    build_image_prompt,
    build_prompt,
    sanitize,
)
from bob_builder.schemas import ImageInputs, LeapOfFaithInputs, MomTestInputs


def test_build_prompt_is_deterministic():
    inputs = LeapOfFaithInputs(customer="freelance designers", problem="late invoices", solution="auto invoicing")
    assert build_prompt("assumption", inputs) == build_prompt("assumption", inputs)

    mom = MomTestInputs(idea="x", audience="y", hypothesis="z")
    assert build_prompt("mom_test", mom) == build_prompt("mom_test", mom)


def test_sanitize_strips_urls_emoji_and_whitespace():
    assert sanitize("  Great idea 🚀 see https://example.com/x now  ") == "Great idea see now"
    assert sanitize("   ", "fallback") == "fallback"
    assert sanitize(None, "fallback") == "fallback"


def test_empty_fields_get_default_phrases():
    pair = build_prompt("assumption", LeapOfFaithInputs())
    assert "Customer: the target customer" in pair.user
    assert "Problem: an unspecified problem" in pair.user
    assert "Solution: the proposed solution" in pair.user


def test_null_fields_become_empty_strings():
    inputs = MomTestInputs.model_validate({"idea": None, "audience": "devs", "context": None})
    assert inputs.idea == ""
    assert inputs.context == ""
    pair = build_prompt("mom_test", inputs)
    assert "- Context: Not provided" in pair.user
    assert "None" not in pair.user


def test_null_circle_type_runs_the_hypothesis_step():
    inputs = LeapOfFaithInputs.model_validate({"circleType": None, "leapOfFaithResults": None})
    assert inputs.circle_type == "hypothesis"
    assert inputs.leap_of_faith_results == []
    assert LeapOfFaithInputs.model_validate({}).circle_type == "assumption"


def test_null_image_options_take_their_defaults():
    inputs = ImageInputs.model_validate({"allowText": None, "userId": None, "n": None})
    assert inputs.allow_text is False
    assert inputs.user_id == "anon"
    assert inputs.n is None


def test_assumption_prompt_uses_lofa_format():
    pair = build_prompt("assumption", LeapOfFaithInputs(customer="c", problem="p", solution="s"))
    assert "[LOFA #1]:" in pair.system
    assert "Customer: c" in pair.user


def test_hypothesis_prompt_requires_assumptions():
    inputs = LeapOfFaithInputs(circleType="hypothesis", leapOfFaithResults=["", "  "])
    with pytest.raises(UpstreamInputMissing) as excinfo:
        build_prompt("hypothesis", inputs)
    assert str(excinfo.value) == NEEDS_ASSUMPTIONS_MESSAGE


def test_hypothesis_prompt_lists_assumptions():
    inputs = LeapOfFaithInputs(circle_type="hypothesis", leap_of_faith_results=["[LOFA #1]: one", "[LOFA #2]: two"])
    pair = build_prompt("hypothesis", inputs)
    assert "[LOFA #1]: one\n[LOFA #2]: two" in pair.user
    assert "We believe that" in pair.system


def test_unknown_intent_is_rejected():
    with pytest.raises(ValueError):
        build_prompt("poem", LeapOfFaithInputs())


def test_image_prompt_bans_text_unless_allowed():
    no_text = build_image_prompt(ImageInputs(idea="dog walking app"))
    assert "Do not render any text" in no_text.prompt
    assert no_text.negative.endswith("text, letters, wordmark")
    assert no_text.style == "E-commerce Studio"

    with_text = build_image_prompt(ImageInputs(idea="dog walking app", allowText=True, stylePreset="Line Art"))
    assert "Do not render any text" not in with_text.prompt
    assert "logo" not in with_text.negative
    assert with_text.style == "Line Art"


def test_image_prompt_skips_empty_optional_lines():
    pair = build_image_prompt(ImageInputs(idea="", passion="", qualified="10 years as a vet"))
    assert "Render a concept visual for: a new product or service" in pair.prompt
    assert "Founder credibility: 10 years as a vet." in pair.prompt
    assert "Motivation:" not in pair.prompt
