import json

from bob_builder.config import DEFAULT_SETTINGS
from bob_builder.llm.router import LLMRouter
from bob_builder.llm.types import FallbackState, LLMResult, ProviderError, QuotaExceeded
from bob_builder.pipeline import generate_mom_test
from bob_builder.prompts import PromptPair
from bob_builder.schemas import MomTestInputs


class FailingProvider:
    def __init__(self, name, error=None):
        self.name = name
        self.calls = 0
        self._error = error or ProviderError("simulated failure", name)

    def generate(self, request):
        self.calls += 1
        raise self._error


class TextProvider:
    def __init__(self, name, text):
        self.name = name
        self.text = text
        self.calls = 0

    def generate(self, request):
        self.calls += 1
        return LLMResult(text=self.text, provider=self.name, model=request.model, tokens_in=10, tokens_out=5)


def _config(intent, names):
    return {
        "llm": {"temperature": 0.1, "max_tokens": 64, "timeout_seconds": 5},
        "routing": {intent: [f"{name}:model-{name}" for name in names]},
        "pricing": {"ok:model-ok": {"input_per_1k": 0.001, "output_per_1k": 0.002}},
    }


def _mom_test_json(count=10, drop_field=None):
    questions = []
    for i in range(count):
        q = {
            "q": f"Tell me about the last time #{i}?",
            "assumption_tag": "Demand",
            "why_it_works": "Past behavior.",
            "signal_to_listen_for": "Specific story.",
            "priority": (i % 3) + 1,
        }
        if drop_field:
            q.pop(drop_field)
        questions.append(q)
    return json.dumps(
        {"assumption_category": "Demand", "hypothesis": "h", "audience": "a", "questions": questions}
    )


def test_router_fallback_uses_next_provider():
    fail = FailingProvider("fail")
    ok = TextProvider("ok", "line one\nline two")
    router = LLMRouter(config=_config("assumption", ["fail", "ok"]), providers={"fail": fail, "ok": ok})

    outcome = router.complete("assumption", PromptPair("s", "u"), lambda text: {"lines": text.splitlines()})

    assert outcome.state is FallbackState.SUCCEEDED
    assert outcome.output == {"lines": ["line one", "line two"]}
    assert outcome.provider == "ok"
    assert outcome.errors == ["fail: simulated failure"]


def test_router_stops_after_first_success():
    first = TextProvider("first", "a")
    second = TextProvider("second", "b")
    third = FailingProvider("third")
    router = LLMRouter(
        config=_config("assumption", ["first", "second", "third"]),
        providers={"first": first, "second": second, "third": third},
    )

    outcome = router.complete("assumption", PromptPair("s", "u"), lambda text: {"text": text})

    assert outcome.output == {"text": "a"}
    assert first.calls == 1
    assert second.calls == 0
    assert third.calls == 0


def test_router_exhausted_collects_errors_in_order():
    providers = {name: FailingProvider(name) for name in ("a", "b", "c")}
    router = LLMRouter(config=_config("assumption", ["a", "b", "c"]), providers=providers)

    outcome = router.complete("assumption", PromptPair("s", "u"), lambda text: {})

    assert outcome.state is FallbackState.EXHAUSTED
    assert outcome.output is None
    assert [e.split(":")[0] for e in outcome.errors] == ["a", "b", "c"]


def test_unregistered_provider_is_just_another_failure():
    ok = TextProvider("ok", "fine")
    router = LLMRouter(config=_config("assumption", ["ghost", "ok"]), providers={"ok": ok})

    outcome = router.complete("assumption", PromptPair("s", "u"), lambda text: {"text": text})

    assert outcome.succeeded
    assert outcome.errors == ["ghost: provider not available"]


def test_malformed_route_is_recorded_and_next_route_tried():
    ok = TextProvider("ok", "fine")
    config = _config("assumption", ["ok"])
    config["routing"]["assumption"] = ["gemini", "ok:model-ok"]
    router = LLMRouter(config=config, providers={"ok": ok})

    outcome = router.complete("assumption", PromptPair("s", "u"), lambda text: {"text": text})

    assert outcome.succeeded
    assert outcome.provider == "ok"
    assert outcome.errors == ["gemini: invalid route"]


def test_quota_error_is_recorded_and_next_provider_tried():
    limited = FailingProvider("limited", QuotaExceeded("rate limited", "limited"))
    ok = TextProvider("ok", "fine")
    router = LLMRouter(config=_config("assumption", ["limited", "ok"]), providers={"limited": limited, "ok": ok})

    outcome = router.complete("assumption", PromptPair("s", "u"), lambda text: {"text": text})

    assert outcome.succeeded
    assert ok.calls == 1
    assert len(outcome.errors) == 1
    assert outcome.errors[0].startswith("limited: ")
    assert "429" in outcome.errors[0]
    assert "quota" in outcome.errors[0]


def test_mom_test_missing_field_falls_through_to_next_provider():
    partial = TextProvider("partial", _mom_test_json(drop_field="signal_to_listen_for"))
    good = TextProvider("good", "```json\n" + _mom_test_json() + "\n```")
    router = LLMRouter(
        config=_config("mom_test", ["partial", "good"]),
        providers={"partial": partial, "good": good},
    )

    result = generate_mom_test(router, MomTestInputs(idea="x", audience="y"))

    assert partial.calls == 1
    assert good.calls == 1
    assert "_warning" not in result
    assert len(result["questions"]) == 10
    assert all(q["priority"] in (1, 2, 3) for q in result["questions"])


def test_mom_test_wrong_question_count_is_rejected():
    short = TextProvider("short", _mom_test_json(count=9))
    router = LLMRouter(config=_config("mom_test", ["short"]), providers={"short": short})

    result = generate_mom_test(router, MomTestInputs(idea="x", audience="y"))

    assert result["_warning"]
    assert len(result["_errors"]) == 1
    assert result["_errors"][0].startswith("short: invalid Mom Test output")
    assert len(result["questions"]) == 10


def test_default_routing_covers_every_intent():
    for intent in ("assumption", "hypothesis", "mom_test", "image"):
        assert DEFAULT_SETTINGS["routing"][intent]
