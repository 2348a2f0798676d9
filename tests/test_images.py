import base64

from bob_builder.images import aspect_size, build_seeds, hash_to_seed, mulberry32, preset_name
from bob_builder.llm.router import LLMRouter
from bob_builder.llm.providers import pollinations_provider
from bob_builder.llm.providers.pollinations_provider import PollinationsProvider
from bob_builder.llm.types import ImageRequest, ProviderHTTPError
from bob_builder.pipeline import generate_business_image, resolve_image_settings
from bob_builder.schemas import ImageInputs


class FakeImageProvider:
    name = "fake"

    def __init__(self):
        self.requests = []

    def render(self, request):
        self.requests.append(request)
        return [{"dataUrl": f"data:image/png;base64,{seed}", "seed": seed} for seed in request.seeds]


class BrokenImageProvider:
    name = "broken"

    def render(self, request):
        raise ProviderHTTPError("HTTP 502: bad gateway", "broken", status_code=502)


def test_seed_helpers_are_deterministic():
    assert hash_to_seed("anon:1") == hash_to_seed("anon:1")
    assert hash_to_seed("anon:1") != hash_to_seed("anon:2")
    assert 0 <= hash_to_seed("") < 2**32

    rng_a, rng_b = mulberry32(42), mulberry32(42)
    values = [rng_a() for _ in range(5)]
    assert values == [rng_b() for _ in range(5)]
    assert all(0 <= v < 1 for v in values)


def test_build_seeds_with_base_seed_ignores_user_and_time():
    assert build_seeds(7, "alice", 3, now_ms=1) == build_seeds(7, "bob", 3, now_ms=2)
    assert len(set(build_seeds(7, "alice", 6, now_ms=1))) == 6


def test_build_seeds_without_base_seed_depends_on_user_and_time():
    assert build_seeds(None, "alice", 2, now_ms=1) == build_seeds(None, "alice", 2, now_ms=1)
    assert build_seeds(None, "alice", 2, now_ms=1) != build_seeds(None, "alice", 2, now_ms=2)


def test_unknown_preset_and_aspect_fall_back():
    assert preset_name("Watercolor") == "E-commerce Studio"
    assert aspect_size("21:9") == {"width": 1024, "height": 1024}
    assert aspect_size("16:9") == {"width": 1536, "height": 864}


def test_resolve_image_settings_clamps_count():
    used = resolve_image_settings(ImageInputs(idea="x", n=50, seed=1), now_ms=0)
    assert len(used["seeds"]) == 6
    used = resolve_image_settings(ImageInputs(idea="x", n=0, seed=1), now_ms=0)
    assert len(used["seeds"]) == 1
    used = resolve_image_settings(ImageInputs(idea="x", seed=1, stylePreset="3D Render"), now_ms=0)
    assert len(used["seeds"]) == 3
    assert (used["cfg"], used["steps"], used["sampler"]) == (8.0, 26, "DPM++ 2M")


def test_generate_business_image_returns_images_and_used():
    fake = FakeImageProvider()
    router = LLMRouter(config={"routing": {"image": ["fake:flux"]}}, providers={"fake": fake})

    result = generate_business_image(router, ImageInputs(idea="dog walking app", n=2, seed=5, aspect="4:5"))

    assert [img["seed"] for img in result["images"]] == result["used"]["seeds"]
    assert result["used"]["width"] == 1024 and result["used"]["height"] == 1280
    assert "_warning" not in result
    assert fake.requests[0].model == "flux"


def test_generate_business_image_falls_back_to_placeholders():
    router = LLMRouter(config={"routing": {"image": ["broken:flux"]}}, providers={"broken": BrokenImageProvider()})

    result = generate_business_image(router, ImageInputs(idea="dog <walking> app", n=2, seed=5))

    assert result["_errors"] == ["broken: HTTP 502: bad gateway"]
    assert len(result["images"]) == 2
    first = result["images"][0]
    assert first["dataUrl"].startswith("data:image/svg+xml;base64,")
    svg = base64.b64decode(first["dataUrl"].split(",", 1)[1]).decode("utf-8")
    assert "dog &lt;walking&gt; app" in svg


class FakeImageResponse:
    def __init__(self, status_code, content=b"", text=""):
        self.status_code = status_code
        self.content = content
        self.text = text
        self.headers = {"content-type": "image/png"}

    @property
    def ok(self):
        return 200 <= self.status_code < 300


def test_pollinations_skips_failed_seeds(monkeypatch):
    calls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append(params["seed"])
        if params["seed"] == 2:
            return FakeImageResponse(500, text="oops")
        return FakeImageResponse(200, content=b"png-bytes")

    monkeypatch.setattr(pollinations_provider.requests, "get", fake_get)
    request = ImageRequest(
        prompt="a cat", negative="", width=64, height=64, cfg=7, steps=20,
        sampler=None, seeds=[1, 2, 3], allow_text=False,
    )

    images = PollinationsProvider(base_url="https://img.test/prompt").render(request)

    assert calls == [1, 2, 3]
    assert [img["seed"] for img in images] == [1, 3]
    assert images[0]["dataUrl"] == "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()
