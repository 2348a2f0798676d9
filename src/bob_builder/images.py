"""Style presets, sizes and deterministic seed fan-out for concept images."""

from __future__ import annotations

from typing import Dict, List

MAX_SEED = 2_147_483_647
_MASK = 0xFFFFFFFF

DEFAULT_PRESET = "E-commerce Studio"
DEFAULT_ASPECT = "1:1"

STYLE_PRESETS: Dict[str, Dict[str, object]] = {
    "E-commerce Studio": {"cfg": 7.0, "steps": 28, "sampler": "Euler a"},
    "Photoreal": {"cfg": 6.5, "steps": 30, "sampler": "Euler a"},
    "3D Render": {"cfg": 8.0, "steps": 26, "sampler": "DPM++ 2M"},
    "Flat Illustration": {"cfg": 5.5, "steps": 22, "sampler": "Euler"},
    "Architectural": {"cfg": 7.5, "steps": 32, "sampler": "DPM++ 2M Karras"},
    "Cyberpunk": {"cfg": 7.0, "steps": 30, "sampler": "Euler a"},
    "Line Art": {"cfg": 5.0, "steps": 20, "sampler": "Euler"},
}

ASPECT_SIZES: Dict[str, Dict[str, int]] = {
    "1:1": {"width": 1024, "height": 1024},
    "4:5": {"width": 1024, "height": 1280},
    "3:2": {"width": 1344, "height": 896},
    "16:9": {"width": 1536, "height": 864},
}


def preset_name(name: str | None) -> str:
    return name if name in STYLE_PRESETS else DEFAULT_PRESET


def aspect_size(aspect: str | None) -> Dict[str, int]:
    return dict(ASPECT_SIZES.get(aspect or DEFAULT_ASPECT, ASPECT_SIZES[DEFAULT_ASPECT]))


def clamp(n: int, low: int, high: int) -> int:
    return max(low, min(high, n))


def hash_to_seed(text: str) -> int:
    """32-bit FNV-1a over UTF-16 code units."""
    data = text.encode("utf-16-le")
    h = 2166136261
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * 16777619) & _MASK
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


def mulberry32(seed: int):
    state = seed & _MASK

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    return next_float


def build_seeds(base_seed: int | None, user_id: str, n: int, now_ms: int) -> List[int]:
    """Fans a base seed out into `n` seeds; without one, hashes user id and time."""
    base = base_seed if base_seed is not None else hash_to_seed(f"{user_id}:{now_ms}")
    rng = mulberry32(base)
    return [int(rng() * MAX_SEED) for _ in range(n)]
