"""Turns raw model text into the structured output for each intent."""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from .errors import ParseError
from .prompts import ASSUMPTION, HYPOTHESIS, IMAGE, MOM_TEST
from .schemas import GeneratedImage, MomTestOutput

_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n(.*?)```", re.DOTALL)
_FENCE_LINE_RE = re.compile(r"```[A-Za-z0-9_-]*")


def strip_code_fences(text: str) -> str:
    """Returns the first fenced block's body, or the text itself when it has none."""
    cleaned = (text or "").strip()
    match = _FENCE_RE.search(cleaned)
    if match:
        return match.group(1).strip()
    return cleaned


def parse_lines(text: str) -> List[str]:
    cleaned = strip_code_fences(text)
    lines = [line.strip() for line in cleaned.splitlines()]
    lines = [line for line in lines if line and not _FENCE_LINE_RE.fullmatch(line)]
    if not lines:
        raise ParseError("empty completion")
    return lines


def parse_json_object(text: str) -> Dict[str, Any]:
    cleaned = strip_code_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        # Models sometimes wrap the object in a sentence; retry on the outermost braces.
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ParseError(f"not valid JSON: {exc.msg}") from exc
        try:
            payload = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as inner:
            raise ParseError(f"not valid JSON: {inner.msg}") from inner

    if not isinstance(payload, dict):
        raise ParseError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    location = ".".join(str(part) for part in err.get("loc", ()))
    return f"{location}: {err.get('msg')}" if location else str(err.get("msg"))


def validate_structured(intent: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Checks an already-decoded output against its intent's contract."""
    if intent in (ASSUMPTION, HYPOTHESIS):
        items = data.get("assumptions")
        if not isinstance(items, list) or not items or not all(isinstance(i, str) and i for i in items):
            raise ParseError("assumptions must be a non-empty list of strings")
        return {"assumptions": list(items)}

    if intent == MOM_TEST:
        try:
            return MomTestOutput.model_validate(data).model_dump()
        except ValidationError as exc:
            raise ParseError(f"invalid Mom Test output ({_first_error(exc)})") from exc

    if intent == IMAGE:
        images = data.get("images")
        if not isinstance(images, list) or not images:
            raise ParseError("no images returned")
        try:
            checked = [GeneratedImage.model_validate(image).model_dump() for image in images]
        except ValidationError as exc:
            raise ParseError(f"invalid image entry ({_first_error(exc)})") from exc
        return {**data, "images": checked}

    raise ValueError(f"Unknown intent '{intent}'")


def parse(intent: str, raw_text: str) -> Dict[str, Any]:
    if intent in (ASSUMPTION, HYPOTHESIS):
        return validate_structured(intent, {"assumptions": parse_lines(raw_text)})
    if intent == MOM_TEST:
        return validate_structured(intent, parse_json_object(raw_text))
    raise ValueError(f"Intent '{intent}' has no text parser")
