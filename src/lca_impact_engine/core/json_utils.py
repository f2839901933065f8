"""Helpers for pulling JSON out of free-form model output."""

from __future__ import annotations

import json
import re
from typing import Any

from .exceptions import ImpactEngineError

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


def parse_json_response(raw: str) -> Any:
    """Parse a JSON document, tolerating code fences and surrounding prose."""
    text = (raw or "").strip()
    if not text:
        raise ImpactEngineError("Empty response where JSON was expected")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    fenced = _FENCE_PATTERN.search(text)
    if fenced:
        try:
            return json.loads(fenced.group(1).strip())
        except json.JSONDecodeError:
            pass
    match = _OBJECT_PATTERN.search(text)
    if match:
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise ImpactEngineError("Response contained malformed JSON") from exc
    raise ImpactEngineError("No JSON object found in response")
