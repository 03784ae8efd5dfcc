"""Shared helpers for JSON values."""

import json
import math
from typing import Any

JSON_INDENT = 2


def is_number(value: Any) -> bool:
    """True for int/float values; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_json_value(value: Any) -> bool:
    """True when value is made only of None, bool, int, float, str, list and str-keyed dict."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return True
    if isinstance(value, list):
        return all(is_json_value(i) for i in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_json_value(v) for k, v in value.items())
    return False


def strict_equals(a: Any, b: Any) -> bool:
    """Compare two stored values.

    Lists and dicts match only when they are the same object. Primitives
    compare by value, except that booleans never equal numbers.
    """
    if isinstance(a, (list, dict)) or isinstance(b, (list, dict)):
        return a is b
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def _walk_finite(obj: Any) -> Any:
    """Recursively replace non-finite floats with None."""
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _walk_finite(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_finite(i) for i in obj]
    return obj


def dump_object(data: dict[str, Any]) -> str:
    """Serialize a store map as indented JSON text.

    inf and nan have no JSON token, so they are written as null.
    """
    return json.dumps(_walk_finite(data), indent=JSON_INDENT, ensure_ascii=False)


def load_object(text: str) -> dict[str, Any]:
    """Parse JSON text that must hold a single object.

    Raises json.JSONDecodeError for malformed text and TypeError when the
    top-level value is not an object.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data
