"""Pure computations behind the store operations.

Nothing here touches the store map or the filesystem. Both FlowDB and
AsyncFlowDB compute new values with these functions and then persist
them with their own ``set``.
"""

import functools
import math
from typing import Any, Callable

from .errors import TypeMismatchError, ValidationError
from .utils import is_json_value, is_number, strict_equals


class _Missing:
    """Sentinel type for "no entry under this key"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

OPERATORS = ("+", "-", "*", "/", "%")


# --- Validation ---


def validate_key(key: Any) -> str:
    if not isinstance(key, str) or not key:
        raise ValidationError(f"The key {key!r} is not defined!")
    return key


def validate_name(name: Any, action: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValidationError(f"Filename for {action} is not defined!")
    return name


def validate_value(value: Any) -> Any:
    """Reject anything that would not survive a JSON round trip unchanged."""
    if not is_json_value(value):
        raise ValidationError(f"The value {value!r} is not JSON-serializable")
    return value


def validate_operand(value: Any) -> float | int:
    if not is_number(value) or (isinstance(value, float) and math.isnan(value)):
        raise ValidationError(f"The value must be a number, got {value!r}")
    return value


def validate_operator(operator: Any) -> str:
    if operator not in OPERATORS:
        raise ValidationError(f"Invalid operator {operator!r}; expected one of {', '.join(OPERATORS)}")
    return operator


# --- Numeric ---


def current_number(current: Any) -> float | int:
    """Missing and null count as 0; any other non-number is rejected."""
    if current is MISSING or current is None:
        return 0
    if not is_number(current):
        raise TypeMismatchError(f"Existing value is not a number: {current!r}")
    return current


def _as_float(x: float | int) -> float:
    """int to float; ints beyond the float range become +/-inf."""
    try:
        return float(x)
    except OverflowError:
        return math.inf if x > 0 else -math.inf


def _divide(a: float | int, b: float | int) -> float:
    a, b = _as_float(a), _as_float(b)
    if b != 0:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _remainder(a: float | int, b: float | int) -> float | int:
    """Truncated remainder: the sign follows the dividend."""
    if isinstance(a, int) and isinstance(b, int):
        if b == 0:
            return math.nan
        r = abs(a) % abs(b)
        return -r if a < 0 else r
    a, b = _as_float(a), _as_float(b)
    if b == 0 or math.isinf(a) or math.isnan(a):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def apply_math(current: Any, operator: str, operand: Any) -> float | int:
    """Validate the arguments and compute ``current <operator> operand``."""
    validate_operator(operator)
    validate_operand(operand)
    base = current_number(current)
    if operator == "/":
        return _divide(base, operand)
    if operator == "%":
        return _remainder(base, operand)
    # mixed int/float arithmetic is done in floats, huge ints included
    if isinstance(base, float) or isinstance(operand, float):
        base, operand = _as_float(base), _as_float(operand)
    if operator == "+":
        return base + operand
    if operator == "-":
        return base - operand
    return base * operand



# --- Arrays ---


def current_list(current: Any) -> list:
    if current is MISSING or current is None:
        return []
    if not isinstance(current, list):
        raise TypeMismatchError(f"Value is not an array: {current!r}")
    return current


def pushed(current: Any, value: Any) -> list:
    return [*current_list(current), value]


def pulled(current: Any, value: Any) -> list:
    return [item for item in current_list(current) if not strict_equals(item, value)]


def find_items(current: Any, value: Any) -> list:
    if not isinstance(current, list):
        return []
    return [item for item in current if strict_equals(item, value)]


def find_by(current: Any, prop: str, value: Any) -> list:
    if not isinstance(current, list):
        return []
    return [
        item for item in current
        if isinstance(item, dict) and prop in item and strict_equals(item[prop], value)
    ]


# --- Functional ---


def _call(fn: Callable, args: tuple, index: int, with_index: bool) -> Any:
    return fn(*args, index) if with_index else fn(*args)


def map_items(current: Any, fn: Callable, with_index: bool = False) -> list:
    if not isinstance(current, list):
        return []
    return [_call(fn, (item,), i, with_index) for i, item in enumerate(current)]


def filter_items(current: Any, fn: Callable, with_index: bool = False) -> list:
    if not isinstance(current, list):
        return []
    return [item for i, item in enumerate(current) if _call(fn, (item,), i, with_index)]


def reduce_items(current: Any, fn: Callable, initial: Any = MISSING, with_index: bool = False) -> Any:
    """Fold the list left to right.

    Without ``initial`` the first element seeds the accumulator and the
    fold starts at index 1; an empty list then raises TypeError.
    """
    if not isinstance(current, list):
        return None if initial is MISSING else initial
    items = list(enumerate(current))
    if initial is MISSING:
        if not items:
            raise TypeError("reduce of empty array with no initial value")
        (_, acc), items = items[0], items[1:]
    else:
        acc = initial
    return functools.reduce(
        lambda a, pair: _call(fn, (a, pair[1]), pair[0], with_index), items, acc
    )


def for_each_item(current: Any, fn: Callable, with_index: bool = False) -> None:
    if not isinstance(current, list):
        return
    for i, item in enumerate(current):
        _call(fn, (item,), i, with_index)
