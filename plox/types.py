"""Runtime value helpers for plox.

plox values map directly onto Python objects:

* ``None``  -- nil
* ``int``   -- 64-bit signed integer (results are wrapped with
  :func:`wrap_int64`)
* ``float`` -- 64-bit floating point
* ``bool``  -- boolean
* ``str``   -- text string
* :class:`plox.callable.LoxCallable` -- functions

Because ``bool`` is a subclass of ``int`` in Python, every numeric test in
this module rules booleans out explicitly.
"""

from __future__ import annotations

import math
from typing import Any

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def wrap_int64(value: int) -> int:
    """Wrap an arbitrary Python int into the signed 64-bit range."""
    return ((value - INT64_MIN) % (2 ** 64)) + INT64_MIN


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: Any) -> bool:
    return isinstance(value, float)


def is_number(value: Any) -> bool:
    return is_int(value) or is_float(value)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_truthy(value: Any) -> bool:
    # nil is false, booleans are themselves, everything else is true
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if is_int(a) and is_int(b):
        return a == b
    if is_string(a) and is_string(b):
        return a == b
    if is_number(a) and is_number(b):
        return float(a) == float(b)
    # user functions and natives each compare by name within their own kind
    if type_name(a) == 'function' and type(a) is type(b):
        return a.name == b.name
    return False


def stringify(value: Any) -> str:
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if is_int(value):
        return '%d' % value
    if is_float(value):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return '+Inf' if value > 0 else '-Inf'
        return '%f' % value
    if is_string(value):
        return value.replace('"', '')
    return str(value)


def type_name(value: Any) -> str:
    """Name of a value's type as used by `isInstance`."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if is_int(value):
        return 'int'
    if is_float(value):
        return 'float'
    if is_string(value):
        return 'string'
    return getattr(type(value), 'type_name', type(value).__name__)


def float_divide(a: float, b: float) -> float:
    """IEEE division: a zero divisor gives a signed infinity or NaN."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def float_mod(a: float, b: float) -> float:
    """Remainder with the sign of the dividend; NaN where it is undefined."""
    if b == 0 or math.isinf(a):
        return math.nan
    return math.fmod(a, b)
