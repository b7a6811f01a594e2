"""Runtime values for Rox.

A Rox value is one of four variants: a string, a double, a boolean, or
nil. The same classes are used for token literals, AST literals and
interpreter results, so nothing has to be converted between stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
import math


@dataclass(frozen=True)
class StringVal:
    value: str


@dataclass(frozen=True)
class DoubleVal:
    value: float


@dataclass(frozen=True)
class BoolVal:
    value: bool


@dataclass(frozen=True)
class NilVal:
    """Marker object for the Rox `nil` value."""


Value = Union[StringVal, DoubleVal, BoolVal, NilVal]

NIL = NilVal()
TRUE = BoolVal(True)
FALSE = BoolVal(False)


def format_number(x: float) -> str:
    """Render a double the way Rox prints numbers.

    Integral values drop the fractional part (`3` rather than `3.0`).
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'inf' if x > 0 else '-inf'
    if x.is_integer():
        if x == 0 and math.copysign(1.0, x) < 0:
            return '-0'
        return str(int(x))
    return repr(x)


def to_runtime_string(value: Value) -> str:
    """Printed form of a value: strings appear without quotes."""
    if isinstance(value, StringVal):
        return value.value
    if isinstance(value, DoubleVal):
        return format_number(value.value)
    if isinstance(value, BoolVal):
        return 'true' if value.value else 'false'
    if isinstance(value, NilVal):
        return 'nil'
    raise TypeError(f'not a Rox value: {value!r}')


def to_display_string(value: Value) -> str:
    """Debug form of a value: like `to_runtime_string` but strings are quoted."""
    if isinstance(value, StringVal):
        return f'"{value.value}"'
    return to_runtime_string(value)


def is_truthy(value: Value) -> bool:
    # nil and false are falsy; 0 and "" are not
    if isinstance(value, NilVal):
        return False
    if isinstance(value, BoolVal):
        return value.value
    return True


def values_equal(a: Value, b: Value) -> bool:
    if isinstance(a, DoubleVal) and isinstance(b, DoubleVal):
        # IEEE comparison, so NaN never equals itself
        return a.value == b.value
    if type(a) is not type(b):
        return False
    return a == b


def type_name(value: Value) -> str:
    if isinstance(value, StringVal):
        return 'string'
    if isinstance(value, DoubleVal):
        return 'number'
    if isinstance(value, BoolVal):
        return 'boolean'
    return 'nil'
