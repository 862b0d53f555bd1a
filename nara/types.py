"""Runtime values and helpers for Nara.

Values are plain Python objects wherever one fits: `int`, `float`, `str`,
`bool` and `list`. Two marker types complete the set: `UnitVal` (the value
of statements and empty blocks) and `FunctionVal` (a user-defined function).
Since `bool` is a subclass of `int` in Python, helpers here always check
for booleans first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List

from .ast import Node

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class UnitVal:
    """Marker object for the Nara unit value."""
    def __repr__(self) -> str:
        return 'Unit'


UNIT = UnitVal()


@dataclass(frozen=True)
class FunctionVal:
    """A user-defined function: parameter names plus the shared body node."""
    name: str
    params: List[str]
    body: Node

    def __repr__(self) -> str:
        return f"<fn {self.name}({', '.join(self.params)})>"


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return is_int(value) or isinstance(value, float)


def fits_int64(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def type_name(value: Any) -> str:
    """Return the Nara kind of a runtime value."""
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'float'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, list):
        return 'list'
    if isinstance(value, FunctionVal):
        return 'function'
    if isinstance(value, UnitVal):
        return 'unit'
    return type(value).__name__


def format_float(value: float) -> str:
    """Positional notation with at least one fractional digit, e.g. `1e20` -> `100000000000000000000.0`.

    Finite floats printed this way parse back as float literals.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(Decimal(repr(value)), 'f')
    if '.' not in text:
        text += '.0'
    return text


def quote_string(value: str) -> str:
    escaped = (value.replace('\\', '\\\\').replace('"', '\\"')
               .replace('\n', '\\n').replace('\t', '\\t').replace('\r', '\\r'))
    return f'"{escaped}"'


def to_string(value: Any) -> str:
    """Convert a value to the text `print` and f-strings show.

    Strings are shown raw at the top level; inside lists they are quoted so
    that `["a, b"]` stays readable.
    """
    if isinstance(value, str):
        return value
    return repr_value(value)


def repr_value(value: Any) -> str:
    """Debug form of a value, as the REPL prints it."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, list):
        return '[' + ', '.join(repr_value(item) for item in value) + ']'
    if isinstance(value, UnitVal):
        return '()'
    return repr(value)
