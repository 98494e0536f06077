"""Runtime value helpers for Sprig.

Sprig values are represented directly by Python objects: numbers are
single precision ``numpy.float32`` scalars, strings are ``str``,
booleans are ``bool`` and nil is the ``NIL`` singleton defined here.
User functions are represented by ``FunctionValue`` in the interpreter
module. This module holds the rules that the language defines over that
value domain: truthiness, equality and conversion to text.

Arithmetic on two ``float32`` scalars stays in single precision, so
``0.1 + 0.2`` is exactly the single precision sum and prints as ``0.3``.
"""

from __future__ import annotations

from typing import Any

import numpy as np


class NilVal:
    """Marker object for the Sprig ``nil`` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


def make_number(value: Any) -> np.float32:
    """Narrow ``value`` to a Sprig Number. Out of range values become inf."""
    with np.errstate(over='ignore'):
        return np.float32(value)


def is_number(value: Any) -> bool:
    return isinstance(value, np.float32)


def is_falsy(value: Any) -> bool:
    """Return True when ``value`` counts as false.

    nil, false, the number 0 and the empty string are falsy. Everything
    else, functions included, is truthy.
    """
    if value is NIL:
        return True
    if isinstance(value, bool):
        return not value
    if is_number(value):
        return bool(value == 0)
    if isinstance(value, str):
        return len(value) == 0
    return False


def values_equal(a: Any, b: Any) -> bool:
    # bool is a subclass of int and True == 1.0 in Python, so compare types first
    if type(a) is not type(b):
        return False
    if isinstance(a, (np.float32, str, bool)):
        return bool(a == b)
    return a is b


def format_number(value: np.float32) -> str:
    """Shortest decimal text that reads back as the same single precision value.

    Never uses an exponent: ``0.00001`` stays ``0.00001`` and ``3.0``
    prints as ``3``. Negative zero prints as ``-0``.
    """
    if np.isnan(value):
        return 'NaN'
    return np.format_float_positional(value, trim='-')


def to_string(value: Any) -> str:
    if value is NIL:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    return repr(value)


def type_name(value: Any) -> str:
    if value is NIL:
        return 'Nil'
    if isinstance(value, bool):
        return 'Boolean'
    if is_number(value):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    return 'Function'
