# valuestore/core/tree.py

"""
Data tree helpers.

A store holds a tree of dicts and lists whose leaves are scalars
(None, bool, int, float or str). The helpers here enforce that rule on
every write and check counter values for increment/decrement.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Union

from valuestore.core.exceptions import (
    NonScalarValueError,
    NotAnIntegerError,
    ValidationError,
)

Scalar = Union[None, bool, int, float, str]
DataTree = Union[Scalar, Dict[str, "DataTree"], List["DataTree"]]

# Exact types only: subclasses such as str enums or numpy floats are rejected
SCALAR_TYPES = (type(None), bool, int, float, str)

INTEGER_STRING_PATTERN = re.compile(r"\A[+-]?[0-9]+\Z")

# ==============================================================
# VALIDATION
# ==============================================================

def _child_path(path: str, key: Union[str, int]) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def validate_value(path: str, value: Any) -> None:
    """
    Check that ``value`` and everything below it only holds scalar leaves.

    Args:
        path: Dotted key path of ``value``, used in error messages.
        value: Value to check.

    Raises:
        NonScalarValueError: A leaf is not exactly None, bool, int, float or
            str, or a container is not a plain dict or list.
        ValidationError: A nested mapping has a non-string key.
    """
    if type(value) is dict:
        for key, item in value.items():
            if type(key) is not str:
                raise ValidationError(_child_path(path, str(key)), "key must be a string")
            validate_value(_child_path(path, key), item)
    elif type(value) is list:
        for index, item in enumerate(value):
            validate_value(_child_path(path, index), item)
    elif type(value) not in SCALAR_TYPES:
        raise NonScalarValueError(path, value)


def validate_tree(data: Mapping[Any, Any]) -> None:
    """Validate every top-level entry of ``data`` before anything is written."""
    for key, value in data.items():
        if type(key) is not str:
            raise ValidationError(str(key), "key must be a string")
        validate_value(key, value)

# ==============================================================
# COUNTERS
# ==============================================================

def to_counter(key: str, value: Any) -> int:
    """
    Return ``value`` as an int for increment/decrement.

    Accepts ints, floats without a fractional part and strings of decimal
    digits with an optional sign. Booleans and containers are rejected.

    Raises:
        NotAnIntegerError: ``value`` cannot be read as an integer without loss.
    """
    if isinstance(value, bool):
        raise NotAnIntegerError(key, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and INTEGER_STRING_PATTERN.match(value):
        return int(value)
    raise NotAnIntegerError(key, value)


def check_amount(key: str, amount: Any) -> int:
    """Make sure a counter step is a plain int."""
    if type(amount) is not int:
        raise ValidationError(key, f"amount must be an integer, got {type(amount).__name__}")
    return amount
