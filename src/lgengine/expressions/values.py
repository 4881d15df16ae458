"""Value conversions shared by the expression evaluator and the renderer.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

__all__ = ["Value", "is_number", "is_truthy", "to_text"]

type Value = object
"""Any value an expression can produce: str, int, float, bool, None,
sequences, mappings or arbitrary data objects."""


def is_number(value: object) -> bool:
    """True for int and float, excluding bool."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_truthy(value: object) -> bool:
    """Truthiness used by ``&&``, ``||``, ``!`` and IF conditions.

    None and False are false; everything else follows Python truthiness
    (empty text, zero and empty collections are false).
    """
    return bool(value)


def to_text(value: object) -> str:
    """Render a value as template output.

    Example:
        >>> to_text(None), to_text(True), to_text(3.0), to_text([1, "a"])
        ('', 'true', '3', '1,a')
    """
    match value:
        case None:
            return ""
        case str():
            return value
        case bool():
            return "true" if value else "false"
        case float() if value.is_integer():
            return str(int(value))
        case int() | float():
            return str(value)
        case Mapping():
            return json.dumps(dict(value), ensure_ascii=False, default=str)
        case Sequence():
            return ",".join(to_text(item) for item in value)
        case _:
            return str(value)
