"""Built-in expression functions and their registry.

Python functions use snake_case; templates call them by their registered
camelCase names (``toUpper(name)`` calls ``to_upper``). Built-in names
take precedence over template names in calls.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from lgengine.diagnostics import ErrorTemplate, ExpressionError

from .values import Value, is_number, is_truthy, to_text

__all__ = [
    "FunctionRegistry",
    "FunctionSignature",
    "create_default_registry",
    "get_shared_registry",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FunctionSignature:
    """Registered function metadata.

    Attributes:
        python_name: Function name in Python (snake_case)
        name: Name used in expressions (camelCase)
        callable: The actual Python function
    """

    python_name: str
    name: str
    callable: Callable[..., Value]


class FunctionRegistry:
    """Registry of functions callable from expressions.

    Supports dict-like introspection (``in``, ``len``, iteration) and can
    be frozen to protect a shared instance.

    Example:
        >>> registry = FunctionRegistry()
        >>> registry.register(lambda text: text[::-1], name="reverse")
        >>> "reverse" in registry
        True
        >>> registry.call("reverse", ["abc"])
        'cba'
    """

    __slots__ = ("_frozen", "_functions")

    def __init__(self) -> None:
        """Initialize empty function registry."""
        self._functions: dict[str, FunctionSignature] = {}
        self._frozen = False

    def register(self, func: Callable[..., Value], *, name: str | None = None) -> None:
        """Register a Python function.

        Args:
            func: Function taking positional arguments
            name: Expression name (default: camelCase of func.__name__)

        Raises:
            TypeError: If the registry is frozen
        """
        if self._frozen:
            msg = "Cannot register functions on a frozen FunctionRegistry; use copy()"
            raise TypeError(msg)
        python_name = getattr(func, "__name__", "unknown")
        if name is None:
            name = self._to_camel_case(python_name)
        self._functions[name] = FunctionSignature(python_name, name, func)

    def call(self, name: str, arguments: Sequence[Value]) -> Value:
        """Call a registered function.

        Raises:
            ExpressionError: If the function is unknown, or raises TypeError
                or ValueError (argument problems)
        """
        signature = self._functions.get(name)
        if signature is None:
            raise ExpressionError(ErrorTemplate.function_failed(name, "not registered"))
        try:
            return signature.callable(*arguments)
        except (TypeError, ValueError) as e:
            raise ExpressionError(ErrorTemplate.function_failed(name, str(e))) from e

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """True once freeze() has been called."""
        return self._frozen

    def copy(self) -> FunctionRegistry:
        """Unfrozen shallow copy; signatures are shared."""
        new_registry = FunctionRegistry()
        new_registry._functions = self._functions.copy()
        return new_registry

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return f"FunctionRegistry(functions={len(self._functions)})"

    @staticmethod
    def _to_camel_case(snake_case: str) -> str:
        """Convert snake_case to camelCase ("to_upper" -> "toUpper")."""
        components = snake_case.strip("_").split("_")
        return components[0] + "".join(comp.capitalize() for comp in components[1:])


# ============================================================================
# BUILT-IN FUNCTIONS
# ============================================================================


def concat(*values: Value) -> str:
    return "".join(to_text(value) for value in values)


def length(value: Value) -> int:
    if value is None:
        return 0
    if isinstance(value, str | Sequence | Mapping):
        return len(value)
    msg = f"length() expects text or a collection, got {type(value).__name__}"
    raise TypeError(msg)


def count(value: Value) -> int:
    return length(value)


def to_upper(value: Value) -> str:
    return to_text(value).upper()


def to_lower(value: Value) -> str:
    return to_text(value).lower()


def trim(value: Value) -> str:
    return to_text(value).strip()


def join(items: Value, separator: Value = ",", last_separator: Value = None) -> str:
    """Join items; an optional last separator goes before the final item."""
    if not isinstance(items, Sequence) or isinstance(items, str):
        msg = "join() expects a list"
        raise TypeError(msg)
    texts = [to_text(item) for item in items]
    sep = to_text(separator)
    if last_separator is None or len(texts) < 2:
        return sep.join(texts)
    return sep.join(texts[:-1]) + to_text(last_separator) + texts[-1]


def exists(value: Value) -> bool:
    return value is not None


def if_(condition: Value, when_true: Value, when_false: Value) -> Value:
    return when_true if is_truthy(condition) else when_false


def string(value: Value) -> str:
    return to_text(value)


def int_(value: Value) -> int:
    if isinstance(value, bool) or value is None:
        msg = f"int() cannot convert {to_text(value)!r}"
        raise ValueError(msg)
    if isinstance(value, float):
        return int(value)
    return int(to_text(value).strip())


def float_(value: Value) -> float:
    if isinstance(value, bool) or value is None:
        msg = f"float() cannot convert {to_text(value)!r}"
        raise ValueError(msg)
    if is_number(value):
        return float(value)  # type: ignore[arg-type]
    return float(to_text(value).strip())


def not_(value: Value) -> bool:
    return not is_truthy(value)


def contains(collection: Value, item: Value) -> bool:
    match collection:
        case None:
            return False
        case str():
            return to_text(item) in collection
        case Mapping():
            return item in collection
        case Sequence():
            return item in collection
        case _:
            msg = f"contains() expects text or a collection, got {type(collection).__name__}"
            raise TypeError(msg)


def replace(text: Value, old: Value, new: Value) -> str:
    return to_text(text).replace(to_text(old), to_text(new))


def first(collection: Value) -> Value:
    if isinstance(collection, str | Sequence) and collection:
        return collection[0]
    return None


def last(collection: Value) -> Value:
    if isinstance(collection, str | Sequence) and collection:
        return collection[-1]
    return None


def create_default_registry() -> FunctionRegistry:
    """Create a new, unfrozen registry with the built-in functions.

    Example:
        >>> registry = create_default_registry()
        >>> "toUpper" in registry and "if" in registry
        True
    """
    registry = FunctionRegistry()
    for func in (
        concat, length, count, to_upper, to_lower, trim, join,
        exists, string, contains, replace, first, last,
    ):  # fmt: skip
        registry.register(func)
    # Names that are Python keywords or builtins
    registry.register(if_, name="if")
    registry.register(int_, name="int")
    registry.register(float_, name="float")
    registry.register(not_, name="not")
    return registry


# Initialized lazily on first access to avoid import-time side effects.
_SHARED_REGISTRY: FunctionRegistry | None = None


def get_shared_registry() -> FunctionRegistry:
    """Shared, frozen registry with the built-in functions.

    To add custom functions, use ``get_shared_registry().copy()`` or
    ``create_default_registry()``.
    """
    global _SHARED_REGISTRY  # noqa: PLW0603
    if _SHARED_REGISTRY is None:
        registry = create_default_registry()
        registry.freeze()
        _SHARED_REGISTRY = registry
        logger.debug("Created shared function registry with %d functions", len(registry))
    return _SHARED_REGISTRY
