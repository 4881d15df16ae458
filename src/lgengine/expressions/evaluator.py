"""Expression evaluation.

ExpressionEvaluator is the protocol the template evaluator depends on;
DefaultExpressionEvaluator implements the built-in expression language.
Template calls inside an expression go back to the template evaluator
through the ``template_invoker`` callback of the ExpressionContext, so
this package never imports the runtime.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol

from lgengine.diagnostics import (
    ErrorTemplate,
    ExpressionError,
    TemplateNotFoundError,
)

from .functions import FunctionRegistry, get_shared_registry
from .nodes import Binary, Call, Index, Literal, Member, Name, Node, Unary
from .parser import parse_expression
from .values import Value, is_number, is_truthy, to_text

__all__ = [
    "DefaultExpressionEvaluator",
    "ExpressionContext",
    "ExpressionEvaluator",
    "TemplateInvoker",
]

type TemplateInvoker = Callable[[str, Sequence[Value]], str]
"""Callback rendering a template by name with positional arguments."""

_MISSING = object()

_COMPARISONS: dict[str, Callable[[object, object], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True, slots=True)
class ExpressionContext:
    """Everything an expression can see.

    Attributes:
        data: Caller data (mapping or object with attributes)
        template_invoker: Renders templates called from the expression
        locals: Bound template parameters; shadow names in data
    """

    data: object = None
    template_invoker: TemplateInvoker | None = None
    locals: Mapping[str, Value] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, name: str) -> Value:
        """Resolve a bare name: parameters first, then data; None if absent."""
        if name in self.locals:
            return self.locals[name]
        return _get_member(self.data, name)


class ExpressionEvaluator(Protocol):
    """Evaluates the text inside ``${...}``."""

    def evaluate(self, expression: str, context: ExpressionContext) -> Value:
        """Evaluate expression source in a context.

        Raises:
            ExpressionError: On syntax or evaluation errors
        """


def _get_member(target: object, name: str) -> Value:
    if target is None:
        return None
    if isinstance(target, Mapping):
        return target.get(name)
    if name.startswith("_"):
        return None
    value = getattr(target, name, _MISSING)
    return None if value is _MISSING else value


def _get_index(target: object, key: object) -> Value:
    match target:
        case None:
            return None
        case Mapping():
            return target.get(key)
        case str() | Sequence() if isinstance(key, int) and not isinstance(key, bool):
            return target[key] if -len(target) <= key < len(target) else None
        case _ if isinstance(key, str):
            return _get_member(target, key)
        case _:
            return None


def _divide(left: int | float, right: int | float) -> int | float:
    if isinstance(left, int) and isinstance(right, int):
        quotient = abs(left) // abs(right)
        return quotient if (left >= 0) == (right > 0) else -quotient
    return left / right


@dataclass(slots=True)
class _Evaluation:
    """State of one evaluate() call."""

    source: str
    context: ExpressionContext
    functions: FunctionRegistry

    def type_mismatch(self, op: str, left: object, right: object) -> ExpressionError:
        return ExpressionError(
            ErrorTemplate.expression_type_mismatch(op, left, right), expression=self.source
        )

    def visit(self, node: Node) -> Value:
        match node:
            case Literal(value=value):
                return value
            case Name(name=name):
                return self.context.lookup(name)
            case Member(target=target, name=name):
                return _get_member(self.visit(target), name)
            case Index(target=target, key=key):
                return _get_index(self.visit(target), self.visit(key))
            case Call(function="if", arguments=[condition, when_true, when_false]) if (
                "if" in self.functions
            ):
                # Only the chosen arm is evaluated
                chosen = when_true if is_truthy(self.visit(condition)) else when_false
                return self.visit(chosen)
            case Call(function=function, arguments=arguments):
                return self.call(function, [self.visit(arg) for arg in arguments])
            case Unary(operator="!", operand=operand):
                return not is_truthy(self.visit(operand))
            case Unary(operator="-", operand=operand):
                value = self.visit(operand)
                if not is_number(value):
                    raise self.type_mismatch("-", value, value)
                return -value  # type: ignore[operator]
            case Binary(operator="&&", left=left, right=right):
                return is_truthy(self.visit(left)) and is_truthy(self.visit(right))
            case Binary(operator="||", left=left, right=right):
                return is_truthy(self.visit(left)) or is_truthy(self.visit(right))
            case Binary(operator=op, left=left, right=right):
                return self.binary(op, self.visit(left), self.visit(right))
            case _:  # pragma: no cover
                msg = f"Unknown expression node: {node!r}"
                raise TypeError(msg)

    def call(self, function: str, arguments: list[Value]) -> Value:
        if function in self.functions:
            try:
                return self.functions.call(function, arguments)
            except ExpressionError as e:
                raise ExpressionError(
                    e.diagnostic or str(e), expression=self.source
                ) from e
        invoker = self.context.template_invoker
        if invoker is None:
            raise TemplateNotFoundError(
                ErrorTemplate.template_not_found(function), template_name=function
            )
        return invoker(function, arguments)

    def binary(self, op: str, left: Value, right: Value) -> Value:
        match op:
            case "==":
                return left == right
            case "!=":
                return left != right
            case "&":
                return to_text(left) + to_text(right)
            case "+" if isinstance(left, str) or isinstance(right, str):
                return to_text(left) + to_text(right)
            case "<" | "<=" | ">" | ">=":
                comparable = (is_number(left) and is_number(right)) or (
                    isinstance(left, str) and isinstance(right, str)
                )
                if not comparable:
                    raise self.type_mismatch(op, left, right)
                return _COMPARISONS[op](left, right)

        if not (is_number(left) and is_number(right)):
            raise self.type_mismatch(op, left, right)
        return self.arithmetic(op, left, right)  # type: ignore[arg-type]

    def arithmetic(self, op: str, left: int | float, right: int | float) -> int | float:
        match op:
            case "+":
                return left + right
            case "-":
                return left - right
            case "*":
                return left * right
            case "/" | "%" if right == 0:
                raise ExpressionError(
                    ErrorTemplate.division_by_zero(self.source), expression=self.source
                )
            case "/":
                return _divide(left, right)
            case "%":
                return left % right
        raise self.type_mismatch(op, left, right)  # pragma: no cover


class DefaultExpressionEvaluator:
    """Evaluator for the built-in expression language.

    Names resolve to template parameters first, then to the data context;
    missing names and members evaluate to None. Calls resolve built-in
    functions first, then templates through the context's invoker.
    ``if(condition, a, b)`` evaluates only the arm it returns, like
    ``&&`` and ``||``.

    Thread-safe: holds no per-call state.

    Example:
        >>> evaluator = DefaultExpressionEvaluator()
        >>> evaluator.evaluate("toUpper(user.name) + '!'", ExpressionContext({"user": {"name": "ana"}}))
        'ANA!'
    """

    __slots__ = ("_functions",)

    def __init__(self, functions: FunctionRegistry | None = None) -> None:
        """Initialize evaluator.

        Args:
            functions: Function registry (default: shared frozen built-ins)
        """
        self._functions = functions if functions is not None else get_shared_registry()

    @property
    def functions(self) -> FunctionRegistry:
        """Functions callable from expressions."""
        return self._functions

    def evaluate(self, expression: str, context: ExpressionContext) -> Value:
        """Evaluate expression source.

        Raises:
            ExpressionError: On syntax, type or function errors
            LGReferenceError: Propagated from template invocations
        """
        tree = parse_expression(expression.strip())
        return _Evaluation(expression, context, self._functions).visit(tree)
