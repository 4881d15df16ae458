"""Embedded expression language for ``${...}`` segments.

Exports:
    ExpressionEvaluator: Protocol used by the template evaluator
    ExpressionContext: Data, template invoker and bound parameters
    DefaultExpressionEvaluator: Built-in expression language
    FunctionRegistry: Functions callable from expressions
    parse_expression: Memoized expression parser
    to_text, is_truthy: Value conversions

Python 3.13+.
"""

from .evaluator import (
    DefaultExpressionEvaluator,
    ExpressionContext,
    ExpressionEvaluator,
    TemplateInvoker,
)
from .functions import FunctionRegistry, create_default_registry, get_shared_registry
from .parser import parse_expression
from .values import Value, is_truthy, to_text

__all__ = [
    "DefaultExpressionEvaluator",
    "ExpressionContext",
    "ExpressionEvaluator",
    "FunctionRegistry",
    "TemplateInvoker",
    "Value",
    "create_default_registry",
    "get_shared_registry",
    "is_truthy",
    "parse_expression",
    "to_text",
]
