"""Tests for the expression language: lexer, parser, evaluator and functions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from lgengine import TemplateNotFoundError
from lgengine.diagnostics import DiagnosticCode, ExpressionError
from lgengine.expressions import (
    DefaultExpressionEvaluator,
    ExpressionContext,
    FunctionRegistry,
    create_default_registry,
    get_shared_registry,
    parse_expression,
    to_text,
)
from lgengine.expressions.lexer import TokenKind, tokenize
from lgengine.expressions.nodes import Binary, Call, Literal, Member, Name, Unary


def _eval(source: str, data: object = None, **context: Any) -> object:
    return DefaultExpressionEvaluator().evaluate(source, ExpressionContext(data, **context))


@dataclass
class _User:
    name: str
    _secret: str = "hidden"


class TestLexer:
    """tokenize splits expression source."""

    def test_token_kinds(self) -> None:
        tokens = tokenize("a.b >= 'x' && f(1.5)")
        assert [t.kind for t in tokens] == [
            TokenKind.NAME,
            TokenKind.PUNCT,
            TokenKind.NAME,
            TokenKind.OPERATOR,
            TokenKind.STRING,
            TokenKind.OPERATOR,
            TokenKind.NAME,
            TokenKind.PUNCT,
            TokenKind.NUMBER,
            TokenKind.PUNCT,
            TokenKind.EOF,
        ]

    def test_string_escapes(self) -> None:
        (token, _) = tokenize(r"'a\nb\'c'")
        assert token.value == "a\nb'c"

    def test_unterminated_string(self) -> None:
        with pytest.raises(ExpressionError):
            tokenize("'abc")

    def test_unknown_character(self) -> None:
        with pytest.raises(ExpressionError):
            tokenize("a # b")


class TestParser:
    """parse_expression builds immutable trees."""

    def test_precedence(self) -> None:
        assert parse_expression("1 + 2 * 3") == Binary(
            "+", Literal(1), Binary("*", Literal(2), Literal(3))
        )

    def test_prefix_and_postfix(self) -> None:
        assert parse_expression("!user.active") == Unary("!", Member(Name("user"), "active"))

    def test_dotted_call(self) -> None:
        assert parse_expression("common.greet(1)") == Call("common.greet", (Literal(1),))

    def test_keywords(self) -> None:
        assert parse_expression("null") == Literal(None)
        assert parse_expression("true") == Literal(True)

    def test_memoized(self) -> None:
        assert parse_expression("x + 1") is parse_expression("x + 1")

    @pytest.mark.parametrize("source", ["", "1 +", "(1", "f(1,", "a.", "1 2", "1(2)", "a[1"])
    def test_syntax_errors(self, source: str) -> None:
        with pytest.raises(ExpressionError) as exc_info:
            parse_expression(source)
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.EXPRESSION_SYNTAX

    def test_nesting_limit(self) -> None:
        with pytest.raises(ExpressionError, match="nesting exceeds"):
            parse_expression("(" * 100 + "1" + ")" * 100)


class TestEvaluation:
    """Operators and name resolution."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("1 + 2 * 3", 7),
            ("(1 + 2) * 3", 9),
            ("7 / 2", 3),
            ("-7 / 2", -3),
            ("7.0 / 2", 3.5),
            ("7 % 3", 1),
            ("-(2 - 5)", 3),
            ("'a' + 1", "a1"),
            ("1 & 2", "12"),
            ("'b' > 'a'", True),
            ("2 <= 2", True),
            ("1 == 1.0", True),
            ("'x' != 'y'", True),
            ("!0", True),
            ("null || 'fallback'", True),
            ("true && ''", False),
        ],
    )
    def test_operators(self, source: str, expected: object) -> None:
        assert _eval(source) == expected

    def test_names_from_mapping(self) -> None:
        assert _eval("user.name", {"user": {"name": "Ana"}}) == "Ana"

    def test_names_from_attributes(self) -> None:
        assert _eval("user.name", {"user": _User("Ana")}) == "Ana"

    def test_private_attributes_hidden(self) -> None:
        assert _eval("user._secret", {"user": _User("Ana")}) is None

    def test_missing_names_are_none(self) -> None:
        assert _eval("missing.deeper.still", {}) is None
        assert _eval("missing") is None

    def test_indexing(self) -> None:
        data = {"items": ["a", "b"], "map": {"k": 1}}
        assert _eval("items[1]", data) == "b"
        assert _eval("items[-1]", data) == "b"
        assert _eval("items[5]", data) is None
        assert _eval("map['k']", data) == 1

    def test_locals_shadow_data(self) -> None:
        context = ExpressionContext({"name": "data"}, locals={"name": "param"})
        assert DefaultExpressionEvaluator().evaluate("name", context) == "param"

    @pytest.mark.parametrize("source", ["'a' * 2", "1 < 'a'", "-'a'", "null - 1"])
    def test_type_mismatch(self, source: str) -> None:
        with pytest.raises(ExpressionError, match="not supported") as exc_info:
            _eval(source)
        assert exc_info.value.expression == source

    @pytest.mark.parametrize("source", ["1 / 0", "1 % 0"])
    def test_division_by_zero(self, source: str) -> None:
        with pytest.raises(ExpressionError, match="Division by zero"):
            _eval(source)


class TestCalls:
    """Built-in functions and template invocation."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("toUpper('ab')", "AB"),
            ("toLower('AB')", "ab"),
            ("trim('  a ')", "a"),
            ("concat('a', 1, null, true)", "a1true"),
            ("length('abc')", 3),
            ("count(items)", 3),
            ("join(items, ', ', ' and ')", "x, y and z"),
            ("join(items)", "x,y,z"),
            ("exists(items)", True),
            ("exists(nothing)", False),
            ("if(1 > 2, 'a', 'b')", "b"),
            ("int('42') + 1", 43),
            ("float('1.5')", 1.5),
            ("string(2.0)", "2"),
            ("not(items)", False),
            ("contains(items, 'y')", True),
            ("contains('hello', 'ell')", True),
            ("replace('a-b', '-', '+')", "a+b"),
            ("first(items)", "x"),
            ("last(items)", "z"),
            ("first(nothing)", None),
        ],
    )
    def test_builtins(self, source: str, expected: object) -> None:
        assert _eval(source, {"items": ["x", "y", "z"]}) == expected

    def test_function_error_wrapped(self) -> None:
        with pytest.raises(ExpressionError, match="Function 'int' failed") as exc_info:
            _eval("int('abc')")
        assert exc_info.value.expression == "int('abc')"

    def test_wrong_arity(self) -> None:
        with pytest.raises(ExpressionError, match="Function 'toUpper' failed"):
            _eval("toUpper()")

    def test_template_call_uses_invoker(self) -> None:
        calls: list[tuple[str, list[object]]] = []

        def invoke(name: str, args: list[object]) -> str:
            calls.append((name, list(args)))
            return f"<{name}>"

        assert _eval("greet('Ana', 1 + 1)", template_invoker=invoke) == "<greet>"
        assert calls == [("greet", ["Ana", 2])]

    def test_builtins_take_precedence(self) -> None:
        def invoke(name: str, args: list[object]) -> str:
            return "template"

        assert _eval("toUpper('a')", template_invoker=invoke) == "A"

    @pytest.mark.parametrize(
        ("condition", "expected", "rendered"),
        [("true", "<yes>", ["yes"]), ("false", "<no>", ["no"])],
    )
    def test_if_evaluates_only_the_chosen_arm(
        self, condition: str, expected: str, rendered: list[str]
    ) -> None:
        calls: list[str] = []

        def invoke(name: str, args: list[object]) -> str:
            calls.append(name)
            return f"<{name}>"

        assert _eval(f"if({condition}, yes(), no())", template_invoker=invoke) == expected
        assert calls == rendered

    def test_if_with_wrong_arity_is_a_function_error(self) -> None:
        with pytest.raises(ExpressionError, match="Function 'if' failed"):
            _eval("if(true, 'a')")

    def test_template_call_without_invoker(self) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            _eval("greet()")
        assert exc_info.value.template_name == "greet"


class TestFunctionRegistry:
    """Registration, freezing and copying."""

    def test_camel_case_names(self) -> None:
        registry = FunctionRegistry()

        def format_price(value: object) -> str:
            return f"${value}"

        registry.register(format_price)
        assert "formatPrice" in registry
        assert registry.call("formatPrice", [3]) == "$3"

    def test_shared_registry_is_frozen(self) -> None:
        shared = get_shared_registry()
        assert shared.frozen
        assert shared is get_shared_registry()
        with pytest.raises(TypeError, match="frozen"):
            shared.register(len, name="len")

    def test_copy_is_unfrozen(self) -> None:
        custom = get_shared_registry().copy()
        custom.register(lambda text: text[::-1], name="reverse")

        assert "reverse" in custom
        assert "reverse" not in get_shared_registry()
        assert len(custom) == len(get_shared_registry()) + 1

    def test_custom_registry_in_evaluator(self) -> None:
        registry = create_default_registry()
        registry.register(lambda text: text[::-1], name="reverse")
        evaluator = DefaultExpressionEvaluator(registry)

        assert evaluator.functions is registry
        assert evaluator.evaluate("reverse('abc')", ExpressionContext()) == "cba"

    def test_unknown_function(self) -> None:
        with pytest.raises(ExpressionError, match="not registered"):
            FunctionRegistry().call("nope", [])


class TestToText:
    """Rendering values into template output."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (3.0, "3"),
            (2.5, "2.5"),
            (7, "7"),
            (["a", 1, None], "a,1,"),
            ({"k": "v"}, '{"k": "v"}'),
        ],
    )
    def test_to_text(self, value: object, expected: str) -> None:
        assert to_text(value) == expected
