"""Recursive-descent parser for embedded expressions.

Precedence, lowest first:

    ||
    &&
    ==  !=
    <  <=  >  >=
    +  -  &
    *  /  %
    !  -            (prefix)
    call, .member, [index]   (postfix)

Parsed trees are memoized by source text; nodes are immutable so one
tree is shared by every evaluation of the same expression.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import functools

from lgengine.constants import MAX_DEPTH, MAX_EXPRESSION_CACHE_SIZE
from lgengine.diagnostics import ErrorTemplate, ExpressionError
from lgengine.expressions.lexer import Token, TokenKind, tokenize
from lgengine.expressions.nodes import (
    Binary,
    Call,
    Index,
    Literal,
    Member,
    Name,
    Node,
    Unary,
)

__all__ = ["parse_expression"]

_BINARY_LEVELS: tuple[frozenset[str], ...] = (
    frozenset({"||"}),
    frozenset({"&&"}),
    frozenset({"==", "!="}),
    frozenset({"<", "<=", ">", ">="}),
    frozenset({"+", "-", "&"}),
    frozenset({"*", "/", "%"}),
)

_KEYWORDS: dict[str, bool | None] = {"true": True, "false": False, "null": None}


class _Parser:
    __slots__ = ("_depth", "_pos", "_source", "_tokens")

    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens = tokenize(source)
        self._pos = 0
        self._depth = 0

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.kind != TokenKind.EOF:
            self._pos += 1
        return token

    def _fail(self, reason: str, token: Token | None = None) -> ExpressionError:
        position = (token or self._current).position
        return ExpressionError(
            ErrorTemplate.expression_syntax(self._source, reason, position),
            expression=self._source,
        )

    def _at(self, kind: TokenKind, value: str) -> bool:
        token = self._current
        return token.kind == kind and token.value == value

    def _expect(self, value: str) -> None:
        if not self._at(TokenKind.PUNCT, value):
            raise self._fail(f"expected '{value}'")
        self._advance()

    def parse(self) -> Node:
        if self._current.kind == TokenKind.EOF:
            raise self._fail("empty expression")
        node = self._binary(0)
        if self._current.kind != TokenKind.EOF:
            raise self._fail(f"unexpected '{self._current.value}'")
        return node

    def _binary(self, level: int) -> Node:
        if level == len(_BINARY_LEVELS):
            return self._unary()
        operators = _BINARY_LEVELS[level]
        node = self._binary(level + 1)
        while self._current.kind == TokenKind.OPERATOR and self._current.value in operators:
            operator = self._advance().value
            node = Binary(operator, node, self._binary(level + 1))
        return node

    def _unary(self) -> Node:
        prefixes: list[str] = []
        while self._current.kind == TokenKind.OPERATOR and self._current.value in ("!", "-"):
            prefixes.append(self._advance().value)
        node = self._postfix(self._primary())
        for operator in reversed(prefixes):
            node = Unary(operator, node)
        return node

    def _postfix(self, node: Node) -> Node:
        while True:
            if self._at(TokenKind.PUNCT, "."):
                self._advance()
                name = self._advance()
                if name.kind != TokenKind.NAME:
                    raise self._fail("expected member name after '.'", name)
                node = Member(node, name.value)
            elif self._at(TokenKind.PUNCT, "["):
                self._advance()
                key = self._nested()
                self._expect("]")
                node = Index(node, key)
            elif self._at(TokenKind.PUNCT, "("):
                function = _dotted_name(node)
                if function is None:
                    raise self._fail("only named functions and templates can be called")
                self._advance()
                node = Call(function, self._arguments())
            else:
                return node

    def _arguments(self) -> tuple[Node, ...]:
        arguments: list[Node] = []
        if self._at(TokenKind.PUNCT, ")"):
            self._advance()
            return ()
        while True:
            arguments.append(self._nested())
            if self._at(TokenKind.PUNCT, ","):
                self._advance()
                continue
            self._expect(")")
            return tuple(arguments)

    def _nested(self) -> Node:
        """Parse a parenthesized, bracketed or argument sub-expression."""
        if self._depth >= MAX_DEPTH:
            raise self._fail(f"nesting exceeds {MAX_DEPTH} levels")
        self._depth += 1
        try:
            return self._binary(0)
        finally:
            self._depth -= 1

    def _primary(self) -> Node:
        token = self._advance()
        match token.kind:
            case TokenKind.NUMBER:
                if "." in token.value:
                    return Literal(float(token.value))
                return Literal(int(token.value))
            case TokenKind.STRING:
                return Literal(token.value)
            case TokenKind.NAME:
                if token.value in _KEYWORDS:
                    return Literal(_KEYWORDS[token.value])
                return Name(token.value)
            case TokenKind.PUNCT if token.value == "(":
                node = self._nested()
                self._expect(")")
                return node
            case TokenKind.EOF:
                raise self._fail("unexpected end of expression", token)
            case _:
                raise self._fail(f"unexpected '{token.value}'", token)


def _dotted_name(node: Node) -> str | None:
    """``common.greeting`` as a call target; None for non-name targets."""
    match node:
        case Name(name=name):
            return name
        case Member(target=target, name=name):
            prefix = _dotted_name(target)
            return f"{prefix}.{name}" if prefix is not None else None
        case _:
            return None


@functools.lru_cache(maxsize=MAX_EXPRESSION_CACHE_SIZE)
def parse_expression(source: str) -> Node:
    """Parse expression source into an immutable tree.

    Args:
        source: Expression text without the ``${`` and ``}`` delimiters

    Returns:
        Root node

    Raises:
        ExpressionError: On any syntax error

    Example:
        >>> parse_expression("a + 1")
        Binary(operator='+', left=Name(name='a'), right=Literal(value=1))
    """
    return _Parser(source).parse()
