"""Tokenizer for embedded ``${...}`` expressions.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from lgengine.diagnostics import ErrorTemplate, ExpressionError

__all__ = ["Token", "TokenKind", "tokenize"]


class TokenKind(StrEnum):
    """Lexical token categories."""

    NUMBER = "number"
    STRING = "string"
    NAME = "name"
    OPERATOR = "operator"
    PUNCT = "punct"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical token.

    Attributes:
        kind: Token category
        value: Source text (strings are unescaped, without quotes)
        position: 0-indexed offset in the expression source
    """

    kind: TokenKind
    value: str
    position: int


# Longest operators first so "<=" wins over "<".
_OPERATORS = ("&&", "||", "==", "!=", "<=", ">=", "<", ">", "+", "-", "*", "/", "%", "&", "!")
_PUNCTUATION = frozenset("()[],.")
_DIGITS = frozenset("0123456789")
_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


def _read_string(source: str, start: int) -> tuple[str, int]:
    quote = source[start]
    chars: list[str] = []
    pos = start + 1
    while pos < len(source):
        char = source[pos]
        if char == "\\" and pos + 1 < len(source):
            escaped = source[pos + 1]
            chars.append(_STRING_ESCAPES.get(escaped, escaped))
            pos += 2
            continue
        if char == quote:
            return "".join(chars), pos + 1
        chars.append(char)
        pos += 1
    raise ExpressionError(
        ErrorTemplate.expression_syntax(source, "unterminated string literal", start),
        expression=source,
    )


def _read_number(source: str, start: int) -> tuple[str, int]:
    pos = start
    seen_dot = False
    while pos < len(source):
        char = source[pos]
        if char in _DIGITS:
            pos += 1
        elif char == "." and not seen_dot and pos + 1 < len(source) and source[pos + 1] in _DIGITS:
            seen_dot = True
            pos += 1
        else:
            break
    return source[start:pos], pos


def tokenize(source: str) -> tuple[Token, ...]:
    """Split expression source into tokens, ending with an EOF token.

    Raises:
        ExpressionError: On unterminated strings or unknown characters

    Example:
        >>> [t.value for t in tokenize("user.name + '!'")]
        ['user', '.', 'name', '+', '!', '']
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(source):
        char = source[pos]
        if char.isspace():
            pos += 1
            continue
        if char in "'\"":
            value, end = _read_string(source, pos)
            tokens.append(Token(TokenKind.STRING, value, pos))
            pos = end
            continue
        if char in _DIGITS:
            value, end = _read_number(source, pos)
            tokens.append(Token(TokenKind.NUMBER, value, pos))
            pos = end
            continue
        if char.isalpha() or char in "_@$":
            end = pos + 1
            while end < len(source) and (source[end].isalnum() or source[end] == "_"):
                end += 1
            tokens.append(Token(TokenKind.NAME, source[pos:end], pos))
            pos = end
            continue
        if char in _PUNCTUATION:
            tokens.append(Token(TokenKind.PUNCT, char, pos))
            pos += 1
            continue
        operator = next((op for op in _OPERATORS if source.startswith(op, pos)), None)
        if operator is None:
            raise ExpressionError(
                ErrorTemplate.expression_syntax(source, f"unexpected character '{char}'", pos),
                expression=source,
            )
        tokens.append(Token(TokenKind.OPERATOR, operator, pos))
        pos += len(operator)

    tokens.append(Token(TokenKind.EOF, "", len(source)))
    return tuple(tokens)
