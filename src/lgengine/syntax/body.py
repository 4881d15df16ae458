"""Template body structure parsing.

Turns the body lines under a ``#`` header into a NormalBody (variations)
or a ConditionalBody (IF/ELSEIF/ELSE branches with indented children),
and splits body text into literal and ``${...}`` segments. Nothing is
evaluated here.

Body grammar (indentation decides nesting):

    body        := variation+ | branch+
    variation   := "-" text
    branch      := "-" ("IF:" | "ELSEIF:") "${" expr "}" NEWLINE body-indented
                 | "-" "ELSE:" NEWLINE body-indented

Escapes inside text: ``\\$`` is a literal dollar sign, ``\\\\`` a literal
backslash. Any other backslash is kept as written.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from lgengine.diagnostics import ErrorTemplate, MalformedTemplateError
from lgengine.enums import BranchKind
from lgengine.syntax.ast import (
    ConditionalBody,
    ConditionalBranch,
    ExpressionSegment,
    NormalBody,
    Segment,
    TemplateBody,
    TextSegment,
    Variation,
)

__all__ = ["BodyLine", "parse_body", "split_segments"]

type BodyLine = tuple[int, str]
"""(1-indexed line number, raw line text)."""

_BRANCH_KEYWORD = re.compile(r"^(IF|ELSEIF|ELSE)\s*:(.*)$", re.IGNORECASE)


def _malformed(reason: str, resource_id: str, line: int) -> MalformedTemplateError:
    return MalformedTemplateError(
        ErrorTemplate.malformed_template(reason, resource_id, line),
        resource_id=resource_id,
        line=line,
    )


def _find_expression_end(text: str, start: int) -> int:
    """Index of the ``}`` closing an expression opened before ``start``, or -1.

    Braces nest; braces inside quoted strings are ignored.
    """
    depth = 1
    quote: str | None = None
    pos = start
    while pos < len(text):
        char = text[pos]
        if quote is not None:
            if char == "\\":
                pos += 1
            elif char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def split_segments(text: str, resource_id: str = "", line: int = 0) -> tuple[Segment, ...]:
    """Split body text into literal and expression segments.

    Adjacent literal characters are merged into one TextSegment.

    Args:
        text: Body text (without the leading ``-``)
        resource_id: Resource id for error reporting
        line: Source line for error reporting

    Returns:
        Tuple of segments in source order

    Raises:
        MalformedTemplateError: On unterminated or empty ``${``

    Example:
        >>> split_segments("Hi ${name}!")
        (TextSegment(value='Hi '), ExpressionSegment(source='name', line=0), TextSegment(value='!'))
    """
    segments: list[Segment] = []
    buffer: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == "\\" and pos + 1 < len(text) and text[pos + 1] in "$\\":
            buffer.append(text[pos + 1])
            pos += 2
            continue
        if char == "$" and text.startswith("${", pos):
            end = _find_expression_end(text, pos + 2)
            if end < 0:
                raise _malformed(
                    f"Unterminated expression: '{text[pos:]}'", resource_id, line
                )
            source = text[pos + 2 : end].strip()
            if not source:
                raise _malformed("Empty expression '${}'", resource_id, line)
            if buffer:
                segments.append(TextSegment("".join(buffer)))
                buffer.clear()
            segments.append(ExpressionSegment(source, line))
            pos = end + 1
            continue
        buffer.append(char)
        pos += 1
    if buffer:
        segments.append(TextSegment("".join(buffer)))
    return tuple(segments)


def _indent_of(text: str) -> int:
    return len(text) - len(text.lstrip(" \t"))


def _group_items(
    lines: Sequence[BodyLine], resource_id: str
) -> list[tuple[int, str, list[BodyLine]]]:
    """Group lines into top-level ``-`` items with their indented children."""
    content = [(number, raw) for number, raw in lines if raw.strip()]
    if not content:
        return []
    base_indent = min(_indent_of(raw) for _, raw in content)

    items: list[tuple[int, str, list[BodyLine]]] = []
    for number, raw in content:
        indent = _indent_of(raw)
        if indent > base_indent:
            if not items:
                raise _malformed("Unexpected indentation", resource_id, number)
            items[-1][2].append((number, raw))
            continue
        stripped = raw.strip()
        if not stripped.startswith("-"):
            raise _malformed(
                f"Template body lines must start with '-': '{stripped}'", resource_id, number
            )
        items.append((number, stripped[1:].strip(), []))
    return items


def _parse_condition(rest: str, keyword: str, resource_id: str, line: int) -> str:
    segments = split_segments(rest.strip(), resource_id, line)
    if len(segments) != 1 or not isinstance(segments[0], ExpressionSegment):
        raise _malformed(
            f"{keyword} condition must be a single '${{...}}' expression", resource_id, line
        )
    return segments[0].source


def _parse_conditional(
    items: list[tuple[int, str, list[BodyLine]]], resource_id: str
) -> ConditionalBody:
    branches: list[ConditionalBranch] = []
    for number, text, children in items:
        match = _BRANCH_KEYWORD.match(text)
        if match is None:
            raise _malformed(
                "Conditional body mixes branches and plain variations", resource_id, number
            )
        kind = BranchKind(match.group(1).upper())
        rest = match.group(2)

        match kind:
            case BranchKind.IF:
                if branches:
                    raise _malformed("IF must start a conditional body", resource_id, number)
                condition: str | None = _parse_condition(rest, "IF", resource_id, number)
            case BranchKind.ELSEIF:
                if not branches or branches[-1].kind == BranchKind.ELSE:
                    raise _malformed("ELSEIF must follow IF or ELSEIF", resource_id, number)
                condition = _parse_condition(rest, "ELSEIF", resource_id, number)
            case BranchKind.ELSE:
                if not branches or branches[-1].kind == BranchKind.ELSE:
                    raise _malformed("ELSE must follow IF or ELSEIF", resource_id, number)
                if rest.strip():
                    raise _malformed("ELSE takes no condition", resource_id, number)
                condition = None

        if not children:
            raise _malformed(f"Empty {kind} branch", resource_id, number)
        branches.append(
            ConditionalBranch(kind, condition, parse_body(children, resource_id), number)
        )
    return ConditionalBody(tuple(branches))


def parse_body(lines: Sequence[BodyLine], resource_id: str = "") -> TemplateBody:
    """Parse the body lines of one template.

    Blank lines are ignored. The least-indented lines are the items of
    this body; deeper lines belong to the item above them.

    Args:
        lines: (line number, raw text) pairs following the header
        resource_id: Resource id for error reporting

    Returns:
        NormalBody or ConditionalBody

    Raises:
        MalformedTemplateError: On empty bodies, stray indentation,
            misplaced branches or invalid segments
    """
    items = _group_items(lines, resource_id)
    if not items:
        line = lines[0][0] if lines else 0
        raise _malformed("Template has an empty body", resource_id, line)

    first_number, first_text, _ = items[0]
    if _BRANCH_KEYWORD.match(first_text):
        return _parse_conditional(items, resource_id)

    variations: list[Variation] = []
    for number, text, children in items:
        if _BRANCH_KEYWORD.match(text):
            raise _malformed(
                f"Branch '{text}' outside a conditional body (body starts at line "
                f"{first_number})",
                resource_id,
                number,
            )
        if children:
            raise _malformed("Unexpected indentation", resource_id, children[0][0])
        variations.append(Variation(split_segments(text, resource_id, number), number))
    return NormalBody(tuple(variations))
