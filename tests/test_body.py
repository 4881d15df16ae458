"""Tests for template body structure and segment splitting."""

from __future__ import annotations

import pytest

from lgengine import MalformedTemplateError
from lgengine.enums import BranchKind
from lgengine.syntax import (
    ConditionalBody,
    ExpressionSegment,
    NormalBody,
    TextSegment,
    parse_body,
    split_segments,
)


def _lines(text: str) -> list[tuple[int, str]]:
    return list(enumerate(text.splitlines(), start=2))


class TestSplitSegments:
    """Literal text and ${...} expressions."""

    def test_plain_text(self) -> None:
        assert split_segments("just text") == (TextSegment("just text"),)

    def test_empty_text(self) -> None:
        assert split_segments("") == ()

    def test_expressions(self) -> None:
        assert split_segments("${a} and ${b}") == (
            ExpressionSegment("a"),
            TextSegment(" and "),
            ExpressionSegment("b"),
        )

    def test_escaped_dollar(self) -> None:
        assert split_segments(r"Total: \$${amount}") == (
            TextSegment("Total: $"),
            ExpressionSegment("amount"),
        )

    def test_escaped_backslash(self) -> None:
        assert split_segments(r"a\\b") == (TextSegment("a\\b"),)

    def test_other_backslashes_kept(self) -> None:
        assert split_segments(r"C:\temp") == (TextSegment(r"C:\temp"),)

    def test_dollar_without_brace(self) -> None:
        assert split_segments("$5") == (TextSegment("$5"),)

    def test_nested_braces_and_quotes(self) -> None:
        segments = split_segments("${concat('}', '{')} done")
        assert segments == (ExpressionSegment("concat('}', '{')"), TextSegment(" done"))

    def test_unterminated(self) -> None:
        with pytest.raises(MalformedTemplateError, match="Unterminated"):
            split_segments("${a", "x.lg", 4)


class TestNormalBody:
    """Variation lists."""

    def test_variations(self) -> None:
        body = parse_body(_lines("- one\n\n- two ${x}"))
        assert isinstance(body, NormalBody)
        assert [v.line for v in body.variations] == [2, 4]
        assert body.variations[1].segments == (TextSegment("two "), ExpressionSegment("x", 4))

    def test_empty_variation(self) -> None:
        body = parse_body(_lines("-"))
        assert isinstance(body, NormalBody)
        assert body.variations[0].segments == ()

    def test_indented_child_rejected(self) -> None:
        with pytest.raises(MalformedTemplateError, match="Unexpected indentation"):
            parse_body(_lines("- one\n    - nested"))

    def test_branch_in_normal_body_rejected(self) -> None:
        with pytest.raises(MalformedTemplateError, match="outside a conditional body"):
            parse_body(_lines("- one\n- IF: ${x}\n    - y"))

    def test_no_lines(self) -> None:
        with pytest.raises(MalformedTemplateError, match="empty body"):
            parse_body([])


class TestConditionalBody:
    """IF / ELSEIF / ELSE branches."""

    def test_branches(self) -> None:
        body = parse_body(
            _lines("- IF: ${a}\n    - A\n- ELSEIF: ${b}\n    - B\n- ELSE:\n    - C")
        )
        assert ConditionalBody.guard(body)
        assert [(b.kind, b.condition) for b in body.branches] == [
            (BranchKind.IF, "a"),
            (BranchKind.ELSEIF, "b"),
            (BranchKind.ELSE, None),
        ]
        assert all(isinstance(b.body, NormalBody) for b in body.branches)

    def test_keywords_case_insensitive(self) -> None:
        body = parse_body(_lines("- if: ${a}\n    - A\n- else:\n    - B"))
        assert ConditionalBody.guard(body)
        assert body.branches[1].kind is BranchKind.ELSE

    def test_nested_conditional(self) -> None:
        body = parse_body(
            _lines("- IF: ${a}\n    - IF: ${b}\n        - AB\n    - ELSE:\n        - A")
        )
        assert ConditionalBody.guard(body)
        assert ConditionalBody.guard(body.branches[0].body)

    def test_child_variations(self) -> None:
        body = parse_body(_lines("- IF: ${a}\n    - one\n    - two"))
        assert ConditionalBody.guard(body)
        inner = body.branches[0].body
        assert isinstance(inner, NormalBody)
        assert len(inner.variations) == 2

    @pytest.mark.parametrize(
        ("text", "message"),
        [
            ("- ELSEIF: ${a}\n    - A", "ELSEIF must follow IF or ELSEIF"),
            ("- ELSE:\n    - A", "ELSE must follow IF or ELSEIF"),
            ("- IF: ${a}\n    - A\n- IF: ${b}\n    - B", "IF must start"),
            ("- IF: ${a}\n    - A\n- ELSE:\n    - B\n- ELSE:\n    - C", "ELSE must follow"),
            ("- IF: ${a}\n    - A\n- ELSE:\n    - B\n- ELSEIF: ${c}\n    - C", "ELSEIF must"),
            ("- IF: ${a}\n    - A\n- ELSE: ${b}\n    - B", "ELSE takes no condition"),
            ("- IF: a > 1\n    - A", "single"),
            ("- IF: ${a} extra\n    - A", "single"),
            ("- IF: ${a}", "Empty IF branch"),
            ("- IF: ${a}\n    - A\n- plain", "mixes branches"),
        ],
    )
    def test_malformed(self, text: str, message: str) -> None:
        with pytest.raises(MalformedTemplateError, match=message):
            parse_body(_lines(text), "x.lg")
