"""Tests for diagnostics: codes, spans, templates, formatter and exceptions."""

from __future__ import annotations

import json

import pytest

from lgengine import (
    CircularTemplateReferenceError,
    ImportNotFoundError,
    LGError,
    LGReferenceError,
    LGResolutionError,
    LGSyntaxError,
    MalformedTemplateError,
    TemplateNotFoundError,
)
from lgengine.core import DepthLimitExceededError
from lgengine.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    ErrorTemplate,
    ExpressionError,
    OutputFormat,
    SourceSpan,
)


class TestSourceSpan:
    """SourceSpan enforces 1-indexed positions."""

    def test_valid(self) -> None:
        span = SourceSpan("a.lg", 3, 5)
        assert (span.resource_id, span.line, span.column) == ("a.lg", 3, 5)

    @pytest.mark.parametrize(("line", "column"), [(0, 1), (1, 0), (-1, 1)])
    def test_rejects_non_positive(self, line: int, column: int) -> None:
        with pytest.raises(ValueError, match="1-indexed"):
            SourceSpan("a.lg", line, column)


class TestErrorTemplate:
    """ErrorTemplate builds diagnostics with stable codes."""

    def test_template_not_found(self) -> None:
        diagnostic = ErrorTemplate.template_not_found("greeting", "a.lg")
        assert diagnostic.code is DiagnosticCode.TEMPLATE_NOT_FOUND
        assert diagnostic.message == "Template 'greeting' not found in 'a.lg' or its imports"

    def test_import_not_found_lists_chain(self) -> None:
        diagnostic = ErrorTemplate.import_not_found("b", ("en-us", ""), "a.en-US.lg")
        assert "'en-us', ''" in diagnostic.message
        assert "a.en-US.lg" in diagnostic.message

    def test_import_not_found_empty_chain(self) -> None:
        assert "<empty>" in ErrorTemplate.import_not_found("b", ()).message

    def test_circular_reference_keeps_path(self) -> None:
        diagnostic = ErrorTemplate.circular_reference(("a.lg#x", "a.lg#y", "a.lg#x"))
        assert diagnostic.resolution_path == ("a.lg#x", "a.lg#y", "a.lg#x")
        assert "a.lg#x -> a.lg#y -> a.lg#x" in diagnostic.message

    def test_malformed_clamps_line(self) -> None:
        """Line 0 (unknown) is reported as line 1."""
        diagnostic = ErrorTemplate.malformed_template("bad", "a.lg", 0)
        assert diagnostic.span == SourceSpan("a.lg", 1)


class TestDiagnosticFormatter:
    """Rust, simple and JSON output."""

    @pytest.fixture
    def diagnostic(self) -> Diagnostic:
        return Diagnostic(
            code=DiagnosticCode.MALFORMED_TEMPLATE,
            message="Template 'greet' has no body",
            span=SourceSpan("a.lg", 4),
            hint="Add at least one '-' line",
        )

    def test_rust(self, diagnostic: Diagnostic) -> None:
        assert DiagnosticFormatter().format(diagnostic) == (
            "error[MALFORMED_TEMPLATE]: Template 'greet' has no body\n"
            "  --> a.lg:4:1\n"
            "  = help: Add at least one '-' line"
        )

    def test_rust_locale_and_path(self) -> None:
        diagnostic = Diagnostic(
            code=DiagnosticCode.NO_GENERATOR_FOR_LOCALE,
            message="none",
            locale="",
            resolution_path=("a", "b"),
        )
        text = DiagnosticFormatter().format(diagnostic)
        assert "  = locale: <neutral>" in text
        assert "  = path: a -> b" in text

    def test_simple(self, diagnostic: Diagnostic) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format(diagnostic) == (
            "MALFORMED_TEMPLATE: Template 'greet' has no body"
        )

    def test_json(self, diagnostic: Diagnostic) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
        data = json.loads(formatter.format(diagnostic))
        assert data == {
            "code": "MALFORMED_TEMPLATE",
            "code_value": 3002,
            "message": "Template 'greet' has no body",
            "severity": "error",
            "resource_id": "a.lg",
            "line": 4,
            "column": 1,
            "hint": "Add at least one '-' line",
        }

    def test_sanitize_truncates(self) -> None:
        formatter = DiagnosticFormatter(
            output_format=OutputFormat.SIMPLE, sanitize=True, max_content_length=5
        )
        diagnostic = Diagnostic(code=DiagnosticCode.EXPRESSION_SYNTAX, message="abcdefghij")
        assert formatter.format(diagnostic) == "EXPRESSION_SYNTAX: abcde..."

    def test_format_all(self, diagnostic: Diagnostic) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format_all([diagnostic, diagnostic]).count("\n\n") == 1


class TestExceptions:
    """Exception hierarchy and attributes."""

    def test_hierarchy(self) -> None:
        assert issubclass(MalformedTemplateError, LGSyntaxError)
        assert issubclass(TemplateNotFoundError, LGReferenceError)
        assert issubclass(CircularTemplateReferenceError, LGReferenceError)
        assert issubclass(ExpressionError, LGResolutionError)
        assert issubclass(DepthLimitExceededError, LGResolutionError)
        assert issubclass(LGResolutionError, LGError)

    def test_diagnostic_message(self) -> None:
        """Diagnostics are rendered into the exception message."""
        error = TemplateNotFoundError(
            ErrorTemplate.template_not_found("x"), template_name="x"
        )
        assert error.diagnostic is not None
        assert error.template_name == "x"
        assert str(error).startswith("error[TEMPLATE_NOT_FOUND]: Template 'x' not found")

    def test_plain_message(self) -> None:
        error = ImportNotFoundError("missing", target="b")
        assert error.diagnostic is None
        assert str(error) == "missing"
        assert error.fallback_chain == ()

    def test_malformed_location(self) -> None:
        error = MalformedTemplateError("bad", resource_id="a.lg", line=3)
        assert (error.resource_id, error.line) == ("a.lg", 3)
