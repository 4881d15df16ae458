"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Reference errors (missing templates, imports, generators)
        2000-2999: Resolution errors (runtime evaluation failures)
        3000-3999: Syntax errors (template resource parse failures)
    """

    # Reference errors (1000-1999)
    TEMPLATE_NOT_FOUND = 1001
    IMPORT_NOT_FOUND = 1002
    NO_GENERATOR_FOR_LOCALE = 1003
    CIRCULAR_REFERENCE = 1004

    # Resolution errors (2000-2999)
    EXPRESSION_SYNTAX = 2001
    EXPRESSION_TYPE_MISMATCH = 2002
    FUNCTION_FAILED = 2003
    MAX_DEPTH_EXCEEDED = 2004

    # Syntax errors (3000-3999)
    DUPLICATE_TEMPLATE = 3001
    MALFORMED_TEMPLATE = 3002
    SOURCE_TOO_LARGE = 3003


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source location for error reporting.

    Template resources are line oriented, so spans carry the resource id
    and a 1-indexed line; column is 1-indexed as well.

    Attributes:
        resource_id: Identifier of the resource the error occurred in
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    resource_id: str
    line: int
    column: int = 1

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If line or column is less than 1
        """
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for evaluation-time errors)
        hint: Suggestion for fixing the error
        locale: Locale or fallback chain description the error occurred under
        severity: Error severity level
        resolution_path: Template stack at time of error (nested references)
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    locale: str | None = None
    severity: Literal["error", "warning"] = "error"
    resolution_path: tuple[str, ...] | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[TEMPLATE_NOT_FOUND]: Template 'greeting' not found
              --> a.en-US.lg
              = help: Define the template or import a resource that defines it

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
