"""Diagnostic system for LG errors.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    CircularTemplateReferenceError,
    DuplicateTemplateError,
    ExpressionError,
    ImportNotFoundError,
    LGError,
    LGReferenceError,
    LGResolutionError,
    LGSyntaxError,
    MalformedTemplateError,
    NoGeneratorForLocaleError,
    TemplateNotFoundError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CircularTemplateReferenceError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DuplicateTemplateError",
    "ErrorTemplate",
    "ExpressionError",
    "ImportNotFoundError",
    "LGError",
    "LGReferenceError",
    "LGResolutionError",
    "LGSyntaxError",
    "MalformedTemplateError",
    "NoGeneratorForLocaleError",
    "OutputFormat",
    "SourceSpan",
    "TemplateNotFoundError",
]
