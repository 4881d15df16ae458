"""Shared constants for LGEngine.

This module provides centralized configuration constants used across
the syntax, localization and runtime packages. Placing constants here
avoids circular imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for template evaluation
- Resource naming: Filename convention for locale-tagged resources
- Input limits: DoS prevention via size constraints
- Cache limits: Memory bounds for parse caching

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Resource naming
    "DEFAULT_EXTENSION",
    "NON_LOCALE_SEGMENTS",
    "NEUTRAL_LOCALE",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Cache limits
    "DEFAULT_PARSE_CACHE_SIZE",
    "MAX_EXPRESSION_CACHE_SIZE",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of template invocations within one generate call.
# Cycles are detected separately by the resolution stack; this bound stops
# long non-cyclic chains (t0 -> t1 -> ... -> t500) before RecursionError.
MAX_DEPTH: int = 64

# ============================================================================
# RESOURCE NAMING
# ============================================================================

# Extension of template resource files: <base>[.<locale>].lg
DEFAULT_EXTENSION: str = ".lg"

# Dotted segments that look like locale tags but are part of a base name.
# "main.dialog.lg" is the neutral resource "main.dialog", not locale "dialog".
NON_LOCALE_SEGMENTS: frozenset[str] = frozenset({
    "dialog",
    "schema",
    "uischema",
    "lg",
    "lu",
    "qna",
    "json",
    "yaml",
    "template",
    "source",
    "common",
    "shared",
})

# Bucket key of locale-neutral resources; always the last fallback candidate.
NEUTRAL_LOCALE: str = ""

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Maximum resource content size in characters (10 MB).
# Prevents unbounded memory allocation from oversized template files.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum parsed resources kept by a ParsedResourceCache.
# Bots rarely ship more than a few hundred .lg files.
DEFAULT_PARSE_CACHE_SIZE: int = 1000

# Maximum memoized expression trees (shared across all evaluators).
MAX_EXPRESSION_CACHE_SIZE: int = 4096
