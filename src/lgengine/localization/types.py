"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating generator call sites.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "BaseName",
    "LGSource",
    "LocaleCode",
    "ResourceId",
    "TemplateName",
]

type ResourceId = str
"""Template resource identifier (e.g., 'a.en-US.lg', 'main.lg')."""

type BaseName = str
"""Logical resource name shared by all locale variants (e.g., 'a')."""

type LocaleCode = str
"""Locale code; bucket keys are lower-case BCP-47 ('en-us'), '' is neutral."""

type TemplateName = str
"""Name of a template declared in a resource (e.g., 'greeting')."""

type LGSource = str
"""Raw template resource text."""
