"""LGEngine - locale-aware language generation templates.

Resolves the most locale-specific definition of a template among a set of
.lg resources, follows imports with the same locale specificity, and
renders the template's embedded ``${...}`` expressions.

Public API:
    TemplateEngineGenerator - Generator bound to one resource
    MultiLanguageGenerator - Dispatch over explicitly bound locales
    ResourceMultiLanguageGenerator - Dispatch over the locale variants of one resource
    LanguageGeneratorManager - Bucket, parse cache and per-resource generators
    FolderResourceProvider / MemoryResourceProvider - Resource sources
    GeneratorConfig - Generator tunables
    resolve_fallback_chain - Locale fallback (exact -> language -> neutral)

Exceptions:
    LGError - Base exception class
    LGSyntaxError - Resource parse errors
    LGReferenceError - Missing templates, imports or generators; cycles
    LGResolutionError - Expression and nesting errors

Submodules:
    lgengine.syntax - Resource parser and syntax tree
    lgengine.expressions - Expression language and built-in functions
    lgengine.localization - Resources, buckets, providers, imports
    lgengine.diagnostics - Error types, codes and formatting
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .diagnostics import (
    CircularTemplateReferenceError,
    DuplicateTemplateError,
    ImportNotFoundError,
    LGError,
    LGReferenceError,
    LGResolutionError,
    LGSyntaxError,
    MalformedTemplateError,
    NoGeneratorForLocaleError,
    TemplateNotFoundError,
)
from .locale_utils import normalize_locale, resolve_fallback_chain
from .localization import (
    FolderResourceProvider,
    LocaleBucket,
    MemoryResourceProvider,
    Resource,
    group_by_locale,
)
from .runtime import (
    GeneratorConfig,
    LanguageGeneratorManager,
    MultiLanguageGenerator,
    ResourceMultiLanguageGenerator,
    TemplateEngineGenerator,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("lgengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CircularTemplateReferenceError",
    "DuplicateTemplateError",
    "FolderResourceProvider",
    "GeneratorConfig",
    "ImportNotFoundError",
    "LGError",
    "LGReferenceError",
    "LGResolutionError",
    "LGSyntaxError",
    "LanguageGeneratorManager",
    "LocaleBucket",
    "MalformedTemplateError",
    "MemoryResourceProvider",
    "MultiLanguageGenerator",
    "NoGeneratorForLocaleError",
    "Resource",
    "ResourceMultiLanguageGenerator",
    "TemplateEngineGenerator",
    "TemplateNotFoundError",
    "__version__",
    "group_by_locale",
    "normalize_locale",
    "resolve_fallback_chain",
]
