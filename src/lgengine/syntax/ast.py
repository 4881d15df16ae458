"""LG syntax tree node definitions.

A parsed resource (LGFile) is an ordered set of templates plus import
declarations. Template bodies keep their raw text and a parsed structure:
either a list of variations or a chain of conditional branches. Embedded
expressions are kept as source text; they are parsed lazily by the
expression evaluator.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeIs

from lgengine.enums import BranchKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Segments
    "TextSegment",
    "ExpressionSegment",
    "Segment",
    # Bodies
    "Variation",
    "NormalBody",
    "ConditionalBranch",
    "ConditionalBody",
    "TemplateBody",
    # Resource structure
    "Template",
    "ImportDeclaration",
    "LGFile",
]


# ============================================================================
# SEGMENTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TextSegment:
    """Literal text with escapes already applied.

    Attributes:
        value: Text rendered verbatim
    """

    value: str


@dataclass(frozen=True, slots=True)
class ExpressionSegment:
    """Embedded ``${...}`` expression.

    Attributes:
        source: Expression text between ``${`` and ``}``
        line: 1-indexed line the expression appears on
    """

    source: str
    line: int = 0


type Segment = TextSegment | ExpressionSegment


# ============================================================================
# BODIES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Variation:
    """One alternative rendering of a template (a ``- text`` line).

    Attributes:
        segments: Text and expression segments in order
        line: 1-indexed source line
    """

    segments: tuple[Segment, ...]
    line: int = 0


@dataclass(frozen=True, slots=True)
class NormalBody:
    """Body made of one or more variations; one is rendered per call."""

    variations: tuple[Variation, ...]


@dataclass(frozen=True, slots=True)
class ConditionalBranch:
    """One ``IF:``/``ELSEIF:``/``ELSE:`` branch.

    Attributes:
        kind: Branch keyword
        condition: Expression source (None for ELSE)
        body: Nested body rendered when this branch is chosen
        line: 1-indexed line of the branch keyword
    """

    kind: BranchKind
    condition: str | None
    body: TemplateBody
    line: int = 0


@dataclass(frozen=True, slots=True)
class ConditionalBody:
    """Body made of IF, optional ELSEIFs, and an optional final ELSE."""

    branches: tuple[ConditionalBranch, ...]

    @staticmethod
    def guard(body: object) -> TypeIs[ConditionalBody]:
        """Type guard: Check if body is a ConditionalBody."""
        return isinstance(body, ConditionalBody)


type TemplateBody = NormalBody | ConditionalBody


# ============================================================================
# RESOURCE STRUCTURE
# ============================================================================


@dataclass(frozen=True, slots=True)
class Template:
    """Named template declared in a resource.

    Attributes:
        name: Template name, unique within its resource
        parameters: Positional parameter names
        body: Raw body text as written in the resource
        structure: Parsed body
        line: 1-indexed line of the ``#`` header

    Example:
        ``# greeting(name)`` followed by ``- Hello ${name}`` yields
        Template(name="greeting", parameters=("name",), body="- Hello ${name}", ...)
    """

    name: str
    parameters: tuple[str, ...]
    body: str
    structure: TemplateBody
    line: int = 0


@dataclass(frozen=True, slots=True)
class ImportDeclaration:
    """Import edge from a resource to a logical resource name.

    Attributes:
        source_id: Id of the declaring resource
        target: Base name of the imported resource
        locale_hint: Locale written in the import path (``b.en-US.lg``), if any
        path: Import path as written
        line: 1-indexed source line
    """

    source_id: str
    target: str
    locale_hint: str | None = None
    path: str = ""
    line: int = 0


@dataclass(frozen=True, slots=True)
class LGFile:
    """Parse result of one resource.

    Attributes:
        resource_id: Id of the parsed resource
        templates: Templates by name, in declaration order (read-only)
        imports: Import declarations in declaration order
    """

    resource_id: str
    templates: Mapping[str, Template] = field(default_factory=lambda: MappingProxyType({}))
    imports: tuple[ImportDeclaration, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.templates, MappingProxyType):
            object.__setattr__(self, "templates", MappingProxyType(dict(self.templates)))

    def get_template(self, name: str) -> Template | None:
        """Return the template declared in this resource, if any."""
        return self.templates.get(name)
