"""LG template resource syntax: tree nodes and parser.

Exports:
    LGParser, parse_resource: Resource -> LGFile
    parse_body, split_segments: Body structure helpers
    Template, ImportDeclaration, LGFile and body/segment nodes

Python 3.13+.
"""

from .ast import (
    ConditionalBody,
    ConditionalBranch,
    ExpressionSegment,
    ImportDeclaration,
    LGFile,
    NormalBody,
    Segment,
    Template,
    TemplateBody,
    TextSegment,
    Variation,
)
from .body import parse_body, split_segments
from .parser import LGParser, parse_resource

__all__ = [
    "ConditionalBody",
    "ConditionalBranch",
    "ExpressionSegment",
    "ImportDeclaration",
    "LGFile",
    "LGParser",
    "NormalBody",
    "Segment",
    "Template",
    "TemplateBody",
    "TextSegment",
    "Variation",
    "parse_body",
    "parse_resource",
    "split_segments",
]
