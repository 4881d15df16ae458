"""LG resource parser.

Line-oriented parser for template resources:

    > comment line
    [import](common.lg)
    # greeting(name)
    - Hello ${name}!
    - Hi ${name}

A ``#`` line opens a template; the lines up to the next header (or the
end of the resource) are its body. Import and comment lines may appear
anywhere at the start of a line. Any other text before the first header
is an error.

Parsing fails fast: the first structural problem raises, so a generator
whose resource does not parse cannot be constructed.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re

from lgengine.constants import MAX_SOURCE_SIZE
from lgengine.diagnostics import (
    DuplicateTemplateError,
    ErrorTemplate,
    MalformedTemplateError,
)
from lgengine.localization.resource import Resource, parse_resource_id
from lgengine.syntax.ast import ImportDeclaration, LGFile, Template
from lgengine.syntax.body import BodyLine, parse_body

__all__ = ["LGParser", "parse_resource"]

logger = logging.getLogger(__name__)

_TEMPLATE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")
_PARAMETER_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_IMPORT_LINE = re.compile(r"^\[import\]\((?P<path>[^)]*)\)\s*$", re.IGNORECASE)


class LGParser:
    """Parser for LG template resources.

    Security:
        Configurable max_source_size rejects oversized resources before
        any line is examined.

    Attributes:
        max_source_size: Maximum resource size in characters (default: 10 MB)
    """

    __slots__ = ("_max_source_size",)

    def __init__(self, *, max_source_size: int | None = None) -> None:
        """Initialize parser.

        Args:
            max_source_size: Maximum source size in characters (default: 10 MB).
                Set to 0 to disable the limit.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    def parse(self, resource: Resource) -> LGFile:
        """Parse one resource into templates and import declarations.

        Args:
            resource: Resource to parse

        Returns:
            LGFile with templates in declaration order

        Raises:
            DuplicateTemplateError: If a template name is declared twice
            MalformedTemplateError: If the resource is structurally invalid

        Example:
            >>> resource = Resource.create("a.lg", "# templatea\\n- from a.lg")
            >>> LGParser().parse(resource).templates["templatea"].body
            '- from a.lg'
        """
        source = resource.content
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            raise MalformedTemplateError(
                ErrorTemplate.source_too_large(resource.id, len(source), self._max_source_size),
                resource_id=resource.id,
            )

        templates: dict[str, Template] = {}
        imports: list[ImportDeclaration] = []
        header: tuple[int, str] | None = None
        body_lines: list[BodyLine] = []

        for number, raw in enumerate(source.removeprefix("\ufeff").splitlines(), start=1):
            stripped = raw.strip()
            if stripped.startswith(">"):
                continue
            if not raw[:1].isspace() and stripped.startswith("[import]"):
                imports.append(self._parse_import(resource, stripped, number))
                continue
            if stripped.startswith("#"):
                if header is not None:
                    self._add_template(resource, templates, header, body_lines)
                header = (number, stripped)
                body_lines = []
                continue
            if header is None:
                if stripped:
                    raise MalformedTemplateError(
                        ErrorTemplate.malformed_template(
                            f"Content outside a template: '{stripped}'", resource.id, number
                        ),
                        resource_id=resource.id,
                        line=number,
                    )
                continue
            body_lines.append((number, raw))

        if header is not None:
            self._add_template(resource, templates, header, body_lines)

        logger.debug(
            "Parsed %s: %d templates, %d imports", resource.id, len(templates), len(imports)
        )
        return LGFile(resource.id, templates, tuple(imports))

    def _add_template(
        self,
        resource: Resource,
        templates: dict[str, Template],
        header: tuple[int, str],
        body_lines: list[BodyLine],
    ) -> None:
        line, text = header
        name, parameters = self._parse_header(resource, text, line)
        if name in templates:
            raise DuplicateTemplateError(
                ErrorTemplate.duplicate_template(name, resource.id, line),
                template_name=name,
                resource_id=resource.id,
            )
        if not any(raw.strip() for _, raw in body_lines):
            raise MalformedTemplateError(
                ErrorTemplate.malformed_template(
                    f"Template '{name}' has an empty body", resource.id, line
                ),
                resource_id=resource.id,
                line=line,
            )
        structure = parse_body(body_lines, resource.id)
        body = "\n".join(raw for _, raw in body_lines).strip()
        templates[name] = Template(name, parameters, body, structure, line)

    @staticmethod
    def _parse_header(resource: Resource, text: str, line: int) -> tuple[str, tuple[str, ...]]:
        """Split ``# name(p1, p2)`` into name and parameter names."""

        def fail(reason: str) -> MalformedTemplateError:
            return MalformedTemplateError(
                ErrorTemplate.malformed_template(reason, resource.id, line),
                resource_id=resource.id,
                line=line,
            )

        declaration = text[1:].strip()
        name, paren, rest = declaration.partition("(")
        name = name.strip()
        if not _TEMPLATE_NAME.match(name):
            raise fail(f"Invalid template name: '{name}'")
        if not paren:
            return name, ()

        if not rest.endswith(")"):
            raise fail(f"Unterminated parameter list in '# {declaration}'")
        inner = rest[:-1].strip()
        if not inner:
            return name, ()

        parameters = tuple(part.strip() for part in inner.split(","))
        for parameter in parameters:
            if not _PARAMETER_NAME.match(parameter):
                raise fail(f"Invalid parameter name '{parameter}' in template '{name}'")
        if len(set(parameters)) != len(parameters):
            raise fail(f"Duplicate parameter name in template '{name}'")
        return name, parameters

    @staticmethod
    def _parse_import(resource: Resource, text: str, line: int) -> ImportDeclaration:
        """Read ``[import](path)`` into an import declaration.

        The target is the base name of the last path component; a locale
        segment in the file name becomes the locale hint.
        """
        match = _IMPORT_LINE.match(text)
        path = match.group("path").strip() if match else ""
        if not path:
            raise MalformedTemplateError(
                ErrorTemplate.malformed_template(f"Malformed import: '{text}'", resource.id, line),
                resource_id=resource.id,
                line=line,
            )
        file_name = re.split(r"[/\\]", path)[-1]
        name = parse_resource_id(file_name)
        return ImportDeclaration(
            source_id=resource.id,
            target=name.base_name,
            locale_hint=name.locale or None,
            path=path,
            line=line,
        )


def parse_resource(resource: Resource, *, max_source_size: int | None = None) -> LGFile:
    """Parse a resource with a one-off parser.

    Raises:
        DuplicateTemplateError: If a template name is declared twice
        MalformedTemplateError: If the resource is structurally invalid
    """
    return LGParser(max_source_size=max_source_size).parse(resource)
