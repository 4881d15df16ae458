"""Template evaluation: lookup across imports and body rendering.

Template lookup starting from a resource:

    1. Templates declared in the resource itself.
    2. Each import in declaration order, resolved for the scope's
       fallback chain and searched the same way (its own templates,
       then its imports). The first match wins. An import leading back to
       a resource already on the search path is skipped; the cycle is
       reported only if the name is found nowhere else.

A template called from inside another template's body is looked up from
the resource that declares the calling template first, then from the
scope's root resource.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import NoReturn

from lgengine.diagnostics import (
    CircularTemplateReferenceError,
    ErrorTemplate,
    TemplateNotFoundError,
)
from lgengine.enums import BranchKind
from lgengine.expressions import ExpressionContext, Value, is_truthy, to_text
from lgengine.localization.imports import resolve_import
from lgengine.localization.resource import Resource
from lgengine.syntax import (
    ConditionalBody,
    ExpressionSegment,
    LGFile,
    NormalBody,
    Segment,
    Template,
    TemplateBody,
    TextSegment,
    split_segments,
)

from .cache import ParsedResourceCache
from .config import GeneratorConfig
from .resolution_context import EvaluationScope, ResolutionContext, template_key

__all__ = ["TemplateEvaluator"]

logger = logging.getLogger(__name__)

type FoundTemplate = tuple[Resource, Template]


class TemplateEvaluator:
    """Resolves and renders templates for one parse cache and configuration.

    Stateless between calls: every evaluate() creates its own
    ResolutionContext, so one evaluator can serve many threads.
    """

    __slots__ = ("_cache", "_config")

    def __init__(self, cache: ParsedResourceCache, config: GeneratorConfig | None = None) -> None:
        self._cache = cache
        self._config = config if config is not None else GeneratorConfig()

    @property
    def config(self) -> GeneratorConfig:
        """Configuration used for rendering."""
        return self._config

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _parsed(self, resource: Resource, scope: EvaluationScope) -> LGFile:
        parsed = scope.parsed.get(resource.id)
        if parsed is not None:
            return parsed
        return self._cache.get(resource)

    def find_template(self, template_name: str, scope: EvaluationScope) -> FoundTemplate | None:
        """Locate a template from the scope's root resource.

        An import that leads back to a resource already on the search path
        is a dead end; later imports are still searched.

        Returns:
            (declaring resource, template), or None if unreachable

        Raises:
            ImportNotFoundError: If an import on the search path does not resolve
            CircularTemplateReferenceError: If the name is unreachable and
                the imports searched form a cycle
            LGSyntaxError: If a resource on the search path does not parse
        """
        cycles: list[tuple[str, ...]] = []
        found = self._find_from(scope.resource, template_name, scope, cycles)
        if found is None and cycles:
            _raise_cycle(cycles[0])
        return found

    def _find_from(
        self,
        start: Resource | None,
        template_name: str,
        scope: EvaluationScope,
        cycles: list[tuple[str, ...]],
    ) -> FoundTemplate | None:
        if start is None:
            return None
        return self._search(start, template_name, scope, (start.id,), cycles)

    def _search(
        self,
        resource: Resource,
        template_name: str,
        scope: EvaluationScope,
        import_path: tuple[str, ...],
        cycles: list[tuple[str, ...]],
    ) -> FoundTemplate | None:
        parsed = self._parsed(resource, scope)
        template = parsed.get_template(template_name)
        if template is not None:
            return resource, template

        for declaration in parsed.imports:
            target = resolve_import(
                resource,
                declaration.target,
                scope.fallback_chain,
                scope.bucket,
                locale_hint=declaration.locale_hint,
            )
            if target.id in import_path:
                cycles.append((*import_path, target.id))
                continue
            found = self._search(
                target, template_name, scope, (*import_path, target.id), cycles
            )
            if found is not None:
                return found
        return None

    def _require(
        self, template_name: str, scope: EvaluationScope, caller: Resource | None
    ) -> FoundTemplate:
        cycles: list[tuple[str, ...]] = []
        found = None
        if caller is not None and (scope.resource is None or caller.id != scope.resource.id):
            found = self._find_from(caller, template_name, scope, cycles)
        if found is None:
            found = self._find_from(scope.resource, template_name, scope, cycles)
        if found is None:
            if cycles:
                _raise_cycle(cycles[0])
            resource_id = scope.resource.id if scope.resource is not None else None
            raise TemplateNotFoundError(
                ErrorTemplate.template_not_found(template_name, resource_id),
                template_name=template_name,
            )
        return found

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def evaluate(
        self,
        template_name: str,
        args: Sequence[Value],
        data: object,
        scope: EvaluationScope,
    ) -> str:
        """Render a template by name.

        Args:
            template_name: Name to look up from the scope's root resource
            args: Positional arguments bound to the template's parameters
            data: Data context visible to expressions
            scope: Root resource, fallback chain and bucket

        Returns:
            Rendered text

        Raises:
            TemplateNotFoundError: If the name is unreachable
            ImportNotFoundError: If an import on the search path does not resolve
            CircularTemplateReferenceError: On template or import cycles
            DepthLimitExceededError: If nesting exceeds the configured depth
            ExpressionError: If an embedded expression fails
        """
        context = ResolutionContext(max_depth=self._config.max_depth)
        resource, template = self._require(template_name, scope, None)
        return self._render_template(resource, template, args, data, scope, context)

    def evaluate_text(self, text: str, data: object, scope: EvaluationScope) -> str:
        """Render inline template text such as ``"${greeting(user.name)}"``.

        Raises:
            MalformedTemplateError: If the text has an unterminated ``${``
            LGError: Any evaluation error, as for evaluate()
        """
        context = ResolutionContext(max_depth=self._config.max_depth)
        segments = split_segments(text)
        return self._render_segments(
            segments, MappingProxyType({}), scope.resource, data, scope, context
        )

    def _render_template(
        self,
        resource: Resource,
        template: Template,
        args: Sequence[Value],
        data: object,
        scope: EvaluationScope,
        context: ResolutionContext,
    ) -> str:
        with context.entering(template_key(resource.id, template.name)):
            bound = {
                name: args[index] if index < len(args) else None
                for index, name in enumerate(template.parameters)
            }
            logger.debug("Rendering %s from %s", template.name, resource.id)
            return self._render_body(
                template.structure, MappingProxyType(bound), resource, data, scope, context
            )

    def _render_body(
        self,
        body: TemplateBody,
        bound: Mapping[str, Value],
        resource: Resource,
        data: object,
        scope: EvaluationScope,
        context: ResolutionContext,
    ) -> str:
        match body:
            case NormalBody(variations=variations):
                variation = (
                    variations[0]
                    if len(variations) == 1
                    else self._config.variation_selector(variations)
                )
                return self._render_segments(
                    variation.segments, bound, resource, data, scope, context
                )
            case ConditionalBody(branches=branches):
                for branch in branches:
                    if branch.kind == BranchKind.ELSE or is_truthy(
                        self._evaluate_expression(
                            branch.condition or "", bound, resource, data, scope, context
                        )
                    ):
                        return self._render_body(
                            branch.body, bound, resource, data, scope, context
                        )
                return ""

    def _render_segments(
        self,
        segments: Sequence[Segment],
        bound: Mapping[str, Value],
        resource: Resource | None,
        data: object,
        scope: EvaluationScope,
        context: ResolutionContext,
    ) -> str:
        parts: list[str] = []
        for segment in segments:
            match segment:
                case TextSegment(value=value):
                    parts.append(value)
                case ExpressionSegment(source=source):
                    value = self._evaluate_expression(
                        source, bound, resource, data, scope, context
                    )
                    parts.append(to_text(value))
        return "".join(parts)

    def _evaluate_expression(
        self,
        source: str,
        bound: Mapping[str, Value],
        resource: Resource | None,
        data: object,
        scope: EvaluationScope,
        context: ResolutionContext,
    ) -> Value:
        def invoke(template_name: str, args: Sequence[Value]) -> str:
            found_resource, template = self._require(template_name, scope, resource)
            return self._render_template(found_resource, template, args, data, scope, context)

        expression_context = ExpressionContext(data=data, template_invoker=invoke, locals=bound)
        return self._config.expression_evaluator.evaluate(source, expression_context)


def _raise_cycle(cycle_path: tuple[str, ...]) -> NoReturn:
    raise CircularTemplateReferenceError(
        ErrorTemplate.circular_reference(cycle_path), cycle_path=cycle_path
    )
