"""Single-resource generator.

A TemplateEngineGenerator renders templates declared in one resource and
in the resources it imports. Its fallback chain is fixed when it is
built, from the resource's own locale and the locales of the bucket.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import MappingProxyType

from lgengine.diagnostics import ImportNotFoundError
from lgengine.expressions import Value
from lgengine.locale_utils import resolve_fallback_chain
from lgengine.localization.bucketing import LocaleBucket, group_by_locale
from lgengine.localization.imports import resolve_import
from lgengine.localization.resource import Resource
from lgengine.localization.types import LocaleCode, ResourceId
from lgengine.syntax import LGFile, LGParser

from .cache import ParsedResourceCache
from .config import GeneratorConfig
from .evaluator import TemplateEvaluator
from .resolution_context import EvaluationScope

__all__ = ["TemplateEngineGenerator"]

logger = logging.getLogger(__name__)


class TemplateEngineGenerator:
    """Generator bound to one resource.

    Construction parses the resource and every import reachable along its
    fallback chain, so syntax errors fail here rather than at generate
    time. Imports that do not resolve are left for generate time, where
    they raise ImportNotFoundError if a lookup needs them.

    Immutable after construction and safe to share between threads.

    Example:
        >>> resource = Resource.create("a.lg", "# templatea\\n- from a.lg")
        >>> TemplateEngineGenerator(resource).generate("${templatea()}")
        'from a.lg'

    Attributes:
        resource: Root resource (None renders built-in functions only)
        bucket: Locale bucket used to resolve imports
        fallback_chain: Locales tried for imports, most specific first
    """

    __slots__ = ("_bucket", "_evaluator", "_fallback_chain", "_resource", "_scope")

    def __init__(
        self,
        resource: Resource | None = None,
        bucket: LocaleBucket | None = None,
        *,
        config: GeneratorConfig | None = None,
        cache: ParsedResourceCache | None = None,
    ) -> None:
        """Build a generator and parse its resources.

        Args:
            resource: Resource whose templates this generator renders
            bucket: Bucket holding the resource's imports
                (default: a bucket with only ``resource``)
            config: Generator configuration (default: GeneratorConfig())
            cache: Shared parse cache (default: a private cache)

        Raises:
            DuplicateTemplateError: If a parsed resource redeclares a template
            MalformedTemplateError: If a parsed resource is malformed
        """
        config = config if config is not None else GeneratorConfig()
        if cache is None:
            parser = LGParser(max_source_size=config.max_source_size)
            cache = ParsedResourceCache(parser.parse, config.parse_cache_size)
        if bucket is None:
            bucket = group_by_locale([resource] if resource is not None else [])

        self._resource = resource
        self._bucket = bucket
        self._fallback_chain: tuple[LocaleCode, ...] = (
            resolve_fallback_chain(resource.locale, bucket.locales)
            if resource is not None
            else ("",)
        )
        parsed = self._preload(resource, cache) if resource is not None else {}
        self._scope = EvaluationScope(
            resource, self._fallback_chain, bucket, MappingProxyType(parsed)
        )
        self._evaluator = TemplateEvaluator(cache, config)

        if resource is not None:
            logger.info(
                "Built generator for %s (fallback chain %s)", resource.id, self._fallback_chain
            )

    def _preload(self, root: Resource, cache: ParsedResourceCache) -> dict[ResourceId, LGFile]:
        """Parse the root resource and its resolvable transitive imports.

        The generator keeps the returned files, so eviction from a small
        shared cache never forces a re-parse at generate time.
        """
        pending = [root]
        parsed: dict[ResourceId, LGFile] = {}
        while pending:
            resource = pending.pop()
            if resource.id in parsed:
                continue
            lg_file = cache.get(resource)
            parsed[resource.id] = lg_file
            for declaration in lg_file.imports:
                try:
                    target = resolve_import(
                        resource,
                        declaration.target,
                        self._fallback_chain,
                        self._bucket,
                        locale_hint=declaration.locale_hint,
                    )
                except ImportNotFoundError:
                    logger.debug(
                        "Import %s of %s does not resolve yet", declaration.target, resource.id
                    )
                    continue
                pending.append(target)
        return parsed

    @property
    def resource(self) -> Resource | None:
        """Root resource."""
        return self._resource

    @property
    def bucket(self) -> LocaleBucket:
        """Bucket used to resolve imports."""
        return self._bucket

    @property
    def fallback_chain(self) -> tuple[LocaleCode, ...]:
        """Locales tried for imports, fixed at construction."""
        return self._fallback_chain

    def generate(self, template_ref: str, data: object = None) -> str:
        """Render inline template text.

        Args:
            template_ref: Template text, usually a call such as
                ``"${greeting(user.name)}"``
            data: Data context (mapping or object)

        Returns:
            Rendered text

        Raises:
            TemplateNotFoundError: If a called template is unreachable
            ImportNotFoundError: If a needed import does not resolve
            CircularTemplateReferenceError: On template or import cycles
            ExpressionError: If an embedded expression fails
        """
        return self._evaluator.evaluate_text(template_ref, data, self._scope)

    def evaluate(
        self, template_name: str, data: object = None, *, args: Sequence[Value] = ()
    ) -> str:
        """Render one template by name.

        Raises:
            TemplateNotFoundError: If the name is unreachable
            LGError: Any evaluation error, as for generate()
        """
        return self._evaluator.evaluate(template_name, args, data, self._scope)

    def __repr__(self) -> str:
        resource_id = self._resource.id if self._resource is not None else None
        return f"TemplateEngineGenerator(resource={resource_id!r})"
