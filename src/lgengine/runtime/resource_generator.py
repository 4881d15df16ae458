"""Multi-locale generator keyed by a logical resource.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lgengine.diagnostics import ErrorTemplate, NoGeneratorForLocaleError
from lgengine.locale_utils import resolve_fallback_chain
from lgengine.localization.resource import parse_resource_id
from lgengine.localization.types import BaseName, ResourceId

from .generator import TemplateEngineGenerator

if TYPE_CHECKING:
    from .manager import LanguageGeneratorManager

__all__ = ["ResourceMultiLanguageGenerator"]

logger = logging.getLogger(__name__)


class ResourceMultiLanguageGenerator:
    """Renders with the locale variant of one logical resource.

    ``ResourceMultiLanguageGenerator("test.lg", manager)`` serves every
    ``test.<locale>.lg``: each call picks the most specific variant along
    the requested locale's fallback chain and asks the manager for its
    (cached) generator.

    Example:
        >>> generator = ResourceMultiLanguageGenerator("test.lg", manager)
        >>> generator.generate("${test()}", locale="en-US")
        'english-us'
    """

    __slots__ = ("_base_name", "_manager", "_resource_id")

    def __init__(self, resource_id: ResourceId, manager: LanguageGeneratorManager) -> None:
        self._resource_id = resource_id
        self._base_name: BaseName = parse_resource_id(resource_id).base_name
        self._manager = manager

    @property
    def resource_id(self) -> ResourceId:
        """Resource id this generator was created for."""
        return self._resource_id

    def select(self, locale: str | None = "") -> TemplateEngineGenerator:
        """Pick the generator of the best locale variant.

        Raises:
            NoGeneratorForLocaleError: If no variant lies on the fallback chain
        """
        variants = self._manager.bucket.resources_for(self._base_name)
        for candidate in resolve_fallback_chain(locale, variants):
            resource = variants.get(candidate)
            if resource is not None:
                logger.debug("Locale %r of %s served by %s", locale, self._base_name, resource.id)
                return self._manager.get_generator(resource.id)
        raise NoGeneratorForLocaleError(
            ErrorTemplate.no_generator_for_locale(locale or "", variants),
            locale=locale or "",
        )

    def generate(self, template_ref: str, data: object = None, locale: str | None = "") -> str:
        """Render inline template text with the best variant for ``locale``.

        Raises:
            NoGeneratorForLocaleError: If no variant lies on the fallback chain
            LGError: Errors of the selected generator, unchanged
        """
        return self.select(locale).generate(template_ref, data)

    def __repr__(self) -> str:
        return f"ResourceMultiLanguageGenerator(resource_id={self._resource_id!r})"
