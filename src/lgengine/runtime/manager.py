"""Generator manager: one bucket, one parse cache, one generator per resource.

Python 3.13+.
"""

from __future__ import annotations

import logging
from threading import Lock

from lgengine.constants import DEFAULT_EXTENSION
from lgengine.locale_utils import resolve_fallback_chain
from lgengine.localization.bucketing import LocaleBucket, load_bucket
from lgengine.localization.loading import LoadSummary, ResourceProvider
from lgengine.localization.resource import Resource
from lgengine.localization.types import BaseName, ResourceId
from lgengine.syntax import LGParser

from .cache import ParsedResourceCache
from .config import GeneratorConfig
from .generator import TemplateEngineGenerator
from .resource_generator import ResourceMultiLanguageGenerator

__all__ = ["LanguageGeneratorManager"]

logger = logging.getLogger(__name__)


class LanguageGeneratorManager:
    """Owns the resources of one provider and the generators built from them.

    The bucket snapshot is built once at construction. Generators are
    built lazily, at most once per resource id, and share one parse
    cache, so each resource is parsed once however many generators
    import it.

    Example:
        >>> manager = LanguageGeneratorManager(FolderResourceProvider("dialogs"))
        >>> manager.get_generator("a.en-US.lg").generate("${templatea()}")
        'from a.en-us.lg'
        >>> manager.resource_generator("test.lg").generate("${test()}", locale="en")
        'english'
    """

    __slots__ = ("_bucket", "_cache", "_config", "_generators", "_lock", "_summary")

    def __init__(
        self,
        provider: ResourceProvider,
        *,
        extension: str = DEFAULT_EXTENSION,
        config: GeneratorConfig | None = None,
    ) -> None:
        """Load every resource of the provider.

        Args:
            provider: Source of template resources
            extension: Resource file extension (default: ".lg")
            config: Configuration for every generator (default: GeneratorConfig())

        Raises:
            ValueError: If two resources in one locale bucket share an id
            OSError: If the provider cannot be read
        """
        self._config = config if config is not None else GeneratorConfig()
        self._bucket, self._summary = load_bucket(provider, extension=extension)
        parser = LGParser(max_source_size=self._config.max_source_size)
        self._cache = ParsedResourceCache(parser.parse, self._config.parse_cache_size)
        self._generators: dict[ResourceId, TemplateEngineGenerator] = {}
        self._lock = Lock()

    @property
    def bucket(self) -> LocaleBucket:
        """Locale bucket snapshot."""
        return self._bucket

    @property
    def config(self) -> GeneratorConfig:
        """Configuration shared by the managed generators."""
        return self._config

    def get_load_summary(self) -> LoadSummary:
        """Outcome of loading the provider's resources."""
        return self._summary

    def _resource(self, resource_id: ResourceId) -> Resource:
        for resource in self._bucket.resources():
            if resource.id == resource_id:
                return resource
        msg = f"Resource '{resource_id}' not found"
        raise KeyError(msg)

    def get_generator(self, resource_id: ResourceId) -> TemplateEngineGenerator:
        """Return the generator of one resource, building it on first use.

        Raises:
            KeyError: If no loaded resource has this id
            LGSyntaxError: If the resource or one of its imports does not parse
        """
        generator = self._generators.get(resource_id)
        if generator is not None:
            return generator

        with self._lock:
            generator = self._generators.get(resource_id)
            if generator is None:
                generator = TemplateEngineGenerator(
                    self._resource(resource_id),
                    self._bucket,
                    config=self._config,
                    cache=self._cache,
                )
                self._generators[resource_id] = generator
            return generator

    def resource_generator(self, resource_id: ResourceId) -> ResourceMultiLanguageGenerator:
        """Multi-locale generator over the locale variants of ``resource_id``."""
        return ResourceMultiLanguageGenerator(resource_id, self)

    def find_resource(self, base_name: BaseName, locale: str | None = "") -> Resource | None:
        """Best resource for a base name along the fallback chain of ``locale``."""
        variants = self._bucket.resources_for(base_name)
        for candidate in resolve_fallback_chain(locale, variants):
            if candidate in variants:
                return variants[candidate]
        return None

    def get_cache_stats(self) -> dict[str, int | float]:
        """Parse cache statistics plus the number of built generators."""
        stats = self._cache.get_stats()
        with self._lock:
            stats["generators"] = len(self._generators)
        return stats

    def __repr__(self) -> str:
        return f"LanguageGeneratorManager(bucket={self._bucket!r})"
