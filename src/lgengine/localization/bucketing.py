"""Locale bucketing of template resources.

Partitions resources by the locale derived from their id. The neutral
bucket ("") holds resources without a locale segment. Bucketing only
records where each resource lives; fallback between buckets is computed
separately by resolve_fallback_chain().

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from lgengine.constants import DEFAULT_EXTENSION, NEUTRAL_LOCALE
from lgengine.locale_utils import normalize_locale, resolve_fallback_chain
from lgengine.localization.loading import LoadSummary, ResourceProvider, load_resources
from lgengine.localization.resource import Resource
from lgengine.localization.types import BaseName, LocaleCode

__all__ = ["LocaleBucket", "group_by_locale", "load_bucket"]

logger = logging.getLogger(__name__)


class LocaleBucket(Mapping[LocaleCode, tuple[Resource, ...]]):
    """Read-only mapping of locale key to the resources in that locale.

    Keys are lower-case locale codes; "" is the neutral bucket. Each value
    keeps source insertion order. Instances are immutable snapshots and
    may be shared across threads.

    Example:
        >>> bucket = group_by_locale([
        ...     Resource.create("a.lg", ""),
        ...     Resource.create("a.en-US.lg", ""),
        ... ])
        >>> sorted(bucket.locales)
        ['', 'en-us']
        >>> bucket.find("a", "en-us").id
        'a.en-US.lg'
    """

    __slots__ = ("_buckets", "_by_key")

    def __init__(self, buckets: Mapping[LocaleCode, tuple[Resource, ...]]) -> None:
        self._buckets: Mapping[LocaleCode, tuple[Resource, ...]] = MappingProxyType(
            dict(buckets)
        )
        by_key: dict[tuple[LocaleCode, BaseName], Resource] = {}
        for locale, resources in self._buckets.items():
            for resource in resources:
                # First resource of a base name wins inside one bucket
                by_key.setdefault((locale, resource.base_name), resource)
        self._by_key = by_key

    def __getitem__(self, locale: LocaleCode) -> tuple[Resource, ...]:
        return self._buckets[locale]

    def __iter__(self) -> Iterator[LocaleCode]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{locale!r}: {len(res)}" for locale, res in self._buckets.items())
        return f"LocaleBucket({{{sizes}}})"

    @property
    def locales(self) -> frozenset[LocaleCode]:
        """Locale keys that hold at least one resource."""
        return frozenset(self._buckets)

    def resources(self) -> Iterator[Resource]:
        """Iterate every resource, bucket by bucket."""
        for resources in self._buckets.values():
            yield from resources

    def find(self, base_name: BaseName, locale: LocaleCode) -> Resource | None:
        """Return the resource with this base name in one locale bucket."""
        return self._by_key.get((normalize_locale(locale), base_name))

    def resources_for(self, base_name: BaseName) -> dict[LocaleCode, Resource]:
        """Map each locale to the resource sharing ``base_name`` in it."""
        return {
            locale: resource
            for (locale, name), resource in self._by_key.items()
            if name == base_name
        }

    def resolve_all(self, locale: str | None) -> tuple[Resource, ...]:
        """Best resource of every base name for one locale.

        Walks the fallback chain of ``locale`` over this bucket's locales
        and keeps, per base name, the first resource found. Resources are
        ordered by the chain position they were found at, then by source
        order.

        Args:
            locale: Requested locale (e.g., "en-US")

        Returns:
            Tuple of resources with unique base names

        Example:
            For a bucket holding a.lg, a.en-US.lg and c.en.lg,
            resolve_all("en-US") returns (a.en-US.lg, c.en.lg).
        """
        chosen: dict[BaseName, Resource] = {}
        for candidate in resolve_fallback_chain(locale, self.locales):
            for resource in self._buckets.get(candidate, ()):
                chosen.setdefault(resource.base_name, resource)
        return tuple(chosen.values())


def group_by_locale(resources: Iterable[Resource]) -> LocaleBucket:
    """Partition resources into locale buckets.

    Every resource lands in exactly one bucket, keyed by its lower-case
    locale (neutral resources under ""). Source order is preserved inside
    each bucket. Grouping is idempotent: regrouping the resources of a
    bucket yields an equal bucket.

    Args:
        resources: Resources in source enumeration order

    Returns:
        Immutable LocaleBucket snapshot

    Raises:
        ValueError: If two resources in the same bucket share an id
    """
    grouped: dict[LocaleCode, list[Resource]] = {}
    seen: set[tuple[LocaleCode, str]] = set()
    for resource in resources:
        locale = normalize_locale(resource.locale) or NEUTRAL_LOCALE
        key = (locale, resource.id)
        if key in seen:
            msg = f"Duplicate resource id '{resource.id}' in locale bucket '{locale}'"
            raise ValueError(msg)
        seen.add(key)
        grouped.setdefault(locale, []).append(resource)
    return LocaleBucket({locale: tuple(items) for locale, items in grouped.items()})


def load_bucket(
    provider: ResourceProvider, *, extension: str = DEFAULT_EXTENSION
) -> tuple[LocaleBucket, LoadSummary]:
    """Enumerate a provider and group its resources by locale.

    Args:
        provider: Source of resource ids and content
        extension: Only ids with this extension are kept (default: ".lg")

    Returns:
        Tuple of (bucket snapshot, load summary)
    """
    resources, summary = load_resources(provider, extension=extension)
    bucket = group_by_locale(resources)
    logger.info("Built locale bucket %r", bucket)
    return bucket, summary
