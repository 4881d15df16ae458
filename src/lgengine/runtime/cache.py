"""Thread-safe LRU cache of parsed template resources.

Parsed resources are keyed by resource id; content is assumed stable for
the cache's lifetime. Parsing runs outside the lock and the result is
inserted with a double-checked lookup, so concurrent first access to one
id yields a single shared LGFile.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock

from lgengine.constants import DEFAULT_PARSE_CACHE_SIZE
from lgengine.localization.resource import Resource
from lgengine.localization.types import ResourceId
from lgengine.syntax import LGFile

__all__ = ["ParsedResourceCache"]

logger = logging.getLogger(__name__)


class ParsedResourceCache:
    """LRU cache of LGFile objects keyed by resource id.

    Attributes:
        maxsize: Maximum number of cached resources
        hits: Lookups answered from the cache
        misses: Lookups that had to parse
    """

    __slots__ = ("_cache", "_hits", "_lock", "_maxsize", "_misses", "_parse")

    def __init__(
        self,
        parse: Callable[[Resource], LGFile],
        maxsize: int = DEFAULT_PARSE_CACHE_SIZE,
    ) -> None:
        """Initialize parse cache.

        Args:
            parse: Function turning a resource into an LGFile
            maxsize: Maximum number of entries (default: 1000)
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._parse = parse
        self._cache: OrderedDict[ResourceId, LGFile] = OrderedDict()
        self._maxsize = maxsize
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def get(self, resource: Resource) -> LGFile:
        """Return the parsed resource, parsing it on first use.

        Parse errors propagate and nothing is cached for that id.

        Raises:
            LGSyntaxError: If the resource does not parse
        """
        with self._lock:
            cached = self._cache.get(resource.id)
            if cached is not None:
                self._cache.move_to_end(resource.id)
                self._hits += 1
                return cached
            self._misses += 1

        logger.debug("Parsing resource %s", resource.id)
        try:
            parsed = self._parse(resource)
        except Exception:
            logger.error("Failed to parse resource %s", resource.id)
            raise

        with self._lock:
            # Another thread may have inserted while we parsed; keep its result
            existing = self._cache.get(resource.id)
            if existing is not None:
                return existing
            if len(self._cache) >= self._maxsize:
                self._cache.popitem(last=False)
            self._cache[resource.id] = parsed
            return parsed

    def __contains__(self, resource_id: object) -> bool:
        with self._lock:
            return resource_id in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys size, maxsize, hits, misses and hit_rate (percent)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    @property
    def maxsize(self) -> int:
        """Maximum cache size."""
        return self._maxsize

    @property
    def hits(self) -> int:
        """Number of cache hits."""
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        """Number of cache misses (parses)."""
        with self._lock:
            return self._misses
