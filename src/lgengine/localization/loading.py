"""Resource loading infrastructure for template generators.

Provides the protocol for resource providers, a filesystem implementation
with path-traversal protection, an in-memory implementation, and
result/summary data structures for tracking load attempts.

Components:
    ResourceEntry - Raw (id, content) pair supplied by a provider
    ResourceProvider - Protocol for enumerating and fetching resources
    FolderResourceProvider - Disk-based provider rooted at one directory
    MemoryResourceProvider - Dictionary-backed provider (tests, embedding)
    ResourceLoadResult - Immutable result of a single resource load attempt
    LoadSummary - Immutable aggregate of all load results
    load_resources - Enumerate a provider into Resource objects

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from lgengine.constants import DEFAULT_EXTENSION
from lgengine.enums import LoadStatus
from lgengine.localization.resource import Resource
from lgengine.localization.types import LGSource, ResourceId

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "ResourceEntry",
    "ResourceProvider",
    # Concrete providers
    "FolderResourceProvider",
    "MemoryResourceProvider",
    # Load result types
    "ResourceLoadResult",
    "LoadSummary",
    "load_resources",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResourceEntry:
    """Raw resource as supplied by a provider.

    Attributes:
        id: Resource identifier (file name, e.g. 'a.en-US.lg')
        content: UTF-8 decoded text
    """

    id: ResourceId
    content: LGSource


class ResourceProvider(Protocol):
    """Protocol for enumerating template resources.

    This is a Protocol (structural typing) rather than ABC so that any
    object with these two methods can feed a generator manager.

    Example:
        >>> class DatabaseProvider:
        ...     def list_resources(self) -> list[ResourceEntry]:
        ...         return [ResourceEntry(row.name, row.text) for row in rows]
        ...     def get_resource(self, resource_id: str) -> ResourceEntry:
        ...         return ResourceEntry(resource_id, fetch(resource_id))
    """

    def list_resources(self) -> Sequence[ResourceEntry]:
        """Return every available resource with its content.

        Raises:
            OSError: If the backing store cannot be enumerated
        """

    def get_resource(self, resource_id: ResourceId) -> ResourceEntry:
        """Return one resource by id.

        Raises:
            KeyError: If no resource has this id
            OSError: If the resource cannot be read
        """


@dataclass(frozen=True, slots=True)
class MemoryResourceProvider:
    """Dictionary-backed resource provider.

    Enumeration order is the mapping's insertion order.

    Example:
        >>> provider = MemoryResourceProvider({"a.lg": "# templatea\\n- from a.lg"})
        >>> provider.get_resource("a.lg").content
        '# templatea\\n- from a.lg'
    """

    resources: Mapping[ResourceId, LGSource] = field(default_factory=dict)

    def list_resources(self) -> tuple[ResourceEntry, ...]:
        return tuple(ResourceEntry(rid, content) for rid, content in self.resources.items())

    def get_resource(self, resource_id: ResourceId) -> ResourceEntry:
        if resource_id not in self.resources:
            msg = f"Resource '{resource_id}' not found"
            raise KeyError(msg)
        return ResourceEntry(resource_id, self.resources[resource_id])


@dataclass(frozen=True, slots=True)
class FolderResourceProvider:
    """File system resource provider.

    Resource ids are file names; sub-directories are searched when
    ``recursive`` is True. Two files with the same name in different
    sub-directories are rejected because ids must be unique.

    Security:
        get_resource() rejects ids with path separators or ".." and only
        returns files located under the fixed root directory.

    Attributes:
        root: Directory that holds the resources
        extension: Only files with this extension are listed (case-insensitive)
        recursive: Also search sub-directories
    """

    root: str | Path
    extension: str = DEFAULT_EXTENSION
    recursive: bool = True
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Resolve and validate the root directory.

        Raises:
            ValueError: If root is not an existing directory
        """
        resolved = Path(self.root).resolve()
        if not resolved.is_dir():
            msg = f"Resource root is not a directory: '{self.root}'"
            raise ValueError(msg)
        object.__setattr__(self, "_resolved_root", resolved)

    def _iter_paths(self) -> list[Path]:
        pattern = "**/*" if self.recursive else "*"
        suffix = self.extension.lower()
        return sorted(
            path
            for path in self._resolved_root.glob(pattern)
            if path.is_file() and path.name.lower().endswith(suffix)
        )

    def _index(self) -> dict[ResourceId, Path]:
        index: dict[ResourceId, Path] = {}
        for path in self._iter_paths():
            if path.name in index:
                msg = (
                    f"Duplicate resource id '{path.name}': "
                    f"{index[path.name]} and {path}"
                )
                raise ValueError(msg)
            index[path.name] = path
        return index

    def list_resources(self) -> tuple[ResourceEntry, ...]:
        """Read every matching file under the root.

        Raises:
            ValueError: If two files share a name
            OSError: If a file cannot be read
        """
        return tuple(
            ResourceEntry(rid, path.read_text(encoding="utf-8"))
            for rid, path in self._index().items()
        )

    def get_resource(self, resource_id: ResourceId) -> ResourceEntry:
        """Read one resource by file name.

        Raises:
            ValueError: If the id contains path components
            KeyError: If no such file exists under the root
        """
        if ".." in resource_id or "/" in resource_id or "\\" in resource_id:
            msg = f"Path components not allowed in resource id: '{resource_id}'"
            raise ValueError(msg)
        path = self._index().get(resource_id)
        if path is None:
            msg = f"Resource '{resource_id}' not found under {self._resolved_root}"
            raise KeyError(msg)
        return ResourceEntry(resource_id, path.read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class ResourceLoadResult:
    """Result of loading a single resource.

    Attributes:
        resource_id: Resource identifier
        status: Load status (success, skipped, error)
        error: Exception if status is ERROR, None otherwise
    """

    resource_id: ResourceId
    status: LoadStatus
    error: Exception | None = None

    @property
    def is_success(self) -> bool:
        """Check if resource loaded successfully."""
        return self.status == LoadStatus.SUCCESS


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of resource load results.

    Attributes:
        results: All individual load results (immutable tuple)
    """

    results: tuple[ResourceLoadResult, ...]

    def __repr__(self) -> str:
        return (
            f"LoadSummary(total={len(self.results)}, ok={self.successful}, "
            f"skipped={self.skipped}, errors={self.errors})"
        )

    @property
    def successful(self) -> int:
        """Number of resources accepted."""
        return sum(1 for r in self.results if r.status == LoadStatus.SUCCESS)

    @property
    def skipped(self) -> int:
        """Number of resources ignored for their extension."""
        return sum(1 for r in self.results if r.status == LoadStatus.SKIPPED)

    @property
    def errors(self) -> int:
        """Number of resources that failed to load."""
        return sum(1 for r in self.results if r.status == LoadStatus.ERROR)

    def get_errors(self) -> tuple[ResourceLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.status == LoadStatus.ERROR)


def load_resources(
    provider: ResourceProvider, *, extension: str = DEFAULT_EXTENSION
) -> tuple[tuple[Resource, ...], LoadSummary]:
    """Enumerate a provider into Resource objects.

    Entries whose id does not end with ``extension`` (case-insensitive)
    are skipped. Content is read once, here; resources are immutable
    afterwards.

    Args:
        provider: Resource provider to enumerate
        extension: Resource file extension (default: ".lg")

    Returns:
        Tuple of (resources in provider order, load summary)
    """
    suffix = extension.lower()
    resources: list[Resource] = []
    results: list[ResourceLoadResult] = []

    for entry in provider.list_resources():
        if not entry.id.lower().endswith(suffix):
            logger.debug("Skipping resource %s: extension is not %s", entry.id, extension)
            results.append(ResourceLoadResult(entry.id, LoadStatus.SKIPPED))
            continue
        if not isinstance(entry.content, str):
            error = TypeError(f"Resource content must be str, got {type(entry.content).__name__}")
            logger.warning("Failed to load resource %s: %s", entry.id, error)
            results.append(ResourceLoadResult(entry.id, LoadStatus.ERROR, error))
            continue
        resources.append(Resource.create(entry.id, entry.content))
        results.append(ResourceLoadResult(entry.id, LoadStatus.SUCCESS))

    summary = LoadSummary(tuple(results))
    logger.info("Loaded %d resources (%r)", len(resources), summary)
    return tuple(resources), summary
