"""Resources, locale buckets, providers and import resolution.

Python 3.13+.
"""

from .bucketing import LocaleBucket, group_by_locale, load_bucket
from .imports import resolve_import
from .loading import (
    FolderResourceProvider,
    LoadSummary,
    MemoryResourceProvider,
    ResourceEntry,
    ResourceLoadResult,
    ResourceProvider,
    load_resources,
)
from .resource import Resource, ResourceName, parse_resource_id
from .types import BaseName, LGSource, LocaleCode, ResourceId, TemplateName

__all__ = [
    "BaseName",
    "FolderResourceProvider",
    "LGSource",
    "LoadSummary",
    "LocaleBucket",
    "LocaleCode",
    "MemoryResourceProvider",
    "Resource",
    "ResourceEntry",
    "ResourceId",
    "ResourceLoadResult",
    "ResourceName",
    "ResourceProvider",
    "TemplateName",
    "group_by_locale",
    "load_bucket",
    "load_resources",
    "parse_resource_id",
    "resolve_import",
]
