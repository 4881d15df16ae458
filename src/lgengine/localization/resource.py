"""Template resources and the filename locale convention.

Resource ids follow ``<baseName>[.<locale>].<extension>``:

    a.lg          -> base "a", neutral locale ""
    a.en-US.lg    -> base "a", locale "en-us" (tag "en-US")
    main.dialog.lg -> base "main.dialog", neutral ("dialog" is not a locale)

The derivation runs once, when the Resource is created, and is stored as
plain data.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

from lgengine.constants import NEUTRAL_LOCALE
from lgengine.locale_utils import is_locale_tag, normalize_locale
from lgengine.localization.types import BaseName, LGSource, LocaleCode, ResourceId

__all__ = ["Resource", "ResourceName", "parse_resource_id"]


@dataclass(frozen=True, slots=True)
class ResourceName:
    """Parts of a resource id.

    Attributes:
        base_name: Logical name shared by all locale variants
        locale: Lower-case locale key ("" when locale-neutral)
        locale_tag: Locale segment with its original casing ("" when neutral)
        extension: Extension including the dot (".lg"), "" when absent
    """

    base_name: BaseName
    locale: LocaleCode
    locale_tag: str
    extension: str


def parse_resource_id(resource_id: ResourceId) -> ResourceName:
    """Split a resource id into base name, locale and extension.

    Best effort and never raises: an id without an extension is neutral
    with the whole id as its base name. Directory components are kept in
    the base name.

    Args:
        resource_id: Resource identifier (e.g., "a.en-US.lg")

    Returns:
        ResourceName with the derived parts

    Example:
        >>> parse_resource_id("a.en-US.lg")
        ResourceName(base_name='a', locale='en-us', locale_tag='en-US', extension='.lg')
        >>> parse_resource_id("NormalStructuredLG.lg").locale
        ''
        >>> parse_resource_id("README").base_name
        'README'
    """
    stem, dot, extension = resource_id.rpartition(".")
    if not dot or not stem:
        return ResourceName(resource_id, NEUTRAL_LOCALE, "", "")

    base_name, dot, candidate = stem.rpartition(".")
    if dot and base_name and is_locale_tag(candidate):
        return ResourceName(base_name, normalize_locale(candidate), candidate, f".{extension}")
    return ResourceName(stem, NEUTRAL_LOCALE, "", f".{extension}")


@dataclass(frozen=True, slots=True)
class Resource:
    """Immutable template resource.

    Identity is ``id``; ``base_name`` and ``locale`` are derived from it
    by ``Resource.create`` and never recomputed.

    Attributes:
        id: Resource identifier (e.g., "a.en-US.lg")
        content: Raw template text
        base_name: Logical name shared by locale variants ("a")
        locale: Lower-case bucket key ("en-us"), "" when locale-neutral
        locale_tag: Locale segment with original casing ("en-US")
    """

    id: ResourceId
    content: LGSource
    base_name: BaseName
    locale: LocaleCode
    locale_tag: str = ""

    @classmethod
    def create(cls, resource_id: ResourceId, content: LGSource) -> Resource:
        """Build a resource, deriving base name and locale from its id.

        Example:
            >>> resource = Resource.create("b.en-us.lg", "# templateb\\n- hi")
            >>> (resource.base_name, resource.locale)
            ('b', 'en-us')
        """
        name = parse_resource_id(resource_id)
        return cls(
            id=resource_id,
            content=content,
            base_name=name.base_name,
            locale=name.locale,
            locale_tag=name.locale_tag,
        )

    @property
    def is_neutral(self) -> bool:
        """True when the resource carries no locale segment."""
        return self.locale == NEUTRAL_LOCALE

    def __repr__(self) -> str:
        return f"Resource(id={self.id!r}, base_name={self.base_name!r}, locale={self.locale!r})"
