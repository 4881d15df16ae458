"""Locale-aware import resolution.

An import names a logical resource (base name). Which physical resource
it reaches depends on the fallback chain of the resource being evaluated,
so the same declaration in a.lg resolves to b.en-us.lg under "en-US"
and to b.lg under "fr".

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from lgengine.diagnostics import ErrorTemplate, ImportNotFoundError
from lgengine.locale_utils import normalize_locale, resolve_fallback_chain
from lgengine.localization.bucketing import LocaleBucket
from lgengine.localization.resource import Resource
from lgengine.localization.types import BaseName, LocaleCode

__all__ = ["resolve_import"]

logger = logging.getLogger(__name__)


def _self_import_chain(source: Resource, bucket: LocaleBucket) -> tuple[LocaleCode, ...]:
    """Candidates strictly more general than the source's own locale."""
    chain = resolve_fallback_chain(source.locale, bucket.locales)
    if chain and chain[0] == source.locale:
        return chain[1:]
    return chain


def resolve_import(
    source: Resource,
    target_base_name: BaseName,
    fallback_chain: Sequence[LocaleCode],
    bucket: LocaleBucket,
    *,
    locale_hint: LocaleCode | None = None,
) -> Resource:
    """Find the resource an import reaches under a fallback chain.

    Rules:
        1. With ``locale_hint`` (``[import](b.en-US.lg)``) only that locale
           bucket is searched.
        2. When the target shares the source's base name
           (``test.en.lg`` importing ``test.lg``) the chain is the source's
           own chain without its locale, so the import always reaches a
           more general resource.
        3. Otherwise the first locale of ``fallback_chain`` that holds a
           resource with the target base name wins.

    An import never resolves to its own source.

    Args:
        source: Resource declaring the import
        target_base_name: Logical name of the imported resource
        fallback_chain: Candidate locales in preference order
        bucket: Locale bucket snapshot
        locale_hint: Explicit locale from the import declaration

    Returns:
        The resolved resource

    Raises:
        ImportNotFoundError: If no candidate locale holds the target
    """
    if locale_hint is not None:
        chain: tuple[LocaleCode, ...] = (normalize_locale(locale_hint),)
    elif target_base_name == source.base_name:
        chain = _self_import_chain(source, bucket)
    else:
        chain = tuple(fallback_chain)

    for locale in chain:
        resource = bucket.find(target_base_name, locale)
        if resource is not None and resource.id != source.id:
            logger.debug(
                "Import %s from %s resolved to %s", target_base_name, source.id, resource.id
            )
            return resource

    raise ImportNotFoundError(
        ErrorTemplate.import_not_found(target_base_name, chain, source.id),
        target=target_base_name,
        fallback_chain=chain,
    )
