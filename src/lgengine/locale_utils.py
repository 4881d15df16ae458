"""Locale utilities: normalization, tag recognition and fallback chains.

Centralizes locale handling used throughout the codebase so that bucket
keys, binding keys and requested locales are always compared in one
canonical form (lower-case BCP-47 with hyphens).

Python 3.13+. External dependency: Babel (BCP-47 subtag parsing).
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable

from babel.core import parse_locale

from lgengine.constants import NEUTRAL_LOCALE, NON_LOCALE_SEGMENTS

__all__ = [
    "is_locale_tag",
    "normalize_locale",
    "primary_subtag",
    "resolve_fallback_chain",
]

# Letters, digits and inner hyphens; at least two characters.
_LOCALE_SHAPE = re.compile(r"^[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*$")


def normalize_locale(locale_code: str | None) -> str:
    """Convert a locale code to its canonical comparison form.

    Strips whitespace, lower-cases and converts POSIX underscores to
    BCP-47 hyphens. Never raises; ``None`` becomes the neutral locale.

    Args:
        locale_code: Locale code in any casing (e.g., "en-US", " EN_us ")

    Returns:
        Canonical locale key (e.g., "en-us"), or "" for empty input

    Example:
        >>> normalize_locale("en-US")
        'en-us'
        >>> normalize_locale(" pt_BR ")
        'pt-br'
        >>> normalize_locale(None)
        ''
    """
    if not locale_code:
        return NEUTRAL_LOCALE
    return locale_code.strip().lower().replace("_", "-")


def primary_subtag(locale_code: str) -> str:
    """Return the language part of a normalized locale ("en-us" -> "en")."""
    return locale_code.split("-", 1)[0]


@functools.lru_cache(maxsize=256)
def is_locale_tag(segment: str) -> bool:
    """Check whether a filename segment is a locale tag.

    A segment is a locale tag when it has the BCP-47 shape (letters,
    digits, hyphens; 2+ characters), is not a known non-locale segment
    such as "dialog", and Babel accepts its subtag structure with a
    2-3 or 5-8 letter language subtag.

    Args:
        segment: Dotted filename segment (e.g., "en-US" from "a.en-US.lg")

    Returns:
        True if the segment should be read as a locale

    Example:
        >>> is_locale_tag("en-US")
        True
        >>> is_locale_tag("zh-Hans-CN")
        True
        >>> is_locale_tag("dialog")
        False
        >>> is_locale_tag("v2")
        False
    """
    if len(segment) < 2 or not _LOCALE_SHAPE.match(segment):
        return False
    if segment.lower() in NON_LOCALE_SEGMENTS:
        return False
    try:
        language = parse_locale(segment, sep="-")[0]
    except ValueError:
        return False
    return len(language) in (2, 3) or 5 <= len(language) <= 8


def resolve_fallback_chain(requested: str | None, available: Iterable[str]) -> tuple[str, ...]:
    """Compute candidate locales in preference order.

    Algorithm:
        1. The normalized requested locale, if available.
        2. Its primary language subtag (text before the first "-"), if the
           request has a region and the language is available.
        3. The neutral locale "" - always last, exactly once.

    Total function: any input string (empty, mixed-case, nonsense) yields
    a valid chain. Available locales are normalized before comparison.

    Args:
        requested: Requested locale (e.g., "en-US")
        available: Locales that have a resource or generator

    Returns:
        Tuple of candidate locale keys without duplicates, ending with ""

    Example:
        >>> resolve_fallback_chain("en-US", {"", "en", "en-us", "fr"})
        ('en-us', 'en', '')
        >>> resolve_fallback_chain("en-GB", {"", "en"})
        ('en', '')
        >>> resolve_fallback_chain("foo", {"", "en"})
        ('',)
    """
    normalized = normalize_locale(requested)
    known = {normalize_locale(locale) for locale in available}

    chain: list[str] = []
    if normalized and normalized in known:
        chain.append(normalized)
    if "-" in normalized:
        language = primary_subtag(normalized)
        if language and language in known and language not in chain:
            chain.append(language)
    chain.append(NEUTRAL_LOCALE)
    return tuple(chain)
