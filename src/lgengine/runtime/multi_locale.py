"""Multi-locale generator with an explicitly owned binding table.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from lgengine.diagnostics import ErrorTemplate, NoGeneratorForLocaleError
from lgengine.locale_utils import normalize_locale, resolve_fallback_chain
from lgengine.localization.types import LocaleCode

from .generator import TemplateEngineGenerator
from .rwlock import RWLock

__all__ = ["MultiLanguageGenerator"]

logger = logging.getLogger(__name__)


class MultiLanguageGenerator:
    """Dispatches to a per-locale generator by locale fallback.

    Bindings are keyed by normalized locale ("" is the neutral fallback).
    Reads take the shared side of an RWLock; set_generator,
    remove_generator and replace_generators take the exclusive side. The
    selected generator runs outside the lock.

    Example:
        >>> multi = MultiLanguageGenerator({"": default_gen, "en": english_gen})
        >>> multi.generate("${test()}", locale="en-GB")  # en-gb -> en
        'english'
    """

    __slots__ = ("_generators", "_lock")

    def __init__(
        self, generators: Mapping[LocaleCode, TemplateEngineGenerator] | None = None
    ) -> None:
        self._lock = RWLock()
        self._generators: dict[LocaleCode, TemplateEngineGenerator] = {
            normalize_locale(locale): generator for locale, generator in (generators or {}).items()
        }

    @property
    def language_generators(self) -> Mapping[LocaleCode, TemplateEngineGenerator]:
        """Read-only snapshot of the current bindings."""
        with self._lock.read():
            return MappingProxyType(dict(self._generators))

    def set_generator(self, locale: str, generator: TemplateEngineGenerator) -> None:
        """Bind (or rebind) a generator for one locale."""
        key = normalize_locale(locale)
        with self._lock.write():
            self._generators[key] = generator
        logger.debug("Bound generator for locale %r: %r", key, generator)

    def remove_generator(self, locale: str) -> TemplateEngineGenerator | None:
        """Unbind a locale; returns the removed generator, if any."""
        key = normalize_locale(locale)
        with self._lock.write():
            return self._generators.pop(key, None)

    def replace_generators(
        self, generators: Mapping[LocaleCode, TemplateEngineGenerator]
    ) -> None:
        """Atomically swap the whole binding table."""
        replacement = {normalize_locale(locale): gen for locale, gen in generators.items()}
        with self._lock.write():
            self._generators = replacement

    def select(self, locale: str | None = "") -> TemplateEngineGenerator:
        """Pick the generator for a locale along its fallback chain.

        Raises:
            NoGeneratorForLocaleError: If no locale of the chain is bound
        """
        with self._lock.read():
            chain = resolve_fallback_chain(locale, self._generators)
            for candidate in chain:
                generator = self._generators.get(candidate)
                if generator is not None:
                    logger.debug("Locale %r served by %r", locale, candidate)
                    return generator
            available = tuple(self._generators)

        raise NoGeneratorForLocaleError(
            ErrorTemplate.no_generator_for_locale(locale or "", available),
            locale=locale or "",
        )

    def generate(self, template_ref: str, data: object = None, locale: str | None = "") -> str:
        """Render inline template text with the best generator for ``locale``.

        Raises:
            NoGeneratorForLocaleError: If no locale of the chain is bound
            LGError: Errors of the selected generator, unchanged
        """
        return self.select(locale).generate(template_ref, data)
