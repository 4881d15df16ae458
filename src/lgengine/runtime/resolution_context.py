"""Per-call evaluation state.

EvaluationScope is what a generator fixes at construction (its resource,
fallback chain, bucket and parsed resources). ResolutionContext is created per generate
call and tracks the templates being rendered for cycle detection and
nesting depth.

Thread Safety:
    ResolutionContext is created per call for full isolation;
    EvaluationScope is immutable and shared.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType

from lgengine.constants import MAX_DEPTH
from lgengine.core.depth_guard import DepthGuard
from lgengine.diagnostics import CircularTemplateReferenceError, ErrorTemplate
from lgengine.localization.bucketing import LocaleBucket
from lgengine.localization.resource import Resource
from lgengine.localization.types import LocaleCode, ResourceId
from lgengine.syntax import LGFile

__all__ = ["EvaluationScope", "ResolutionContext", "template_key"]


def template_key(resource_id: str, template_name: str) -> str:
    """Cycle-detection key of a template (``"a.lg#greeting"``)."""
    return f"{resource_id}#{template_name}"


@dataclass(frozen=True, slots=True)
class EvaluationScope:
    """Where template names and imports are resolved.

    Attributes:
        resource: Root resource (None for a resource-less generator)
        fallback_chain: Locales tried for imports, most specific first
        bucket: Locale bucket snapshot used to resolve imports
        parsed: Resources parsed at construction, by id; consulted before
            the shared parse cache
    """

    resource: Resource | None
    fallback_chain: tuple[LocaleCode, ...]
    bucket: LocaleBucket
    parsed: Mapping[ResourceId, LGFile] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(slots=True)
class ResolutionContext:
    """Explicit context for one generate call.

    Uses both a list (ordered path for error messages) and a set (O(1)
    membership) for cycle detection.

    Attributes:
        stack: Template keys currently being rendered, outermost first
        max_depth: Maximum nesting of template invocations
    """

    stack: list[str] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set)
    max_depth: int = MAX_DEPTH
    _guard: DepthGuard = field(init=False)

    def __post_init__(self) -> None:
        self._guard = DepthGuard(max_depth=self.max_depth)

    def push(self, key: str) -> None:
        """Push template key onto the resolution stack."""
        self.stack.append(key)
        self._seen.add(key)

    def pop(self) -> str:
        """Pop template key from the resolution stack."""
        key = self.stack.pop()
        self._seen.discard(key)
        return key

    def contains(self, key: str) -> bool:
        """Check whether a template is already being rendered."""
        return key in self._seen

    def get_cycle_path(self, key: str) -> tuple[str, ...]:
        """Cycle path for error reporting, from the first occurrence of key."""
        start = self.stack.index(key) if key in self._seen else 0
        return (*self.stack[start:], key)

    @property
    def depth(self) -> int:
        """Current template nesting depth."""
        return len(self.stack)

    @contextmanager
    def entering(self, key: str) -> Iterator[None]:
        """Render one template level.

        Raises:
            CircularTemplateReferenceError: If key is already on the stack
            DepthLimitExceededError: If nesting exceeds max_depth
        """
        if self.contains(key):
            cycle_path = self.get_cycle_path(key)
            raise CircularTemplateReferenceError(
                ErrorTemplate.circular_reference(cycle_path), cycle_path=cycle_path
            )
        with self._guard:
            self.push(key)
            try:
                yield
            finally:
                self.pop()
