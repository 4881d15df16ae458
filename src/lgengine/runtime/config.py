"""Generator configuration.

One frozen dataclass groups the tunables shared by every generator a
manager builds.

Python 3.13+.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from lgengine.constants import DEFAULT_PARSE_CACHE_SIZE, MAX_DEPTH, MAX_SOURCE_SIZE
from lgengine.expressions import DefaultExpressionEvaluator, ExpressionEvaluator
from lgengine.syntax import Variation

__all__ = ["GeneratorConfig", "VariationSelector"]

type VariationSelector = Callable[[Sequence[Variation]], Variation]
"""Picks the variation to render from a template with several."""


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Immutable generator configuration.

    ``GeneratorConfig()`` with no arguments is a usable configuration.

    Attributes:
        max_depth: Maximum template nesting per generate call (default: 64)
        max_source_size: Maximum resource size in characters (default: 10 MB)
        parse_cache_size: Parsed resources kept by a manager (default: 1000)
        variation_selector: Chooses among variations (default: random.choice)
        expression_evaluator: Evaluates ``${...}`` (default: built-in language)

    Example:
        >>> config = GeneratorConfig(variation_selector=lambda variations: variations[0])
        >>> config.max_depth
        64
    """

    max_depth: int = MAX_DEPTH
    max_source_size: int = MAX_SOURCE_SIZE
    parse_cache_size: int = DEFAULT_PARSE_CACHE_SIZE
    variation_selector: VariationSelector = random.choice
    expression_evaluator: ExpressionEvaluator = field(
        default_factory=DefaultExpressionEvaluator
    )

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If max_depth or parse_cache_size is not positive,
                or max_source_size is negative
        """
        if self.max_depth <= 0:
            msg = "max_depth must be positive"
            raise ValueError(msg)
        if self.parse_cache_size <= 0:
            msg = "parse_cache_size must be positive"
            raise ValueError(msg)
        if self.max_source_size < 0:
            msg = "max_source_size must be non-negative (0 disables the limit)"
            raise ValueError(msg)
