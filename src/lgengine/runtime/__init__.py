"""Template evaluation runtime: evaluator, generators and manager.

Python 3.13+.
"""

from .cache import ParsedResourceCache
from .config import GeneratorConfig, VariationSelector
from .evaluator import TemplateEvaluator
from .generator import TemplateEngineGenerator
from .manager import LanguageGeneratorManager
from .multi_locale import MultiLanguageGenerator
from .resolution_context import EvaluationScope, ResolutionContext
from .resource_generator import ResourceMultiLanguageGenerator
from .rwlock import RWLock

__all__ = [
    "EvaluationScope",
    "GeneratorConfig",
    "LanguageGeneratorManager",
    "MultiLanguageGenerator",
    "ParsedResourceCache",
    "RWLock",
    "ResolutionContext",
    "ResourceMultiLanguageGenerator",
    "TemplateEngineGenerator",
    "TemplateEvaluator",
    "VariationSelector",
]
