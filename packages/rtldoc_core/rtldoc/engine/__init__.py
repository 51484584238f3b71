"""
Transform stages applied to an opened template copy.

- :mod:`.placeholder_engine` - token substitution
- :mod:`.run_normalizer` - merging of equally formatted adjacent runs
- :mod:`.directionality` - right-to-left paragraph and run formatting
"""

from .directionality import DirectionalityEnforcer, EnforcementResult, enforce_rtl
from .placeholder_engine import (
    PlaceholderEngine,
    PlaceholderInfo,
    PlaceholderSyntax,
    extract_placeholders,
    substitute,
)
from .run_normalizer import MergePolicy, NormalizationStats, RunNormalizer, normalize

__all__ = [
    "DirectionalityEnforcer",
    "EnforcementResult",
    "enforce_rtl",
    "PlaceholderEngine",
    "PlaceholderInfo",
    "PlaceholderSyntax",
    "extract_placeholders",
    "substitute",
    "MergePolicy",
    "NormalizationStats",
    "RunNormalizer",
    "normalize",
]
