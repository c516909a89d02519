"""Decision callbacks run by hook processes."""

from hookadapter.callbacks.code_review import (
    CodeReviewHook,
    CommandReviewer,
    Reviewer,
    ReviewResult,
)
from hookadapter.callbacks.design_patterns import (
    DesignPattern,
    DesignPatternHook,
    PatternSource,
    SuffixPatternSource,
)
from hookadapter.callbacks.phantom_code import PhantomCodeCheckHook
from hookadapter.callbacks.registry import build_default_registry

__all__ = [
    "CodeReviewHook",
    "CommandReviewer",
    "DesignPattern",
    "DesignPatternHook",
    "PatternSource",
    "PhantomCodeCheckHook",
    "ReviewResult",
    "Reviewer",
    "SuffixPatternSource",
    "build_default_registry",
]
