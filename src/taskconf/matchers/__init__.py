# src/taskconf/matchers/__init__.py
"""Problem matcher declarations and the built-in registry."""

from .problem_matcher import (
    ApplyTo,
    FileLocationKind,
    ProblemMatcher,
    ProblemMatcherParser,
    ProblemPattern,
    Severity,
    WatchingMatcher,
    WatchingPattern,
)
from .registry import (
    BUILTIN_MATCHERS,
    ProblemMatcherRegistry,
    builtin_registry,
    load_builtins,
)


__all__ = [
    # problem_matcher
    "ApplyTo",
    "FileLocationKind",
    "ProblemMatcher",
    "ProblemMatcherParser",
    "ProblemPattern",
    "Severity",
    "WatchingMatcher",
    "WatchingPattern",
    # registry
    "BUILTIN_MATCHERS",
    "ProblemMatcherRegistry",
    "load_builtins",
    "builtin_registry",
]
