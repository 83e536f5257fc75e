# src/taskconf/__init__.py

"""Taskconf: resolve task runner configuration documents.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use, custom integrations, or plugins.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - parse()             → Resolve a document into a ResolvedConfiguration
    - load_config()       → Read tasks.json (comments and trailing commas allowed)
    - find_config()       → Locate tasks.json from a directory upwards
    - main()              → CLI entrypoint
"""

from .cli import main
from .config import (
    EMPTY_ARGS,
    EMPTY_MATCHERS,
    CommandConfig,
    CommandOptions,
    FrozenConfigError,
    Globals,
    ParseResult,
    Platform,
    ResolvedConfiguration,
    ResolvedTask,
    ShellConfig,
    ShowOutput,
    configuration_to_dict,
    find_config,
    load_config,
    parse,
    task_to_dict,
)
from .constants import (
    DEFAULT_CONFIG_NAMES,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    TERMINAL_RUNNER,
    WORKSPACE_ROOT_PLACEHOLDER,
)
from .logs import getAppLogger
from .matchers import (
    ProblemMatcher,
    ProblemMatcherParser,
    ProblemMatcherRegistry,
    ProblemPattern,
    builtin_registry,
    builtin_registry as registry,
)
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_ENV,
    PROGRAM_PACKAGE,
    PROGRAM_SCRIPT,
    VERSION,
    Metadata,
)
from .utils_system import detect_platform
from .validation import ValidationState, ValidationStatus


__version__ = VERSION

__all__ = [  # noqa: RUF022
    # cli
    "main",
    # config
    "EMPTY_ARGS",
    "EMPTY_MATCHERS",
    "CommandConfig",
    "CommandOptions",
    "FrozenConfigError",
    "Globals",
    "ParseResult",
    "Platform",
    "ResolvedConfiguration",
    "ResolvedTask",
    "ShellConfig",
    "ShowOutput",
    "configuration_to_dict",
    "find_config",
    "load_config",
    "parse",
    "task_to_dict",
    # constants
    "DEFAULT_CONFIG_NAMES",
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_LOG_LEVEL",
    "TERMINAL_RUNNER",
    "WORKSPACE_ROOT_PLACEHOLDER",
    # logs
    "getAppLogger",
    # matchers
    "ProblemMatcher",
    "ProblemMatcherParser",
    "ProblemMatcherRegistry",
    "ProblemPattern",
    "builtin_registry",
    "registry",
    # meta
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    "PROGRAM_SCRIPT",
    "VERSION",
    "Metadata",
    # utils_system
    "detect_platform",
    # validation
    "ValidationState",
    "ValidationStatus",
]
