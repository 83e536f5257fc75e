# src/taskconf/config/__init__.py

"""Task configuration resolution for taskconf.

This package loads a task runner document, resolves its global, platform
and per-task layers, and produces a frozen `ResolvedConfiguration`.
"""

from .command_resolve import (
    fill_command_defaults,
    fill_options_defaults,
    merge_command,
    merge_options,
    merge_shell,
    resolve_command,
    resolve_options,
    resolve_shell,
)
from .config_loader import find_config, load_config
from .config_migrate import MIGRATIONS, apply_migrations
from .config_model import (
    EMPTY_ARGS,
    EMPTY_MATCHERS,
    CommandConfig,
    CommandOptions,
    FrozenConfigError,
    Globals,
    ParseContext,
    ResolvedConfiguration,
    ResolvedTask,
    ShellConfig,
    TaskSet,
    configuration_to_dict,
    task_to_dict,
)
from .config_parse import ParseResult, parse
from .config_types import (
    PLATFORM_KEYS,
    CommandOptionsConfig,
    MatcherSpecKind,
    Platform,
    PlatformCommand,
    PlatformDocument,
    ShellConfigConfig,
    ShowOutput,
    TaskEntry,
    TaskRunnerDocument,
)
from .globals_resolve import resolve_globals
from .matcher_resolve import (
    classify_matcher_spec,
    resolve_matchers,
    resolve_named_matchers,
)
from .task_resolve import (
    fill_task_defaults,
    merge_globals,
    merge_task_sets,
    resolve_task,
    resolve_tasks,
)


__all__ = [  # noqa: RUF022
    # command_resolve
    "fill_command_defaults",
    "fill_options_defaults",
    "merge_command",
    "merge_options",
    "merge_shell",
    "resolve_command",
    "resolve_options",
    "resolve_shell",
    # config_loader
    "find_config",
    "load_config",
    # config_migrate
    "MIGRATIONS",
    "apply_migrations",
    # config_model
    "EMPTY_ARGS",
    "EMPTY_MATCHERS",
    "CommandConfig",
    "CommandOptions",
    "FrozenConfigError",
    "Globals",
    "ParseContext",
    "ResolvedConfiguration",
    "ResolvedTask",
    "ShellConfig",
    "TaskSet",
    "configuration_to_dict",
    "task_to_dict",
    # config_parse
    "ParseResult",
    "parse",
    # config_types
    "PLATFORM_KEYS",
    "CommandOptionsConfig",
    "MatcherSpecKind",
    "Platform",
    "PlatformCommand",
    "PlatformDocument",
    "ShellConfigConfig",
    "ShowOutput",
    "TaskEntry",
    "TaskRunnerDocument",
    # globals_resolve
    "resolve_globals",
    # matcher_resolve
    "classify_matcher_spec",
    "resolve_matchers",
    "resolve_named_matchers",
    # task_resolve
    "fill_task_defaults",
    "merge_globals",
    "merge_task_sets",
    "resolve_task",
    "resolve_tasks",
]
