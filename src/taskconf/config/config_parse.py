# src/taskconf/config/config_parse.py
"""Top-level entry point: raw document → `ResolvedConfiguration`."""

from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from taskconf.constants import TERMINAL_RUNNER
from taskconf.logs import getAppLogger
from taskconf.matchers.registry import ProblemMatcherRegistry, builtin_registry
from taskconf.utils_system import detect_platform
from taskconf.utils_types import cast_hint, schema_from_typeddict
from taskconf.validation import (
    AppLogSink,
    DiagnosticSink,
    ValidationState,
    ValidationStatus,
    collect_msg,
    warn_unknown_keys,
)

from .config_model import (
    EMPTY_MATCHERS,
    Globals,
    ParseContext,
    ResolvedConfiguration,
    ResolvedTask,
    TaskSet,
    new_task_id,
)
from .config_types import PLATFORM_KEYS, Platform, PlatformDocument, TaskRunnerDocument
from .globals_resolve import resolve_flag, resolve_globals
from .matcher_resolve import resolve_matchers, resolve_named_matchers
from .task_resolve import (
    fill_task_defaults,
    merge_globals,
    merge_task_sets,
    resolve_tasks,
)


_DOCUMENT_KEYS: list[str] = list(schema_from_typeddict(TaskRunnerDocument))
_PLATFORM_DOCUMENT_KEYS: list[str] = list(schema_from_typeddict(PlatformDocument))


@dataclass
class ParseResult:
    validation_status: ValidationStatus
    configuration: ResolvedConfiguration | None


def _check_unknown_keys(document: dict[str, Any], ctx: ParseContext) -> None:
    warn_unknown_keys(document, _DOCUMENT_KEYS, "at the top level", ctx=ctx)
    for key in PLATFORM_KEYS:
        overlay = document.get(key)
        if isinstance(overlay, dict):
            warn_unknown_keys(
                cast_hint(dict[str, Any], overlay),
                _PLATFORM_DOCUMENT_KEYS,
                f"in `{key}`",
                ctx=ctx,
            )


def _synthesize_task(
    document: dict[str, Any],
    globals_: Globals,
    ctx: ParseContext,
) -> TaskSet:
    """Build the single implicit task a command-only document describes."""
    tasks = TaskSet()
    command = globals_.command
    if command is None or not command.name:
        return tasks

    matchers = resolve_matchers(document.get("problemMatcher"), ctx)
    # only a truthy flag counts here; false falls through to the default
    is_background: bool | None = None
    for key in ("isBackground", "isWatching"):
        if document.get(key):
            is_background = resolve_flag(document, key, "at the top level", ctx)
            break

    task = ResolvedTask(
        id=ctx.id_factory(),
        name=command.name,
        is_background=is_background,
        suppress_task_name=True,
        problem_matchers=tuple(matchers) if matchers else EMPTY_MATCHERS,
    )
    merge_globals(task, globals_)
    fill_task_defaults(task)
    tasks.tasks[task.id] = task
    tasks.build_task = task.id
    getAppLogger().trace(f"[parse] synthesized task {task.name!r} → {task.id}")
    return tasks


def _resolve_configuration(
    document: dict[str, Any],
    ctx: ParseContext,
) -> ResolvedConfiguration | None:
    logger = getAppLogger()
    _check_unknown_keys(document, ctx)

    globals_ = resolve_globals(document, ctx)
    if ctx.status.is_fatal():
        logger.debug("Global configuration is invalid; no tasks resolved")
        return None

    ctx.named_matchers = resolve_named_matchers(document.get("declares"), ctx)

    platform_tasks: TaskSet | None = None
    overlay = document.get(ctx.platform.key)
    if isinstance(overlay, dict):
        platform_tasks = resolve_tasks(
            overlay.get("tasks"), globals_, ctx, where=f" in `{ctx.platform.key}`"
        )
    base_tasks = resolve_tasks(document.get("tasks"), globals_, ctx)
    merged = merge_task_sets(base_tasks, platform_tasks)

    if merged is None or merged.is_empty():
        merged = _synthesize_task(document, globals_, ctx)

    for task in merged.tasks.values():
        task.freeze()

    logger.trace(
        f"[parse] {len(merged.tasks)} task(s)"
        f" build={merged.build_task} test={merged.test_task}"
    )
    return ResolvedConfiguration(
        tasks=MappingProxyType(dict(merged.tasks)),
        build_tasks=(merged.build_task,) if merged.build_task else (),
        test_tasks=(merged.test_task,) if merged.test_task else (),
    )


def parse(  # noqa: PLR0913
    document: Any,
    logger: DiagnosticSink | None = None,
    *,
    platform: Platform | str | None = None,
    terminal: bool | None = None,
    registry: ProblemMatcherRegistry | None = None,
    id_factory: Callable[[], str] | None = None,
) -> ParseResult:
    """Resolve a task runner document.

    Args:
        document: The raw document, usually straight from `load_config()`.
        logger: Receives one human-readable line per diagnostic. Defaults to
            the app logger.
        platform: Which platform overlay applies. Defaults to the running
            platform.
        terminal: Whether tasks run in a terminal. Defaults to
            `document["_runner"] == "terminal"`.
        registry: Named matchers `$name` references resolve against first.
            Defaults to the built-in registry.
        id_factory: Generates task ids. Defaults to random UUID strings.

    Returns:
        A `ParseResult`. Its configuration is None when the document is not
        an object or the global configuration is Fatal.
    """
    status = ValidationStatus()
    sink = logger if logger is not None else AppLogSink()

    if platform is None:
        platform = detect_platform()
    if isinstance(platform, str):
        platform = Platform(platform)

    if terminal is None:
        terminal = (
            isinstance(document, dict)
            and document.get("_runner") == TERMINAL_RUNNER
        )

    ctx = ParseContext(
        logger=sink,
        status=status,
        platform=platform,
        is_terminal=terminal,
        registry=registry if registry is not None else builtin_registry,
        id_factory=id_factory or new_task_id,
    )
    getAppLogger().trace(
        f"[parse] platform={platform.key} terminal={terminal}"
    )

    if not isinstance(document, dict):
        collect_msg(
            "the task configuration must be an object,"
            f" got {type(document).__name__}",
            severity=ValidationState.FATAL,
            ctx=ctx,
        )
        return ParseResult(validation_status=status, configuration=None)

    configuration = _resolve_configuration(cast_hint(dict[str, Any], document), ctx)
    return ParseResult(validation_status=status, configuration=configuration)
