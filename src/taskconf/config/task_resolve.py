# src/taskconf/config/task_resolve.py
"""Per-task resolution and the name-keyed merge of task lists."""

import json
from dataclasses import dataclass, replace
from typing import Any

from taskconf.constants import BUILD_TASK_NAME, TEST_TASK_NAME
from taskconf.logs import getAppLogger
from taskconf.utils_types import cast_hint, is_string_list, schema_from_typeddict
from taskconf.validation import (
    ValidationState,
    ValidationStatus,
    collect_msg,
    warn_unknown_keys,
)

from .command_resolve import fill_command_defaults, merge_command, resolve_command
from .config_migrate import apply_migrations
from .config_model import (
    EMPTY_ARGS,
    EMPTY_MATCHERS,
    CommandConfig,
    Globals,
    ParseContext,
    ResolvedTask,
    TaskSet,
)
from .config_types import PLATFORM_KEYS, PlatformCommand, ShowOutput, TaskEntry
from .globals_resolve import resolve_flag, resolve_show_output
from .matcher_resolve import resolve_matchers


_TASK_KEYS: list[str] = list(schema_from_typeddict(TaskEntry))
_PLATFORM_COMMAND_KEYS: list[str] = list(schema_from_typeddict(PlatformCommand))

# exactness of a build/test designation
_SCORE_EXPLICIT = 2
_SCORE_NAME = 1


@dataclass
class _Candidate:
    """Best build (or test) task seen so far."""

    id: str | None = None
    score: int = 0

    def offer(self, task_id: str, score: int) -> None:
        # strictly higher only: the first task wins a tie
        if score > self.score:
            self.id = task_id
            self.score = score


def _score(raw: dict[str, Any], flag: str, conventional_name: str) -> int:
    if raw.get(flag):
        return _SCORE_EXPLICIT
    if raw.get("taskName") == conventional_name:
        return _SCORE_NAME
    return 0


# --------------------------------------------------------------------------- #
# globals and defaults
# --------------------------------------------------------------------------- #


def merge_globals(task: ResolvedTask, globals_: Globals) -> None:
    """Fill unset task fields from the document-level defaults."""
    global_command = globals_.command
    has_global_command = global_command is not None and not global_command.is_empty()

    if (task.command is None or task.command.is_empty()) and has_global_command:
        task.command = global_command

    if task.command is not None and task.command.is_echo_only():
        # the task's own echo survives the merge
        echo = task.command.echo
        merged = merge_command(task.command, global_command)
        if merged is not None:
            if merged.is_frozen:
                merged = replace(merged)
            merged.echo = echo
        task.command = merged

    # background tasks infer promptOnClose from isBackground instead
    if (
        task.prompt_on_close is None
        and task.is_background is None
        and globals_.prompt_on_close is not None
    ):
        task.prompt_on_close = globals_.prompt_on_close
    if task.suppress_task_name is None and globals_.suppress_task_name is not None:
        task.suppress_task_name = globals_.suppress_task_name
    if task.show_output is None and globals_.show_output is not None:
        task.show_output = globals_.show_output


def fill_task_defaults(task: ResolvedTask) -> None:
    fill_command_defaults(task.command)
    if task.args is None and task.command is None:
        task.args = EMPTY_ARGS
    if task.suppress_task_name is None:
        task.suppress_task_name = False
    if task.prompt_on_close is None:
        task.prompt_on_close = (
            not task.is_background if task.is_background is not None else True
        )
    if task.is_background is None:
        task.is_background = False
    if task.show_output is None:
        task.show_output = ShowOutput.ALWAYS
    if task.problem_matchers is None:
        task.problem_matchers = EMPTY_MATCHERS


# --------------------------------------------------------------------------- #
# one task
# --------------------------------------------------------------------------- #


def _check_unknown_keys(entry: dict[str, Any], name: str, ctx: ParseContext) -> None:
    warn_unknown_keys(entry, _TASK_KEYS, f"in task {name!r}", ctx=ctx)
    for key in PLATFORM_KEYS:
        overlay = entry.get(key)
        if isinstance(overlay, dict):
            warn_unknown_keys(
                cast_hint(dict[str, Any], overlay),
                _PLATFORM_COMMAND_KEYS,
                f"in `{key}` of task {name!r}",
                ctx=ctx,
            )


def resolve_task(
    entry: Any,
    globals_: Globals,
    ctx: ParseContext,
) -> ResolvedTask | None:
    """Resolve one raw task entry, globals merged and defaults filled.

    Returns None when the entry has no usable `taskName`. Other problems are
    reported through `ctx`; the caller decides whether a Fatal one drops the
    task.
    """
    task_name = entry.get("taskName") if isinstance(entry, dict) else None
    if not isinstance(task_name, str) or not task_name:
        collect_msg(
            "tasks must provide a taskName property. The task will be ignored.\n"
            + json.dumps(entry, indent=4, default=repr),
            severity=ValidationState.FATAL,
            ctx=ctx,
        )
        return None

    entry = cast_hint(dict[str, Any], entry)
    _check_unknown_keys(entry, task_name, ctx)
    raw = apply_migrations(entry)
    where = f"in task {task_name!r}"

    matchers = resolve_matchers(raw.get("problemMatcher"), ctx)

    has_command = "command" in raw
    command: CommandConfig | None = None
    if has_command:
        command = resolve_command(raw, ctx)
    elif "echoCommand" in raw:
        command = CommandConfig(echo=bool(raw["echoCommand"]))

    task = ResolvedTask(id=ctx.id_factory(), name=task_name, command=command)

    # without its own command, args are extra arguments for the global one
    if not has_command and "args" in raw:
        if is_string_list(raw["args"]):
            task.args = tuple(raw["args"])
        else:
            collect_msg(
                f"command arguments {where} must be an array of strings."
                f" Provided value is:\n{raw['args']!r}",
                severity=ValidationState.FATAL,
                ctx=ctx,
            )

    task.is_background = resolve_flag(raw, "isBackground", where, ctx)
    task.prompt_on_close = resolve_flag(raw, "promptOnClose", where, ctx)
    task.show_output = resolve_show_output(raw.get("showOutput"), where, ctx)
    if has_command:
        # a task with its own command doesn't pass its name as an argument
        task.suppress_task_name = True
    else:
        task.suppress_task_name = resolve_flag(raw, "suppressTaskName", where, ctx)
    if matchers:
        task.problem_matchers = tuple(matchers)

    merge_globals(task, globals_)
    fill_task_defaults(task)

    if (
        ctx.is_terminal
        and task.command is not None
        and task.command.is_shell
        and task.command.args
    ):
        collect_msg(
            f"The task {task_name!r} is a shell command and specifies arguments."
            " To ensure correct command line quoting please merge args"
            " into the command.",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
    return task


# --------------------------------------------------------------------------- #
# task lists
# --------------------------------------------------------------------------- #


def resolve_tasks(
    entries: Any,
    globals_: Globals,
    ctx: ParseContext,
    *,
    where: str = "",
) -> TaskSet | None:
    """Resolve a task list into a `TaskSet`.

    Each entry is resolved against its own status; an entry that reaches
    Fatal is left out, but its diagnostics still reach `ctx.status`.
    A name listed twice keeps its first position and its last definition.
    Returns None when no task survives.
    """
    logger = getAppLogger()
    if entries is None:
        return None
    if not isinstance(entries, list):
        collect_msg(
            f"`tasks`{where} must be a list of task entries. Ignoring value {entries!r}",
            severity=ValidationState.ERROR,
            ctx=ctx,
        )
        return None

    by_name: dict[str, tuple[ResolvedTask, dict[str, Any]]] = {}
    for entry in cast_hint(list[Any], entries):
        entry_ctx = replace(ctx, status=ValidationStatus())
        task = resolve_task(entry, globals_, entry_ctx)
        ctx.status.absorb(entry_ctx.status)
        if task is None:
            continue
        if entry_ctx.status.is_fatal():
            logger.debug(f"Skipping task {task.name!r}: entry is invalid")
            continue
        if task.name in by_name:
            logger.debug(
                f"Task {task.name!r} is defined again{where}; keeping the last one"
            )
        by_name[task.name] = (task, cast_hint(dict[str, Any], entry))

    result = TaskSet()
    build, test = _Candidate(), _Candidate()
    for task, raw in by_name.values():
        result.tasks[task.id] = task
        build.offer(task.id, _score(raw, "isBuildCommand", BUILD_TASK_NAME))
        test.offer(task.id, _score(raw, "isTestCommand", TEST_TASK_NAME))
        logger.trace(f"[resolve_tasks] {task.name!r} → {task.id}")

    result.build_task = build.id
    result.test_task = test.id
    return None if result.is_empty() else result


def merge_task_sets(target: TaskSet | None, source: TaskSet | None) -> TaskSet | None:
    """Merge `source` over `target` by task name.

    A source task replaces every target task of the same name, keeping the
    source id. Build/test designations come from the target when set.
    """
    if source is None or source.is_empty():
        return target
    if target is None or target.is_empty():
        return source

    logger = getAppLogger()
    target_ids: dict[str, list[str]] = {}
    for task_id, task in target.tasks.items():
        target_ids.setdefault(task.name, []).append(task_id)
    source_names = {task.name: task_id for task_id, task in source.tasks.items()}

    replaced: dict[str, str] = {}
    for name, source_id in source_names.items():
        for target_id in target_ids.get(name, ()):
            logger.trace(f"[merge_task_sets] {name!r}: {target_id} → {source_id}")
            del target.tasks[target_id]
            replaced[target_id] = source_id
        target.tasks[source_id] = source.tasks[source_id]

    if target.build_task is None:
        target.build_task = source.build_task
    else:
        target.build_task = replaced.get(target.build_task, target.build_task)
    if target.test_task is None:
        target.test_task = source.test_task
    else:
        target.test_task = replaced.get(target.test_task, target.test_task)
    return target
