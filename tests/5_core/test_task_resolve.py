# tests/5_core/test_task_resolve.py
"""Tests for resolve_task and resolve_tasks."""

from typing import Any

import taskconf.config.task_resolve as mod_task_resolve
from taskconf.config.config_model import (
    EMPTY_MATCHERS,
    CommandConfig,
    Globals,
    ParseContext,
)
from taskconf.config.config_types import ShowOutput
from taskconf.config.globals_resolve import resolve_globals
from taskconf.validation import ValidationState
from tests.utils import RecordingSink, make_context, make_task


def _globals(ctx: ParseContext, **document: Any) -> Globals:
    return resolve_globals(document, ctx)


def test_task_without_name_is_fatal_and_skipped() -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(sink=sink)

    # --- execute ---
    task = mod_task_resolve.resolve_task({"command": "make"}, _globals(ctx), ctx)

    # --- verify ---
    assert task is None
    assert ctx.status.is_fatal()
    assert "tasks must provide a taskName property" in sink.text()


def test_task_with_own_command_suppresses_name() -> None:
    # --- setup ---
    ctx = make_context()
    entry = make_task("lint", command="eslint", args=["."], suppressTaskName=False)

    # --- execute ---
    task = mod_task_resolve.resolve_task(entry, _globals(ctx, command="make"), ctx)

    # --- verify ---
    assert task is not None
    assert task.command is not None
    assert task.command.name == "eslint"
    assert task.command.args == (".",)
    assert task.args is None
    assert task.suppress_task_name is True


def test_task_without_command_uses_global_command() -> None:
    # --- setup ---
    ctx = make_context()
    globals_ = _globals(ctx, command="make", showOutput="silent")

    # --- execute ---
    task = mod_task_resolve.resolve_task(make_task("all", args=["-k"]), globals_, ctx)

    # --- verify ---
    assert task is not None
    assert task.command is globals_.command
    assert task.args == ("-k",)
    assert task.suppress_task_name is False
    assert task.show_output is ShowOutput.SILENT
    assert task.prompt_on_close is True
    assert task.is_background is False
    assert task.problem_matchers is EMPTY_MATCHERS


def test_task_echo_only_keeps_its_echo() -> None:
    # --- setup ---
    ctx = make_context()
    globals_ = _globals(ctx, command="make", echoCommand=False)

    # --- execute ---
    task = mod_task_resolve.resolve_task(
        make_task("verbose", echoCommand=True), globals_, ctx
    )

    # --- verify ---
    assert task is not None
    assert task.command is not None
    assert task.command.name == "make"
    assert task.command.echo is True
    assert globals_.command is not None
    assert globals_.command.echo is False


def test_is_watching_implies_background_and_no_prompt() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    task = mod_task_resolve.resolve_task(
        make_task("watch", isWatching=True), _globals(ctx), ctx
    )

    # --- verify ---
    assert task is not None
    assert task.is_background is True
    assert task.prompt_on_close is False
    assert ctx.status.is_ok()


def test_background_task_ignores_global_prompt_on_close() -> None:
    # --- setup ---
    ctx = make_context()
    globals_ = _globals(ctx, promptOnClose=True)

    # --- execute ---
    task = mod_task_resolve.resolve_task(
        make_task("serve", isBackground=True), globals_, ctx
    )

    # --- verify ---
    assert task is not None
    assert task.prompt_on_close is False


def test_task_level_problem_matchers() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    task = mod_task_resolve.resolve_task(
        make_task("tsc", problemMatcher=["$tsc", "$unknownName"]), _globals(ctx), ctx
    )

    # --- verify ---
    assert task is not None
    assert task.problem_matchers is not None
    assert [m.owner for m in task.problem_matchers] == ["typescript"]
    assert ctx.status.state is ValidationState.ERROR


def test_shell_command_with_args_warns_in_terminal() -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(is_terminal=True, sink=sink)
    entry = make_task("hello", command="echo", isShellCommand=True, args=["hi"])

    # --- execute ---
    task = mod_task_resolve.resolve_task(entry, _globals(ctx), ctx)

    # --- verify ---
    assert task is not None
    assert ctx.status.state is ValidationState.WARNING
    assert "merge args into the command" in sink.text()


def test_shell_command_with_args_quiet_outside_terminal() -> None:
    # --- setup ---
    ctx = make_context(is_terminal=False)
    entry = make_task("hello", command="echo", isShellCommand=True, args=["hi"])

    # --- execute ---
    mod_task_resolve.resolve_task(entry, _globals(ctx), ctx)

    # --- verify ---
    assert ctx.status.is_ok()


def test_unknown_task_key_warns_with_hint() -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(sink=sink)

    # --- execute ---
    task = mod_task_resolve.resolve_task(
        make_task("build", isBuildComand=True, linux={"comand": "make"}),
        _globals(ctx),
        ctx,
    )

    # --- verify ---
    assert task is not None
    assert ctx.status.state is ValidationState.WARNING
    assert "'isBuildComand' → 'isBuildCommand'" in sink.text()
    assert "'comand' → 'command'" in sink.text()


def test_resolve_tasks_explicit_flag_outranks_name() -> None:
    # --- setup ---
    ctx = make_context()
    entries = [make_task("build"), make_task("compile", isBuildCommand=True)]

    # --- execute ---
    result = mod_task_resolve.resolve_tasks(entries, _globals(ctx), ctx)

    # --- verify ---
    assert result is not None
    assert result.build_task is not None
    assert result.tasks[result.build_task].name == "compile"
    assert result.test_task is None


def test_resolve_tasks_first_wins_a_tie() -> None:
    # --- setup ---
    ctx = make_context()
    entries = [
        make_task("unit", isTestCommand=True),
        make_task("test"),
        make_task("e2e", isTestCommand=True),
    ]

    # --- execute ---
    result = mod_task_resolve.resolve_tasks(entries, _globals(ctx), ctx)

    # --- verify ---
    assert result is not None
    assert result.test_task is not None
    assert result.tasks[result.test_task].name == "unit"


def test_resolve_tasks_drops_fatal_entry_only() -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(sink=sink)
    entries = [
        make_task("bad", args="notanarray", isBuildCommand=True),
        {"command": "nameless"},
        make_task("good"),
    ]

    # --- execute ---
    result = mod_task_resolve.resolve_tasks(entries, _globals(ctx), ctx)

    # --- verify ---
    assert result is not None
    assert [t.name for t in result.tasks.values()] == ["good"]
    assert result.build_task is None
    assert ctx.status.is_fatal()
    assert len(ctx.status.fatals) == 2  # noqa: PLR2004


def test_resolve_tasks_all_dropped_is_none() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    result = mod_task_resolve.resolve_tasks([{}], _globals(ctx), ctx)

    # --- verify ---
    assert result is None


def test_resolve_tasks_non_list_is_error() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    result = mod_task_resolve.resolve_tasks(
        make_task("build"), _globals(ctx), ctx, where=" in `linux`"
    )

    # --- verify ---
    assert result is None
    assert ctx.status.state is ValidationState.ERROR
    assert "`tasks` in `linux` must be a list" in ctx.status.errors[0]


def test_merge_globals_keeps_task_values() -> None:
    # --- setup ---
    ctx = make_context()
    globals_ = _globals(ctx, command="make", showOutput="never")
    task = mod_task_resolve.ResolvedTask(
        id="t",
        name="own",
        command=CommandConfig(name="ninja"),
        show_output=ShowOutput.SILENT,
    )

    # --- execute ---
    mod_task_resolve.merge_globals(task, globals_)

    # --- verify ---
    assert task.command == CommandConfig(name="ninja")
    assert task.show_output is ShowOutput.SILENT
    assert task.prompt_on_close is True
