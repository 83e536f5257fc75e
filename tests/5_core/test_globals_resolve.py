# tests/5_core/test_globals_resolve.py
"""Tests for the document-level defaults."""

import pytest

import taskconf.config.globals_resolve as mod_globals_resolve
from taskconf.config.config_model import FrozenConfigError
from taskconf.config.config_types import Platform, ShowOutput
from taskconf.validation import ValidationState
from tests.utils import RecordingSink, make_context


def test_resolve_globals_fills_defaults_and_freezes() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    result = mod_globals_resolve.resolve_globals({}, ctx)

    # --- verify ---
    assert result.command is None
    assert result.show_output is ShowOutput.ALWAYS
    assert result.suppress_task_name is False
    assert result.prompt_on_close is True
    assert result.is_frozen
    with pytest.raises(FrozenConfigError):
        result.prompt_on_close = False


def test_resolve_globals_platform_overlay_wins() -> None:
    # --- setup ---
    document = {
        "showOutput": "never",
        "suppressTaskName": True,
        "osx": {"showOutput": "silent", "promptOnClose": False},
    }

    # --- execute ---
    on_mac = mod_globals_resolve.resolve_globals(
        document, make_context(platform=Platform.MAC)
    )
    on_linux = mod_globals_resolve.resolve_globals(
        document, make_context(platform=Platform.LINUX)
    )

    # --- verify ---
    assert on_mac.show_output is ShowOutput.SILENT
    assert on_mac.prompt_on_close is False
    assert on_mac.suppress_task_name is True
    assert on_linux.show_output is ShowOutput.NEVER
    assert on_linux.prompt_on_close is True


def test_resolve_globals_attaches_frozen_command() -> None:
    # --- setup ---
    document = {"command": "make", "args": ["-s"], "windows": {"command": "nmake"}}
    ctx = make_context(platform=Platform.WINDOWS)

    # --- execute ---
    result = mod_globals_resolve.resolve_globals(document, ctx)

    # --- verify ---
    assert result.command is not None
    assert result.command.name == "nmake"
    assert result.command.args == ("-s",)
    assert result.command.is_frozen


def test_resolve_globals_bad_args_is_fatal() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    mod_globals_resolve.resolve_globals({"command": "make", "args": [1, 2]}, ctx)

    # --- verify ---
    assert ctx.status.is_fatal()


@pytest.mark.parametrize(
    ("value", "expected"),
    [("always", ShowOutput.ALWAYS), ("Silent", ShowOutput.SILENT), (" never ", ShowOutput.NEVER)],
)
def test_resolve_show_output_known_values(value: str, expected: ShowOutput) -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    result = mod_globals_resolve.resolve_show_output(value, "in task 't'", ctx)

    # --- verify ---
    assert result is expected
    assert ctx.status.is_ok()


@pytest.mark.parametrize("value", ["sometimes", 3])
def test_resolve_show_output_unknown_warns(value: object) -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(sink=sink)

    # --- execute ---
    result = mod_globals_resolve.resolve_show_output(value, "in task 't'", ctx)

    # --- verify ---
    assert result is None
    assert ctx.status.state is ValidationState.WARNING
    assert "in task 't'" in sink.text()


def test_resolve_flag_coerces_with_warning() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    absent = mod_globals_resolve.resolve_flag({}, "promptOnClose", "here", ctx)
    exact = mod_globals_resolve.resolve_flag(
        {"promptOnClose": False}, "promptOnClose", "here", ctx
    )
    ok_state = ctx.status.state
    coerced = mod_globals_resolve.resolve_flag(
        {"promptOnClose": "no"}, "promptOnClose", "here", ctx
    )

    # --- verify ---
    assert absent is None
    assert exact is False
    assert ok_state is ValidationState.OK
    assert coerced is True
    assert ctx.status.state is ValidationState.WARNING
