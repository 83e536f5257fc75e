# src/taskconf/config/command_resolve.py
"""Resolve, merge and default the command layers.

`CommandOptions`, `ShellConfig` and `CommandConfig` each go through the same
four steps: resolve one raw layer, merge an overlay on top, fill defaults,
freeze. Merges never touch a frozen value in place; they work on a copy.
"""

import json
from dataclasses import replace
from typing import Any, TypeVar

from taskconf.constants import WORKSPACE_ROOT_PLACEHOLDER
from taskconf.logs import getAppLogger
from taskconf.utils_types import cast_hint, is_string_list, schema_from_typeddict
from taskconf.validation import (
    DiagnosticContext,
    ValidationState,
    collect_msg,
    warn_unknown_keys,
)

from .config_model import (
    EMPTY_ARGS,
    CommandConfig,
    CommandOptions,
    ParseContext,
    ShellConfig,
)
from .config_types import CommandOptionsConfig


_OPTIONS_KEYS: list[str] = list(schema_from_typeddict(CommandOptionsConfig))

_F = TypeVar("_F", CommandOptions, ShellConfig, CommandConfig)


def _thaw(value: _F) -> _F:
    """Return `value`, or an unfrozen copy of it if it is frozen."""
    return replace(value) if value.is_frozen else value


def _dump(value: Any) -> str:
    try:
        return json.dumps(value, indent=4)
    except (TypeError, ValueError):
        return repr(value)


# --------------------------------------------------------------------------- #
# options
# --------------------------------------------------------------------------- #


def resolve_options(raw: Any, ctx: DiagnosticContext) -> CommandOptions | None:
    """Resolve an `options` object; None when nothing usable is set."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        collect_msg(
            f"`options` must be an object. Ignoring value {raw!r}",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
        return None
    options = cast_hint(dict[str, Any], raw)
    warn_unknown_keys(options, _OPTIONS_KEYS, "in `options`", ctx=ctx)

    result = CommandOptions()
    if "cwd" in options:
        cwd = options["cwd"]
        if isinstance(cwd, str):
            result.cwd = cwd
        else:
            collect_msg(
                f"options.cwd must be of type string. Ignoring value {cwd!r}",
                severity=ValidationState.WARNING,
                ctx=ctx,
            )

    if "env" in options:
        env = options["env"]
        if isinstance(env, dict):
            clean: dict[str, str] = {}
            for key, value in cast_hint(dict[str, Any], env).items():
                if isinstance(value, str):
                    clean[key] = value
                else:
                    collect_msg(
                        f"options.env[{key!r}] must be a string."
                        f" Ignoring value {value!r}",
                        severity=ValidationState.WARNING,
                        ctx=ctx,
                    )
            result.env = clean
        else:
            collect_msg(
                f"options.env must be an object. Ignoring value {env!r}",
                severity=ValidationState.WARNING,
                ctx=ctx,
            )

    return None if result.is_empty() else result


def merge_options(
    target: CommandOptions | None,
    source: CommandOptions | None,
) -> CommandOptions | None:
    if source is None or source.is_empty():
        return target
    if target is None or target.is_empty():
        return source

    merged = _thaw(target)
    if source.cwd is not None:
        merged.cwd = source.cwd
    if merged.env is None:
        merged.env = source.env
    elif source.env is not None:
        # keys already on the target keep their value
        env = dict(source.env)
        env.update(merged.env)
        merged.env = env
    return merged


def fill_options_defaults(value: CommandOptions | None) -> CommandOptions:
    if value is not None and value.is_frozen:
        return value
    if value is None:
        value = CommandOptions()
    if value.cwd is None:
        value.cwd = WORKSPACE_ROOT_PLACEHOLDER
    return value


# --------------------------------------------------------------------------- #
# shell
# --------------------------------------------------------------------------- #


def is_shell_config(raw: Any) -> bool:
    """True for `{executable: str, args?: [str, ...]}`."""
    return (
        isinstance(raw, dict)
        and isinstance(raw.get("executable"), str)
        and ("args" not in raw or is_string_list(raw["args"]))
    )


def resolve_shell(raw: Any, ctx: DiagnosticContext) -> ShellConfig | None:  # noqa: ARG001
    if not is_shell_config(raw):
        return None
    shell = cast_hint(dict[str, Any], raw)
    args = shell.get("args")
    return ShellConfig(
        executable=shell["executable"],
        args=tuple(args) if args is not None else None,
    )


def merge_shell(
    target: ShellConfig | None,
    source: ShellConfig | None,
) -> ShellConfig | None:
    if source is None or source.is_empty():
        return target
    if target is None or target.is_empty():
        return source

    merged = _thaw(target)
    if source.executable is not None:
        merged.executable = source.executable
    if source.args is not None:
        merged.args = source.args
    return merged


# --------------------------------------------------------------------------- #
# command
# --------------------------------------------------------------------------- #


def _resolve_shell_flag(value: Any, ctx: ParseContext) -> bool | ShellConfig:
    if isinstance(value, bool):
        return value
    if is_shell_config(value):
        if not ctx.is_terminal:
            collect_msg(
                "shell configuration is only supported when executing"
                " tasks in the terminal.",
                severity=ValidationState.WARNING,
                ctx=ctx,
            )
        shell = resolve_shell(value, ctx)
        if shell is not None:
            return shell
    collect_msg(
        f"`isShellCommand` should be a boolean or a shell configuration;"
        f" treating {value!r} as {bool(value)}",
        severity=ValidationState.WARNING,
        ctx=ctx,
    )
    return bool(value)


def _resolve_command_layer(raw: Any, ctx: ParseContext) -> CommandConfig | None:
    """Resolve one layer (base or platform) without defaults."""
    if not isinstance(raw, dict):
        return None
    layer = cast_hint(dict[str, Any], raw)
    result = CommandConfig()

    if isinstance(layer.get("command"), str):
        result.name = layer["command"]
    if "isShellCommand" in layer and layer["isShellCommand"] is not None:
        result.is_shell_command = _resolve_shell_flag(layer["isShellCommand"], ctx)
    if "args" in layer:
        args = layer["args"]
        if is_string_list(args):
            result.args = tuple(args)
        else:
            # siblings are still resolved; the caller decides what Fatal means
            collect_msg(
                "command arguments must be an array of strings."
                f" Provided value is:\n{_dump(args)}",
                severity=ValidationState.FATAL,
                ctx=ctx,
            )
    if "options" in layer:
        result.options = resolve_options(layer["options"], ctx)
    if isinstance(layer.get("echoCommand"), bool):
        result.echo = layer["echoCommand"]
    if isinstance(layer.get("taskSelector"), str):
        result.task_selector = layer["taskSelector"]

    return None if result.is_empty() else result


def resolve_command(raw: Any, ctx: ParseContext) -> CommandConfig | None:
    """Resolve a command shape plus the overlay for `ctx.platform`.

    The platform layer is merged on top of the base layer, then defaults
    are filled. Returns None when neither layer sets anything.
    """
    logger = getAppLogger()
    result = _resolve_command_layer(raw, ctx)
    if isinstance(raw, dict):
        overlay = _resolve_command_layer(raw.get(ctx.platform.key), ctx)
        if overlay is not None:
            logger.trace(f"[resolve_command] applying {ctx.platform.key} overlay")
            result = merge_command(result, overlay)
    if result is None:
        return None
    fill_command_defaults(result)
    return None if result.is_empty() else result


def merge_command(
    target: CommandConfig | None,
    source: CommandConfig | None,
) -> CommandConfig | None:
    if source is None or source.is_empty():
        return target
    if target is None or target.is_empty():
        return source

    merged = _thaw(target)
    if source.name is not None:
        merged.name = source.name

    # is_shell_command: bool | ShellConfig | None on either side
    ours, theirs = merged.is_shell_command, source.is_shell_command
    if ours is None:
        merged.is_shell_command = theirs
    elif isinstance(ours, bool) and theirs is not None:
        # bool + bool → source; bool + shell → shell replaces the flag
        merged.is_shell_command = theirs
    elif isinstance(ours, ShellConfig) and isinstance(theirs, ShellConfig):
        merged.is_shell_command = merge_shell(ours, theirs)
    # shell + bool → keep the shell configuration

    if source.echo is not None:
        merged.echo = source.echo
    if source.task_selector is not None:
        merged.task_selector = source.task_selector
    if source.args is not None:
        merged.args = (
            source.args if merged.args is None else (*merged.args, *source.args)
        )
    merged.options = merge_options(merged.options, source.options)
    return merged


def fill_command_defaults(value: CommandConfig | None) -> None:
    """Fill unset fields in place; frozen values are left alone."""
    if value is None or value.is_frozen:
        return
    if value.name is not None and value.is_shell_command is None:
        value.is_shell_command = False
    if value.echo is None:
        value.echo = False
    if value.args is None:
        value.args = EMPTY_ARGS
    if not value.is_empty():
        value.options = fill_options_defaults(value.options)
