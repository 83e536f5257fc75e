# src/taskconf/config/globals_resolve.py
"""Resolution of the document-level defaults shared by every task."""

from typing import Any

from taskconf.logs import getAppLogger
from taskconf.validation import DiagnosticContext, ValidationState, collect_msg

from .command_resolve import resolve_command
from .config_model import Globals, ParseContext
from .config_types import ShowOutput


# --------------------------------------------------------------------------- #
# scalar fields shared with the task resolver
# --------------------------------------------------------------------------- #


def resolve_show_output(
    value: Any,
    where: str,
    ctx: DiagnosticContext,
) -> ShowOutput | None:
    """Map a `showOutput` string to the enum.

    Unknown strings and non-strings are reported and left unset, so the
    global value or the default applies instead.
    """
    if value is None:
        return None
    valid = ", ".join(s.value for s in ShowOutput)
    if not isinstance(value, str):
        collect_msg(
            f"`showOutput` {where} must be a string ({valid}). Ignoring value {value!r}",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
        return None
    show = ShowOutput.from_string(value)
    if show is None:
        collect_msg(
            f"unknown `showOutput` value {value!r} {where} (expected one of {valid})",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
    return show


def resolve_flag(
    raw: dict[str, Any],
    key: str,
    where: str,
    ctx: DiagnosticContext,
) -> bool | None:
    """Read a boolean key; other values are coerced by truthiness with a Warning."""
    if key not in raw or raw[key] is None:
        return None
    value = raw[key]
    if not isinstance(value, bool):
        collect_msg(
            f"`{key}` {where} should be a boolean; treating {value!r} as {bool(value)}",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
    return bool(value)


# --------------------------------------------------------------------------- #
# globals
# --------------------------------------------------------------------------- #


def _resolve_globals_layer(raw: Any, where: str, ctx: ParseContext) -> Globals:
    result = Globals()
    if not isinstance(raw, dict):
        return result
    result.show_output = resolve_show_output(raw.get("showOutput"), where, ctx)
    result.suppress_task_name = resolve_flag(raw, "suppressTaskName", where, ctx)
    result.prompt_on_close = resolve_flag(raw, "promptOnClose", where, ctx)
    return result


def merge_globals_layers(target: Globals, source: Globals) -> Globals:
    if source.is_empty():
        return target
    if target.is_empty():
        return source
    if source.prompt_on_close is not None:
        target.prompt_on_close = source.prompt_on_close
    if source.suppress_task_name is not None:
        target.suppress_task_name = source.suppress_task_name
    if source.show_output is not None:
        target.show_output = source.show_output
    return target


def fill_globals_defaults(value: Globals) -> None:
    if value.is_frozen:
        return
    if value.suppress_task_name is None:
        value.suppress_task_name = False
    if value.show_output is None:
        value.show_output = ShowOutput.ALWAYS
    if value.prompt_on_close is None:
        value.prompt_on_close = True


def resolve_globals(document: dict[str, Any], ctx: ParseContext) -> Globals:
    """Resolve the document-level defaults for `ctx.platform`.

    The returned value is frozen.
    """
    logger = getAppLogger()
    result = _resolve_globals_layer(document, "at the top level", ctx)

    key = ctx.platform.key
    overlay = _resolve_globals_layer(document.get(key), f"in `{key}`", ctx)
    result = merge_globals_layers(result, overlay)
    fill_globals_defaults(result)

    command = resolve_command(document, ctx)
    if command is not None:
        result.command = command

    result.freeze()
    logger.trace(
        f"[resolve_globals] platform={key}"
        f" command={command.name if command else None!r}"
        f" show_output={result.show_output}"
    )
    return result
