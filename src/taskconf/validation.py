# src/taskconf/validation.py
"""Run-scoped validation status and diagnostic routing.

Resolution never raises for bad input. Every problem is routed through
`collect_msg()`, which escalates the shared `ValidationStatus`, files the
message in its severity bucket and writes it to the diagnostic sink.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from difflib import get_close_matches
from enum import IntEnum
from typing import Any, Protocol

from .logs import AppLogger, getAppLogger
from .utils_files import plural


# --- constants ----------------------------------------------------------


DEFAULT_HINT_CUTOFF: float = 0.75


# --- types ----------------------------------------------------------


class ValidationState(IntEnum):
    OK = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3


class DiagnosticSink(Protocol):
    """Append-only receiver for human-readable diagnostics."""

    def log(self, message: str) -> None: ...


class AppLogSink:
    """Forward diagnostics to the app logger.

    Used when `parse()` is called without an explicit sink.
    """

    def __init__(self, logger: AppLogger | None = None) -> None:
        self._logger = logger

    def log(self, message: str) -> None:
        logger = self._logger or getAppLogger()
        logger.warning(message)


# --- dataclasses ------------------------------------------------------


@dataclass
class ValidationStatus:
    """Monotonic severity accumulator for one resolution run."""

    state: ValidationState = ValidationState.OK
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    fatals: list[str] = field(default_factory=list)

    def escalate(self, state: ValidationState) -> None:
        """Raise the state to `state`; lower states are ignored."""
        if state > self.state:
            self.state = state

    def is_ok(self) -> bool:
        return self.state == ValidationState.OK

    def is_fatal(self) -> bool:
        return self.state == ValidationState.FATAL

    def absorb(self, other: "ValidationStatus") -> None:
        """Fold another status (e.g. a per-task one) into this one."""
        self.escalate(other.state)
        self.warnings.extend(other.warnings)
        self.errors.extend(other.errors)
        self.fatals.extend(other.fatals)

    @property
    def messages(self) -> list[str]:
        return [*self.fatals, *self.errors, *self.warnings]


class DiagnosticContext(Protocol):
    """Anything carrying a status and a sink (see ParseContext)."""

    status: ValidationStatus
    logger: DiagnosticSink


# --- helpers --------------------------------------------------------

_PREFIXES: dict[ValidationState, str] = {
    ValidationState.WARNING: "Warning",
    ValidationState.ERROR: "Error",
    ValidationState.FATAL: "Fatal",
}


def collect_msg(
    msg: str,
    *,
    severity: ValidationState,
    ctx: DiagnosticContext,  # status modified in function, not returned
) -> None:
    """Route a message to the appropriate bucket and to the sink.

    The status only ever escalates; OK-severity messages are just logged.
    """
    status = ctx.status
    status.escalate(severity)
    if severity == ValidationState.FATAL:
        status.fatals.append(msg)
    elif severity == ValidationState.ERROR:
        status.errors.append(msg)
    elif severity == ValidationState.WARNING:
        status.warnings.append(msg)

    prefix = _PREFIXES.get(severity)
    ctx.logger.log(f"{prefix}: {msg}" if prefix else msg)


def warn_unknown_keys(
    raw: Mapping[str, Any],
    known: Iterable[str],
    context: str,
    *,
    ctx: DiagnosticContext,
) -> list[str]:
    """Warn about keys not in `known`, with a "did you mean" hint.

    Returns the unknown keys.
    """
    known_keys = list(known)
    unknown = [k for k in raw if k not in known_keys]
    if not unknown:
        return []

    joined = ", ".join(f"`{u}`" for u in unknown)
    msg = f"Unknown key{plural(unknown)} {joined} {context}."

    hints: list[str] = []
    for k in unknown:
        close = get_close_matches(k, known_keys, n=1, cutoff=DEFAULT_HINT_CUTOFF)
        if close:
            hints.append(f"'{k}' → '{close[0]}'")
    if hints:
        msg += "\nHint: did you mean " + ", ".join(hints) + "?"

    collect_msg(msg, severity=ValidationState.WARNING, ctx=ctx)
    return unknown
