# src/taskconf/config/config_model.py
"""Resolved configuration model.

Layer objects (`CommandOptions`, `ShellConfig`, `CommandConfig`, `Globals`,
`ResolvedTask`) are mutable while a run merges and fills them, then frozen.
A frozen object rejects every attribute assignment with `FrozenConfigError`.
"""

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from taskconf.matchers.problem_matcher import ProblemMatcher
from taskconf.matchers.registry import ProblemMatcherRegistry
from taskconf.validation import DiagnosticSink, ValidationStatus

from .config_types import Platform, ShowOutput


# Shared immutable defaults; never allocate a fresh empty sequence per task.
EMPTY_ARGS: tuple[str, ...] = ()
EMPTY_MATCHERS: tuple[ProblemMatcher, ...] = ()


class FrozenConfigError(AttributeError):
    """Raised when a frozen configuration object is mutated."""


class _Freezable:
    """Mixin giving dataclasses a one-way `freeze()`."""

    _frozen: bool = False

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            xmsg = f"cannot assign to field {name!r}: {type(self).__name__} is frozen"
            raise FrozenConfigError(xmsg)
        super().__setattr__(name, value)

    def __delattr__(self, name: str) -> None:
        if self._frozen:
            xmsg = f"cannot delete field {name!r}: {type(self).__name__} is frozen"
            raise FrozenConfigError(xmsg)
        super().__delattr__(name)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _mark_frozen(self) -> None:
        object.__setattr__(self, "_frozen", True)


# --- command layers ---------------------------------------------------------


@dataclass(eq=True)
class CommandOptions(_Freezable):
    cwd: str | None = None
    env: Mapping[str, str] | None = None

    def is_empty(self) -> bool:
        return self.cwd is None and self.env is None

    def freeze(self) -> None:
        if self._frozen:
            return
        if self.env is not None and not isinstance(self.env, MappingProxyType):
            self.env = MappingProxyType(dict(self.env))
        self._mark_frozen()


@dataclass(eq=True)
class ShellConfig(_Freezable):
    executable: str | None = None
    args: tuple[str, ...] | None = None

    def is_empty(self) -> bool:
        return self.executable is None and not self.args

    def freeze(self) -> None:
        self._mark_frozen()


@dataclass(eq=True)
class CommandConfig(_Freezable):
    """How to run one command, for a single layer or fully merged."""

    name: str | None = None
    is_shell_command: bool | ShellConfig | None = None
    args: tuple[str, ...] | None = None
    options: CommandOptions | None = None
    echo: bool | None = None
    task_selector: str | None = None

    def is_empty(self) -> bool:
        return (
            self.name is None
            and self.is_shell_command is None
            and self.args is None
            and (self.options is None or self.options.is_empty())
            and self.echo is None
        )

    def is_echo_only(self) -> bool:
        """The degenerate shape a task gets from a bare `echoCommand`."""
        return (
            self.echo is not None
            and self.name is None
            and self.is_shell_command is None
            and self.args is None
            and (self.options is None or self.options.is_empty())
        )

    @property
    def is_shell(self) -> bool:
        """True for `isShellCommand: true` and for a shell configuration."""
        return isinstance(self.is_shell_command, ShellConfig) or bool(
            self.is_shell_command
        )

    def freeze(self) -> None:
        if self._frozen:
            return
        if self.options is not None:
            self.options.freeze()
        if isinstance(self.is_shell_command, ShellConfig):
            self.is_shell_command.freeze()
        self._mark_frozen()


# --- globals and tasks ------------------------------------------------------


@dataclass(eq=True)
class Globals(_Freezable):
    """Document-level defaults applied to every task that doesn't override them."""

    command: CommandConfig | None = None
    prompt_on_close: bool | None = None
    suppress_task_name: bool | None = None
    show_output: ShowOutput | None = None

    def is_empty(self) -> bool:
        return (
            self.command is None
            and self.prompt_on_close is None
            and self.suppress_task_name is None
            and self.show_output is None
        )

    def freeze(self) -> None:
        if self._frozen:
            return
        if self.command is not None:
            self.command.freeze()
        self._mark_frozen()


@dataclass(eq=True)
class ResolvedTask(_Freezable):
    id: str
    name: str
    command: CommandConfig | None = None
    args: tuple[str, ...] | None = None
    is_background: bool | None = None
    prompt_on_close: bool | None = None
    suppress_task_name: bool | None = None
    show_output: ShowOutput | None = None
    problem_matchers: tuple[ProblemMatcher, ...] | None = None

    def freeze(self) -> None:
        if self._frozen:
            return
        if self.command is not None:
            self.command.freeze()
        self._mark_frozen()


@dataclass
class TaskSet:
    """Tasks resolved from one task list, keyed by generated id."""

    tasks: dict[str, ResolvedTask] = field(default_factory=dict)
    build_task: str | None = None
    test_task: str | None = None

    def is_empty(self) -> bool:
        return not self.tasks


@dataclass(frozen=True)
class ResolvedConfiguration:
    tasks: Mapping[str, ResolvedTask]
    build_tasks: tuple[str, ...] = ()
    test_tasks: tuple[str, ...] = ()

    def task_named(self, name: str) -> ResolvedTask | None:
        return next((t for t in self.tasks.values() if t.name == name), None)


# --- resolution context -----------------------------------------------------


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass
class ParseContext:
    """Everything a resolver needs besides its raw input."""

    logger: DiagnosticSink
    status: ValidationStatus
    platform: Platform
    is_terminal: bool
    registry: ProblemMatcherRegistry
    named_matchers: dict[str, ProblemMatcher] = field(default_factory=dict)
    id_factory: Callable[[], str] = new_task_id


# --- serialization ----------------------------------------------------------


def _value_to_dict(value: Any) -> Any:  # noqa: PLR0911
    if isinstance(value, ShowOutput):
        return value.value
    if isinstance(value, ProblemMatcher):
        return value.to_dict()
    if isinstance(value, _Freezable):
        return {
            f.name: _value_to_dict(getattr(value, f.name))
            for f in fields(value)  # type: ignore[arg-type]
            if getattr(value, f.name) is not None
        }
    if isinstance(value, Mapping):
        return {k: _value_to_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_value_to_dict(v) for v in value]
    return value


def task_to_dict(task: ResolvedTask, *, include_id: bool = True) -> dict[str, Any]:
    data: dict[str, Any] = _value_to_dict(task)
    if not include_id:
        data.pop("id", None)
    return data


def configuration_to_dict(
    config: ResolvedConfiguration,
    *,
    include_ids: bool = True,
) -> dict[str, Any]:
    """Plain JSON-ready view of a resolved configuration.

    With `include_ids=False` tasks are listed by name and the build/test
    designations refer to names, which makes two runs comparable.
    """
    names = {task_id: task.name for task_id, task in config.tasks.items()}
    if include_ids:
        return {
            "tasks": {
                task_id: task_to_dict(task) for task_id, task in config.tasks.items()
            },
            "buildTasks": list(config.build_tasks),
            "testTasks": list(config.test_tasks),
        }
    return {
        "tasks": {
            task.name: task_to_dict(task, include_id=False)
            for task in sorted(config.tasks.values(), key=lambda t: t.name)
        },
        "buildTasks": [names[i] for i in config.build_tasks],
        "testTasks": [names[i] for i in config.test_tasks],
    }
