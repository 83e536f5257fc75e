# src/taskconf/config/config_types.py


from enum import Enum
from typing import Any, Literal, TypedDict

from typing_extensions import NotRequired


# --- enums ----------------------------------------------------------


class Platform(Enum):
    """The operating system a document layer can target."""

    WINDOWS = "windows"
    MAC = "osx"
    LINUX = "linux"

    @property
    def key(self) -> str:
        """Document key holding this platform's overrides."""
        return self.value


PLATFORM_KEYS: tuple[str, ...] = tuple(p.key for p in Platform)


class ShowOutput(Enum):
    """When the task output view is brought to front."""

    ALWAYS = "always"
    SILENT = "silent"
    NEVER = "never"

    @classmethod
    def from_string(cls, value: str) -> "ShowOutput | None":
        """Case-insensitive lookup; None for unknown strings."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class MatcherSpecKind(Enum):
    """Shape of a `problemMatcher` value, classified before resolution."""

    UNKNOWN = "unknown"
    STRING = "string"
    SINGLE = "single"
    ARRAY = "array"


RunnerKind = Literal["terminal", "process"]


# --- raw document shapes ----------------------------------------------------
# Everything is optional; values are untrusted until resolved.


class CommandOptionsConfig(TypedDict, total=False):
    cwd: str
    env: dict[str, str]


class ShellConfigConfig(TypedDict):
    executable: str
    args: NotRequired[list[str]]


class PlatformCommand(TypedDict, total=False):
    command: str
    isShellCommand: bool | ShellConfigConfig
    args: list[str]
    options: CommandOptionsConfig
    echoCommand: bool
    taskSelector: str


class TaskEntry(PlatformCommand, total=False):
    taskName: str
    windows: PlatformCommand
    osx: PlatformCommand
    linux: PlatformCommand
    isWatching: bool  # deprecated, use isBackground
    isBackground: bool
    promptOnClose: bool
    isBuildCommand: bool
    isTestCommand: bool
    showOutput: str
    suppressTaskName: bool
    problemMatcher: Any  # str | ProblemMatcherConfig | list of either


class PlatformDocument(PlatformCommand, total=False):
    showOutput: str
    suppressTaskName: bool
    problemMatcher: Any
    isWatching: bool  # deprecated, use isBackground
    isBackground: bool
    promptOnClose: bool
    tasks: list[TaskEntry]


class TaskRunnerDocument(PlatformDocument, total=False):
    version: str
    _runner: RunnerKind
    declares: list[dict[str, Any]]
    windows: PlatformDocument
    osx: PlatformDocument
    linux: PlatformDocument
