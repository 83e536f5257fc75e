# src/taskconf/meta.py
"""Program identity shared by the CLI, logger and config discovery."""

from dataclasses import dataclass


PROGRAM_PACKAGE: str = "taskconf"
PROGRAM_SCRIPT: str = "taskconf"
PROGRAM_DISPLAY: str = "Taskconf"
PROGRAM_ENV: str = "TASKCONF"

VERSION: str = "0.1.0"


@dataclass(frozen=True)
class Metadata:
    """Version information reported by `--version`."""

    version: str = VERSION

    def __str__(self) -> str:
        return f"{PROGRAM_DISPLAY} {self.version}"
