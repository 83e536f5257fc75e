# tests/utils/__init__.py

from .builders import (
    RecordingSink,
    counting_ids,
    make_context,
    make_document,
    make_status,
    make_task,
    write_tasks_file,
)
from .constants import DEFAULT_TEST_LOG_LEVEL, PROJ_ROOT


__all__ = [  # noqa: RUF022
    # builders
    "RecordingSink",
    "counting_ids",
    "make_context",
    "make_document",
    "make_status",
    "make_task",
    "write_tasks_file",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "PROJ_ROOT",
]
