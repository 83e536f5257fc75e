# tests/0_independant/test_type_helpers.py
"""Tests for is_string_list, literal_to_set and schema_from_typeddict."""

from typing import Literal

import pytest

import taskconf.config.config_types as mod_config_types
import taskconf.utils_types as mod_utils_types


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ([], True),
        (["-c", "echo hi"], True),
        (["ok", 3], False),
        ("notanarray", False),
        (("a", "b"), False),
        (None, False),
    ],
)
def test_is_string_list(value: object, expected: bool) -> None:  # noqa: FBT001
    # --- execute and verify ---
    assert mod_utils_types.is_string_list(value) is expected


def test_literal_to_set_extracts_values() -> None:
    # --- execute ---
    result = mod_utils_types.literal_to_set(Literal["terminal", "process"])

    # --- verify ---
    assert result == {"terminal", "process"}


def test_literal_to_set_rejects_non_literal() -> None:
    # --- execute and verify ---
    with pytest.raises(TypeError, match="Expected Literal"):
        mod_utils_types.literal_to_set(str)


def test_schema_from_typeddict_lists_task_keys() -> None:
    # --- execute ---
    keys = set(mod_utils_types.schema_from_typeddict(mod_config_types.TaskEntry))

    # --- verify ---
    # inherited command keys plus task-only ones
    assert {"command", "args", "options", "taskName", "isBuildCommand"} <= keys
    assert {"windows", "osx", "linux", "isWatching"} <= keys
    assert "declares" not in keys


def test_schema_from_typeddict_document_has_runner_key() -> None:
    # --- execute ---
    keys = set(
        mod_utils_types.schema_from_typeddict(mod_config_types.TaskRunnerDocument)
    )

    # --- verify ---
    assert {"_runner", "version", "declares", "tasks", "problemMatcher"} <= keys
