# tests/5_core/test_matcher_resolve.py
"""Tests for problemMatcher references and `declares`."""

from typing import Any

import pytest

import taskconf.config.matcher_resolve as mod_matcher_resolve
from taskconf.config.config_types import MatcherSpecKind
from taskconf.matchers.registry import builtin_registry
from taskconf.validation import ValidationState
from tests.utils import RecordingSink, make_context


LINT = {"name": "lint", "owner": "lint", "pattern": {"regexp": r"^(.*)$"}}


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        ("$tsc", MatcherSpecKind.STRING),
        ({"pattern": {}}, MatcherSpecKind.SINGLE),
        (["$tsc"], MatcherSpecKind.ARRAY),
        (42, MatcherSpecKind.UNKNOWN),
        (None, MatcherSpecKind.UNKNOWN),
    ],
)
def test_classify_matcher_spec(value: Any, kind: MatcherSpecKind) -> None:
    # --- execute and verify ---
    assert mod_matcher_resolve.classify_matcher_spec(value) is kind


def test_resolve_builtin_reference_returns_copy() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    result = mod_matcher_resolve.resolve_matchers("$tsc", ctx)

    # --- verify ---
    assert ctx.status.is_ok()
    assert result == [builtin_registry.get("tsc")]
    assert result[0] is not builtin_registry.get("tsc")


def test_resolve_unknown_reference_is_error() -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(sink=sink)

    # --- execute ---
    result = mod_matcher_resolve.resolve_matchers("$unknownName", ctx)

    # --- verify ---
    assert result == []
    assert ctx.status.state is ValidationState.ERROR
    assert "Invalid problemMatcher reference: $unknownName" in sink.text()


def test_resolve_array_skips_bad_entries() -> None:
    # --- setup ---
    ctx = make_context()
    spec = ["$go", "$missing", {"pattern": {"regexp": "("}}, {"pattern": {"regexp": "x"}}]

    # --- execute ---
    result = mod_matcher_resolve.resolve_matchers(spec, ctx)

    # --- verify ---
    assert [m.owner for m in result] == ["go", "external"]
    assert ctx.status.state is ValidationState.ERROR
    assert len(ctx.status.errors) == 2  # noqa: PLR2004


def test_resolve_unknown_shape_warns() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    result = mod_matcher_resolve.resolve_matchers(42, ctx)

    # --- verify ---
    assert result == []
    assert ctx.status.state is ValidationState.WARNING


def test_resolve_absent_is_empty() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute and verify ---
    assert mod_matcher_resolve.resolve_matchers(None, ctx) == []
    assert ctx.status.is_ok()


def test_declared_matcher_is_anonymous_once_referenced() -> None:
    # --- setup ---
    ctx = make_context()
    ctx.named_matchers = mod_matcher_resolve.resolve_named_matchers([LINT], ctx)

    # --- execute ---
    result = mod_matcher_resolve.resolve_matchers("$lint", ctx)

    # --- verify ---
    assert ctx.status.is_ok()
    assert ctx.named_matchers["lint"].name == "lint"
    (matcher,) = result
    assert matcher.name is None
    assert matcher.owner == "lint"


def test_builtin_wins_over_declared_name() -> None:
    # --- setup ---
    ctx = make_context()
    local_tsc = {"name": "tsc", "owner": "local", "pattern": {"regexp": "x"}}
    ctx.named_matchers = mod_matcher_resolve.resolve_named_matchers([local_tsc], ctx)

    # --- execute ---
    (matcher,) = mod_matcher_resolve.resolve_matchers("$tsc", ctx)

    # --- verify ---
    assert matcher.owner == "typescript"


def test_named_matchers_last_declaration_wins() -> None:
    # --- setup ---
    ctx = make_context()
    second = {**LINT, "owner": "second"}

    # --- execute ---
    table = mod_matcher_resolve.resolve_named_matchers([LINT, second], ctx)

    # --- verify ---
    assert list(table) == ["lint"]
    assert table["lint"].owner == "second"


def test_named_matchers_without_name_is_error() -> None:
    # --- setup ---
    sink = RecordingSink()
    ctx = make_context(sink=sink)

    # --- execute ---
    table = mod_matcher_resolve.resolve_named_matchers(
        [{"pattern": {"regexp": "x"}}, LINT], ctx
    )

    # --- verify ---
    assert list(table) == ["lint"]
    assert ctx.status.state is ValidationState.ERROR
    assert "must have a name" in sink.text()


def test_named_matchers_non_list_warns() -> None:
    # --- setup ---
    ctx = make_context()

    # --- execute ---
    table = mod_matcher_resolve.resolve_named_matchers(LINT, ctx)

    # --- verify ---
    assert table == {}
    assert ctx.status.state is ValidationState.WARNING
