# src/taskconf/config/matcher_resolve.py
"""Turn `problemMatcher` values and `declares` into parsed matchers."""

import json
from dataclasses import replace
from typing import Any

from taskconf.constants import MATCHER_REFERENCE_PREFIX
from taskconf.logs import getAppLogger
from taskconf.matchers.problem_matcher import ProblemMatcher, ProblemMatcherParser
from taskconf.utils_types import cast_hint
from taskconf.validation import ValidationState, collect_msg

from .config_model import ParseContext
from .config_types import MatcherSpecKind


def classify_matcher_spec(value: Any) -> MatcherSpecKind:
    """Classify a `problemMatcher` value once, before resolving it."""
    if isinstance(value, str):
        return MatcherSpecKind.STRING
    if isinstance(value, list):
        return MatcherSpecKind.ARRAY
    if isinstance(value, dict):
        return MatcherSpecKind.SINGLE
    return MatcherSpecKind.UNKNOWN


def resolve_named_matchers(
    declares: Any,
    ctx: ParseContext,
) -> dict[str, ProblemMatcher]:
    """Parse the `declares` list into a name → matcher table.

    Entries without a name are reported and dropped; a later declaration
    replaces an earlier one with the same name.
    """
    logger = getAppLogger()
    result: dict[str, ProblemMatcher] = {}
    if declares is None:
        return result
    if not isinstance(declares, list):
        collect_msg(
            f"`declares` must be a list of problem matchers. Ignoring value {declares!r}",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
        return result

    parser = ProblemMatcherParser(ctx.registry, ctx)
    for entry in cast_hint(list[Any], declares):
        matcher = parser.parse(entry)
        if matcher is None:
            continue
        if not matcher.name:
            collect_msg(
                "Problem Matcher in declare scope must have a name:\n"
                + json.dumps(entry, indent=4, default=repr),
                severity=ValidationState.ERROR,
                ctx=ctx,
            )
            continue
        if matcher.name in result:
            logger.trace(f"[declares] {matcher.name!r} redeclared; last one wins")
        result[matcher.name] = matcher

    logger.trace(f"[declares] {len(result)} named matcher(s): {sorted(result)}")
    return result


def _resolve_reference(value: str, ctx: ParseContext) -> ProblemMatcher | None:
    if len(value) > 1 and value.startswith(MATCHER_REFERENCE_PREFIX):
        name = value[len(MATCHER_REFERENCE_PREFIX) :]
        builtin = ctx.registry.get(name)
        if builtin is not None:
            return replace(builtin)
        local = ctx.named_matchers.get(name)
        if local is not None:
            # once attached to a task a local matcher is anonymous
            return local.without_name()
    collect_msg(
        f"Invalid problemMatcher reference: {value}",
        severity=ValidationState.ERROR,
        ctx=ctx,
    )
    return None


def _resolve_one(value: Any, ctx: ParseContext) -> ProblemMatcher | None:
    if isinstance(value, str):
        return _resolve_reference(value, ctx)
    return ProblemMatcherParser(ctx.registry, ctx).parse(value)


def resolve_matchers(spec: Any, ctx: ParseContext) -> list[ProblemMatcher]:
    """Resolve a `problemMatcher` value to a list of matchers.

    Absent → empty. Each array entry is resolved independently; a bad entry
    contributes nothing but does not stop the others.
    """
    if spec is None:
        return []

    kind = classify_matcher_spec(spec)
    if kind is MatcherSpecKind.UNKNOWN:
        collect_msg(
            "the defined problem matcher is unknown. Supported types are"
            " string | ProblemMatcher | (string | ProblemMatcher)[].\n"
            f"{spec!r}",
            severity=ValidationState.WARNING,
            ctx=ctx,
        )
        return []

    entries = cast_hint(list[Any], spec) if kind is MatcherSpecKind.ARRAY else [spec]
    result: list[ProblemMatcher] = []
    for entry in entries:
        matcher = _resolve_one(entry, ctx)
        if matcher is not None:
            result.append(matcher)
    return result
