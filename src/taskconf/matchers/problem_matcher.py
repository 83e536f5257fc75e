# src/taskconf/matchers/problem_matcher.py
"""Problem matcher definitions and their parser.

A problem matcher tells the execution engine how to turn process output into
diagnostics. This module only parses and validates the declarations; running
the patterns against output happens elsewhere.
"""

import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Literal, Protocol

from taskconf.constants import (
    DEFAULT_MATCHER_OWNER,
    MATCHER_REFERENCE_PREFIX,
    WORKSPACE_ROOT_PLACEHOLDER,
)
from taskconf.logs import getAppLogger
from taskconf.utils_types import cast_hint, literal_to_set
from taskconf.validation import DiagnosticContext, ValidationState, collect_msg


# --- enums ----------------------------------------------------------


class ApplyTo(Enum):
    ALL_DOCUMENTS = "allDocuments"
    OPEN_DOCUMENTS = "openDocuments"
    CLOSED_DOCUMENTS = "closedDocuments"


class FileLocationKind(Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def from_string(cls, value: str) -> "Severity | None":
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


FileLocationName = Literal["absolute", "relative"]

# document key → ProblemPattern attribute
_GROUP_KEYS: dict[str, str] = {
    "file": "file",
    "location": "location",
    "line": "line",
    "column": "column",
    "endLine": "end_line",
    "endColumn": "end_column",
    "code": "code",
    "severity": "severity",
    "message": "message",
}


# --- dataclasses ------------------------------------------------------


@dataclass(frozen=True)
class ProblemPattern:
    """One regular expression line of a matcher, with its capture groups."""

    regexp: str
    file: int | None = None
    location: int | None = None
    line: int | None = None
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None
    code: int | None = None
    severity: int | None = None
    message: int | None = None
    loop: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"regexp": self.regexp}
        for key, attr in _GROUP_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        if self.loop:
            out["loop"] = True
        return out


@dataclass(frozen=True)
class WatchingPattern:
    regexp: str
    file: int | None = None


@dataclass(frozen=True)
class WatchingMatcher:
    """Begin/end markers of one build cycle in a background task's output."""

    begins_pattern: WatchingPattern
    ends_pattern: WatchingPattern
    active_on_start: bool = False


@dataclass(frozen=True)
class ProblemMatcher:
    owner: str
    pattern: tuple[ProblemPattern, ...]
    apply_to: ApplyTo = ApplyTo.ALL_DOCUMENTS
    file_location: FileLocationKind = FileLocationKind.RELATIVE
    file_prefix: str | None = WORKSPACE_ROOT_PLACEHOLDER
    severity: Severity | None = None
    watching: WatchingMatcher | None = None
    name: str | None = None
    label: str | None = None

    def without_name(self) -> "ProblemMatcher":
        return replace(self, name=None)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                out[f.name] = value.value
            elif f.name == "pattern":
                out[f.name] = [p.to_dict() for p in value]
            elif isinstance(value, WatchingMatcher):
                out[f.name] = {
                    "beginsPattern": value.begins_pattern.regexp,
                    "endsPattern": value.ends_pattern.regexp,
                    "activeOnStart": value.active_on_start,
                }
            else:
                out[f.name] = value
        return out


class MatcherLookup(Protocol):
    def get(self, name: str) -> ProblemMatcher | None: ...


# --- parser -----------------------------------------------------------------


def _compiles(regexp: str) -> str | None:
    """Return the compile error message, or None if `regexp` is valid."""
    try:
        re.compile(regexp)
    except re.error as e:
        return str(e)
    return None


def _is_group_index(value: Any) -> bool:
    # bool is an int subclass, but `true` is not a group index
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ProblemMatcherParser:
    """Parse one structured problem matcher declaration.

    Diagnostics go to the context; `parse()` returns None when the
    declaration cannot be used at all.
    """

    def __init__(self, registry: MatcherLookup, ctx: DiagnosticContext) -> None:
        self.registry = registry
        self.ctx = ctx

    # --- diagnostics ---

    def _warn(self, msg: str) -> None:
        collect_msg(msg, severity=ValidationState.WARNING, ctx=self.ctx)

    def _error(self, msg: str) -> None:
        collect_msg(msg, severity=ValidationState.ERROR, ctx=self.ctx)

    # --- entry point ---

    def parse(self, spec: Any) -> ProblemMatcher | None:  # noqa: PLR0912
        logger = getAppLogger()
        if not isinstance(spec, dict):
            self._error(
                "a problem matcher must be an object, "
                f"got {type(spec).__name__}: {spec!r}"
            )
            return None
        raw = cast_hint(dict[str, Any], spec)

        base = self._resolve_base(raw.get("base"))
        if base is False:
            return None
        base_matcher = base if isinstance(base, ProblemMatcher) else None

        # --- pattern ---
        if "pattern" in raw:
            pattern = self._parse_patterns(raw["pattern"])
            if pattern is None:
                return None
        elif base_matcher is not None:
            pattern = base_matcher.pattern
        else:
            self._error(f"problem matcher is missing a `pattern`: {raw!r}")
            return None

        # --- owner ---
        owner = base_matcher.owner if base_matcher else DEFAULT_MATCHER_OWNER
        if "owner" in raw:
            if isinstance(raw["owner"], str) and raw["owner"]:
                owner = raw["owner"]
            else:
                self._warn(f"problem matcher `owner` must be a string: {raw['owner']!r}")

        # --- applyTo ---
        apply_to = base_matcher.apply_to if base_matcher else ApplyTo.ALL_DOCUMENTS
        if "applyTo" in raw:
            try:
                apply_to = ApplyTo(raw["applyTo"])
            except ValueError:
                valid = ", ".join(a.value for a in ApplyTo)
                self._warn(
                    f"unknown `applyTo` value {raw['applyTo']!r}"
                    f" (expected one of {valid}); using {apply_to.value}"
                )

        # --- fileLocation ---
        if base_matcher is not None:
            location = (base_matcher.file_location, base_matcher.file_prefix)
        else:
            location = (FileLocationKind.RELATIVE, WORKSPACE_ROOT_PLACEHOLDER)
        if "fileLocation" in raw:
            location = self._parse_file_location(raw["fileLocation"], location)

        # --- severity ---
        severity = base_matcher.severity if base_matcher else None
        if "severity" in raw:
            parsed = (
                Severity.from_string(raw["severity"])
                if isinstance(raw["severity"], str)
                else None
            )
            if parsed is None:
                self._warn(f"unknown problem matcher severity {raw['severity']!r}")
            else:
                severity = parsed

        # --- watching / background ---
        watching = base_matcher.watching if base_matcher else None
        watch_raw = raw.get("background", raw.get("watching"))
        if watch_raw is not None:
            watching = self._parse_watching(watch_raw) or watching

        name = self._optional_string(raw, "name")
        label = self._optional_string(raw, "label")

        matcher = ProblemMatcher(
            owner=owner,
            pattern=pattern,
            apply_to=apply_to,
            file_location=location[0],
            file_prefix=location[1],
            severity=severity,
            watching=watching,
            name=name,
            label=label,
        )
        logger.trace(
            f"[parse_matcher] owner={owner} name={name}"
            f" patterns={len(pattern)} base={base_matcher.name if base_matcher else None}"
        )
        return matcher

    # --- pieces ---

    def _resolve_base(self, value: Any) -> ProblemMatcher | bool | None:
        """None for no base, False for an unusable one."""
        if value is None:
            return None
        if (
            isinstance(value, str)
            and len(value) > 1
            and value.startswith(MATCHER_REFERENCE_PREFIX)
        ):
            found = self.registry.get(value[1:])
            if found is not None:
                return found
        self._error(f"problem matcher refers to an unknown base {value!r}")
        return False

    def _optional_string(self, raw: dict[str, Any], key: str) -> str | None:
        value = raw.get(key)
        if value is None or isinstance(value, str):
            return value
        self._warn(f"problem matcher `{key}` must be a string, got {value!r}")
        return None

    def _parse_file_location(
        self,
        value: Any,
        fallback: tuple[FileLocationKind, str | None],
    ) -> tuple[FileLocationKind, str | None]:
        kinds = literal_to_set(FileLocationName)
        kind_name: Any = value
        prefix: Any = None
        if isinstance(value, list) and value:
            kind_name = value[0]
            prefix = value[1] if len(value) > 1 else None

        if not isinstance(kind_name, str) or kind_name not in kinds:
            self._warn(
                f"invalid `fileLocation` {value!r}; expected"
                ' "absolute", "relative" or ["relative", "<prefix>"]'
            )
            return fallback

        kind = FileLocationKind(kind_name)
        if kind is FileLocationKind.ABSOLUTE:
            return kind, None
        if prefix is not None and not isinstance(prefix, str):
            self._warn(f"`fileLocation` prefix must be a string, got {prefix!r}")
            prefix = None
        return kind, prefix or WORKSPACE_ROOT_PLACEHOLDER

    def _parse_patterns(self, value: Any) -> tuple[ProblemPattern, ...] | None:
        if isinstance(value, dict):
            items: list[Any] = [value]
        elif isinstance(value, list) and value:
            items = cast_hint(list[Any], value)
        else:
            self._error(
                f"`pattern` must be an object or a non-empty list, got {value!r}"
            )
            return None

        patterns: list[ProblemPattern] = []
        for i, item in enumerate(items):
            pattern = self._parse_pattern(item, is_last=i == len(items) - 1)
            if pattern is None:
                return None
            patterns.append(pattern)

        if len(patterns) == 1:
            only = patterns[0]
            if only.file is None and only.location is None and only.line is None:
                patterns[0] = replace(
                    only,
                    file=1,
                    location=2,
                    message=3 if only.message is None else only.message,
                )

        if all(p.file is None for p in patterns):
            self._error("problem pattern must define a `file` group")
            return None
        if all(p.message is None for p in patterns):
            self._error("problem pattern must define a `message` group")
            return None
        return tuple(patterns)

    def _parse_pattern(self, value: Any, *, is_last: bool) -> ProblemPattern | None:
        if not isinstance(value, dict):
            self._error(f"a problem pattern must be an object, got {value!r}")
            return None
        raw = cast_hint(dict[str, Any], value)

        regexp = raw.get("regexp")
        if not isinstance(regexp, str) or not regexp:
            self._error(f"problem pattern is missing a `regexp` string: {raw!r}")
            return None
        problem = _compiles(regexp)
        if problem is not None:
            self._error(f"invalid problem pattern regexp {regexp!r}: {problem}")
            return None

        groups: dict[str, Any] = {}
        for key, attr in _GROUP_KEYS.items():
            if key not in raw:
                continue
            index = raw[key]
            if _is_group_index(index):
                groups[attr] = index
            else:
                self._warn(
                    f"problem pattern `{key}` must be a non-negative"
                    f" group index, got {index!r}"
                )

        loop = False
        if "loop" in raw:
            if not isinstance(raw["loop"], bool):
                self._warn(f"problem pattern `loop` must be a boolean: {raw['loop']!r}")
            elif raw["loop"] and not is_last:
                self._warn("only the last problem pattern can loop; ignoring `loop`")
            else:
                loop = raw["loop"]

        return ProblemPattern(regexp=regexp, loop=loop, **groups)

    def _parse_watching(self, value: Any) -> WatchingMatcher | None:
        if not isinstance(value, dict):
            self._warn(f"`background` must be an object, got {value!r}")
            return None
        raw = cast_hint(dict[str, Any], value)
        begins = self._parse_watching_pattern(
            raw.get("beginsPattern", raw.get("activeBegin"))
        )
        ends = self._parse_watching_pattern(raw.get("endsPattern", raw.get("activeEnd")))
        if begins is None or ends is None:
            self._warn(
                "`background` needs valid `beginsPattern` and `endsPattern`; ignoring"
            )
            return None
        active = raw.get("activeOnStart", False)
        return WatchingMatcher(
            begins_pattern=begins,
            ends_pattern=ends,
            active_on_start=active if isinstance(active, bool) else False,
        )

    def _parse_watching_pattern(self, value: Any) -> WatchingPattern | None:
        file_group: Any = None
        if isinstance(value, dict):
            file_group = value.get("file")
            value = value.get("regexp")
        if not isinstance(value, str) or _compiles(value) is not None:
            return None
        if not _is_group_index(file_group):
            file_group = None
        return WatchingPattern(regexp=value, file=file_group)
