# src/taskconf/matchers/registry.py
"""Built-in named problem matchers.

Documents refer to these as `"$tsc"`, `"$go"` and so on. The module-level
`builtin_registry` is populated on import and only read afterwards.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from taskconf.logs import getAppLogger
from taskconf.validation import DiagnosticSink, ValidationStatus

from .problem_matcher import ProblemMatcher, ProblemMatcherParser


class ProblemMatcherRegistry:
    """Name → matcher lookup."""

    def __init__(self) -> None:
        self._matchers: dict[str, ProblemMatcher] = {}

    def get(self, name: str) -> ProblemMatcher | None:
        return self._matchers.get(name)

    def add(self, matcher: ProblemMatcher) -> None:
        if not matcher.name:
            xmsg = "Only named problem matchers can be registered"
            raise ValueError(xmsg)
        self._matchers[matcher.name] = matcher

    def keys(self) -> list[str]:
        return sorted(self._matchers)

    def __contains__(self, name: object) -> bool:
        return name in self._matchers

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._matchers)


# --- built-in definitions ---------------------------------------------------
# Order matters: a definition can only use an earlier one as its `base`.

_TSC_LOCATION = r"(\d+|\d+,\d+|\d+,\d+,\d+,\d+)"

BUILTIN_MATCHERS: list[dict[str, Any]] = [
    {
        "name": "tsc",
        "owner": "typescript",
        "applyTo": "closedDocuments",
        "fileLocation": ["relative", "${cwd}"],
        "pattern": {
            "regexp": (
                rf"^([^\s].*)\({_TSC_LOCATION}\):\s+(error|warning|info)"
                r"\s+(TS\d+)\s*:\s*(.*)$"
            ),
            "file": 1,
            "location": 2,
            "severity": 3,
            "code": 4,
            "message": 5,
        },
    },
    {
        "name": "tsc-watch",
        "base": "$tsc",
        "applyTo": "closedDocuments",
        "background": {
            "activeOnStart": True,
            "beginsPattern": (
                r"^\s*(?:message TS6032:|\d{1,2}:\d{1,2}:\d{1,2}(?: AM| PM)? -)"
                r" File change detected\. Starting incremental compilation\.\.\."
            ),
            "endsPattern": (
                r"^\s*(?:message TS6042:|\d{1,2}:\d{1,2}:\d{1,2}(?: AM| PM)? -)"
                r" (?:Compilation complete\.|Found \d+ errors?\.)"
                r" Watching for file changes\."
            ),
        },
    },
    {
        "name": "msCompile",
        "owner": "msCompile",
        "fileLocation": "absolute",
        "pattern": {
            "regexp": (
                rf"^(?:\s+\d+>)?([^\s].*)\({_TSC_LOCATION}\)\s*:\s+"
                r"(error|warning|info)\s+(\w{1,2}\d+)\s*:\s*(.*)$"
            ),
            "file": 1,
            "location": 2,
            "severity": 3,
            "code": 4,
            "message": 5,
        },
    },
    {
        "name": "lessCompile",
        "owner": "lessCompile",
        "fileLocation": "absolute",
        "severity": "error",
        "pattern": {
            "regexp": r"^\s*(.*) in file (.*) line no. (\d+)$",
            "message": 1,
            "file": 2,
            "line": 3,
        },
    },
    {
        "name": "gulp-tsc",
        "owner": "typescript",
        "fileLocation": "relative",
        "pattern": {
            "regexp": rf"^([^\s].*)\({_TSC_LOCATION}\):\s+(\d+)\s+(.*)$",
            "file": 1,
            "location": 2,
            "code": 3,
            "message": 4,
        },
    },
    {
        "name": "jshint",
        "owner": "jshint",
        "fileLocation": "absolute",
        "pattern": {
            "regexp": (
                r"^(.*):\s+line\s+(\d+),\s+col\s+(\d+),\s(.+?)(?:\s+\((\w)(\d+)\))?$"
            ),
            "file": 1,
            "line": 2,
            "column": 3,
            "message": 4,
            "severity": 5,
            "code": 6,
        },
    },
    {
        "name": "jshint-stylish",
        "owner": "jshint",
        "fileLocation": "absolute",
        "pattern": [
            {"regexp": r"^(.+)$", "file": 1},
            {
                "regexp": (
                    r"^\s+line\s+(\d+)\s+col\s+(\d+)\s+(.+?)(?:\s+\((\w)(\d+)\))?$"
                ),
                "line": 1,
                "column": 2,
                "message": 3,
                "severity": 4,
                "code": 5,
                "loop": True,
            },
        ],
    },
    {
        "name": "eslint-compact",
        "owner": "eslint",
        "fileLocation": "relative",
        "pattern": {
            "regexp": (
                r"^(.+):\sline\s(\d+),\scol\s(\d+),\s(Error|Warning|Info)"
                r"\s-\s(.+)\s\((.+)\)$"
            ),
            "file": 1,
            "line": 2,
            "column": 3,
            "severity": 4,
            "message": 5,
            "code": 6,
        },
    },
    {
        "name": "eslint-stylish",
        "owner": "eslint",
        "fileLocation": "absolute",
        "pattern": [
            {"regexp": r"^([^\s].*)$", "file": 1},
            {
                "regexp": r"^\s+(\d+):(\d+)\s+(error|warning|info)\s+(.+?)(?:\s\s+(.*))?$",
                "line": 1,
                "column": 2,
                "severity": 3,
                "message": 4,
                "code": 5,
                "loop": True,
            },
        ],
    },
    {
        "name": "go",
        "owner": "go",
        "fileLocation": "relative",
        "pattern": {
            "regexp": r"^([^:]*: )?((.:)?[^:]*):(\d+)(:(\d+))?: (.*)$",
            "file": 2,
            "line": 4,
            "column": 6,
            "message": 7,
        },
    },
]


class _RaisingSink:
    def log(self, message: str) -> None:
        xmsg = f"Internal problem matcher definition invalid: {message}"
        raise AssertionError(xmsg)


@dataclass
class _BuiltinContext:
    status: ValidationStatus = field(default_factory=ValidationStatus)
    logger: DiagnosticSink = field(default_factory=_RaisingSink)


def load_builtins(target: ProblemMatcherRegistry) -> ProblemMatcherRegistry:
    """Parse every built-in definition into `target`.

    A built-in that fails to parse is a bug, so any diagnostic raises.
    """
    parser = ProblemMatcherParser(target, _BuiltinContext())
    for spec in BUILTIN_MATCHERS:
        matcher = parser.parse(spec)
        if matcher is None:  # pragma: no cover
            xmsg = f"Internal problem matcher definition invalid: {spec['name']}"
            raise AssertionError(xmsg)
        target.add(matcher)
    getAppLogger().trace(f"[registry] loaded {len(target)} built-in matchers")
    return target


builtin_registry: ProblemMatcherRegistry = load_builtins(ProblemMatcherRegistry())
