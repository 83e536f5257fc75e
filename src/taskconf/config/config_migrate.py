# src/taskconf/config/config_migrate.py
"""Deprecated-key migrations.

Each rule is a pure function returning the keys to add to a raw layer.
Rules run in order before resolution; a key the layer already sets is never
overwritten, so the current spelling wins over the legacy one.
"""

from collections.abc import Callable, Mapping
from typing import Any

from taskconf.logs import getAppLogger


MigrationRule = Callable[[Mapping[str, Any]], dict[str, Any]]


def _is_watching_to_is_background(raw: Mapping[str, Any]) -> dict[str, Any]:
    if "isWatching" in raw:
        return {"isBackground": raw["isWatching"]}
    return {}


MIGRATIONS: list[MigrationRule] = [
    _is_watching_to_is_background,
]


def apply_migrations(
    raw: Mapping[str, Any],
    rules: list[MigrationRule] | None = None,
) -> dict[str, Any]:
    """Return a copy of `raw` with every migration rule applied."""
    logger = getAppLogger()
    result = dict(raw)
    for rule in MIGRATIONS if rules is None else rules:
        for key, value in rule(result).items():
            if key not in result:
                logger.trace(f"[migrate] {rule.__name__}: {key}={value!r}")
                result[key] = value
    return result
