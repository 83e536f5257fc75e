# tests/9_integration/test_version.py
"""Tests for --version."""

import re

import pytest

import taskconf
import taskconf.cli as mod_cli
import taskconf.meta as mod_meta
from tests.utils import PROJ_ROOT


def test_version_flag(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Should print the program name and version and exit cleanly."""
    # --- setup ---
    monkeypatch.delenv(f"{mod_meta.PROGRAM_ENV}_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    # --- execute ---
    code = mod_cli.main(["--version"])
    out = capsys.readouterr().out.lower()

    # --- verify ---
    assert code == 0
    assert mod_meta.PROGRAM_DISPLAY.lower() in out
    assert re.search(r"\d+\.\d+\.\d+", out)


def test_package_version_matches_meta() -> None:
    # --- execute and verify ---
    assert taskconf.__version__ == mod_meta.VERSION
    assert str(mod_meta.Metadata()) == f"{mod_meta.PROGRAM_DISPLAY} {mod_meta.VERSION}"


def test_pyproject_version_matches_meta() -> None:
    # --- setup ---
    pyproject = (PROJ_ROOT / "pyproject.toml").read_text(encoding="utf-8")

    # --- execute ---
    match = re.search(r'^version = "([^"]+)"', pyproject, re.MULTILINE)

    # --- verify ---
    assert match is not None
    assert match.group(1) == mod_meta.VERSION
