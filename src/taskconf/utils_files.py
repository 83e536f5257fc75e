# src/taskconf/utils_files.py

import json
import re
from pathlib import Path
from typing import Any

from .logs import getAppLogger


# A double-quoted string is matched first so comment markers and commas
# inside it are never touched.
_STRING = r'"(?:\\.|[^"\\])*"'
_COMMENTS = re.compile(
    rf"(?P<string>{_STRING})|(?P<line>(?://|\#)[^\n]*)|(?P<block>/\*.*?(?:\*/|\Z))",
    re.DOTALL,
)
_TRAILING_COMMAS = re.compile(rf"(?P<string>{_STRING})|,(?=\s*[}}\]])")


def _drop_comment(match: re.Match[str]) -> str:
    if match.group("string") is not None:
        return match.group("string")
    if match.group("block") is not None:
        # keep line numbers stable for syntax errors
        return "\n" * match.group("block").count("\n") or " "
    return ""


def strip_jsonc(text: str) -> str:
    """Reduce JSONC to plain JSON.

    Removes `//`, `#` and `/* */` comments and trailing commas before
    `}` or `]`. String contents are left alone.
    """
    text = _COMMENTS.sub(_drop_comment, text)
    return _TRAILING_COMMAS.sub(lambda m: m.group("string") or "", text)


def load_jsonc(path: Path) -> Any:
    """Load a JSONC file.

    Returns None when the file holds nothing but whitespace and comments.

    Raises:
        FileNotFoundError: `path` does not exist.
        ValueError: `path` is not a file, or its content is not valid JSONC.
            The message does not repeat the path.
    """
    logger = getAppLogger()
    logger.trace(f"[load_jsonc] Loading from {path}")

    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)
    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = strip_jsonc(path.read_text(encoding="utf-8"))
    if not text.strip():
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = f"Invalid JSONC syntax: {e.msg} (line {e.lineno}, column {e.colno})"
        raise ValueError(xmsg) from e

    logger.trace(f"[load_jsonc] Loaded {type(data).__name__}")
    return data


def plural(obj: Any) -> str:
    """'s' unless `obj` (a number or a sized collection) counts exactly one."""
    count = obj if isinstance(obj, (int, float)) else len(obj)
    return "" if count == 1 else "s"
