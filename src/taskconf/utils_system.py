# src/taskconf/utils_system.py

import sys


def detect_platform(sys_platform: str | None = None) -> str:
    """Map `sys.platform` onto a document platform key.

    Returns "windows", "osx" or "linux"; anything that is neither Windows
    nor macOS is treated as Linux.
    """
    value = sys.platform if sys_platform is None else sys_platform
    if value.startswith(("win32", "cygwin", "msys")):
        return "windows"
    if value.startswith("darwin"):
        return "osx"
    return "linux"
