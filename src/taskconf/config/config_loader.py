# src/taskconf/config/config_loader.py


from pathlib import Path
from typing import Any

from apathetic_logging import getLevelNumber

from taskconf.constants import DEFAULT_CONFIG_NAMES
from taskconf.logs import getAppLogger
from taskconf.utils_files import load_jsonc


def find_config(
    path_arg: str | Path | None,
    cwd: Path,
    *,
    missing_level: str = "error",
) -> Path | None:
    """Locate a task configuration file.

    missing_level: log-level for failing to find a configuration file.

    Search order:
      1. Explicit path (CLI positional argument)
      2. Default candidates, from `cwd` up to the filesystem root:
         tasks.json, .vscode/tasks.json

    Returns the first matching path, or None if no config was found.
    """
    logger = getAppLogger()

    try:
        getLevelNumber(missing_level)
    except ValueError:
        logger.error("Invalid log level name in find_config(): %s", missing_level)
        missing_level = "error"

    # --- 1. Explicit config path ---
    if path_arg:
        config = Path(path_arg).expanduser()
        if not config.is_absolute():
            config = cwd / config
        config = config.resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    # --- 2. Default candidates (closest level to cwd wins) ---
    current = cwd.resolve()
    while True:
        for name in DEFAULT_CONFIG_NAMES:
            candidate = current / name
            if candidate.is_file():
                logger.trace(f"[find_config] Found {candidate}")
                return candidate
        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    # Expected absence, soft failure
    logger.logDynamic(missing_level, f"No tasks.json found in {cwd} or parents")
    return None


def load_config(config_path: Path) -> dict[str, Any] | None:
    """Load a task configuration document (JSON with comments).

    Returns:
        The raw document, or None for an empty file.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: the file is not valid JSONC or its root is not an object.
    """
    logger = getAppLogger()
    logger.trace(f"[load_config] Loading from {config_path}")

    try:
        data = load_jsonc(config_path)
    except ValueError as e:
        xmsg = f"Error while loading configuration file '{config_path.name}': {e}"
        raise ValueError(xmsg) from e

    if data is not None and not isinstance(data, dict):
        xmsg = (
            f"Configuration file '{config_path.name}' must contain an object,"
            f" not {type(data).__name__}"
        )
        raise ValueError(xmsg)  # noqa: TRY004
    return data
