# src/taskconf/logs.py

import logging
from typing import cast

from apathetic_logging import (
    Logger,
    registerDefaultLogLevel,
    registerLogger,
    registerLogLevelEnvVars,
)

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE


class AppLogger(Logger):
    """App-specific logger class."""


# --- Logger initialization ---------------------------------------------------

# Must happen before any loggers are created.
logging.setLoggerClass(AppLogger)

# Registers TRACE, SILENT and the other extra levels
AppLogger.extendLoggingModule()

# TASKCONF_LOG_LEVEL, then LOG_LEVEL, then the default
registerLogLevelEnvVars(
    [f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}", DEFAULT_ENV_LOG_LEVEL]
)
registerDefaultLogLevel(DEFAULT_LOG_LEVEL)

registerLogger(PROGRAM_PACKAGE)

# Created through logging.getLogger() so the manager tracks it and
# setLevel() invalidates its isEnabledFor() cache.
_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))

# The app logger owns its DualStreamHandler instead of relying on root.
_APP_LOGGER.setPropagate(False)
_APP_LOGGER.setLevel(_APP_LOGGER.determineLogLevel())


# --- Convenience utils ---------------------------------------------------------


def getAppLogger() -> AppLogger:  # noqa: N802
    """Return the configured app logger."""
    return _APP_LOGGER
