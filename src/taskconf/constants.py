# src/taskconf/constants.py
"""Central constants used across the project."""


# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"

# --- config discovery ---
# searched in order, from the working directory upwards
DEFAULT_CONFIG_NAMES: tuple[str, ...] = ("tasks.json", ".vscode/tasks.json")

# --- document defaults ---
WORKSPACE_ROOT_PLACEHOLDER: str = "${workspaceRoot}"
TERMINAL_RUNNER: str = "terminal"
BUILD_TASK_NAME: str = "build"
TEST_TASK_NAME: str = "test"

# --- problem matcher defaults ---
DEFAULT_MATCHER_OWNER: str = "external"
MATCHER_REFERENCE_PREFIX: str = "$"
