# src/taskconf/cli.py

import argparse
import json
import platform
import sys
from difflib import get_close_matches
from pathlib import Path
from typing import Any

from apathetic_logging import LEVEL_ORDER, DualStreamHandler, safeLog

from .config import (
    PLATFORM_KEYS,
    ParseResult,
    ResolvedConfiguration,
    ResolvedTask,
    configuration_to_dict,
    find_config,
    load_config,
    parse,
)
from .logs import getAppLogger
from .meta import PROGRAM_SCRIPT, Metadata
from .utils_files import plural
from .validation import ValidationState, ValidationStatus


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # "unrecognized arguments: --platfrom linux"
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")

        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description="Resolve a tasks.json document and report the result.",
    )

    parser.add_argument(
        "config",
        nargs="?",
        metavar="PATH",
        help=(
            "Task configuration file. Defaults to tasks.json or"
            " .vscode/tasks.json in the current directory or a parent."
        ),
    )

    parser.add_argument(
        "--platform",
        choices=PLATFORM_KEYS,
        default=None,
        help="Platform overlay to apply (default: the running platform).",
    )

    # --- Runner kind ---
    terminal = parser.add_mutually_exclusive_group()
    terminal.add_argument(
        "--terminal",
        dest="terminal",
        action="store_const",
        const=True,
        help="Resolve as if tasks run in a terminal.",
    )
    terminal.add_argument(
        "--no-terminal",
        dest="terminal",
        action="store_const",
        const=False,
        help="Resolve as if tasks run as plain processes.",
    )
    terminal.set_defaults(terminal=None)

    # --- Output ---
    parser.add_argument(
        "--format",
        choices=["summary", "json"],
        default="summary",
        help="Output format (default: summary).",
    )
    parser.add_argument(
        "--by-name",
        action="store_true",
        help="In JSON output, key tasks by name instead of generated id.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail (exit 1) on warnings as well as errors.",
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = getAppLogger()
    log_level = logger.determineLogLevel(args=args)
    logger.setLevel(log_level)
    use_color = getattr(args, "use_color", None)
    logger.enable_color = (
        use_color if use_color is not None else logger.determineColorEnabled()
    )
    for handler in logger.handlers:
        if isinstance(handler, DualStreamHandler):
            handler.enable_color = logger.enable_color
    logger.trace("[BOOT] log-level initialized: %s", logger.levelName)

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


# --------------------------------------------------------------------------- #
# output
# --------------------------------------------------------------------------- #


def _status_to_dict(status: ValidationStatus) -> dict[str, Any]:
    return {
        "state": status.state.name,
        "fatals": list(status.fatals),
        "errors": list(status.errors),
        "warnings": list(status.warnings),
    }


def _command_line(task: ResolvedTask) -> str:
    command = task.command
    parts: list[str] = []
    if command is not None and command.name:
        parts.append(command.name)
        parts.extend(command.args or ())
    if task.args:
        parts.extend(task.args)
    if not task.suppress_task_name:
        parts.append(task.name)
    return " ".join(parts) if parts else "(no command)"


def _summary_lines(config: ResolvedConfiguration) -> list[str]:
    lines = [f"Tasks ({len(config.tasks)}):"]
    for task_id, task in sorted(config.tasks.items(), key=lambda kv: kv[1].name):
        markers = ""
        if task_id in config.build_tasks:
            markers += " [build]"
        if task_id in config.test_tasks:
            markers += " [test]"
        if task.is_background:
            markers += " [background]"
        lines.append(f"  - {task.name}: {_command_line(task)}{markers}")
    return lines


def _report(result: ParseResult, args: argparse.Namespace) -> None:
    logger = getAppLogger()
    status = result.validation_status
    config = result.configuration

    if args.format == "json":
        payload: dict[str, Any] = {"validation": _status_to_dict(status)}
        if config is not None:
            payload.update(configuration_to_dict(config, include_ids=not args.by_name))
        else:
            payload["tasks"] = None
        # data output goes straight to stdout, whatever the log level
        print(json.dumps(payload, indent=2))
        return

    if config is None:
        logger.error("No configuration produced (state: %s).", status.state.name)
    else:
        for line in _summary_lines(config):
            logger.info(line)
    logger.info(
        "Status: %s (%d error%s, %d warning%s)",
        status.state.name,
        len(status.errors) + len(status.fatals),
        plural(len(status.errors) + len(status.fatals)),
        len(status.warnings),
        plural(status.warnings),
    )


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = getAppLogger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        # --- Version flag ---
        if args.version:
            logger.info("%s", Metadata())
            return 0

        # --- Locate and load ---
        cwd = Path.cwd().resolve()
        config_path = find_config(args.config, cwd)
        if config_path is None:
            return 1
        logger.debug("Using config: %s", config_path)
        document = load_config(config_path)
        if document is None:
            logger.warning("%s is empty; nothing to resolve.", config_path.name)
            document = {}

        # --- Resolve ---
        result = parse(document, platform=args.platform, terminal=args.terminal)
        _report(result, args)

        threshold = ValidationState.WARNING if args.strict else ValidationState.ERROR
        if result.configuration is None or result.validation_status.state >= threshold:
            return 1

    except (FileNotFoundError, ValueError) as e:
        # controlled termination
        try:
            logger.errorIfNotDebug(str(e))
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.criticalIfNotDebug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return 1

    else:
        return 0
