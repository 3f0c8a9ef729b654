import importlib
import json
import logging
import logging.handlers
import os
import sys
import traceback
from pathlib import Path
from typing import Any

import click

from notelink.server.core.config.models import LoggingConfigModel

DEBUG_ENV = "NOTELINK_DEBUG"

logger = logging.getLogger(__name__)


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Read a boolean flag ("1", "true" or "yes") from the environment."""
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(
    debug: bool = False,
    log_file: Path | None = None,
    log_level: str | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Route log records to stderr and, optionally, a rotating file.

    Args:
        debug: Log everything; also enabled by ``NOTELINK_DEBUG``
        log_file: Rotating log file, created with its parent directories
        log_level: Level name used when not in debug mode (default WARNING)
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files kept next to the log file
    """
    if debug or get_env_flag(DEBUG_ENV):
        level = logging.DEBUG
    else:
        level = logging.getLevelName((log_level or "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    stderr = logging.StreamHandler(sys.stderr)
    stderr.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root.addHandler(stderr)

    if log_file is None:
        return
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
    except OSError as e:
        logger.warning(f"File logging to {log_file} disabled: {e}")
        return
    rotating.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    root.addHandler(rotating)


def configure_logging_from_config(logging_config: LoggingConfigModel, debug: bool = False) -> None:
    """Apply the ``logging`` section of notelink.yml."""
    if not logging_config.enabled:
        configure_logging(debug=debug)
        return
    configure_logging(
        debug=debug,
        log_file=Path(logging_config.path) if logging_config.path else None,
        log_level=logging_config.level,
        max_bytes=logging_config.max_bytes,
        backup_count=logging_config.backup_count,
    )


def load_object(target: str) -> Any:
    """Import ``module:attribute`` (the attribute may be dotted).

    Raises:
        ValueError: If the target is malformed or the attribute does not exist
        ImportError: If the module cannot be imported
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid target '{target}', expected 'module:attribute'")

    # Allow targets relative to the working directory
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    obj: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"'{module_name}' has no attribute '{attr_path}'") from None
    return obj


def output_json(result: Any) -> None:
    """Print a successful command result as a ``{"status": "ok"}`` envelope."""
    click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Report a failed command and abort with a non-zero exit code.

    In debug mode the exception type and traceback are included.
    """
    payload: dict[str, Any] = {"status": "error", "error": str(error)}
    if debug:
        payload["type"] = type(error).__name__
        payload["traceback"] = traceback.format_exc()

    if json_output:
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(f"Error: {payload['error']}", err=True)
        if debug:
            click.echo(f"\n{payload['traceback']}", err=True)

    raise click.Abort()
