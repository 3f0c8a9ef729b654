from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from notelink.server.core.config.models import DocsConfigModel

logger = logging.getLogger(__name__)

__all__ = ["CONFIG_FILENAME", "find_config_file", "load_docs_config"]

CONFIG_FILENAME = "notelink.yml"


def find_config_file(start: Path | None = None) -> Path | None:
    """Find notelink.yml in ``start`` (default: cwd) or any parent directory.

    Returns:
        Path to the config file, or None if there is none
    """
    current = start or Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_docs_config(config_path: Path | str | None = None) -> DocsConfigModel:
    """Load and validate the documentation config.

    Args:
        config_path: Path to a YAML config file. If not provided, notelink.yml is
            searched for from the current directory upwards and defaults are
            used when none exists.

    Returns:
        The loaded and validated configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the file is not a YAML mapping or validation fails
    """
    if config_path is None:
        found = find_config_file()
        if found is None:
            logger.debug(f"No {CONFIG_FILENAME} found, using default docs config")
            return DocsConfigModel()
        path = found
    else:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found at {path}")

    with open(path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    try:
        return DocsConfigModel.model_validate(config)
    except ValidationError as exc:
        raise ValueError(f"Docs config validation error: {exc}") from exc
