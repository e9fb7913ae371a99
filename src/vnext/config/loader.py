"""Configuration loading from pyproject.toml.

Settings live in the ``[tool.vnext]`` table of the nearest
pyproject.toml. Command line options are layered on top as a nested
dict of overrides; ``GITHUB_TOKEN`` fills in the API token.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vnext.config.models import VNextConfig
from vnext.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_KEY = "vnext"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any parent directory.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Read and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_vnext_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.vnext]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_KEY, {})


def merge_overrides(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``overrides`` into ``base``; None values are ignored."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_overrides(merged[key], value)
        elif isinstance(value, dict):
            merged[key] = merge_overrides({}, value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> VNextConfig:
    """Load configuration for the project at ``path``.

    Args:
        path: Project directory; the nearest pyproject.toml above it is used
        overrides: Nested values taking precedence over the file

    Returns:
        Validated configuration (defaults when no file or table exists)

    Raises:
        ConfigValidationError: If the file or the overrides are invalid
    """
    try:
        pyproject_path = find_pyproject_toml(path)
        raw = extract_vnext_config(load_pyproject_toml(pyproject_path))
        logger.debug(f"Loaded configuration from {pyproject_path}")
    except ConfigNotFoundError:
        logger.debug("No pyproject.toml found, using default configuration")
        raw = {}

    data = merge_overrides(raw, overrides or {})

    token = os.environ.get("GITHUB_TOKEN")
    if token and not data.get("github", {}).get("token"):
        data = merge_overrides(data, {"github": {"token": token}})

    try:
        return VNextConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_KEY}] configuration:\n{e}") from e
