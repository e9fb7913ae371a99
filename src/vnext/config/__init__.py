"""Configuration management for vnext."""

from __future__ import annotations

from vnext.config.loader import load_config
from vnext.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    ParserConfig,
    VNextConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "GitHubConfig",
    "ParserConfig",
    "VNextConfig",
    "load_config",
]
