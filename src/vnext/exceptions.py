"""Exception hierarchy for vnext.

All errors raised by vnext derive from VNextError so callers can
catch a single base class. Each family carries the process exit code
the CLI uses when it surfaces the error.
"""

from __future__ import annotations


class VNextError(Exception):
    """Base class for all vnext errors."""

    exit_code = 1


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(VNextError):
    """Invalid or unusable configuration."""

    exit_code = 2


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


class UnknownParserError(ConfigError):
    """The requested commit parser strategy does not exist."""

    def __init__(self, strategy: str, available: list[str]) -> None:
        self.strategy = strategy
        self.available = available
        super().__init__(
            f"Unknown parser strategy '{strategy}'. Available strategies: {', '.join(available)}"
        )


class InvalidPatternError(ConfigError):
    """A regular expression override does not compile."""

    def __init__(self, field: str, pattern: str, reason: str) -> None:
        self.field = field
        self.pattern = pattern
        super().__init__(f"Invalid {field} regex '{pattern}': {reason}")


# =============================================================================
# Repository errors
# =============================================================================


class RepositoryError(VNextError):
    """The repository cannot be analyzed."""

    exit_code = 3


class NotAGitRepositoryError(RepositoryError):
    """The path is not inside a git repository."""


class EmptyRepositoryError(RepositoryError):
    """The repository has no commits yet."""


class GitError(RepositoryError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


# =============================================================================
# Other errors
# =============================================================================


class InvalidVersionError(VNextError):
    """A version string is not a MAJOR.MINOR.PATCH triple."""


class GitHubError(VNextError):
    """A GitHub API request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
