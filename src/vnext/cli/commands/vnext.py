"""Implementation of the default 'vnext' command.

Prints the next version, the current version or the changelog for the
repository at the given path.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from vnext.config import load_config
from vnext.core.release import compute_current_version, plan_release, render_release_changelog
from vnext.exceptions import ConfigError, RepositoryError, VNextError
from vnext.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

_ERROR_LABELS: list[tuple[type[VNextError], str]] = [
    (ConfigError, "Configuration error"),
    (RepositoryError, "Repository error"),
    (VNextError, "Error"),
]


def run_vnext(
    path: str | None,
    overrides: dict[str, Any],
    show_changelog: bool,
    show_current: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the vnext command.

    Args:
        path: Optional path inside the repository
        overrides: Configuration values from command line options
        show_changelog: Print the changelog instead of the version
        show_current: Print the version being bumped from
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path, overrides)
        repo = GitRepository(project_path)

        if show_current:
            output = str(compute_current_version(repo, config))
        else:
            plan = plan_release(repo, config)
            if show_changelog:
                output = render_release_changelog(plan, repo, config)
            else:
                output = str(plan.next_version)
    except VNextError as e:
        _report(e, err_console)
        raise SystemExit(e.exit_code) from e

    # stdout must match the rendered text byte for byte.
    console.file.write(f"{output}\n")


def _report(error: VNextError, err_console: Console) -> None:
    label = next(text for kind, text in _ERROR_LABELS if isinstance(error, kind))
    err_console.print(f"[red]{label}:[/] {escape(str(error))}", highlight=False, soft_wrap=True)
