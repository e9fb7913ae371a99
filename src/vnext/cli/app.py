"""CLI entry point for vnext."""

from __future__ import annotations

from typing import Any

import click
from rich.console import Console

from vnext import __version__
from vnext.cli.commands.vnext import run_vnext
from vnext.logs import setup_logging


def _split_types(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def build_overrides(
    *,
    base_ref: str | None = None,
    parser: str | None = None,
    type_pattern: str | None = None,
    scope_pattern: str | None = None,
    title_pattern: str | None = None,
    body_pattern: str | None = None,
    breaking_pattern: str | None = None,
    major_types: str | None = None,
    minor_types: str | None = None,
    noop_types: str | None = None,
    no_header_scaling: bool = False,
    no_contributors: bool = False,
    no_compare_link: bool = False,
) -> dict[str, Any]:
    """Translate command line options into nested configuration overrides.

    Options left unset are None and do not override the file.
    """
    return {
        "base_ref": base_ref,
        "parser": {
            "strategy": parser,
            "type_pattern": type_pattern,
            "scope_pattern": scope_pattern,
            "title_pattern": title_pattern,
            "body_pattern": body_pattern,
            "breaking_pattern": breaking_pattern,
        },
        "commits": {
            "types_major": _split_types(major_types),
            "types_minor": _split_types(minor_types),
            "types_noop": _split_types(noop_types),
        },
        "changelog": {
            "header_scaling": False if no_header_scaling else None,
            "contributors": False if no_contributors else None,
            "compare_link": False if no_compare_link else None,
        },
    }


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="vnext")
@click.option("--path", type=click.Path(file_okay=False), help="Repository path (default: cwd).")
@click.option("--changelog", is_flag=True, help="Print the changelog for the next version.")
@click.option("--current", is_flag=True, help="Print the version vnext is bumping from.")
@click.option(
    "--no-header-scaling",
    is_flag=True,
    help="Keep markdown headers in commit bodies as-is (default scales h1-h3 to h4-h6).",
)
@click.option("--no-contributors", is_flag=True, help="Do not attribute commits to GitHub users.")
@click.option("--no-compare-link", is_flag=True, help="Omit the 'See full diff' link.")
@click.option("--parser", help="Commit parser strategy: conventional or custom.")
@click.option("--type-pattern", help="Regex for the commit type (custom parser).")
@click.option("--scope-pattern", help="Regex for the commit scope (custom parser).")
@click.option("--title-pattern", help="Regex for the commit title (custom parser).")
@click.option("--body-pattern", help="Regex for the commit body (custom parser).")
@click.option("--breaking-pattern", help="Regex marking a breaking change (custom parser).")
@click.option("--major-types", help="Comma-separated commit types that bump major.")
@click.option("--minor-types", help="Comma-separated commit types that bump minor.")
@click.option("--noop-types", help="Comma-separated commit types that never bump.")
@click.option("--base-ref", help="Analyze commits after this ref instead of the latest tag.")
@click.option("--log-level", envvar="LOG_LEVEL", help="Log level (default: WARNING).")
def cli(
    path: str | None,
    changelog: bool,
    current: bool,
    log_level: str | None,
    **options: Any,
) -> None:
    """Calculate the next version based on conventional commits."""
    if changelog and current:
        raise click.UsageError("--changelog and --current are mutually exclusive.")

    err_console = Console(stderr=True)
    setup_logging(log_level, err_console)

    run_vnext(
        path,
        build_overrides(**options),
        show_changelog=changelog,
        show_current=current,
        console=Console(),
        err_console=err_console,
    )


def main() -> None:
    cli()
