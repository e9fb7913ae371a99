"""Release planning: the entry points used by the command line.

A release plan ties together base resolution, commit parsing and bump
calculation for one repository and one configuration. The changelog is
rendered from the same plan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vnext.core.base import VersionBase, resolve_base
from vnext.core.changelog import ChangelogOptions, render_changelog
from vnext.core.commits import calculate_bump
from vnext.core.parsing import create_parser_from_config
from vnext.forge.github import GitHubContributorResolver
from vnext.vcs.remote import parse_remote_url

if TYPE_CHECKING:
    from vnext.config.models import VNextConfig
    from vnext.core.commits import ChangesetSummary
    from vnext.core.version import Version, VersionBump
    from vnext.forge.base import ContributorResolver
    from vnext.vcs.base import Repository
    from vnext.vcs.remote import RepoInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Outcome of analyzing a repository."""

    head: str
    base: VersionBase
    bump: VersionBump
    summary: ChangesetSummary
    next_version: Version

    @property
    def current_version(self) -> Version:
        return self.base.version

    @property
    def is_release_needed(self) -> bool:
        return self.next_version != self.current_version


def plan_release(repo: Repository, config: VNextConfig) -> ReleasePlan:
    """Analyze ``repo`` and decide the next version.

    Raises:
        ConfigError: If the parser configuration is invalid
        RepositoryError: If the repository is empty or unreadable
    """
    parser = create_parser_from_config(config.parser)
    types = config.commits.to_commit_types()

    head = repo.head_commit()
    base = resolve_base(repo, head, config.base_ref)
    bump, summary = calculate_bump(repo, base, head, parser, types)
    next_version = bump.apply(base.version)

    logger.debug(f"Current version {base.version}, next version {next_version}")
    return ReleasePlan(
        head=head,
        base=base,
        bump=bump,
        summary=summary,
        next_version=next_version,
    )


def compute_next_version(repo: Repository, config: VNextConfig) -> Version:
    """Next version; equal to the current one when nothing warrants a release."""
    return plan_release(repo, config).next_version


def compute_current_version(repo: Repository, config: VNextConfig) -> Version:
    """Version the next release is bumped from."""
    head = repo.head_commit()
    return resolve_base(repo, head, config.base_ref).version


def compute_changelog(
    repo: Repository,
    config: VNextConfig,
    resolver: ContributorResolver | None = None,
) -> str:
    """Render the changelog for the upcoming release.

    Contributor attribution uses ``resolver`` when given; otherwise a
    GitHub resolver is created for GitHub remotes when enabled.
    """
    plan = plan_release(repo, config)
    return render_release_changelog(plan, repo, config, resolver)


def render_release_changelog(
    plan: ReleasePlan,
    repo: Repository,
    config: VNextConfig,
    resolver: ContributorResolver | None = None,
) -> str:
    repo_info = _repo_info(repo, config.remote)
    options = ChangelogOptions(
        contributors=config.changelog.contributors,
        header_scaling=config.changelog.header_scaling,
        compare_link=config.changelog.compare_link and bool(repo_info and repo_info.is_github),
    )

    owned_resolver = None
    if options.contributors and resolver is None and repo_info is not None and repo_info.is_github:
        owned_resolver = GitHubContributorResolver.from_config(repo_info, config.github)
        resolver = owned_resolver

    try:
        return render_changelog(
            plan.summary,
            plan.next_version,
            options,
            previous_ref=plan.base.tag,
            repo_info=repo_info,
            resolver=resolver,
        )
    finally:
        if owned_resolver is not None:
            owned_resolver.close()


def _repo_info(repo: Repository, remote: str) -> RepoInfo | None:
    url = repo.remote_url(remote)
    if not url:
        return None
    info = parse_remote_url(url)
    if info is None:
        logger.debug(f"Unrecognized remote URL: {url}")
    return info
