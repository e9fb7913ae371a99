"""Locating the commit that version analysis starts from."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vnext.core.version import Version

if TYPE_CHECKING:
    from vnext.vcs.base import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionBase:
    """Where analysis starts and which version it starts from.

    Attributes:
        commit: Base commit SHA
        version: Version released at (or assumed for) the base
        tag: Release tag or explicit ref the base came from, if any
        include_commit: Whether the base commit itself belongs to the
            analyzed range. Only true for the root commit of an untagged
            history.
    """

    commit: str
    version: Version
    tag: str | None = None
    include_commit: bool = False


def resolve_base(
    repo: Repository,
    head: str | None = None,
    base_ref: str | None = None,
) -> VersionBase:
    """Find the base commit and starting version.

    1. An explicit ``base_ref`` is used as-is.
    2. Otherwise the highest ``vX.Y.Z`` tag is used, and the base is the
       merge-base of the tag and HEAD so that branches merged after
       tagging are not counted twice.
    3. Without any release tag, analysis starts at the first-parent root
       of HEAD, from version 0.0.0.

    Raises:
        EmptyRepositoryError: If the repository has no commits
        GitError: If ``base_ref`` cannot be resolved
    """
    head = head or repo.head_commit()

    if base_ref:
        return _explicit_base(repo, base_ref)

    tags = repo.version_tags()
    if tags:
        latest = tags[0]
        base_commit = repo.merge_base(latest.sha, head)
        logger.debug(f"Last release: {latest.name} at {latest.sha[:8]}, base {base_commit[:8]}")
        return VersionBase(commit=base_commit, version=latest.version, tag=latest.name)

    root = repo.first_parent_root(head)
    logger.debug(f"No release tags found, starting from 0.0.0 at root {root[:8]}")
    return VersionBase(commit=root, version=Version(), include_commit=True)


def _explicit_base(repo: Repository, base_ref: str) -> VersionBase:
    commit = repo.resolve_ref(base_ref)

    version = Version.from_tag(base_ref)
    if version is None:
        tagged = [tag.version for tag in repo.version_tags() if tag.sha == commit]
        version = max(tagged) if tagged else Version()

    logger.debug(f"Using explicit base {base_ref} ({commit[:8]}) at version {version}")
    return VersionBase(commit=commit, version=version, tag=base_ref)
