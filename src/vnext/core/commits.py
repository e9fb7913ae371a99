"""Commit records, classification and bump aggregation.

Each commit in the analyzed range is parsed once into a CommitRecord,
classified into a BumpType, and folded into a VersionBump plus a
ChangesetSummary that keeps every commit for the changelog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vnext.core.version import BumpType, VersionBump
from vnext.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vnext.core.base import VersionBase
    from vnext.core.parsing import CommitParser
    from vnext.vcs.base import Repository

logger = logging.getLogger(__name__)

DEFAULT_MAJOR_TYPES = frozenset({"major"})
DEFAULT_MINOR_TYPES = frozenset({"feat", "minor"})
DEFAULT_NOOP_TYPES = frozenset({"chore", "noop"})


@dataclass(frozen=True)
class AuthorIdentity:
    """Commit author as recorded by git."""

    name: str
    email: str

    @property
    def key(self) -> tuple[str, str]:
        """Normalized identity used to deduplicate lookups."""
        return (self.name.strip().lower(), self.email.strip().lower())


@dataclass(frozen=True)
class CommitRecord:
    """A parsed commit.

    Attributes:
        sha: Commit SHA
        message: Full commit message as read from git
        commit_type: Commit type, empty when the message did not match the grammar
        scope: Optional scope
        is_breaking: Whether any breaking change trigger fired
        title: Subject line without the type/scope prefix
        body: Message body after the subject, or None
        author: Author identity, if known
    """

    sha: str
    message: str
    commit_type: str = ""
    scope: str | None = None
    is_breaking: bool = False
    title: str = ""
    body: str | None = None
    author: AuthorIdentity | None = None

    @property
    def subject(self) -> str:
        """First line of the raw message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class CommitTypes:
    """Disjoint sets of commit types mapped to bump levels.

    Any type not listed here (including the empty type) is a patch.
    """

    major: frozenset[str] = DEFAULT_MAJOR_TYPES
    minor: frozenset[str] = DEFAULT_MINOR_TYPES
    noop: frozenset[str] = DEFAULT_NOOP_TYPES

    def __post_init__(self) -> None:
        overlaps = (
            (self.major & self.minor)
            | (self.major & self.noop)
            | (self.minor & self.noop)
        )
        if overlaps:
            raise ConfigValidationError(
                f"Commit types must map to a single bump level: {', '.join(sorted(overlaps))}"
            )

    @classmethod
    def from_lists(
        cls,
        major: Iterable[str],
        minor: Iterable[str],
        noop: Iterable[str],
    ) -> CommitTypes:
        return cls(frozenset(major), frozenset(minor), frozenset(noop))


@dataclass
class ChangesetSummary:
    """Tally of classified commits in traversal order (newest first)."""

    major_count: int = 0
    minor_count: int = 0
    patch_count: int = 0
    noop_count: int = 0
    commits: list[CommitRecord] = field(default_factory=list)

    def add(self, record: CommitRecord, bump_type: BumpType) -> None:
        if bump_type == BumpType.MAJOR:
            self.major_count += 1
        elif bump_type == BumpType.MINOR:
            self.minor_count += 1
        elif bump_type == BumpType.PATCH:
            self.patch_count += 1
        else:
            self.noop_count += 1
        self.commits.append(record)

    @property
    def is_empty(self) -> bool:
        return not self.commits


def classify_commit(record: CommitRecord, types: CommitTypes) -> BumpType:
    """Map a parsed commit to the bump it requires.

    Breaking changes win over everything, then the configured
    major/minor/no-op types; whatever remains is a patch.
    """
    if record.is_breaking:
        return BumpType.MAJOR
    if record.commit_type in types.major:
        return BumpType.MAJOR
    if record.commit_type in types.minor:
        return BumpType.MINOR
    if record.commit_type in types.noop:
        return BumpType.NONE
    return BumpType.PATCH


def summarize_commits(
    records: Iterable[CommitRecord],
    types: CommitTypes,
) -> tuple[VersionBump, ChangesetSummary]:
    """Fold parsed commits into a bump decision and summary."""
    bump = VersionBump()
    summary = ChangesetSummary()

    for record in records:
        bump_type = classify_commit(record, types)
        logger.debug(f"{record.sha[:8]} {record.subject!r} -> {bump_type}")
        bump.record(bump_type)
        summary.add(record, bump_type)

    return bump, summary


def calculate_bump(
    repo: Repository,
    base: VersionBase,
    head: str,
    parser: CommitParser,
    types: CommitTypes,
) -> tuple[VersionBump, ChangesetSummary]:
    """Walk ``base..head`` and decide the version bump.

    Args:
        repo: Repository to read commits from
        base: Resolved base; its commit is excluded unless ``include_commit``
        head: Commit SHA to stop at (inclusive)
        parser: Commit message parser
        types: Commit type classification

    Returns:
        The accumulated bump flags and the changeset summary
    """
    since = None if base.include_commit else base.commit
    logger.debug(f"Analyzing commits {since or '<root>'}..{head} with {parser.name} parser")

    records = (
        parser.parse(commit.sha, commit.message, _author_of(commit.author_name, commit.author_email))
        for commit in repo.iter_commits(since, head)
    )
    bump, summary = summarize_commits(records, types)

    logger.debug(
        f"Bump flags: major={bump.major}, minor={bump.minor}, patch={bump.patch} "
        f"({len(summary.commits)} commits, {summary.noop_count} no-op)"
    )
    return bump, summary


def _author_of(name: str, email: str) -> AuthorIdentity | None:
    if not name and not email:
        return None
    return AuthorIdentity(name=name, email=email)
