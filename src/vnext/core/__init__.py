"""Core business logic for vnext.

This module contains the fundamental building blocks:
- Version values and bump decisions
- Commit message parsing strategies
- Base commit resolution and bump calculation
- Changelog rendering
- Release planning
"""

from __future__ import annotations

from vnext.core.base import VersionBase, resolve_base
from vnext.core.changelog import ChangelogOptions, render_changelog
from vnext.core.commits import (
    AuthorIdentity,
    ChangesetSummary,
    CommitRecord,
    CommitTypes,
    calculate_bump,
    classify_commit,
)
from vnext.core.parsing import (
    ConventionalCommitParser,
    CustomRegexParser,
    ParserPatterns,
    ParserStrategy,
    create_parser,
)
from vnext.core.release import (
    ReleasePlan,
    compute_changelog,
    compute_current_version,
    compute_next_version,
    plan_release,
)
from vnext.core.version import BumpType, Version, VersionBump

__all__ = [
    # Commits
    "AuthorIdentity",
    # Version
    "BumpType",
    # Changelog
    "ChangelogOptions",
    "ChangesetSummary",
    # Parsing
    "ConventionalCommitParser",
    "CommitRecord",
    "CommitTypes",
    "CustomRegexParser",
    "ParserPatterns",
    "ParserStrategy",
    # Release
    "ReleasePlan",
    "Version",
    "VersionBase",
    "VersionBump",
    "calculate_bump",
    "classify_commit",
    "compute_changelog",
    "compute_current_version",
    "compute_next_version",
    "create_parser",
    "plan_release",
    "render_changelog",
    "resolve_base",
]
