"""Version control access."""

from __future__ import annotations

from vnext.vcs.base import GitCommit, Repository, VersionTag
from vnext.vcs.git import GitRepository
from vnext.vcs.remote import RepoInfo, parse_remote_url

__all__ = [
    "GitCommit",
    "GitRepository",
    "RepoInfo",
    "Repository",
    "VersionTag",
    "parse_remote_url",
]
