"""Code-hosting platform integrations."""

from __future__ import annotations

from vnext.forge.base import ContributorResolver
from vnext.forge.github import GitHubClient, GitHubContributorResolver

__all__ = [
    "ContributorResolver",
    "GitHubClient",
    "GitHubContributorResolver",
]
