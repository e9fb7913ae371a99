"""GitHub REST API access for contributor attribution.

Handles are looked up through the commits endpoint, which links a
commit's git author to a GitHub account. Requests are bounded by a
timeout and retried at most ``retries`` times on transport errors and
5xx responses. Lookups never raise to the caller.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

import httpx

from vnext import __version__
from vnext.exceptions import GitHubError

if TYPE_CHECKING:
    from vnext.config.models import GitHubConfig
    from vnext.core.commits import AuthorIdentity
    from vnext.vcs.remote import RepoInfo

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# 12345+login@users.noreply.github.com or login@users.noreply.github.com
NOREPLY_EMAIL_PATTERN = re.compile(
    r"^(?:\d+\+)?(?P<login>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)@users\.noreply\.github\.com$",
    re.IGNORECASE,
)


def handle_from_noreply_email(email: str) -> str | None:
    """Extract the login from a GitHub noreply address."""
    match = NOREPLY_EMAIL_PATTERN.match(email.strip())
    return match.group("login") if match else None


class GitHubClient:
    """Minimal synchronous GitHub REST client for one repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        retries: int = 1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Optional token for authenticated requests
            api_url: API root (GitHub Enterprise uses ``https://host/api/v3``)
            timeout: Per-request timeout in seconds
            retries: Extra attempts after a transient failure
            transport: Custom transport, mainly for tests
        """
        self.owner = owner
        self.repo = repo
        self.retries = retries

        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"vnext/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def get_commit(self, sha: str) -> dict[str, Any]:
        """Fetch a commit, including the linked GitHub account.

        Raises:
            GitHubError: If the request fails or the commit is unknown
        """
        return self._get(f"/repos/{self.owner}/{self.repo}/commits/{sha}")

    def _get(self, path: str) -> dict[str, Any]:
        last_error = GitHubError(f"Request to {path} was not attempted")

        for attempt in range(self.retries + 1):
            if attempt:
                logger.debug(f"Retrying GET {path} (attempt {attempt + 1})")
            try:
                response = self._client.get(path)
            except httpx.TransportError as e:
                last_error = GitHubError(f"Request to {path} failed: {e}")
                continue

            if response.status_code >= 500:
                last_error = GitHubError(
                    f"GitHub API error: HTTP {response.status_code}",
                    status_code=response.status_code,
                )
                continue
            if response.status_code == 404:
                raise GitHubError(f"Not found: {path}", status_code=404)
            if response.status_code != 200:
                raise GitHubError(
                    f"GitHub API error: HTTP {response.status_code}",
                    status_code=response.status_code,
                )

            try:
                return response.json()
            except ValueError as e:
                raise GitHubError(f"Invalid JSON from {path}") from e

        raise last_error


class GitHubContributorResolver:
    """Resolves commit authors to GitHub handles."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    @classmethod
    def from_config(
        cls,
        repo_info: RepoInfo,
        config: GitHubConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> GitHubContributorResolver:
        client = GitHubClient(
            repo_info.owner,
            repo_info.name,
            token=config.token,
            api_url=config.api_url,
            timeout=config.timeout,
            retries=config.retries,
            transport=transport,
        )
        return cls(client)

    def close(self) -> None:
        self.client.close()

    def resolve_handle(self, author: AuthorIdentity, sha: str) -> str | None:
        handle = handle_from_noreply_email(author.email)
        if handle:
            return handle

        try:
            data = self.client.get_commit(sha)
        except GitHubError as e:
            if e.status_code == 404:
                logger.debug(f"Commit {sha[:8]} not found on GitHub; it may not be pushed yet")
            else:
                logger.warning(f"Failed to fetch author of {sha[:8]} from GitHub: {e}")
            return None

        account = data.get("author") or {}
        login = account.get("login") if isinstance(account, dict) else None
        if not login:
            logger.debug(f"No GitHub account linked to {author.email}")
        return login or None
