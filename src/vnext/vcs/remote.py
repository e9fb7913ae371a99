"""Remote URL parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

_SCP_LIKE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/][^:]*)$")


@dataclass(frozen=True)
class RepoInfo:
    """Hosting location of a repository."""

    host: str
    owner: str
    name: str

    @property
    def is_github(self) -> bool:
        return self.host.lower() in ("github.com", "www.github.com")

    @property
    def web_url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.name}"

    def compare_url(self, previous: str, current: str) -> str:
        return f"{self.web_url}/compare/{previous}...{current}"


def parse_remote_url(url: str) -> RepoInfo | None:
    """Extract host, owner and name from a git remote URL.

    Handles ``git@github.com:owner/repo.git``, ``ssh://`` and
    ``https://`` forms. Returns None for anything else, including
    local paths.
    """
    url = url.strip()
    if "://" in url:
        parsed = urlparse(url)
        host = parsed.hostname
        path = parsed.path
    else:
        match = _SCP_LIKE.match(url)
        if not match:
            return None
        host = match.group("host")
        path = match.group("path")

    if not host:
        return None

    parts = [part for part in path.strip("/").split("/") if part]
    if len(parts) < 2:
        return None

    owner, name = parts[-2], parts[-1]
    name = name.removesuffix(".git")
    if not name:
        return None
    return RepoInfo(host=host, owner=owner, name=name)
