"""Git repository access through the git executable.

Every operation here is a read: vnext never writes to the
repository it analyzes.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from vnext.core.version import Version
from vnext.exceptions import EmptyRepositoryError, GitError, NotAGitRepositoryError
from vnext.vcs.base import GitCommit, VersionTag

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = f"%H{_FIELD_SEP}%an{_FIELD_SEP}%ae{_FIELD_SEP}%B{_RECORD_SEP}"


class GitRepository:
    """Read-only view of a local git repository."""

    def __init__(self, path: str | Path = ".") -> None:
        """Open the repository containing ``path``.

        Args:
            path: Any path inside the working tree

        Raises:
            NotAGitRepositoryError: If ``path`` is not inside a git repository
        """
        self._cwd = Path(path).resolve()
        if not self._cwd.exists():
            raise NotAGitRepositoryError(f"Path does not exist: {self._cwd}")
        if self._cwd.is_file():
            self._cwd = self._cwd.parent
        result = self._run("rev-parse", "--show-toplevel", check=False, cwd=self._cwd)
        if result.returncode != 0:
            raise NotAGitRepositoryError(f"Not a git repository: {self._cwd}")
        self.path = Path(result.stdout.strip())

    def _run(
        self,
        *args: str,
        check: bool = True,
        cwd: Path | None = None,
    ) -> subprocess.CompletedProcess[str]:
        cmd = ["git", *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd or self.path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            raise GitError(f"git {' '.join(args)} failed", stderr=result.stderr)
        return result

    def head_commit(self) -> str:
        """Return the commit SHA of HEAD.

        Raises:
            EmptyRepositoryError: If the repository has no commits yet
        """
        result = self._run("rev-parse", "--verify", "--quiet", "HEAD^{commit}", check=False)
        if result.returncode != 0:
            raise EmptyRepositoryError(f"Repository at {self.path} has no commits")
        return result.stdout.strip()

    def resolve_ref(self, ref: str) -> str:
        """Resolve a branch, tag or SHA to a commit SHA."""
        result = self._run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", check=False)
        if result.returncode != 0:
            raise GitError(f"Cannot resolve '{ref}' to a commit")
        return result.stdout.strip()

    def version_tags(self) -> list[VersionTag]:
        """List strict ``vX.Y.Z`` tags, highest version first.

        Annotated tags are peeled to the commit they point at.
        """
        result = self._run(
            "for-each-ref",
            "--format=%(refname:short)%09%(objectname)%09%(*objectname)",
            "refs/tags",
        )
        tags = []
        for line in result.stdout.splitlines():
            name, sha, peeled = (line.split("\t") + ["", ""])[:3]
            version = Version.from_tag(name)
            if version is None:
                continue
            tags.append(VersionTag(name=name, sha=peeled or sha, version=version))

        tags.sort(key=lambda tag: (tag.version, tag.name), reverse=True)
        return tags

    def merge_base(self, first: str, second: str) -> str:
        result = self._run("merge-base", first, second, check=False)
        if result.returncode != 0:
            raise GitError(f"No common ancestor between {first[:8]} and {second[:8]}")
        return result.stdout.strip()

    def first_parent_root(self, sha: str) -> str:
        """Follow first parents from ``sha`` down to the root commit."""
        result = self._run("rev-list", "--first-parent", "--max-parents=0", sha)
        roots = result.stdout.split()
        if not roots:
            raise GitError(f"No root commit reachable from {sha[:8]}")
        return roots[0]

    def iter_commits(self, since: str | None, until: str) -> Iterator[GitCommit]:
        """Yield commits in ``since..until``, newest first.

        Args:
            since: Exclusive lower bound, or None for the full history
            until: Inclusive upper bound
        """
        rev_range = f"{since}..{until}" if since else until
        result = self._run("log", f"--format={_LOG_FORMAT}", rev_range)

        for record in result.stdout.split(_RECORD_SEP):
            record = record.lstrip("\n")
            if not record:
                continue
            sha, author_name, author_email, message = record.split(_FIELD_SEP, 3)
            yield GitCommit(
                sha=sha,
                message=message.rstrip(),
                author_name=author_name,
                author_email=author_email,
            )

    def remote_url(self, name: str = "origin") -> str | None:
        result = self._run("remote", "get-url", name, check=False)
        if result.returncode != 0:
            logger.debug(f"No remote named {name}")
            return None
        return result.stdout.strip() or None
