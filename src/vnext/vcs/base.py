"""Read-only repository interface consumed by the version core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

    from vnext.core.version import Version


@dataclass(frozen=True)
class GitCommit:
    """A commit as read from version control."""

    sha: str
    message: str
    author_name: str = ""
    author_email: str = ""


@dataclass(frozen=True)
class VersionTag:
    """A strict ``vX.Y.Z`` release tag and the commit it points at."""

    name: str
    sha: str
    version: Version


class Repository(Protocol):
    """What the core needs from version control.

    Implementations never mutate the repository.
    """

    def head_commit(self) -> str: ...

    def resolve_ref(self, ref: str) -> str: ...

    def version_tags(self) -> list[VersionTag]: ...

    def merge_base(self, first: str, second: str) -> str: ...

    def first_parent_root(self, sha: str) -> str: ...

    def iter_commits(self, since: str | None, until: str) -> Iterator[GitCommit]: ...

    def remote_url(self, name: str = "origin") -> str | None: ...
