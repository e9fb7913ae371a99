"""Contributor lookup interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from vnext.core.commits import AuthorIdentity


class ContributorResolver(Protocol):
    """Maps a commit author to a hosting-platform handle.

    Implementations return None instead of raising when the author
    cannot be resolved.
    """

    def resolve_handle(self, author: AuthorIdentity, sha: str) -> str | None: ...
