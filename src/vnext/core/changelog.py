"""Markdown changelog rendering.

The changelog lists every analyzed commit, newest first, as a bullet
holding the commit subject. Commit bodies follow the bullet, indented
so they stay attached to it. Nothing is filtered out here: no-op
commits are listed like any other.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vnext.core.commits import AuthorIdentity, ChangesetSummary, CommitRecord
    from vnext.core.version import Version
    from vnext.forge.base import ContributorResolver
    from vnext.vcs.remote import RepoInfo

logger = logging.getLogger(__name__)

BODY_INDENT = "  "
HEADER_SCALE_LEVELS = 3

# Only h1-h3 are demoted; the changelog sits under an h3 of its own.
_SCALABLE_HEADER = re.compile(r"^(#{1,3})(?= |$)")


@dataclass(frozen=True)
class ChangelogOptions:
    """Rendering switches.

    Attributes:
        contributors: Append ``(by @handle)`` when the author resolves
        header_scaling: Demote h1-h3 headers found in commit bodies
        compare_link: Append a link comparing the previous and next release
    """

    contributors: bool = False
    header_scaling: bool = True
    compare_link: bool = False


def scale_header(line: str) -> str:
    """Demote a level 1-3 markdown header by three levels.

    ``# Title`` becomes ``#### Title``; ``#### Title`` is left alone.
    """
    return _SCALABLE_HEADER.sub(lambda m: m.group(1) + "#" * HEADER_SCALE_LEVELS, line, count=1)


def format_body(message: str, *, header_scaling: bool = True) -> list[str]:
    """Indented body lines of a commit message (everything after the subject).

    Leading blank lines are dropped; blank lines inside the body are
    kept as-is, without the indent, so paragraphs stay separate.
    """
    lines = message.split("\n")[1:]
    while lines and not lines[0].strip():
        lines.pop(0)

    formatted = []
    for line in lines:
        if not line.strip():
            formatted.append(line)
            continue
        if header_scaling:
            line = scale_header(line)
        formatted.append(f"{BODY_INDENT}{line}")
    return formatted


class _HandleCache:
    """Per-render memo of author handles keyed by normalized identity."""

    def __init__(self, resolver: ContributorResolver) -> None:
        self._resolver = resolver
        self._handles: dict[tuple[str, str], str | None] = {}

    def get(self, author: AuthorIdentity, sha: str) -> str | None:
        if author.key not in self._handles:
            self._handles[author.key] = self._lookup(author, sha)
        return self._handles[author.key]

    def _lookup(self, author: AuthorIdentity, sha: str) -> str | None:
        try:
            return self._resolver.resolve_handle(author, sha)
        except Exception as e:
            logger.warning(f"Could not resolve contributor for {author.email or author.name}: {e}")
            return None


def _format_commit(
    record: CommitRecord,
    options: ChangelogOptions,
    handles: _HandleCache | None,
) -> list[str]:
    line = f"* {record.subject}"
    if handles is not None and record.author is not None:
        handle = handles.get(record.author, record.sha)
        if handle:
            line += f" (by @{handle})"

    lines = [line]
    body = format_body(record.message, header_scaling=options.header_scaling)
    if body:
        lines.append("")
        lines.extend(body)
    return lines


def render_changelog(
    summary: ChangesetSummary,
    next_version: Version,
    options: ChangelogOptions | None = None,
    *,
    previous_ref: str | None = None,
    repo_info: RepoInfo | None = None,
    resolver: ContributorResolver | None = None,
) -> str:
    """Render the changelog for a release.

    Args:
        summary: Classified commits, newest first
        next_version: Version being released
        options: Rendering switches
        previous_ref: Tag or ref of the previous release, for the compare link
        repo_info: Hosting location, for the compare link
        resolver: Contributor lookup used when ``options.contributors`` is set

    Returns:
        Markdown text without a trailing newline
    """
    options = options or ChangelogOptions()
    handles = _HandleCache(resolver) if options.contributors and resolver else None

    lines = [f"### What's changed in {next_version.tag}", ""]
    if summary.is_empty:
        lines.append("* No changes")
    for record in summary.commits:
        lines.extend(_format_commit(record, options, handles))

    if options.compare_link and previous_ref and repo_info is not None:
        next_ref = next_version.tag
        url = repo_info.compare_url(previous_ref, next_ref)
        lines.extend(["", f"See full diff: [{previous_ref}...{next_ref}]({url})"])

    return "\n".join(lines)
