"""Commit message parsing strategies.

Two strategies turn a raw commit message into a CommitRecord:

- ``conventional``: the Conventional Commits header
  ``type(scope)!: title`` followed by an optional body
- ``custom``: caller-supplied regular expressions, one per field, for
  histories that do not follow the convention

Parsers never raise on input; a message that does not fit the grammar
yields a record with an empty ``commit_type``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from vnext.core.commits import CommitRecord
from vnext.exceptions import InvalidPatternError, UnknownParserError

if TYPE_CHECKING:
    from vnext.config.models import ParserConfig
    from vnext.core.commits import AuthorIdentity

logger = logging.getLogger(__name__)

BREAKING_MARKER = "BREAKING CHANGE:"

# type(scope)!: title, matched against the first line only
CONVENTIONAL_HEADER_PATTERN = re.compile(
    r"^(?P<type>[\w-]+)"
    r"(?:\((?P<scope>[^)]*)\))?"
    r"(?P<breaking>!)?"
    r":\s*(?P<title>.*)$"
)

# The marker must open the body: subject, exactly one blank line, marker.
BREAKING_BODY_PATTERN = re.compile(r"\A[^\n]*\n\n" + re.escape(BREAKING_MARKER))

DEFAULT_TYPE_PATTERN = r"^([\w-]+)(?:\([^)]*\))?!?:"
DEFAULT_SCOPE_PATTERN = r"^[\w-]+\(([^)]*)\)!?:"
DEFAULT_TITLE_PATTERN = r"^[\w-]+(?:\([^)]*\))?!?:\s*(.*)"
DEFAULT_BODY_PATTERN = r"^[^\n]*\n(?:[ \t]*\n)*([\s\S]+)"
DEFAULT_BREAKING_PATTERN = r"^[^\n]*\n\nBREAKING CHANGE:|^[\w-]+(?:\([^)]*\))?!:"


class ParserStrategy(str, Enum):
    """Available parsing strategies."""

    CONVENTIONAL = "conventional"
    CUSTOM = "custom"

    @classmethod
    def from_name(cls, name: str) -> ParserStrategy:
        key = _STRATEGY_ALIASES.get(name.strip().lower(), name.strip().lower())
        try:
            return cls(key)
        except ValueError:
            raise UnknownParserError(name, [strategy.value for strategy in cls]) from None


_STRATEGY_ALIASES = {"custom-regex": "custom"}


class CommitParser(Protocol):
    """Turns raw commit messages into CommitRecords."""

    name: str

    def parse(
        self,
        sha: str,
        message: str,
        author: AuthorIdentity | None = None,
    ) -> CommitRecord: ...


def normalize_message(message: str) -> str:
    """Use ``\\n`` line endings and drop trailing whitespace."""
    return message.replace("\r\n", "\n").replace("\r", "\n").rstrip()


def strip_leading_blank_lines(text: str) -> str:
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    return "\n".join(lines)


class ConventionalCommitParser:
    """Parser for `Conventional Commits <https://www.conventionalcommits.org/>`_.

    A commit is breaking when any of these holds:

    - ``!`` directly before the colon (``feat!: ...``)
    - the type is ``major``
    - the first body line, right after the blank separator line,
      starts with ``BREAKING CHANGE:``
    """

    name = ParserStrategy.CONVENTIONAL.value

    def parse(
        self,
        sha: str,
        message: str,
        author: AuthorIdentity | None = None,
    ) -> CommitRecord:
        message = normalize_message(message)
        subject, _, rest = message.partition("\n")
        body = strip_leading_blank_lines(rest) or None

        match = CONVENTIONAL_HEADER_PATTERN.match(subject)
        if not match:
            logger.debug(f"Not a conventional commit: {subject!r}")
            return CommitRecord(
                sha=sha,
                message=message,
                title=subject,
                body=body,
                author=author,
            )

        commit_type = match.group("type")
        breaking_flag = match.group("breaking") is not None
        breaking_body = BREAKING_BODY_PATTERN.match(message) is not None
        is_major_type = commit_type == "major"

        if breaking_flag:
            logger.debug(f"{sha[:8]}: breaking change flag (!) present")
        if breaking_body:
            logger.debug(f"{sha[:8]}: {BREAKING_MARKER} opens the commit body")

        return CommitRecord(
            sha=sha,
            message=message,
            commit_type=commit_type,
            scope=match.group("scope") or None,
            is_breaking=breaking_flag or breaking_body or is_major_type,
            title=match.group("title").strip(),
            body=body,
            author=author,
        )


@dataclass(frozen=True)
class ParserPatterns:
    """Regular expressions used by the custom strategy.

    Each extracting pattern reads its field from capture group 1;
    ``breaking`` only needs to match.
    """

    type: str = DEFAULT_TYPE_PATTERN
    scope: str = DEFAULT_SCOPE_PATTERN
    title: str = DEFAULT_TITLE_PATTERN
    body: str = DEFAULT_BODY_PATTERN
    breaking: str = DEFAULT_BREAKING_PATTERN


class CustomRegexParser:
    """Parser driven by independently configurable regular expressions."""

    name = ParserStrategy.CUSTOM.value

    def __init__(self, patterns: ParserPatterns | None = None) -> None:
        """Compile the patterns once for the lifetime of the parser.

        Raises:
            InvalidPatternError: If any pattern does not compile
        """
        self.patterns = patterns or ParserPatterns()
        compiled = {}
        for item in fields(self.patterns):
            pattern = getattr(self.patterns, item.name)
            try:
                compiled[item.name] = re.compile(pattern)
            except re.error as e:
                raise InvalidPatternError(f"{item.name} pattern", pattern, str(e)) from e

        self._type_re = compiled["type"]
        self._scope_re = compiled["scope"]
        self._title_re = compiled["title"]
        self._body_re = compiled["body"]
        self._breaking_re = compiled["breaking"]

    def parse(
        self,
        sha: str,
        message: str,
        author: AuthorIdentity | None = None,
    ) -> CommitRecord:
        message = normalize_message(message)
        subject = message.partition("\n")[0]

        commit_type = _first_group(self._type_re, message) or ""
        scope = _first_group(self._scope_re, message) or None
        title = _first_group(self._title_re, message)
        body = _first_group(self._body_re, message)
        is_breaking = self._breaking_re.search(message) is not None

        logger.debug(
            f"{sha[:8]}: type={commit_type!r} scope={scope!r} breaking={is_breaking}"
        )

        return CommitRecord(
            sha=sha,
            message=message,
            commit_type=commit_type,
            scope=scope,
            is_breaking=is_breaking,
            title=title.strip() if title else subject,
            body=body.strip() if body and body.strip() else None,
            author=author,
        )


def _first_group(pattern: re.Pattern[str], text: str) -> str | None:
    if pattern.groups < 1:
        return None
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1)


def create_parser(strategy: str, patterns: ParserPatterns | None = None) -> CommitParser:
    """Build the parser for a strategy name.

    Args:
        strategy: ``conventional`` or ``custom`` (``custom-regex`` also accepted)
        patterns: Regex overrides for the custom strategy

    Raises:
        UnknownParserError: If the strategy name is not known
        InvalidPatternError: If a custom pattern does not compile
    """
    selected = ParserStrategy.from_name(strategy)
    logger.debug(f"Using {selected.value} commit parser")

    if selected == ParserStrategy.CUSTOM:
        return CustomRegexParser(patterns)
    return ConventionalCommitParser()


def create_parser_from_config(config: ParserConfig) -> CommitParser:
    """Build the parser described by the ``[tool.vnext.parser]`` table."""
    patterns = ParserPatterns(
        type=config.type_pattern,
        scope=config.scope_pattern,
        title=config.title_pattern,
        body=config.body_pattern,
        breaking=config.breaking_pattern,
    )
    return create_parser(config.strategy, patterns)
