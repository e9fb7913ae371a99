"""Semantic version values and bump decisions.

Versions are plain MAJOR.MINOR.PATCH triples. Release tags use the
strict ``vMAJOR.MINOR.PATCH`` form; anything else (pre-release
suffixes, missing components) is not treated as a release tag.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from vnext.exceptions import InvalidVersionError

VERSION_TAG_PATTERN = re.compile(r"^v(\d+)\.(\d+)\.(\d+)$")
_VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


class BumpType(str, Enum):
    """Which version component to increment."""

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class Version:
    """An immutable MAJOR.MINOR.PATCH version.

    Ordering compares major, then minor, then patch.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise InvalidVersionError(f"Version {name} must be a non-negative integer: {value!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def tag(self) -> str:
        """Release tag name for this version (e.g. ``v1.2.3``)."""
        return f"v{self}"

    @property
    def is_initial(self) -> bool:
        return self == Version()

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse ``1.2.3`` or ``v1.2.3``.

        Raises:
            InvalidVersionError: If the string is not a version triple
        """
        match = _VERSION_PATTERN.match(value.strip())
        if not match:
            raise InvalidVersionError(f"Invalid version '{value}': expected MAJOR.MINOR.PATCH")
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def from_tag(cls, tag: str) -> Version | None:
        """Return the version of a strict ``vX.Y.Z`` tag, or None."""
        match = VERSION_TAG_PATTERN.match(tag)
        if not match:
            return None
        return cls(*(int(part) for part in match.groups()))

    def bump(self, bump_type: BumpType) -> Version:
        """Return a new version with at most one component incremented."""
        if bump_type == BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        return self


@dataclass
class VersionBump:
    """Monotone accumulator of bump flags over a commit range.

    Flags only ever go from False to True.
    """

    major: bool = False
    minor: bool = False
    patch: bool = False

    def record(self, bump_type: BumpType) -> None:
        if bump_type == BumpType.MAJOR:
            self.major = True
        elif bump_type == BumpType.MINOR:
            self.minor = True
        elif bump_type == BumpType.PATCH:
            self.patch = True

    @property
    def level(self) -> BumpType:
        """The dominant bump: major beats minor beats patch."""
        if self.major:
            return BumpType.MAJOR
        if self.minor:
            return BumpType.MINOR
        if self.patch:
            return BumpType.PATCH
        return BumpType.NONE

    def apply(self, version: Version) -> Version:
        return version.bump(self.level)
