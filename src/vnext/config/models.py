"""Configuration models for vnext.

The models mirror the ``[tool.vnext]`` table in pyproject.toml. Every
field has a default, so an empty or missing table is a valid
configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vnext.core.commits import (
    DEFAULT_MAJOR_TYPES,
    DEFAULT_MINOR_TYPES,
    DEFAULT_NOOP_TYPES,
    CommitTypes,
)
from vnext.core.parsing import (
    DEFAULT_BODY_PATTERN,
    DEFAULT_BREAKING_PATTERN,
    DEFAULT_SCOPE_PATTERN,
    DEFAULT_TITLE_PATTERN,
    DEFAULT_TYPE_PATTERN,
)
from vnext.forge.github import DEFAULT_API_URL


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ParserConfig(_Model):
    """Commit parser selection and custom-strategy patterns."""

    strategy: str = "conventional"
    type_pattern: str = DEFAULT_TYPE_PATTERN
    scope_pattern: str = DEFAULT_SCOPE_PATTERN
    title_pattern: str = DEFAULT_TITLE_PATTERN
    body_pattern: str = DEFAULT_BODY_PATTERN
    breaking_pattern: str = DEFAULT_BREAKING_PATTERN


class CommitsConfig(_Model):
    """Mapping of commit types to bump levels.

    Types not listed anywhere trigger a patch bump.
    """

    types_major: list[str] = Field(default_factory=lambda: sorted(DEFAULT_MAJOR_TYPES))
    types_minor: list[str] = Field(default_factory=lambda: sorted(DEFAULT_MINOR_TYPES))
    types_noop: list[str] = Field(default_factory=lambda: sorted(DEFAULT_NOOP_TYPES))

    @field_validator("types_major", "types_minor", "types_noop", mode="before")
    @classmethod
    def _split_comma_separated(cls, value: object) -> object:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @model_validator(mode="after")
    def _check_disjoint(self) -> CommitsConfig:
        major, minor, noop = set(self.types_major), set(self.types_minor), set(self.types_noop)
        overlaps = (major & minor) | (major & noop) | (minor & noop)
        if overlaps:
            raise ValueError(
                f"commit types listed under more than one bump level: {', '.join(sorted(overlaps))}"
            )
        return self

    def to_commit_types(self) -> CommitTypes:
        return CommitTypes.from_lists(self.types_major, self.types_minor, self.types_noop)


class ChangelogConfig(_Model):
    """Changelog rendering options."""

    header_scaling: bool = True
    contributors: bool = True
    compare_link: bool = True


class GitHubConfig(_Model):
    """GitHub API settings used for contributor attribution."""

    api_url: str = DEFAULT_API_URL
    token: str | None = Field(default=None, repr=False)
    timeout: float = Field(default=10.0, gt=0)
    retries: int = Field(default=1, ge=0, le=1)


class VNextConfig(_Model):
    """Root configuration."""

    base_ref: str | None = None
    remote: str = "origin"
    parser: ParserConfig = Field(default_factory=ParserConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
