"""Tests for commit classification and bump calculation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from vnext.core.base import VersionBase
from vnext.core.commits import (
    AuthorIdentity,
    ChangesetSummary,
    CommitTypes,
    calculate_bump,
    classify_commit,
    summarize_commits,
)
from vnext.core.parsing import ConventionalCommitParser
from vnext.core.version import BumpType, Version
from vnext.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from tests.conftest import FakeRepository
    from vnext.core.commits import CommitRecord


class TestClassifyCommit:
    """Tests for classify_commit()."""

    @pytest.mark.parametrize(
        ("commit_type", "expected"),
        [
            ("major", BumpType.MAJOR),
            ("feat", BumpType.MINOR),
            ("minor", BumpType.MINOR),
            ("chore", BumpType.NONE),
            ("noop", BumpType.NONE),
            ("fix", BumpType.PATCH),
            ("docs", BumpType.PATCH),
            ("", BumpType.PATCH),
        ],
    )
    def test_default_types(
        self,
        make_record: Callable[..., CommitRecord],
        commit_type: str,
        expected: BumpType,
    ):
        """Default type sets; unknown and empty types are patches."""
        record = make_record(commit_type=commit_type)
        assert classify_commit(record, CommitTypes()) == expected

    def test_breaking_wins(self, make_record: Callable[..., CommitRecord]):
        """A breaking no-op type is still a major bump."""
        record = make_record("chore!: drop support", commit_type="chore", is_breaking=True)
        assert classify_commit(record, CommitTypes()) == BumpType.MAJOR

    def test_custom_types(self, make_record: Callable[..., CommitRecord]):
        """Configured sets replace the defaults."""
        types = CommitTypes.from_lists(["breaking"], ["feature"], ["docs"])

        assert classify_commit(make_record(commit_type="breaking"), types) == BumpType.MAJOR
        assert classify_commit(make_record(commit_type="feature"), types) == BumpType.MINOR
        assert classify_commit(make_record(commit_type="docs"), types) == BumpType.NONE
        assert classify_commit(make_record(commit_type="feat"), types) == BumpType.PATCH
        assert classify_commit(make_record(commit_type="chore"), types) == BumpType.PATCH


class TestCommitTypes:
    """Tests for CommitTypes."""

    def test_defaults(self):
        """Defaults are major / feat, minor / chore, noop."""
        types = CommitTypes()
        assert types.major == {"major"}
        assert types.minor == {"feat", "minor"}
        assert types.noop == {"chore", "noop"}

    def test_overlap_rejected(self):
        """A type cannot belong to two bump levels."""
        with pytest.raises(ConfigValidationError, match="feat"):
            CommitTypes.from_lists(["major"], ["feat"], ["feat", "chore"])


class TestAuthorIdentity:
    """Tests for AuthorIdentity."""

    def test_key_is_normalized(self):
        """Case and surrounding whitespace do not matter."""
        first = AuthorIdentity("Jane Doe", "Jane@Example.com")
        second = AuthorIdentity(" jane doe", "jane@example.com ")
        assert first.key == second.key


class TestSummarizeCommits:
    """Tests for summarize_commits()."""

    def test_counts_and_order(self, make_record: Callable[..., CommitRecord]):
        """Every record is kept in input order and counted once."""
        records = [
            make_record("fix: a", commit_type="fix"),
            make_record("feat: b", commit_type="feat"),
            make_record("chore: c", commit_type="chore"),
            make_record("fix: d", commit_type="fix"),
        ]

        bump, summary = summarize_commits(records, CommitTypes())

        assert bump.level == BumpType.MINOR
        assert summary.minor_count == 1
        assert summary.patch_count == 2
        assert summary.noop_count == 1
        assert summary.major_count == 0
        assert [record.title for record in summary.commits] == ["fix: a", "feat: b", "chore: c", "fix: d"]

    def test_only_noop(self, make_record: Callable[..., CommitRecord]):
        """Only no-op commits means no bump but a non-empty summary."""
        bump, summary = summarize_commits([make_record("chore: x", commit_type="chore")], CommitTypes())

        assert bump.level == BumpType.NONE
        assert not summary.is_empty

    def test_empty(self):
        """No commits at all."""
        bump, summary = summarize_commits([], CommitTypes())

        assert bump.level == BumpType.NONE
        assert summary.is_empty
        assert summary == ChangesetSummary()


class TestCalculateBump:
    """Tests for calculate_bump()."""

    def test_excludes_base_commit(self, fake_repo: FakeRepository):
        """Commits up to and including the base are not analyzed."""
        fake_repo.commit("feat: before release")
        base = fake_repo.commit("fix: released")
        fake_repo.commit("fix: after release")
        head = fake_repo.commit("chore: tidy")

        bump, summary = calculate_bump(
            fake_repo,
            VersionBase(commit=base, version=Version(1, 0, 0), tag="v1.0.0"),
            head,
            ConventionalCommitParser(),
            CommitTypes(),
        )

        assert bump.level == BumpType.PATCH
        assert [record.subject for record in summary.commits] == ["chore: tidy", "fix: after release"]

    def test_includes_root_when_requested(self, fake_repo: FakeRepository):
        """An untagged history counts its root commit."""
        root = fake_repo.commit("feat: initial")
        head = fake_repo.commit("fix: follow-up")

        bump, summary = calculate_bump(
            fake_repo,
            VersionBase(commit=root, version=Version(), include_commit=True),
            head,
            ConventionalCommitParser(),
            CommitTypes(),
        )

        assert bump.level == BumpType.MINOR
        assert len(summary.commits) == 2

    def test_base_equals_head(self, fake_repo: FakeRepository):
        """Nothing to analyze when HEAD is the release commit."""
        head = fake_repo.commit("feat: released")

        bump, summary = calculate_bump(
            fake_repo,
            VersionBase(commit=head, version=Version(2, 0, 0), tag="v2.0.0"),
            head,
            ConventionalCommitParser(),
            CommitTypes(),
        )

        assert bump.level == BumpType.NONE
        assert summary.is_empty

    def test_authors_attached(self, fake_repo: FakeRepository):
        """Author identity flows from git into each record."""
        base = fake_repo.commit("chore: init")
        head = fake_repo.commit("fix: x", author_name="Jane", author_email="jane@example.com")

        _, summary = calculate_bump(
            fake_repo,
            VersionBase(commit=base, version=Version(0, 1, 0)),
            head,
            ConventionalCommitParser(),
            CommitTypes(),
        )

        assert summary.commits[0].author == AuthorIdentity("Jane", "jane@example.com")
        assert summary.commits[0].sha == head
