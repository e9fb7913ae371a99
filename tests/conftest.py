"""Shared fixtures for vnext tests."""

from __future__ import annotations

import itertools
import logging
import os
import subprocess
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from vnext.core.commits import AuthorIdentity, CommitRecord
from vnext.core.version import Version
from vnext.exceptions import EmptyRepositoryError, GitError
from vnext.vcs.base import GitCommit, VersionTag

# =============================================================================
# In-memory repository
# =============================================================================


class FakeRepository:
    """Linear in-memory history implementing the Repository protocol."""

    def __init__(self) -> None:
        self.commits: list[GitCommit] = []  # oldest first
        self.tags: dict[str, str] = {}
        self.remote: str | None = None
        self.iter_calls = 0
        self._counter = itertools.count(1)

    def commit(
        self,
        message: str,
        author_name: str = "Test",
        author_email: str = "test@test.com",
    ) -> str:
        sha = f"{next(self._counter):040x}"
        self.commits.append(GitCommit(sha, message, author_name, author_email))
        return sha

    def tag(self, name: str, sha: str | None = None) -> None:
        self.tags[name] = sha or self.commits[-1].sha

    def _index(self, sha: str) -> int:
        for index, commit in enumerate(self.commits):
            if commit.sha == sha:
                return index
        raise GitError(f"Unknown commit {sha}")

    def head_commit(self) -> str:
        if not self.commits:
            raise EmptyRepositoryError("Repository has no commits")
        return self.commits[-1].sha

    def resolve_ref(self, ref: str) -> str:
        if ref in self.tags:
            return self.tags[ref]
        return self.commits[self._index(ref)].sha

    def version_tags(self) -> list[VersionTag]:
        tags = [
            VersionTag(name, sha, version)
            for name, sha in self.tags.items()
            if (version := Version.from_tag(name)) is not None
        ]
        return sorted(tags, key=lambda tag: (tag.version, tag.name), reverse=True)

    def merge_base(self, first: str, second: str) -> str:
        return self.commits[min(self._index(first), self._index(second))].sha

    def first_parent_root(self, sha: str) -> str:
        self._index(sha)
        return self.commits[0].sha

    def iter_commits(self, since: str | None, until: str) -> Iterator[GitCommit]:
        self.iter_calls += 1
        stop = self._index(since) if since else -1
        for index in range(self._index(until), stop, -1):
            yield self.commits[index]

    def remote_url(self, name: str = "origin") -> str | None:
        return self.remote


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Empty in-memory repository."""
    return FakeRepository()


@pytest.fixture
def make_record() -> Callable[..., CommitRecord]:
    """Build CommitRecords with sensible defaults."""
    counter = itertools.count(1)

    def _make(message: str = "fix: something", **kwargs: object) -> CommitRecord:
        defaults: dict[str, object] = {
            "sha": f"{next(counter):040x}",
            "message": message,
            "title": message.split("\n", 1)[0],
            "author": AuthorIdentity("Test", "test@test.com"),
        }
        defaults.update(kwargs)
        return CommitRecord(**defaults)  # type: ignore[arg-type]

    return _make


# =============================================================================
# Real git repositories
# =============================================================================


def _run_git(*args: str, cwd: Path) -> str:
    """Run git command safely without shell=True."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


class GitRepoBuilder:
    """Creates commits, tags and branches in a temporary repository."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._files = itertools.count(1)
        _run_git("init", "-q", "-b", "main", cwd=path)
        _run_git("config", "user.email", "test@test.com", cwd=path)
        _run_git("config", "user.name", "Test", cwd=path)
        _run_git("config", "commit.gpgsign", "false", cwd=path)
        _run_git("config", "tag.gpgsign", "false", cwd=path)

    def git(self, *args: str) -> str:
        return _run_git(*args, cwd=self.path)

    def commit(
        self,
        message: str,
        author: str | None = None,
    ) -> str:
        (self.path / f"file{next(self._files)}.txt").write_text(message)
        self.git("add", "-A")
        args = ["commit", "-q", "--cleanup=verbatim", "-m", message]
        if author:
            args.extend(["--author", author])
        self.git(*args)
        return self.git("rev-parse", "HEAD")

    def tag(self, name: str, annotated: bool = False) -> None:
        if annotated:
            self.git("tag", "-a", name, "-m", f"Release {name}")
        else:
            self.git("tag", name)


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitRepoBuilder:
    """Empty git repository on branch main."""
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    return GitRepoBuilder(repo_path)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    for name in list(os.environ):
        if name.startswith("GIT_") and name not in ("GIT_CONFIG_NOSYSTEM",):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    logger = logging.getLogger("vnext")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
