"""Shared fixtures for the nextsv tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from nextsv.vcs.git import Commit


def git(repo: Path, *args: str) -> str:
    """Run a git command in a test repository."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def commit_file(repo: Path, path: str, message: str, content: str | None = None) -> None:
    """Write a file and commit it with the given message."""
    file_path = repo / path
    file_path.parent.mkdir(parents=True, exist_ok=True)
    existing = file_path.read_text(encoding="utf-8") if file_path.exists() else ""
    file_path.write_text(content if content is not None else existing + message + "\n", encoding="utf-8")
    git(repo, "add", path)
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def feat_commit() -> Commit:
    return Commit(sha="a1b2c3d4e5f6", message="feat: add new feature", changed_files=frozenset({"src/lib.py"}))


@pytest.fixture
def fix_commit() -> Commit:
    return Commit(sha="b2c3d4e5f6a1", message="fix: handle empty input", changed_files=frozenset({"src/lib.py"}))


@pytest.fixture
def breaking_commit() -> Commit:
    return Commit(
        sha="c3d4e5f6a1b2",
        message="feat(api)!: change response format",
        changed_files=frozenset({"src/api.py"}),
    )


@pytest.fixture
def chore_commit() -> Commit:
    return Commit(sha="d4e5f6a1b2c3", message="chore: update tooling", changed_files=frozenset({"tox.ini"}))


@pytest.fixture
def sample_commits(feat_commit: Commit, fix_commit: Commit, chore_commit: Commit) -> list[Commit]:
    return [feat_commit, fix_commit, chore_commit]


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    """A git repository with one commit tagged ``v0.1.0``."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")

    commit_file(repo, "README.md", "chore: initial commit", "# Test\n")
    git(repo, "tag", "v0.1.0")
    return repo


@pytest.fixture
def temp_git_repo_with_pyproject(temp_git_repo: Path) -> Path:
    """A tagged git repository with a pyproject.toml configuring nextsv."""
    commit_file(
        temp_git_repo,
        "pyproject.toml",
        "build: add pyproject.toml",
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.nextsv]
prefix = "v"
check_level = "other"
""",
    )
    return temp_git_repo


@pytest.fixture
def git_commit():
    """Callable committing a file change: ``git_commit(repo, path, message)``."""
    return commit_file


@pytest.fixture
def git_tag():
    """Callable creating a lightweight tag at HEAD."""

    def _tag(repo: Path, name: str) -> None:
        git(repo, "tag", name)

    return _tag
