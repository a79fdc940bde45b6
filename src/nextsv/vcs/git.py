"""Git repository access.

A thin wrapper around the ``git`` command line. Everything the calculator
needs (tag names, commits and the files they changed) is read eagerly and
handed over as plain values.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from nextsv.core.version import VersionTag, tags_matching
from nextsv.exceptions import GitError

logger = logging.getLogger(__name__)

# Field and record separators for `git log --format`
_FS = "\x1f"
_RS = "\x1e"


@dataclass(frozen=True)
class Commit:
    """A commit and the files it changed."""

    sha: str
    message: str
    changed_files: frozenset[str] = field(default_factory=frozenset)

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def summary(self) -> str:
        return self.message.strip().split("\n", 1)[0]


class GitRepository:
    """Read-only view of a git repository."""

    def __init__(self, path: Path | str = ".") -> None:
        self.path = Path(path)
        if not self.path.is_dir():
            raise GitError(f"Not a directory: {self.path}")
        self.root = self.path
        try:
            toplevel = self._git("rev-parse", "--show-toplevel")
        except GitError as e:
            if e.stderr is None:
                raise
            raise GitError(f"Not a git repository: {self.path}", stderr=e.stderr) from e
        # Paths from git log and the pathspecs are relative to the top level
        self.root = Path(toplevel.strip())

    def _git(self, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", "-c", "core.quotePath=false", *args],
                cwd=self.root,
                capture_output=True,
                encoding="utf-8",
                check=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except NotADirectoryError as e:
            raise GitError(f"Not a directory: {self.root}") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout

    def tag_names(self) -> list[str]:
        """All tag names in the repository."""
        return [line for line in self._git("tag", "--list").splitlines() if line]

    def tags_matching(self, prefix: str) -> list[VersionTag]:
        """Version tags for the prefix, sorted ascending."""
        return tags_matching(self.tag_names(), prefix)

    def commits_since(self, tag: VersionTag | str | None, path: str | None = None) -> list[Commit]:
        """Commits reachable from HEAD but not from the tag, newest first.

        Args:
            tag: Tag to start after; ``None`` lists the whole history
            path: Restrict to commits touching this path
        """
        rev_range = f"{tag}..HEAD" if tag is not None else "HEAD"
        args = ["log", f"--format={_RS}%H{_FS}%B{_FS}", "--name-only", rev_range]
        if path:
            args.extend(["--", path])

        output = self._git(*args)

        commits = []
        for record in output.split(_RS):
            if not record.strip():
                continue
            sha, message, files = record.split(_FS, 2)
            commits.append(
                Commit(
                    sha=sha.strip(),
                    message=message.strip(),
                    changed_files=frozenset(line for line in files.splitlines() if line.strip()),
                )
            )

        logger.debug("Found %d commit(s) in %s", len(commits), rev_range)
        return commits

    def tracked_files(self) -> set[str]:
        """Paths of all files tracked at HEAD."""
        return {line for line in self._git("ls-files").splitlines() if line}
