"""Git repository access through the ``git`` command line.

Only the handful of operations a release needs are wrapped here:
reading the last tag and the commits after it, staging, committing,
tagging and pushing.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from tagbump.exceptions import (
    CommitHistoryError,
    GitError,
    NotARepositoryError,
    TagError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Field and record separators for `git log --format`
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%P", "%an", "%ae", "%aI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A commit as read from git history."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime
    parent_count: int = 1

    @property
    def is_merge(self) -> bool:
        return self.parent_count > 1

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0].strip()


def parse_log_output(output: str) -> list[Commit]:
    """Parse ``git log`` output produced with the internal format."""
    commits = []
    for record in output.split(_RECORD_SEP):
        record = record.lstrip("\n")
        if not record:
            continue
        sha, parents, name, email, date, message = record.split(_FIELD_SEP, 5)
        commits.append(
            Commit(
                sha=sha,
                message=message.strip(),
                author_name=name,
                author_email=email,
                date=datetime.fromisoformat(date),
                parent_count=len(parents.split()),
            )
        )
    return commits


class GitRepository:
    """A git working tree."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or Path.cwd()).resolve()
        try:
            top = self._run("rev-parse", "--show-toplevel")
        except GitError as e:
            raise NotARepositoryError(f"Not a git repository: {self.path}") from e
        self.root = Path(top)

    def _run(self, *args: str, check: bool = True) -> str:
        cmd = ["git", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=check,
                cwd=self.path,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {args[0]} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout.strip()

    def is_dirty(self) -> bool:
        """Whether tracked files have uncommitted changes."""
        return bool(self._run("status", "--porcelain", "--untracked-files=no"))

    def current_branch(self) -> str:
        return self._run("rev-parse", "--abbrev-ref", "HEAD")

    def get_latest_tag(self, pattern: str | None = None) -> str | None:
        """Return the nearest tag reachable from HEAD.

        Args:
            pattern: Glob the tag name must match, e.g. ``v*``

        Returns:
            Tag name, or None when no matching tag exists
        """
        args = ["describe", "--tags", "--abbrev=0"]
        if pattern:
            args.extend(["--match", pattern])
        try:
            return self._run(*args) or None
        except GitError as e:
            stderr = (e.stderr or "").lower()
            if "no names found" in stderr or "cannot describe" in stderr or "no tags" in stderr:
                return None
            raise

    def get_commits_since_tag(self, tag: str | None) -> list[Commit]:
        """Return commits after ``tag`` up to HEAD, oldest first.

        Raises:
            CommitHistoryError: If history cannot be read (e.g. no commits yet)
        """
        revision = f"{tag}..HEAD" if tag else "HEAD"
        try:
            output = self._run("log", "--reverse", f"--format={_LOG_FORMAT}", revision)
        except GitError as e:
            raise CommitHistoryError(
                f"Could not read commits for {revision}", stderr=e.stderr
            ) from e
        return parse_log_output(output)

    def add(self, paths: Iterable[Path | str]) -> None:
        self._run("add", "--", *(str(p) for p in paths))

    def commit(self, message: str) -> str:
        """Commit staged changes and return the new commit sha."""
        self._run("commit", "-m", message)
        return self._run("rev-parse", "HEAD")

    def create_tag(self, name: str, message: str) -> None:
        """Create an annotated tag at HEAD.

        Raises:
            TagError: If the tag cannot be created (e.g. it already exists)
        """
        try:
            self._run("tag", "-a", name, "-m", message)
        except GitError as e:
            raise TagError(f"Could not create tag {name}", stderr=e.stderr) from e

    def tag_exists(self, name: str) -> bool:
        return bool(self._run("tag", "--list", name))

    def push(self, remote: str, branch: str, *, follow_tags: bool = True) -> None:
        args = ["push"]
        if follow_tags:
            args.append("--follow-tags")
        args.extend([remote, branch])
        self._run(*args)
