"""Version control access."""

from __future__ import annotations

from tagbump.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
