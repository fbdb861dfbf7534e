"""tagbump: semantic versions, changelogs and tags from Conventional Commits."""

from __future__ import annotations

__version__ = "0.3.0"
