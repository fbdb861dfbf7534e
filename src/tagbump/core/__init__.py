"""Core business logic for tagbump.

This module contains the fundamental building blocks:
- Version parsing, ordering and bumping
- Conventional commit parsing
- Bump resolution
- Changelog rendering
- Release orchestration
"""

from __future__ import annotations

from tagbump.core.bump import BumpResult, calculate_bump, resolve_bump
from tagbump.core.changelog import (
    ChangelogSection,
    build_changelog_section,
    generate_changelog,
    render_changelog,
)
from tagbump.core.commits import (
    CommitType,
    Footer,
    ParsedCommit,
    format_commit_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
    parse_commit_message,
    parse_commits,
)
from tagbump.core.version import BumpType, Version, parse_version

__all__ = [
    # Bump
    "BumpResult",
    # Version
    "BumpType",
    # Changelog
    "ChangelogSection",
    # Commits
    "CommitType",
    "Footer",
    "ParsedCommit",
    "Version",
    "build_changelog_section",
    "calculate_bump",
    "format_commit_for_changelog",
    "generate_changelog",
    "get_breaking_changes",
    "group_commits_by_type",
    "parse_commit_message",
    "parse_commits",
    "parse_version",
    "render_changelog",
    "resolve_bump",
]
