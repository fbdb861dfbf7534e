"""Changelog generation from parsed commits.

A release produces one markdown section::

    ## v1.3.0 (2024-05-01)

    ### Features

    - **api:** add pagination (1a2b3c4d5e)

Categories appear in a fixed order: breaking changes, features, bug
fixes and performance, followed by the remaining commit types according
to ``changelog.other_types``. Rendering depends only on its inputs, so
the same commits and date always produce the same text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tagbump.core.commits import (
    CommitType,
    breaking_notes,
    format_commit_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
)
from tagbump.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from pathlib import Path

    from tagbump.config.models import ChangelogConfig
    from tagbump.core.commits import ParsedCommit
    from tagbump.core.version import Version

logger = logging.getLogger(__name__)

BREAKING_TITLE = "Breaking Changes"
OTHER_TITLE = "Other Changes"
EMPTY_NOTICE = "*no notable changes*"

PRIMARY_SECTIONS: tuple[tuple[CommitType, str], ...] = (
    (CommitType.FEAT, "Features"),
    (CommitType.FIX, "Bug Fixes"),
    (CommitType.PERF, "Performance"),
)

SECONDARY_SECTIONS: tuple[tuple[CommitType, str], ...] = (
    (CommitType.REFACTOR, "Refactoring"),
    (CommitType.DOCS, "Documentation"),
    (CommitType.BUILD, "Build"),
    (CommitType.CI, "CI"),
    (CommitType.TEST, "Tests"),
    (CommitType.STYLE, "Style"),
    (CommitType.CHORE, "Chores"),
)


@dataclass(frozen=True)
class ChangelogSection:
    """The changelog for one release, grouped into titled categories."""

    version: Version
    tag: str
    released_on: date
    categories: dict[str, list[str]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not any(self.categories.values())

    @property
    def heading(self) -> str:
        # Patch releases get a lower heading level
        level = "###" if self.version.patch > 0 else "##"
        return f"{level} {self.tag} ({self.released_on.strftime('%Y-%m-%d')})"


def _entry(commit: ParsedCommit, config: ChangelogConfig) -> str:
    return format_commit_for_changelog(commit, include_sha=config.include_sha)


def _breaking_entry(commit: ParsedCommit, config: ChangelogConfig) -> str:
    lines = [_entry(commit, config)]
    for note in breaking_notes(commit):
        for i, note_line in enumerate(note.splitlines()):
            lines.append(f"  - {note_line}" if i == 0 else f"    {note_line}")
    return "\n".join(lines)


def build_changelog_section(
    version: Version,
    released_on: date,
    commits: Sequence[ParsedCommit],
    config: ChangelogConfig,
    *,
    tag: str | None = None,
) -> ChangelogSection:
    """Group commits into changelog categories.

    Args:
        version: Version being released
        released_on: Release date shown in the heading
        commits: Parsed commits, oldest first
        config: Changelog configuration
        tag: Tag name for the heading (defaults to the bare version)

    Returns:
        ChangelogSection with categories in display order
    """
    relevant = [pc for pc in commits if pc.is_conventional and not pc.is_release_commit]
    if config.newest_first:
        relevant.reverse()

    categories: dict[str, list[str]] = {}

    breaking = get_breaking_changes(relevant)
    if breaking:
        categories[BREAKING_TITLE] = [_breaking_entry(pc, config) for pc in breaking]

    remaining = [pc for pc in relevant if not pc.is_breaking]
    grouped = group_commits_by_type(remaining)

    for commit_type, title in PRIMARY_SECTIONS:
        entries = [_entry(pc, config) for pc in grouped.get(commit_type, [])]
        if entries:
            categories[title] = entries

    if config.other_types == "expand":
        for commit_type, title in SECONDARY_SECTIONS:
            entries = [_entry(pc, config) for pc in grouped.get(commit_type, [])]
            if entries:
                categories[title] = entries
    elif config.other_types == "collapse":
        primary = {commit_type for commit_type, _ in PRIMARY_SECTIONS}
        entries = [_entry(pc, config) for pc in remaining if pc.commit_type not in primary]
        if entries:
            categories[OTHER_TITLE] = entries

    return ChangelogSection(
        version=version,
        tag=tag or str(version),
        released_on=released_on,
        categories=categories,
    )


def render_changelog(section: ChangelogSection) -> str:
    """Render a changelog section as markdown, ending with a newline."""
    lines = [section.heading, ""]

    if section.is_empty:
        lines.extend([EMPTY_NOTICE, ""])

    for title, entries in section.categories.items():
        if not entries:
            continue
        lines.extend([f"#### {title}" if section.version.patch > 0 else f"### {title}", ""])
        lines.extend(entries)
        lines.append("")

    return "\n".join(lines)


def generate_changelog(
    version: Version,
    released_on: date,
    commits: Sequence[ParsedCommit],
    config: ChangelogConfig,
    *,
    tag: str | None = None,
) -> str:
    """Build and render the changelog section for a release."""
    section = build_changelog_section(version, released_on, commits, config, tag=tag)
    return render_changelog(section)


def prepend_changelog(path: Path, content: str) -> Path:
    """Insert a rendered section at the top of the changelog file.

    The file is created when it does not exist yet.

    Raises:
        ChangelogError: If the file cannot be read or written
    """
    try:
        if path.exists():
            existing = path.read_text()
            new_content = f"{content}\n{existing}" if existing.strip() else content
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            new_content = content
        path.write_text(new_content)
    except OSError as e:
        raise ChangelogError(f"Could not write changelog {path}: {e}") from e

    logger.debug("Wrote %d characters to %s", len(content), path)
    return path
