"""Unit tests for changelog generation."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from tagbump.config.models import ChangelogConfig, CommitsConfig
from tagbump.core.changelog import (
    build_changelog_section,
    generate_changelog,
    prepend_changelog,
    render_changelog,
)
from tagbump.core.commits import parse_commit_message, parse_commits
from tagbump.core.version import Version
from tagbump.exceptions import ChangelogError

if TYPE_CHECKING:
    from pathlib import Path

    from tagbump.core.commits import ParsedCommit
    from tagbump.vcs.git import Commit

RELEASE_DATE = date(2024, 5, 1)


@pytest.fixture
def parsed(sample_commits: list[Commit]) -> list[ParsedCommit]:
    return parse_commits(sample_commits, CommitsConfig())


class TestGenerateChangelog:
    """Tests for generate_changelog()."""

    def test_full_section(self, parsed: list[ParsedCommit]):
        """Render categories in fixed order with collapsed other types."""
        text = generate_changelog(
            Version(2, 0, 0), RELEASE_DATE, parsed, ChangelogConfig(), tag="v2.0.0"
        )

        assert text == (
            "## v2.0.0 (2024-05-01)\n"
            "\n"
            "### Breaking Changes\n"
            "\n"
            "- **api:** remove v1 endpoints (break12345)\n"
            "  - v1 clients must upgrade\n"
            "\n"
            "### Features\n"
            "\n"
            "- add user authentication (feat123456)\n"
            "\n"
            "### Bug Fixes\n"
            "\n"
            "- **core:** handle empty input (fix1234567)\n"
            "\n"
            "### Other Changes\n"
            "\n"
            "- update readme (docs123456)\n"
            "- **deps:** bump pydantic (chore12345)\n"
        )

    def test_idempotent(self, parsed: list[ParsedCommit]):
        """Rendering twice gives byte-identical output."""
        config = ChangelogConfig(other_types="expand")
        first = generate_changelog(Version(2, 0, 0), RELEASE_DATE, parsed, config)
        second = generate_changelog(Version(2, 0, 0), RELEASE_DATE, parsed, config)

        assert first == second

    def test_other_type_omitted(self, parsed: list[ParsedCommit]):
        """Unrecognized commits never appear."""
        text = generate_changelog(Version(2, 0, 0), RELEASE_DATE, parsed, ChangelogConfig())
        assert "Updated the readme file" not in text

    def test_expand_other_types(self, parsed: list[ParsedCommit]):
        text = generate_changelog(
            Version(2, 0, 0), RELEASE_DATE, parsed, ChangelogConfig(other_types="expand")
        )

        assert "### Documentation" in text
        assert "### Chores" in text
        assert "Other Changes" not in text
        assert text.index("### Bug Fixes") < text.index("### Documentation")
        assert text.index("### Documentation") < text.index("### Chores")

    def test_omit_other_types(self, parsed: list[ParsedCommit]):
        text = generate_changelog(
            Version(2, 0, 0), RELEASE_DATE, parsed, ChangelogConfig(other_types="omit")
        )

        assert "update readme" not in text
        assert "bump pydantic" not in text
        assert "add user authentication" in text

    def test_chronological_order(self):
        commits = [
            parse_commit_message("feat: first", "a1"),
            parse_commit_message("feat: second", "a2"),
            parse_commit_message("feat: third", "a3"),
        ]
        text = generate_changelog(Version(1, 1, 0), RELEASE_DATE, commits, ChangelogConfig())
        assert text.index("first") < text.index("second") < text.index("third")

    def test_newest_first(self):
        commits = [
            parse_commit_message("feat: first", "a1"),
            parse_commit_message("feat: second", "a2"),
        ]
        config = ChangelogConfig(newest_first=True)
        text = generate_changelog(Version(1, 1, 0), RELEASE_DATE, commits, config)
        assert text.index("second") < text.index("first")

    def test_release_commits_skipped(self):
        commits = [
            parse_commit_message("chore(release): v1.0.0", "r1"),
            parse_commit_message("fix: bug", "f1"),
        ]
        text = generate_changelog(Version(1, 0, 1), RELEASE_DATE, commits, ChangelogConfig())
        assert "chore(release)" not in text
        assert "v1.0.0" not in text

    def test_patch_release_heading_level(self):
        commits = [parse_commit_message("fix: bug", "f1")]
        text = generate_changelog(Version(1, 0, 1), RELEASE_DATE, commits, ChangelogConfig())

        assert text.startswith("### 1.0.1 (2024-05-01)\n")
        assert "#### Bug Fixes" in text

    def test_empty_section(self):
        text = generate_changelog(Version(1, 0, 1), RELEASE_DATE, [], ChangelogConfig())
        assert text == "### 1.0.1 (2024-05-01)\n\n*no notable changes*\n"

    def test_without_sha(self):
        commits = [parse_commit_message("feat: x", "abcdef1234567")]
        text = generate_changelog(
            Version(1, 1, 0), RELEASE_DATE, commits, ChangelogConfig(include_sha=False)
        )
        assert "abcdef" not in text


class TestBuildChangelogSection:
    """Tests for build_changelog_section()."""

    def test_category_order(self, parsed: list[ParsedCommit]):
        section = build_changelog_section(Version(2, 0, 0), RELEASE_DATE, parsed, ChangelogConfig())

        assert list(section.categories) == [
            "Breaking Changes",
            "Features",
            "Bug Fixes",
            "Other Changes",
        ]
        assert section.tag == "2.0.0"
        assert not section.is_empty

    def test_render_section(self, parsed: list[ParsedCommit]):
        section = build_changelog_section(Version(2, 0, 0), RELEASE_DATE, parsed, ChangelogConfig())
        assert render_changelog(section).startswith("## 2.0.0 (2024-05-01)")


class TestPrependChangelog:
    """Tests for prepend_changelog()."""

    def test_creates_file(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        prepend_changelog(path, "## 1.0.0\n")
        assert path.read_text() == "## 1.0.0\n"

    def test_prepends(self, tmp_path: Path):
        path = tmp_path / "CHANGELOG.md"
        path.write_text("## 1.0.0\n")

        prepend_changelog(path, "## 1.1.0\n")

        assert path.read_text() == "## 1.1.0\n\n## 1.0.0\n"

    def test_unwritable_raises(self, tmp_path: Path):
        with pytest.raises(ChangelogError):
            prepend_changelog(tmp_path, "## 1.0.0\n")
