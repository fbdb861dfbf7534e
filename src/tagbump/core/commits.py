"""Conventional commit parsing.

This module turns raw commit messages into structured records
following the Conventional Commits 1.0 format:

    <type>[optional scope][!]: <subject>

    [optional body]

    [optional footer(s)]

Parsing never fails. Messages whose header does not match the grammar,
or whose type is not a known one, are classified as ``other`` with the
whole first line kept as the subject.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from tagbump.config.models import CommitsConfig
    from tagbump.vcs.git import Commit

logger = logging.getLogger(__name__)


class CommitType(StrEnum):
    """Known conventional commit types."""

    FEAT = "feat"
    FIX = "fix"
    PERF = "perf"
    REFACTOR = "refactor"
    DOCS = "docs"
    CHORE = "chore"
    BUILD = "build"
    CI = "ci"
    TEST = "test"
    STYLE = "style"
    OTHER = "other"


KNOWN_TYPES: frozenset[str] = frozenset(t.value for t in CommitType if t != CommitType.OTHER)

HEADER_PATTERN = re.compile(
    r"^(?P<type>[A-Za-z][A-Za-z0-9_-]*)"
    r"(?:\((?P<scope>[^()\r\n]*)\))?"
    r"(?P<breaking>!)?"
    r":[ \t]*(?P<subject>.*)$"
)

FOOTER_PATTERN = re.compile(
    r"^(?:(?P<breaking_token>(?i:BREAKING[ -]CHANGE))(?::[ \t]*| #)"
    r"|(?P<token>[A-Za-z][A-Za-z0-9-]*)(?::[ \t]+| #)(?=\S))"
    r"(?P<value>.*)$"
)

BREAKING_TOKENS = frozenset({"BREAKING CHANGE", "BREAKING-CHANGE"})


class Footer(NamedTuple):
    """A single ``Token: value`` trailer from a commit message."""

    token: str
    value: str

    @property
    def is_breaking(self) -> bool:
        return self.token.upper() in BREAKING_TOKENS


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message broken into its conventional commit parts."""

    sha: str
    commit_type: CommitType
    subject: str
    scope: str | None = None
    body: str | None = None
    footers: tuple[Footer, ...] = field(default_factory=tuple)
    is_breaking: bool = False

    @property
    def is_conventional(self) -> bool:
        return self.commit_type != CommitType.OTHER

    @property
    def is_release_commit(self) -> bool:
        """Whether this is a release commit created by tagbump itself."""
        return self.commit_type == CommitType.CHORE and self.scope == "release"

    @property
    def short_sha(self) -> str:
        return self.sha[:10]

    def footer_values(self, token: str) -> list[str]:
        """Return the values of every footer with ``token`` (case-insensitive)."""
        wanted = token.upper()
        return [f.value for f in self.footers if f.token.upper() == wanted]

    @classmethod
    def from_commit(
        cls,
        commit: Commit,
        type_aliases: Mapping[str, str] | None = None,
    ) -> ParsedCommit:
        """Parse a commit from the history source."""
        return parse_commit_message(commit.message, sha=commit.sha, type_aliases=type_aliases)


def _split_footers(lines: list[str]) -> tuple[list[str], list[str]]:
    """Split the lines after the header into body lines and footer lines.

    The footer block is the run of trailing paragraphs whose first line
    looks like a footer.
    """
    # Index of the first line of every paragraph
    starts: list[int] = []
    previous_blank = True
    for index, line in enumerate(lines):
        blank = not line.strip()
        if not blank and previous_blank:
            starts.append(index)
        previous_blank = blank

    split_at = len(starts)
    while split_at > 0 and FOOTER_PATTERN.match(lines[starts[split_at - 1]]):
        split_at -= 1

    if split_at == len(starts):
        return lines, []

    cut = starts[split_at]
    footer_lines = [line for line in lines[cut:] if line.strip()]
    return lines[:cut], footer_lines


def _parse_footers(lines: list[str]) -> tuple[Footer, ...]:
    footers: list[Footer] = []
    for line in lines:
        match = FOOTER_PATTERN.match(line)
        if match:
            token = match.group("breaking_token") or match.group("token")
            footers.append(Footer(token, match.group("value").strip()))
        elif footers:
            # Continuation of a multi-line footer value
            token, value = footers[-1]
            footers[-1] = Footer(token, f"{value}\n{line.strip()}".strip())
    return tuple(footers)


def _unconventional(sha: str, header: str) -> ParsedCommit:
    return ParsedCommit(sha=sha, commit_type=CommitType.OTHER, subject=header)


def parse_commit_message(
    message: str,
    sha: str = "",
    type_aliases: Mapping[str, str] | None = None,
) -> ParsedCommit:
    """Parse a raw commit message into a ParsedCommit.

    Args:
        message: Full commit message (header, body and footers)
        sha: Commit identifier, kept for changelog references
        type_aliases: Extra header tokens mapped onto known types,
            e.g. ``{"feature": "feat"}``

    Returns:
        ParsedCommit; unknown or malformed headers yield type ``other``
    """
    lines = message.replace("\r\n", "\n").strip("\n").split("\n")
    header = lines[0].strip()

    match = HEADER_PATTERN.match(header)
    if match is None:
        return _unconventional(sha, header)

    token = match.group("type")
    if token in KNOWN_TYPES:
        commit_type = CommitType(token)
    elif type_aliases and token in type_aliases:
        commit_type = CommitType(type_aliases[token])
    else:
        return _unconventional(sha, header)

    body_lines, footer_lines = _split_footers(lines[1:])
    footers = _parse_footers(footer_lines)
    body = "\n".join(body_lines).strip("\n") or None
    scope = match.group("scope")

    return ParsedCommit(
        sha=sha,
        commit_type=commit_type,
        subject=match.group("subject").strip(),
        scope=(scope or "").strip() or None,
        body=body,
        footers=footers,
        is_breaking=bool(match.group("breaking")) or any(f.is_breaking for f in footers),
    )


def filter_skip_release_commits(
    commits: Iterable[Commit],
    patterns: Iterable[str],
) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker.

    Markers are matched case-insensitively anywhere in the message.
    """
    lowered = [p.lower() for p in patterns]
    if not lowered:
        return list(commits)

    kept = []
    for commit in commits:
        message = commit.message.lower()
        if any(marker in message for marker in lowered):
            logger.debug("Skipping %s: skip release marker", commit.sha[:10])
            continue
        kept.append(commit)
    return kept


def parse_commits(commits: Iterable[Commit], config: CommitsConfig) -> list[ParsedCommit]:
    """Parse a commit history, preserving its order.

    Merge commits and commits carrying a skip-release marker are
    excluded.

    Args:
        commits: Commits from the history source, oldest first
        config: Commit parsing configuration

    Returns:
        Parsed commits in the same order
    """
    candidates = []
    for commit in commits:
        if commit.is_merge:
            logger.debug("Ignoring merge commit %s", commit.sha[:10])
            continue
        candidates.append(commit)

    candidates = filter_skip_release_commits(candidates, config.skip_release_patterns)
    aliases = {alias: str(target) for alias, target in config.type_aliases.items()}

    parsed = [ParsedCommit.from_commit(commit, aliases) for commit in candidates]
    for pc in parsed:
        if not pc.is_conventional:
            logger.debug("Commit %s is not a conventional commit", pc.short_sha)
    return parsed


def group_commits_by_type(commits: Iterable[ParsedCommit]) -> dict[CommitType, list[ParsedCommit]]:
    """Group parsed commits by type, keeping their order within each group."""
    grouped: dict[CommitType, list[ParsedCommit]] = {}
    for pc in commits:
        grouped.setdefault(pc.commit_type, []).append(pc)
    return grouped


def get_breaking_changes(commits: Iterable[ParsedCommit]) -> list[ParsedCommit]:
    return [pc for pc in commits if pc.is_breaking]


def breaking_notes(commit: ParsedCommit) -> list[str]:
    """Descriptions given in BREAKING CHANGE footers."""
    return [f.value for f in commit.footers if f.is_breaking and f.value]


def format_commit_for_changelog(
    commit: ParsedCommit,
    *,
    include_scope: bool = True,
    include_sha: bool = True,
) -> str:
    """Format a parsed commit as a changelog bullet.

    Example: ``- **api:** handle null response (abc1234567)``
    """
    parts = ["-"]
    if include_scope and commit.scope:
        parts.append(f"**{commit.scope}:**")
    if commit.subject:
        parts.append(commit.subject)
    if include_sha and commit.sha:
        parts.append(f"({commit.short_sha})")
    return " ".join(parts)
