"""Bump resolution from parsed commits.

The decision over a set of commits is the strongest rule that matches
any commit:

1. a breaking change  -> MAJOR
2. a ``feat`` commit  -> MINOR
3. a ``fix``/``perf`` -> PATCH
4. anything else      -> NONE
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tagbump.core.commits import CommitType
from tagbump.core.version import BumpType, Version

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tagbump.core.commits import ParsedCommit

MINOR_TYPES = frozenset({CommitType.FEAT})
PATCH_TYPES = frozenset({CommitType.FIX, CommitType.PERF})


@dataclass(frozen=True)
class BumpResult:
    """Outcome of resolving a bump against the current version."""

    bump: BumpType
    current: Version
    next_version: Version | None

    @property
    def has_release(self) -> bool:
        return self.next_version is not None


def calculate_bump(commits: Sequence[ParsedCommit]) -> BumpType:
    """Determine the bump type for a sequence of parsed commits.

    Args:
        commits: Parsed commits since the last release

    Returns:
        The strongest bump required by any commit
    """
    if any(pc.is_breaking for pc in commits):
        return BumpType.MAJOR
    if any(pc.commit_type in MINOR_TYPES for pc in commits):
        return BumpType.MINOR
    if any(pc.commit_type in PATCH_TYPES for pc in commits):
        return BumpType.PATCH
    return BumpType.NONE


def resolve_bump(
    commits: Sequence[ParsedCommit],
    current: Version,
    *,
    force: bool = False,
) -> BumpResult:
    """Resolve the next version for the current one.

    Args:
        commits: Parsed commits since the last release
        current: Version of the last release (``0.0.0`` when none)
        force: Release a patch even when no commit requires a bump

    Returns:
        BumpResult whose ``next_version`` is None when there is
        nothing to release
    """
    bump = calculate_bump(commits)
    if bump == BumpType.NONE and force:
        bump = BumpType.PATCH

    if bump == BumpType.NONE:
        return BumpResult(bump=bump, current=current, next_version=None)
    return BumpResult(bump=bump, current=current, next_version=current.bump(bump))
