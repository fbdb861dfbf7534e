"""Semantic version parsing, ordering and bumping.

Versions are ``major.minor.patch`` triples with an optional pre-release
label. Tags may carry a non-numeric prefix such as ``v`` or ``release-``;
the prefix is accepted when parsing but never stored, so rendering a tag is
always the caller's decision.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum
from functools import total_ordering

from tagbump.exceptions import InvalidVersionFormat

_VERSION_RE = re.compile(
    r"""
    ^
    (?P<prefix>[^\d]*)
    (?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)
    (?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?
    $
    """,
    re.VERBOSE,
)


class BumpType(StrEnum):
    """Kind of version increment derived from a set of commits."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"


def _prerelease_key(label: str) -> tuple[tuple[int, int | str], ...]:
    # Numeric identifiers sort numerically and before alphanumeric ones.
    key: list[tuple[int, int | str]] = []
    for part in label.split("."):
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part))
    return tuple(key)


@total_ordering
@dataclass(frozen=True)
class Version:
    """An immutable semantic version."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: str | None = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise InvalidVersionFormat(
                    self.render(with_prerelease=True),
                    f"Version component {name} must be non-negative",
                )

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version or tag string.

        Args:
            text: Version string such as ``1.2.3``, ``v1.2.3`` or
                ``release-2.0.0-rc.1``

        Returns:
            Parsed Version (prefix is discarded)

        Raises:
            InvalidVersionFormat: If the string is not three dot-separated
                integers with an optional ``-prerelease`` suffix
        """
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise InvalidVersionFormat(text)

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease"),
        )

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def render(self, *, prefix: str = "", with_prerelease: bool = False) -> str:
        """Render the version, adding prefix and pre-release only on request."""
        text = f"{prefix}{self.major}.{self.minor}.{self.patch}"
        if with_prerelease and self.prerelease:
            text = f"{text}-{self.prerelease}"
        return text

    def bump(self, bump_type: BumpType) -> Version:
        """Return the version following this one for the given bump.

        Breaking changes before 1.0.0 bump the minor component instead of
        the major one. A pre-release graduates to its own release when that
        release already carries the requested bump, e.g. ``1.3.0-rc.1``
        becomes ``1.3.0`` for a fix or a feature and ``2.0.0`` for a
        breaking change.

        Raises:
            ValueError: If ``bump_type`` is ``BumpType.NONE``
        """
        if bump_type == BumpType.NONE:
            raise ValueError(f"Cannot bump version {self} with bump type {bump_type}")
        if self.is_prerelease:
            release = replace(self, prerelease=None)
            if release._key() != (0, 0, 0) and release._covers(bump_type):
                return release
            return release.bump(bump_type)
        if bump_type == BumpType.MAJOR:
            if self.major == 0:
                return Version(0, self.minor + 1, 0)
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)

    def _covers(self, bump_type: BumpType) -> bool:
        """Whether this release is already a ``bump_type`` step from the previous line."""
        if bump_type == BumpType.MAJOR:
            return self.patch == 0 and (self.minor == 0 or self.major == 0)
        if bump_type == BumpType.MINOR:
            return self.patch == 0
        return True

    def with_prerelease(self, label: str | None) -> Version:
        return replace(self, prerelease=label or None)

    def _key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        if self._key() != other._key():
            return self._key() < other._key()
        if self.prerelease == other.prerelease:
            return False
        if self.prerelease is None:
            return False
        if other.prerelease is None:
            return True
        return _prerelease_key(self.prerelease) < _prerelease_key(other.prerelease)

    def __str__(self) -> str:
        return self.render()


def parse_version(text: str) -> Version:
    """Parse a version string. See :meth:`Version.parse`."""
    return Version.parse(text)


def parse_last_tag(tag: str | None) -> Version:
    """Return the baseline version for a release.

    No tag means nothing was released yet and the baseline is ``0.0.0``.
    A tag that exists but does not parse is an error.

    Raises:
        InvalidVersionFormat: If ``tag`` is malformed
    """
    if tag is None:
        return Version()
    return Version.parse(tag)
