"""Exception hierarchy for tagbump.

All errors raised by tagbump derive from :class:`TagbumpError` so the CLI
can report them uniformly. Commit parsing never raises: malformed messages
degrade to the ``other`` commit type instead.
"""

from __future__ import annotations


class TagbumpError(Exception):
    """Base class for all tagbump errors."""


# =============================================================================
# Version
# =============================================================================


class VersionError(TagbumpError):
    """Base class for version related errors."""


class InvalidVersionFormat(VersionError):
    """A version or tag string could not be parsed."""

    def __init__(self, value: str, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Invalid version format: {value!r}")


# =============================================================================
# Git
# =============================================================================


class GitError(TagbumpError):
    """A git command failed."""

    def __init__(self, message: str, *, stderr: str | None = None) -> None:
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class NotARepositoryError(GitError):
    """The path is not inside a git work tree."""


class CommitHistoryError(GitError):
    """Commit history could not be read (e.g. HEAD does not exist yet)."""


class TagError(GitError):
    """A tag could not be created."""


class DirtyRepositoryError(GitError):
    """The working tree has uncommitted changes."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(TagbumpError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """A configuration file could not be found."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


# =============================================================================
# Project files
# =============================================================================


class ProjectError(TagbumpError):
    """A project manifest could not be read or written."""


class VersionNotFoundError(ProjectError):
    """A manifest does not contain a version field."""


class ChangelogError(TagbumpError):
    """The changelog file could not be written."""
