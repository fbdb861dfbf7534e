"""Configuration models.

All settings have defaults, so a project without any ``[tool.tagbump]``
table still gets a working configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tagbump.core.commits import CommitType

ManifestFormat = Literal["json", "yaml", "toml", "python"]
OtherTypesMode = Literal["collapse", "expand", "omit"]


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CommitsConfig(_Model):
    """How commits are read and classified."""

    type_aliases: dict[str, CommitType] = Field(
        default_factory=dict,
        description="Unknown header tokens reclassified as a known type",
    )
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: ["[skip release]", "[release skip]", "[no release]"],
        description="Commits containing any of these markers are ignored",
    )

    @field_validator("type_aliases")
    @classmethod
    def _no_other_alias(cls, value: dict[str, CommitType]) -> dict[str, CommitType]:
        for alias, target in value.items():
            if target == CommitType.OTHER:
                raise ValueError(f"Alias {alias!r} cannot map to 'other'")
        return value


class ChangelogConfig(_Model):
    """Changelog rendering options."""

    enabled: bool = True
    path: Path = Path("CHANGELOG.md")
    other_types: OtherTypesMode = "collapse"
    newest_first: bool = False
    include_sha: bool = True


class VersionConfig(_Model):
    """Version and tag naming."""

    tag_prefix: str | None = None
    pre_release: str | None = None


class GitConfig(_Model):
    """Commit, tag and push settings."""

    commit_message: str = "chore(release): {tag}"
    tag_message: str = "Release"
    remote: str = "origin"
    push: bool = False


class ManifestFile(_Model):
    """A file whose version field is rewritten on release."""

    path: Path
    format: ManifestFormat | None = None


def _default_files() -> list[ManifestFile]:
    return [
        ManifestFile(path=Path("package.json"), format="json"),
        ManifestFile(path=Path("composer.json"), format="json"),
        ManifestFile(path=Path(".helm/Chart.yaml"), format="yaml"),
        ManifestFile(path=Path("pyproject.toml"), format="toml"),
    ]


class TagbumpConfig(_Model):
    """Root configuration."""

    allow_dirty: bool = False
    tag_prefix: str = "v"
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    files: list[ManifestFile] = Field(default_factory=_default_files)

    @property
    def effective_tag_prefix(self) -> str:
        """Tag prefix, with ``[version].tag_prefix`` taking precedence."""
        if self.version.tag_prefix is not None:
            return self.version.tag_prefix
        return self.tag_prefix

    @property
    def effective_changelog_path(self) -> Path:
        return self.changelog.path
