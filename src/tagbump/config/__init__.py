"""Configuration management for tagbump."""

from __future__ import annotations

from tagbump.config.loader import load_config
from tagbump.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitConfig,
    ManifestFile,
    TagbumpConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "GitConfig",
    "ManifestFile",
    "TagbumpConfig",
    "VersionConfig",
    "load_config",
]
