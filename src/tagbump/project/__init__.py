"""Project manifest handling."""

from __future__ import annotations

from tagbump.project.patchers import (
    VersionPatcher,
    detect_format,
    get_patcher,
    read_manifest_version,
    update_manifest,
)

__all__ = [
    "VersionPatcher",
    "detect_format",
    "get_patcher",
    "read_manifest_version",
    "update_manifest",
]
