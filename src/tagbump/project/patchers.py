"""Version field rewriting for project manifests.

Each supported manifest format has a patcher that can locate the
version field in the file's text and replace it. Patchers work on the
raw text with targeted regex replacements, so formatting, key order and
comments are preserved.

Supported formats:

- ``json``: ``package.json``, ``composer.json`` (``"version": "..."``)
- ``yaml``: Helm ``Chart.yaml`` (``appVersion``) or a top-level ``version``
- ``toml``: ``pyproject.toml`` (``[project]`` or ``[tool.poetry]`` version)
- ``python``: ``__version__ = "..."`` in a module
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Protocol

from tagbump.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class VersionPatcher(Protocol):
    """Locates and replaces the version field of one manifest format."""

    format: str

    def locate(self, content: str) -> str | None:
        """Return the current version string, or None if there is none."""
        ...

    def replace(self, content: str, new_version: str) -> str:
        """Return ``content`` with the version field set to ``new_version``.

        Raises:
            VersionNotFoundError: If the content has no version field
        """
        ...


class JsonVersionPatcher:
    """The first ``"version": "..."`` member of a JSON document."""

    format = "json"
    _pattern = re.compile(r'("version"\s*:\s*")([^"]*)(")')

    def locate(self, content: str) -> str | None:
        match = self._pattern.search(content)
        return match.group(2) if match else None

    def replace(self, content: str, new_version: str) -> str:
        new_content, count = self._pattern.subn(
            lambda m: f"{m.group(1)}{new_version}{m.group(3)}", content, count=1
        )
        if count == 0:
            raise VersionNotFoundError('No "version" member found')
        return new_content


class YamlVersionPatcher:
    """A top-level scalar version key in a YAML document.

    Keys are tried in order; Helm charts carry both ``version`` (the chart
    version) and ``appVersion`` (the application version), and only the
    latter tracks releases.
    """

    format = "yaml"

    def __init__(self, keys: tuple[str, ...] = ("appVersion", "version")) -> None:
        self.keys = keys

    def _pattern(self, key: str) -> re.Pattern[str]:
        return re.compile(
            rf"""^({re.escape(key)}:[ \t]*)(["']?)([^"'\s#]+)(\2)""",
            re.MULTILINE,
        )

    def locate(self, content: str) -> str | None:
        for key in self.keys:
            match = self._pattern(key).search(content)
            if match:
                return match.group(3)
        return None

    def replace(self, content: str, new_version: str) -> str:
        for key in self.keys:
            new_content, count = self._pattern(key).subn(
                lambda m: f"{m.group(1)}{m.group(2)}{new_version}{m.group(4)}",
                content,
                count=1,
            )
            if count:
                return new_content
        raise VersionNotFoundError(f"None of the keys {', '.join(self.keys)} found")


class TomlVersionPatcher:
    """``version`` in the ``[project]`` (PEP 621) or ``[tool.poetry]`` table."""

    format = "toml"
    _sections = (r"^\[project\]", r"^\[tool\.poetry\]")
    _version_line = re.compile(r'^(version\s*=\s*)(["\'])([^"\']+)(\2)', re.MULTILINE)

    def _section_pattern(self, header: str) -> re.Pattern[str]:
        # The whole table up to the next table header or EOF
        return re.compile(rf"{header}.*?(?=^\[|\Z)", re.MULTILINE | re.DOTALL)

    def locate(self, content: str) -> str | None:
        for header in self._sections:
            section = self._section_pattern(header).search(content)
            if section is None:
                continue
            match = self._version_line.search(section.group(0))
            if match:
                return match.group(3)
        return None

    def replace(self, content: str, new_version: str) -> str:
        for header in self._sections:
            section = self._section_pattern(header).search(content)
            if section is None:
                continue
            new_section, count = self._version_line.subn(
                lambda m: f"{m.group(1)}{m.group(2)}{new_version}{m.group(4)}",
                section.group(0),
                count=1,
            )
            if count:
                return content[: section.start()] + new_section + content[section.end() :]
        raise VersionNotFoundError("Expected [project].version or [tool.poetry].version")


class PythonVersionPatcher:
    """A module level ``__version__ = "..."`` assignment."""

    format = "python"

    def __init__(self, variable: str = "__version__") -> None:
        self._pattern = re.compile(
            rf"""^({re.escape(variable)}\s*=\s*)(["'])([^"']+)(\2)""",
            re.MULTILINE,
        )

    def locate(self, content: str) -> str | None:
        match = self._pattern.search(content)
        return match.group(3) if match else None

    def replace(self, content: str, new_version: str) -> str:
        new_content, count = self._pattern.subn(
            lambda m: f"{m.group(1)}{m.group(2)}{new_version}{m.group(4)}",
            content,
            count=1,
        )
        if count == 0:
            raise VersionNotFoundError("No __version__ assignment found")
        return new_content


_PATCHERS: dict[str, type[VersionPatcher]] = {
    "json": JsonVersionPatcher,
    "yaml": YamlVersionPatcher,
    "toml": TomlVersionPatcher,
    "python": PythonVersionPatcher,
}

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".py": "python",
}


def detect_format(path: Path) -> str:
    """Infer the manifest format from a file name.

    Raises:
        ProjectError: If the suffix is not a supported format
    """
    fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise ProjectError(f"Cannot infer manifest format of {path}")
    return fmt


def get_patcher(fmt: str) -> VersionPatcher:
    """Return a patcher instance for a manifest format.

    Raises:
        ProjectError: If the format is unknown
    """
    try:
        return _PATCHERS[fmt]()
    except KeyError:
        raise ProjectError(f"Unsupported manifest format: {fmt}") from None


def read_manifest_version(path: Path, fmt: str | None = None) -> str:
    """Read the version field of a manifest.

    Raises:
        ProjectError: If the file does not exist
        VersionNotFoundError: If the file has no version field
    """
    if not path.is_file():
        raise ProjectError(f"Manifest not found: {path}")
    patcher = get_patcher(fmt or detect_format(path))
    version = patcher.locate(path.read_text())
    if version is None:
        raise VersionNotFoundError(f"Could not find a version in {path}")
    return version


def update_manifest(path: Path, new_version: str, fmt: str | None = None) -> bool:
    """Write ``new_version`` into a manifest file.

    Missing files and files without a version field are skipped with a
    warning, since the default manifest list covers several ecosystems.

    Args:
        path: Manifest file
        new_version: Version string to write
        fmt: Manifest format; inferred from the file name when None

    Returns:
        True if the file was changed

    Raises:
        ProjectError: If ``path`` exists but is not a file, or the format
            is unsupported
    """
    if not path.exists():
        logger.debug("Tried to update %s but it does not exist", path)
        return False
    if not path.is_file():
        raise ProjectError(f"{path} is not a file")

    patcher = get_patcher(fmt or detect_format(path))
    content = path.read_text()

    try:
        new_content = patcher.replace(content, new_version)
    except VersionNotFoundError:
        logger.warning("File %s does not contain a version field", path)
        return False

    if new_content == content:
        logger.info("Version in %s is already %s", path, new_version)
        return False

    path.write_text(new_content)
    logger.info("Changed version in %s to %s", path, new_version)
    return True
