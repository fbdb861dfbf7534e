"""Configuration loading.

Settings are read from ``[tool.tagbump]`` in the nearest
``pyproject.toml``. Projects without one may use a ``.version.json``
file listing the manifests to update::

    {"npm": "package.json", "helm": [".helm/Chart.yaml"], "composer": null}
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tagbump.config.models import TagbumpConfig
from tagbump.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

LEGACY_CONFIG_NAME = ".version.json"
TOOL_NAME = "tagbump"

# Legacy key -> manifest format
_LEGACY_FORMATS = {
    "helm": "yaml",
    "npm": "json",
    "composer": "json",
}


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Load and parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tagbump_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.tagbump]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_NAME, {}))


def load_legacy_config(path: Path) -> dict[str, Any]:
    """Translate a ``.version.json`` file into tagbump settings.

    Each of the ``helm``, ``npm`` and ``composer`` keys may hold a path,
    a list of paths, or null.

    Raises:
        ConfigValidationError: If the file is malformed
    """
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path} must contain a JSON object")

    files: list[dict[str, str]] = []
    for key, fmt in _LEGACY_FORMATS.items():
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            paths = [value]
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            paths = value
        else:
            raise ConfigValidationError(
                f"'{key}' in {path} should be a string or an array of strings"
            )
        files.extend({"path": p, "format": fmt} for p in paths)

    return {"files": files}


def load_config(path: Path | None = None) -> TagbumpConfig:
    """Load configuration for the project at ``path``.

    Lookup order: ``[tool.tagbump]`` in pyproject.toml, then
    ``.version.json`` in the project directory, then defaults.

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    project_path = (path or Path.cwd()).resolve()
    raw: dict[str, Any] = {}

    try:
        pyproject_path = find_pyproject_toml(project_path)
    except ConfigNotFoundError:
        pyproject_path = None

    if pyproject_path is not None:
        raw = extract_tagbump_config(load_pyproject_toml(pyproject_path))
        if raw:
            logger.debug("Loaded [tool.%s] from %s", TOOL_NAME, pyproject_path)

    legacy_path = project_path / LEGACY_CONFIG_NAME
    if not raw and legacy_path.is_file():
        raw = load_legacy_config(legacy_path)
        logger.debug("Loaded legacy configuration from %s", legacy_path)

    try:
        return TagbumpConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid tagbump configuration:\n{e}") from e
