"""Shared fixtures for tagbump tests."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from tagbump.vcs.git import Commit

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

COMMIT_DATE = datetime(2024, 5, 1, 12, 0, 0)


def make_commit(sha: str, message: str, parent_count: int = 1) -> Commit:
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=COMMIT_DATE,
        parent_count=parent_count,
    )


@pytest.fixture
def commit_factory() -> Callable[..., Commit]:
    """Build commits from a sha and a message."""
    return make_commit


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat1234567890", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix1234567890", "fix(core): handle empty input")


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit(
        "break1234567890",
        "feat(api)!: remove v1 endpoints\n\nBREAKING CHANGE: v1 clients must upgrade",
    )


@pytest.fixture
def sample_commits(
    feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit
) -> list[Commit]:
    return [
        feat_commit,
        fix_commit,
        make_commit("docs1234567890", "docs: update readme"),
        make_commit("chore1234567890", "chore(deps): bump pydantic"),
        breaking_commit,
        make_commit("other1234567890", "Updated the readme file"),
    ]


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """A project directory with manifests in several formats."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.2.3"

[tool.tagbump]
tag_prefix = "v"
"""
    )
    (tmp_path / "package.json").write_text(
        '{\n  "name": "test-project",\n  "version": "1.2.3",\n  "private": true\n}\n'
    )
    return tmp_path
