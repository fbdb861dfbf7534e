"""Helpers shared by CLI commands."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from tagbump.config import load_config
from tagbump.core.release import prepare_release
from tagbump.cli.messages import message
from tagbump.exceptions import TagbumpError
from tagbump.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from tagbump.config.models import TagbumpConfig
    from tagbump.core.release import ReleasePlan


def resolve_project_path(path: str | None) -> Path:
    return Path(path).resolve() if path else Path.cwd()


def load_project(
    project_path: Path,
    err_console: Console,
) -> tuple[TagbumpConfig, GitRepository]:
    """Load configuration and open the repository, exiting on failure."""
    try:
        config = load_config(project_path)
    except TagbumpError as e:
        err_console.print(f"[red]{message('config_error')}[/] {e}")
        raise SystemExit(1) from e

    try:
        repo = GitRepository(project_path)
    except TagbumpError as e:
        err_console.print(f"[red]{message('error')}[/] {e}")
        raise SystemExit(1) from e

    return config, repo


def compute_plan(
    repo: GitRepository,
    config: TagbumpConfig,
    err_console: Console,
    *,
    force: bool,
) -> ReleasePlan | None:
    """Plan the next release, exiting on failure."""
    try:
        return prepare_release(repo, config, date.today(), force=force)
    except TagbumpError as e:
        err_console.print(f"[red]{message('plan_error')}[/] {e}")
        raise SystemExit(1) from e


def print_nothing_to_release(console: Console) -> None:
    console.print(
        f"[yellow]{message('nothing_to_release')}[/]\n[dim]{message('force_hint')}[/]"
    )
