"""Implementation of the 'changelog' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagbump.cli.commands.common import (
    compute_plan,
    load_project,
    print_nothing_to_release,
    resolve_project_path,
)

if TYPE_CHECKING:
    from rich.console import Console


def run_changelog(
    path: str | None,
    force: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Print the changelog section the next release would add."""
    project_path = resolve_project_path(path)
    config, repo = load_project(project_path, err_console)

    plan = compute_plan(repo, config, err_console, force=force)
    if plan is None:
        print_nothing_to_release(err_console)
        return

    console.print(plan.changelog, markup=False, highlight=False, end="")
