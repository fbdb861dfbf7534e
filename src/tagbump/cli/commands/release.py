"""Implementation of the 'release' command.

The release command updates manifests and the changelog, commits
the result and creates the release tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel

from tagbump.cli.commands.common import (
    compute_plan,
    load_project,
    print_nothing_to_release,
    resolve_project_path,
)
from tagbump.cli.messages import message
from tagbump.core.release import apply_release
from tagbump.exceptions import ProjectError, TagbumpError, VersionNotFoundError
from tagbump.project.patchers import read_manifest_version

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from tagbump.config.models import ManifestFile


def _describe_manifest(project_path: Path, manifest: ManifestFile, version: str) -> str | None:
    path = project_path / manifest.path
    if not path.is_file():
        return None
    try:
        current = read_manifest_version(path, manifest.format)
    except VersionNotFoundError:
        return f"  • Skip [cyan]{manifest.path}[/] (no version field)"
    except ProjectError as e:
        return f"  • [red]Cannot update[/] [cyan]{manifest.path}[/]: {e}"
    return f"  • Update [cyan]{manifest.path}[/]: {current} -> {version}"


def run_release(
    path: str | None,
    execute: bool,
    force: bool,
    push: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        execute: Whether to actually apply changes
        force: Release a patch even without releasable commits
        push: Push the release commit and tag to the remote
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = resolve_project_path(path)
    config, repo = load_project(project_path, err_console)

    plan = compute_plan(repo, config, err_console, force=force)
    if plan is None:
        print_nothing_to_release(console)
        return

    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    if plan.previous_tag is None:
        console.print(f"\n{mode_str} - First release! Tagging [green]{plan.tag}[/]\n")
    else:
        console.print(
            f"\n{mode_str} - Releasing [green]{plan.tag}[/] "
            f"(was [cyan]{plan.previous_tag}[/], {plan.bump} bump)\n"
        )

    if not execute:
        manifests = [_describe_manifest(project_path, m, plan.version_string) for m in config.files]
        files = "\n".join(line for line in manifests if line)
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n"
                f"{files}\n"
                f"  • Prepend changelog to [cyan]{config.effective_changelog_path}[/]\n"
                f"  • Commit and tag [cyan]{plan.tag}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print(plan.changelog, markup=False, highlight=False)
        console.print("[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    try:
        result = apply_release(repo, plan, config, project_path, push=push or None)
    except TagbumpError as e:
        err_console.print(f"[red]{message('release_failed')}[/] {e}")
        raise SystemExit(1) from e

    for changed in result.changed_files:
        console.print(f"  [green]✓[/] {message('updated', path=changed)}")
    if result.commit_sha:
        console.print(f"  [green]✓[/] {message('committed', sha=result.commit_sha[:10])}")
    console.print(f"  [green]✓[/] {message('tagged', tag=plan.tag)}")

    if result.pushed:
        console.print(f"  [green]✓[/] {message('pushed', remote=config.git.remote)}")
    else:
        console.print(
            f"\n[blue]i[/] {message('push_hint')} "
            f"[cyan]git push --follow-tags {config.git.remote} {repo.current_branch()}[/]"
        )
