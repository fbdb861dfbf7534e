"""Typer application for tagbump."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from tagbump import __version__
from tagbump.cli.commands.changelog import run_changelog
from tagbump.cli.commands.next import run_next
from tagbump.cli.commands.release import run_release

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="tagbump",
    help="Semantic versions, changelogs and tags from Conventional Commits.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

PathArgument = typer.Argument(None, help="Project directory (defaults to the current one)")
ForceOption = typer.Option(
    False, "--force", "-f", help="Release a patch version even without releasable commits."
)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def _main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Increase output verbosity."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def release(
    path: str | None = PathArgument,
    execute: bool = typer.Option(False, "--execute", help="Apply changes (default: dry run)."),
    force: bool = ForceOption,
    push: bool = typer.Option(False, "--push", "-p", help="Push the release commit and tag."),
) -> None:
    """Bump the version, update the changelog, commit and tag."""
    run_release(path, execute, force, push, console, err_console)


@app.command("next")
def next_version(
    path: str | None = PathArgument,
    force: bool = ForceOption,
) -> None:
    """Print the tag of the next release."""
    run_next(path, force, console, err_console)


@app.command()
def changelog(
    path: str | None = PathArgument,
    force: bool = ForceOption,
) -> None:
    """Print the changelog section of the next release."""
    run_changelog(path, force, console, err_console)


def main() -> None:
    app()
