"""Command line entry point for history-py."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from history_py import __version__
from history_py.cli.commands.show import run_show_releases
from history_py.cli.commands.update_history import run_update_history


def _configure_logging(verbose: bool, err_console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(version=__version__, prog_name="history-py")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Keep per-component version history files up to date from git history."""
    console = Console(soft_wrap=True)
    err_console = Console(stderr=True, soft_wrap=True)
    _configure_logging(verbose, err_console)

    ctx.obj = {"console": console, "err_console": err_console}


@cli.command("update-history")
@click.argument("component_ids", nargs=-1)
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    help="Directory inside the repository (default: current directory)",
)
@click.pass_context
def update_history(ctx: click.Context, component_ids: tuple[str, ...], path: str | None) -> None:
    """Update the release history file for each changed version.

    Without COMPONENT_IDS, the components whose version in the catalog
    differs from the committed catalog are updated.
    """
    run_update_history(component_ids, path, ctx.obj["console"], ctx.obj["err_console"])


@cli.command("show-releases")
@click.argument("component_id")
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False),
    help="Directory inside the repository (default: current directory)",
)
@click.pass_context
def show_releases(ctx: click.Context, component_id: str, path: str | None) -> None:
    """Show the releases computed for COMPONENT_ID without writing anything."""
    run_show_releases(component_id, path, ctx.obj["console"], ctx.obj["err_console"])


def main() -> None:
    cli()
