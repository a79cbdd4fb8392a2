"""Implementation of the 'show-releases' command.

Prints the releases computed for a component without touching its
history file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from history_py.config import load_config
from history_py.exceptions import HistoryPyError
from history_py.project.catalog import Catalog
from history_py.updater import load_releases
from history_py.vcs import GitRepository, find_repository_root

if TYPE_CHECKING:
    from rich.console import Console


def run_show_releases(
    component_id: str,
    path: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the show-releases command.

    Args:
        component_id: Component to inspect
        path: Optional path inside the repository
        console: Console for standard output
        err_console: Console for error output
    """
    start = Path(path) if path else Path.cwd()

    try:
        root = find_repository_root(start)
        config = load_config(start)
        component = Catalog.load(root / config.catalog_path)[component_id]
        with GitRepository.open(root) as repository:
            releases = load_releases(repository, config, component)
    except HistoryPyError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    table = Table(title=f"Releases of {escape(component_id)}")
    table.add_column("Version", style="cyan")
    table.add_column("Released")
    table.add_column("Tag commit")
    table.add_column("Commits", justify="right")

    for release in releases:
        table.add_row(
            str(release.version),
            release.release_date.date().isoformat() if release.release_date else "unreleased",
            release.anchor_commit.short_sha if release.anchor_commit else "-",
            str(len(release.commits)),
        )

    console.print(table)
