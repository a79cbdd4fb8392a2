"""Implementation of the 'update-history' command.

The command regenerates the version history file of each component
whose version changed, one component at a time.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from history_py.config import load_config
from history_py.exceptions import HistoryPyError
from history_py.project.catalog import Catalog, VersionChange, find_changed_versions
from history_py.updater import update_history_file
from history_py.vcs import GitRepository, find_repository_root

if TYPE_CHECKING:
    from datetime import date

    from rich.console import Console

    from history_py.config.models import HistoryPyConfig


def run_update_history(
    component_ids: tuple[str, ...],
    path: str | None,
    console: Console,
    err_console: Console,
    today: date | None = None,
) -> None:
    """Run the update-history command.

    Args:
        component_ids: Components to update; when empty, the components whose
            catalog version differs from HEAD
        path: Optional path inside the repository
        console: Console for standard output
        err_console: Console for error output
        today: Date for unreleased changes (default: today)
    """
    start = Path(path) if path else Path.cwd()

    try:
        root = find_repository_root(start)
        config = load_config(start)
        catalog = Catalog.load(root / config.catalog_path)
    except HistoryPyError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if component_ids:
        changes = [
            VersionChange(id_, None, _declared_version(catalog, id_)) for id_ in component_ids
        ]
    else:
        try:
            changes = _find_changes(root, config, catalog)
        except HistoryPyError as e:
            err_console.print(f"[red]Error finding changed versions:[/] {escape(str(e))}")
            raise SystemExit(1) from e

    if not changes:
        console.print("[yellow]No component versions changed. Nothing to do.[/]")
        return

    for change in changes:
        if change.new_version is None:
            console.print(f"{escape(change.id)} has been deleted; no history required.")
            continue

        # The first failure aborts the remaining components
        try:
            history_path = update_history_file(root, config, catalog[change.id], today=today)
        except HistoryPyError as e:
            err_console.print(
                f"[red]Error updating history for {escape(change.id)}:[/] {escape(str(e))}"
            )
            raise SystemExit(1) from e

        relative_path = history_path.relative_to(root).as_posix()
        console.print(f"Updated version history file: {escape(relative_path)}")


def _declared_version(catalog: Catalog, component_id: str) -> str | None:
    component = catalog.get(component_id)
    return component.version if component else None


def _find_changes(root: Path, config: HistoryPyConfig, catalog: Catalog) -> list[VersionChange]:
    with GitRepository.open(root) as repository:
        previous_text = repository.read_file_at_head(config.catalog_path)

    previous = Catalog() if previous_text is None else Catalog.parse(previous_text, "HEAD")
    return find_changed_versions(catalog, previous)
