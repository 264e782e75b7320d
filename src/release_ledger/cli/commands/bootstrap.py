"""Implementation of the 'bootstrap' command.

Backfills the changelog history from the entire commit log, grouping
commits into synthetic releases. Meant to be run once when adopting
release-ledger on an existing project.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.table import Table

from release_ledger.config import load_config
from release_ledger.core.grouping import bootstrap_history
from release_ledger.core.history import save_history
from release_ledger.core.version import Version
from release_ledger.exceptions import ReleaseLedgerError
from release_ledger.project.targets import sync_targets
from release_ledger.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console


def run_bootstrap(
    path: str | None,
    execute: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the bootstrap command.

    Args:
        path: Optional path to project directory
        execute: Whether to write the history and version files
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        repo = GitRepository(project_path)
        commits = repo.get_commits()
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"Found {len(commits)} commit(s) in history")
    if not commits:
        console.print("[yellow]No commits to process.[/]")
        return

    history = bootstrap_history(
        commits,
        max_gap_days=config.grouping.max_gap_days,
        max_size=config.grouping.max_group_size,
    )

    table = Table(title=f"{len(history.versions)} synthetic versions")
    table.add_column("Version", style="cyan")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Changes", justify="right")
    table.add_column("Title")
    for record in history.versions:
        table.add_row(
            record.version,
            record.date.isoformat(),
            str(record.bump_type),
            str(len(record.changes)),
            record.title,
        )
    console.print(table)

    if not execute:
        console.print("\n[dim]Run without [cyan]--dry-run[/] to write the history.[/]")
        return

    changelog_path = project_path / config.changelog_path
    if changelog_path.exists():
        console.print(f"[yellow]Overwriting existing history at {config.changelog_path}[/]")

    try:
        save_history(history, changelog_path)
        sync_targets(project_path, Version.parse(history.current_version), config.targets)
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"[green]✓[/] History initialized at [cyan]{history.current_version}[/]")
