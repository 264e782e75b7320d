"""Implementation of the read-mostly commands: sync, show and notes."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import TYPE_CHECKING

from release_ledger.config import load_config
from release_ledger.core.changelog import find_record, render_record
from release_ledger.core.channels import project
from release_ledger.core.history import load_history
from release_ledger.core.version import Version
from release_ledger.exceptions import ReleaseLedgerError
from release_ledger.project.targets import sync_targets, update_channel_manifest

if TYPE_CHECKING:
    from rich.console import Console


def run_sync(path: str | None, console: Console, err_console: Console) -> None:
    """Re-write every version target from the recorded current version."""
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        history = load_history(project_path / config.changelog_path, config.version.initial_version)
        version = Version.parse(history.current_version)

        console.print(f"Syncing version files to [cyan]{version}[/]")
        written = sync_targets(project_path, version, config.targets)
        if config.channel_manifest is not None:
            update_channel_manifest(project_path / config.channel_manifest, version, dt.date.today())
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if not written:
        console.print("[yellow]No version files found to update.[/]")
    for written_path, value in written:
        console.print(f"  [green]✓[/] {written_path.relative_to(project_path)} → {value}")


def run_show(path: str | None, console: Console, err_console: Console) -> None:
    """Print the current version with its projections."""
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        history = load_history(project_path / config.changelog_path, config.version.initial_version)
        projection = project(Version.parse(history.current_version))
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"Version: [cyan]{projection.full}[/]")
    console.print(f"Strict:  {projection.strict}")
    console.print(f"Channel: {projection.channel}")
    if history.latest is not None:
        console.print(f"Released {history.latest.date.isoformat()}: {history.latest.title}")


def run_notes(
    path: str | None,
    version: str | None,
    technical: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Print markdown release notes for one version (default: current)."""
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        history = load_history(project_path / config.changelog_path, config.version.initial_version)
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    wanted = version or history.current_version
    record = find_record(history, wanted)
    if record is None:
        err_console.print(f"[red]Error:[/] No recorded version {wanted}")
        raise SystemExit(1)

    console.print(render_record(record, include_technical=technical), markup=False, highlight=False)
