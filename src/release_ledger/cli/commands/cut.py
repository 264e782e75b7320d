"""Implementation of the 'cut' command.

The cut command turns the commits since the last recorded version into
a new version record, then syncs every version-bearing file.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from release_ledger.config import load_config
from release_ledger.core.channels import project
from release_ledger.core.engine import UNSET
from release_ledger.core.history import cut_version, last_versioned_commit, load_history, save_history
from release_ledger.exceptions import ReleaseLedgerError
from release_ledger.project.targets import sync_targets, update_channel_manifest
from release_ledger.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from release_ledger.core.engine import VersionBump, _Unset
    from release_ledger.vcs.git import Commit


def run_cut(
    path: str | None,
    execute: bool,
    bump_type: str | None,
    prefix: str | None,
    allow_dirty: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the cut command.

    Args:
        path: Optional path to project directory
        execute: Whether to write the history and version files
        bump_type: Forced bump type (major, minor, patch)
        prefix: Channel prefix override ("stable" for no prefix)
        allow_dirty: Skip the clean working tree check
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        repo = GitRepository(project_path)
        dirty = repo.is_dirty()
        branch = repo.current_branch()
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if execute and dirty and not (allow_dirty or config.allow_dirty):
        err_console.print(
            "[red]Error:[/] Repository has uncommitted changes.\n"
            "Commit or stash them, or use [cyan]--allow-dirty[/]."
        )
        raise SystemExit(1)

    if branch != config.default_branch:
        console.print(f"[yellow]Warning:[/] cutting from [cyan]{branch}[/], not {config.default_branch}")

    changelog_path = project_path / config.changelog_path

    try:
        history = load_history(changelog_path, config.version.initial_version)
        since = last_versioned_commit(history)
        commits = repo.get_commits(since)

        console.print(f"Current version: [cyan]{history.current_version}[/]")
        console.print(f"Last versioned commit: [dim]{since or 'none'}[/]")

        result = cut_version(
            history,
            commits,
            bump_type=bump_type,
            prefix=_effective_prefix(prefix, config.version.default_prefix, first_cut=not history.versions),
            today=dt.date.today(),
        )
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if result.bump is None or result.record is None:
        console.print("[yellow]No new commits since the last version. Nothing to do.[/]")
        return

    bump, record = result.bump, result.record
    _print_summary(bump, commits, console)

    if not execute:
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n"
                f"  • Sync {len(config.targets)} version target(s)\n"
                f"  • Record version in [cyan]{config.changelog_path}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run without [cyan]--dry-run[/] to apply these changes.[/]")
        return

    new_version = bump.version

    # Version files first: a failed sync leaves the history untouched
    try:
        for written_path, value in sync_targets(project_path, new_version, config.targets):
            console.print(f"  [green]✓[/] Updated {written_path.relative_to(project_path)} → {value}")

        if config.channel_manifest is not None:
            channel = update_channel_manifest(
                project_path / config.channel_manifest, new_version, dt.date.today()
            )
            console.print(f"  [green]✓[/] Published to [cyan]{channel}[/] channel")

        save_history(result.history, changelog_path)
        console.print(f"  [green]✓[/] Updated {config.changelog_path}")
    except ReleaseLedgerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Version {new_version} recorded![/]\n\n"
            f"Changes: {len(record.changes)}\n"
            f"Commits: {result.commit_count}",
            title="[green]Cut Complete[/]",
            border_style="green",
        )
    )


def _effective_prefix(
    requested: str | None,
    default: str | None,
    *,
    first_cut: bool,
) -> str | _Unset:
    """Prefix override for a cut.

    An explicit prefix always wins. The configured default only seeds the
    first cut; later cuts carry the current prefix forward.
    """
    if requested is not None:
        return requested
    if first_cut and default is not None:
        return default
    return UNSET


def _print_summary(bump: VersionBump, commits: list[Commit], console: Console) -> None:
    console.print("\nCommits included in the new version:")
    for commit in commits:
        console.print(f"  • [dim]{commit.short_sha}[/] {commit.title}")

    projection = project(bump.version)
    forced = f" → forced: {bump.bump_type}" if bump.forced else ""
    console.print(f"\nNew version: [cyan]{bump.current}[/] → [green]{bump.version}[/]")
    console.print(f"Detected type: {bump.detected_bump_type}{forced}")
    console.print(f"Channel: {projection.channel} (strict: {projection.strict})")

    if bump.prefix_changed:
        console.print(
            f"Prefix: {bump.current.prefix or 'stable'} → {bump.version.prefix or 'stable'}"
        )
    if bump.regression:
        console.print(
            "[yellow]Warning:[/] channel moves backwards; "
            "this may confuse users about stability."
        )
