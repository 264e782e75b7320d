"""CLI entry point for release-ledger."""

from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler

from release_ledger import __version__
from release_ledger.core.version import BumpType, Prefix

console = Console()
err_console = Console(stderr=True)

BUMP_CHOICES = [BumpType.MAJOR.value, BumpType.MINOR.value, BumpType.PATCH.value]
PREFIX_CHOICES = [*(p.value for p in Prefix), "stable"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-ledger",
        description="Commit-driven changelog and channel-aware versioning",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    cut = subparsers.add_parser("cut", help="Cut a new version from commits since the last one")
    cut.add_argument("--path", help="Project directory (default: current directory)")
    cut.add_argument("-t", "--type", dest="bump_type", choices=BUMP_CHOICES, help="Force bump type")
    cut.add_argument("-p", "--prefix", choices=PREFIX_CHOICES, help="Change channel prefix ('stable' drops it)")
    cut.add_argument("--dry-run", action="store_true", help="Preview without writing files")
    cut.add_argument("--allow-dirty", action="store_true", help="Allow uncommitted changes")

    bootstrap = subparsers.add_parser("bootstrap", help="Backfill history from the whole commit log")
    bootstrap.add_argument("--path", help="Project directory (default: current directory)")
    bootstrap.add_argument("--dry-run", action="store_true", help="Preview without writing files")

    sync = subparsers.add_parser("sync", help="Sync version files with the recorded version")
    sync.add_argument("--path", help="Project directory (default: current directory)")

    show = subparsers.add_parser("show", help="Show the current version, channel and strict form")
    show.add_argument("--path", help="Project directory (default: current directory)")

    notes = subparsers.add_parser("notes", help="Print markdown release notes for a version")
    notes.add_argument("--path", help="Project directory (default: current directory)")
    notes.add_argument("--for", dest="for_version", metavar="VERSION", help="Version (default: current)")
    notes.add_argument("--technical", action="store_true", help="Include technical notes")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "cut":
        from release_ledger.cli.commands.cut import run_cut

        run_cut(
            path=args.path,
            execute=not args.dry_run,
            bump_type=args.bump_type,
            prefix=args.prefix,
            allow_dirty=args.allow_dirty,
            console=console,
            err_console=err_console,
        )
    elif args.command == "bootstrap":
        from release_ledger.cli.commands.bootstrap import run_bootstrap

        run_bootstrap(args.path, not args.dry_run, console, err_console)
    elif args.command == "sync":
        from release_ledger.cli.commands.sync import run_sync

        run_sync(args.path, console, err_console)
    elif args.command == "show":
        from release_ledger.cli.commands.sync import run_show

        run_show(args.path, console, err_console)
    elif args.command == "notes":
        from release_ledger.cli.commands.sync import run_notes

        run_notes(args.path, args.for_version, args.technical, console, err_console)


if __name__ == "__main__":
    main()
