"""Core business logic for release-ledger.

This module contains the fundamental building blocks:
- Version parsing and manipulation (prefixed major.minor.patch)
- Commit message parsing and changelog entry classification
- The version increment engine and channel projections
- Changelog history, version cuts and history bootstrap
- Markdown rendering of recorded versions
"""

from __future__ import annotations

from release_ledger.core.changelog import find_record, render_changelog, render_record
from release_ledger.core.channels import Channel, VersionProjection, channel_for, full_version, project, strict_version
from release_ledger.core.commits import (
    ChangelogEntry,
    CommitSections,
    EntryKind,
    collect_changes,
    entries_for_commit,
    parse_changelog_section,
    parse_commit_message,
)
from release_ledger.core.engine import UNSET, VersionBump, detect_bump, next_version
from release_ledger.core.grouping import CommitGroup, bootstrap_history, group_commits, synthetic_version
from release_ledger.core.history import (
    ChangelogHistory,
    CutResult,
    VersionRecord,
    cut_version,
    generate_version_title,
    last_versioned_commit,
    load_history,
    save_history,
)
from release_ledger.core.proposals import CommitProposal, parse_commit_proposals
from release_ledger.core.version import BumpType, Prefix, Version, parse_version

__all__ = [
    "UNSET",
    # Version
    "BumpType",
    # Commits
    "ChangelogEntry",
    # History
    "ChangelogHistory",
    # Channels
    "Channel",
    # Grouping
    "CommitGroup",
    # Proposals
    "CommitProposal",
    "CommitSections",
    "CutResult",
    "EntryKind",
    "Prefix",
    "Version",
    # Engine
    "VersionBump",
    "VersionProjection",
    "VersionRecord",
    "bootstrap_history",
    "channel_for",
    "collect_changes",
    "cut_version",
    "detect_bump",
    "entries_for_commit",
    "find_record",
    "full_version",
    "generate_version_title",
    "group_commits",
    "last_versioned_commit",
    "load_history",
    "next_version",
    "parse_changelog_section",
    "parse_commit_message",
    "parse_commit_proposals",
    "parse_version",
    "project",
    "render_changelog",
    "render_record",
    "save_history",
    "strict_version",
    "synthetic_version",
]
