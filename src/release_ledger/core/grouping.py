"""Historical commit grouping for one-time history bootstrap.

When a project adopts release-ledger late, its existing history is
partitioned into synthetic release groups: a new group starts when the
commit date drifts too far from the group's anchor date, or when the
group is full. Each group becomes one backfilled VersionRecord.

The synthetic version numbers only preserve ordering (the most recent
group gets the highest version); the exact numbers carry no meaning and
are never used by the live increment engine.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from release_ledger.core.commits import EntryKind, collect_changes, entries_for_commit, get_breaking_changes
from release_ledger.core.engine import detect_bump
from release_ledger.core.history import ChangelogHistory, VersionRecord
from release_ledger.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from release_ledger.core.commits import ChangelogEntry
    from release_ledger.vcs.git import Commit

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAP_DAYS = 7
DEFAULT_MAX_GROUP_SIZE = 10

FEATURES_TITLE = "New features and improvements"
FIXES_TITLE = "Fixes and optimizations"
IMPROVEMENTS_TITLE = "System improvements"


@dataclass
class CommitGroup:
    """A run of consecutive commits treated as one synthetic release."""

    date: dt.date
    commits: list[Commit] = field(default_factory=list)

    @property
    def entries(self) -> list[ChangelogEntry]:
        return [entry for commit in self.commits for entry in entries_for_commit(commit)]

    @property
    def bump_type(self) -> BumpType:
        return detect_bump(self.entries)

    @property
    def title(self) -> str:
        kinds = {entry.kind for entry in self.entries}
        if EntryKind.FEATURE in kinds:
            return FEATURES_TITLE
        if EntryKind.FIX in kinds:
            return FIXES_TITLE
        return IMPROVEMENTS_TITLE


def group_commits(
    commits: Sequence[Commit],
    *,
    max_gap_days: int = DEFAULT_MAX_GAP_DAYS,
    max_size: int = DEFAULT_MAX_GROUP_SIZE,
) -> list[CommitGroup]:
    """Partition an ordered history into release groups.

    Args:
        commits: Entire history, oldest to newest
        max_gap_days: Start a new group when a commit is more than this
            many days from the group's anchor date
        max_size: Start a new group once the current one holds this
            many commits

    Returns:
        Groups, most recent first
    """
    groups: list[CommitGroup] = []
    current: CommitGroup | None = None

    for commit in commits:
        day = commit.day
        if (
            current is None
            or abs((day - current.date).days) > max_gap_days
            or len(current.commits) >= max_size
        ):
            current = CommitGroup(date=day)
            groups.append(current)
        current.commits.append(commit)

    logger.debug("Grouped %d commit(s) into %d group(s)", len(commits), len(groups))
    groups.reverse()
    return groups


def synthetic_version(index: int, total: int) -> str:
    """Backfill version for the group at ``index`` (0 = most recent).

    The newest group is 1.0.0, the next two are 0.8.0 and 0.7.0, and older
    groups count down 0.1.N towards 0.1.1.
    """
    if total == 1 or index == 0:
        return "1.0.0"
    if index < 3:
        return f"0.{9 - index}.0"
    return f"0.1.{max(1, total - index)}"


def bootstrap_history(
    commits: Sequence[Commit],
    *,
    max_gap_days: int = DEFAULT_MAX_GAP_DAYS,
    max_size: int = DEFAULT_MAX_GROUP_SIZE,
) -> ChangelogHistory:
    """Build a synthetic history from the entire commit log.

    Args:
        commits: Entire history, oldest to newest

    Returns:
        A new ChangelogHistory (empty if there are no commits)
    """
    groups = group_commits(commits, max_gap_days=max_gap_days, max_size=max_size)
    if not groups:
        return ChangelogHistory.empty()

    records: list[VersionRecord] = []
    for index, group in enumerate(groups):
        changes, technical_notes = collect_changes(group.commits)
        records.append(
            VersionRecord(
                version=synthetic_version(index, len(groups)),
                date=group.date,
                bump_type=detect_bump(changes),
                title=group.title,
                changes=changes,
                technical_notes=technical_notes,
                breaking_changes=get_breaking_changes(changes),
                commit_hash=group.commits[-1].sha,
            )
        )

    return ChangelogHistory(current_version=records[0].version, versions=records)
