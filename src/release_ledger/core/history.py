"""Changelog history model, version cuts and persistence.

The history is an explicit value: callers load it, pass it to
``cut_version`` and save the returned copy. Nothing here keeps global
state, and a failed computation never touches the file on disk.

On-disk layout (``changelog.json``)::

    {
      "current_version": "beta-1.3.0",
      "versions": [
        {"version": "beta-1.3.0", "date": "2026-10-16", "type": "minor",
         "title": "...", "changes": [...], "technical_notes": "...",
         "breaking_changes": [], "commit_hash": "abc123", "prefix": "beta"}
      ]
    }

Versions are ordered most recent first.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from release_ledger.core.commits import ChangelogEntry, EntryKind, collect_changes, get_breaking_changes
from release_ledger.core.engine import UNSET, VersionBump, next_version
from release_ledger.core.version import BumpType, Prefix, Version
from release_ledger.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from release_ledger.core.engine import _Unset
    from release_ledger.vcs.git import Commit

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_VERSION = "0.1.0"


class VersionRecord(BaseModel):
    """One released version in the history. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str
    date: dt.date
    bump_type: BumpType = Field(alias="type")
    title: str
    changes: list[ChangelogEntry] = Field(default_factory=list)
    technical_notes: str = ""
    breaking_changes: list[str] = Field(default_factory=list)
    commit_hash: str
    prefix: Prefix | None = None

    @property
    def parsed_version(self) -> Version:
        return Version.parse(self.version)


class ChangelogHistory(BaseModel):
    """The persisted release history."""

    model_config = ConfigDict(frozen=True)

    current_version: str = DEFAULT_INITIAL_VERSION
    versions: list[VersionRecord] = Field(default_factory=list)

    @classmethod
    def empty(cls, initial_version: str = DEFAULT_INITIAL_VERSION) -> ChangelogHistory:
        return cls(current_version=initial_version, versions=[])

    @property
    def latest(self) -> VersionRecord | None:
        return self.versions[0] if self.versions else None

    def with_record(self, record: VersionRecord) -> ChangelogHistory:
        """New history with ``record`` prepended and made current."""
        return ChangelogHistory(
            current_version=record.version,
            versions=[record, *self.versions],
        )

    def to_json(self) -> str:
        data = self.model_dump(mode="json", by_alias=True)
        for record in data["versions"]:
            if record.get("prefix") is None:
                record.pop("prefix", None)
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


@dataclass(frozen=True)
class CutResult:
    """Outcome of a version cut."""

    history: ChangelogHistory
    record: VersionRecord | None = None
    bump: VersionBump | None = None
    commit_count: int = 0

    @property
    def no_new_commits(self) -> bool:
        return self.record is None


def generate_version_title(
    changes: Sequence[ChangelogEntry],
    bump_type: BumpType,
    prefix: Prefix | None = None,
) -> str:
    """Human summary for a version built from its entries."""
    label = f"{prefix.label} version - " if prefix else ""

    if bump_type == BumpType.MAJOR:
        return f"{label}Major update with significant changes"

    features = [c for c in changes if c.kind == EntryKind.FEATURE]
    fixes = [c for c in changes if c.kind == EntryKind.FIX]
    improvements = [c for c in changes if c.kind == EntryKind.IMPROVEMENT]

    if features:
        if len(features) == 1:
            return f"{label}New feature: {features[0].title}"
        return f"{label}New features including {features[0].title} and {len(features) - 1} more"

    if fixes:
        if len(fixes) == 1:
            return f"{label}Fix: {fixes[0].title}"
        return f"{label}Fixes and improvements ({len(fixes)} fixes, {len(improvements)} improvements)"

    return f"{label}Improvements and optimizations"


def last_versioned_commit(history: ChangelogHistory) -> str | None:
    """Commit hash anchoring the most recent cut, if any."""
    if not history.versions:
        return None
    # sorted() is stable, so equal dates keep most-recent-first order
    newest = sorted(history.versions, key=lambda r: r.date, reverse=True)[0]
    return newest.commit_hash


def cut_version(
    history: ChangelogHistory,
    commits: Sequence[Commit],
    *,
    bump_type: BumpType | str | None = None,
    prefix: Prefix | str | None | _Unset = UNSET,
    today: dt.date | None = None,
) -> CutResult:
    """Compute a new version record from commits since the last cut.

    Args:
        history: Current history snapshot
        commits: New commits, oldest to newest
        bump_type: Forced bump type
        prefix: Channel override (UNSET keeps the current one)
        today: Cut date; defaults to today

    Returns:
        CutResult. With no commits the history is returned unchanged
        and ``no_new_commits`` is True.

    Raises:
        InvalidVersionFormatError: If the current version is malformed
        InvalidPrefixError: If the prefix override is not recognized
    """
    if not commits:
        logger.info("No new commits since last cut")
        return CutResult(history=history)

    current = Version.parse(history.current_version)
    changes, technical_notes = collect_changes(commits)
    bump = next_version(current, changes, bump_type=bump_type, prefix=prefix)

    record = VersionRecord(
        version=str(bump.version),
        date=today or dt.date.today(),
        bump_type=bump.bump_type,
        title=generate_version_title(changes, bump.bump_type, bump.version.prefix),
        changes=changes,
        technical_notes=technical_notes,
        breaking_changes=get_breaking_changes(changes),
        commit_hash=commits[-1].sha,
        prefix=bump.version.prefix,
    )

    return CutResult(
        history=history.with_record(record),
        record=record,
        bump=bump,
        commit_count=len(commits),
    )


def load_history(path: Path, initial_version: str = DEFAULT_INITIAL_VERSION) -> ChangelogHistory:
    """Read the history file.

    A missing file is not an error: an empty history is returned so the
    first run can bootstrap.

    Raises:
        ChangelogError: If the file exists but cannot be parsed
    """
    if not path.exists():
        logger.info("No history at %s, starting from %s", path, initial_version)
        return ChangelogHistory.empty(initial_version)

    try:
        return ChangelogHistory.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        raise ChangelogError(f"Could not read changelog history {path}: {e}") from e


def save_history(history: ChangelogHistory, path: Path) -> Path:
    """Write the whole history atomically (temp file + rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(history.to_json())
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise ChangelogError(f"Could not write changelog history {path}: {e}") from e

    logger.info("Saved changelog history to %s", path)
    return path
