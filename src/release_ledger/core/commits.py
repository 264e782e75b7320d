"""Commit message parsing and changelog entry classification.

Commit bodies carry two optional tagged blocks::

    feat(orders) - Split bills by seat

    Free text description.

    <technical>
    Added SplitService and migrated the tickets table.
    </technical>

    <changelog>
    ## New Features ✨
    - Bills can be split by seat. Works for open tables.
    </changelog>

Everything here is a pure text function. Malformed or missing markers
never raise; they degrade to absent sections and fallback entries,
because commit text is free-form human or AI authored input.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_ledger.vcs.git import Commit

logger = logging.getLogger(__name__)

TECHNICAL_PATTERN = re.compile(r"<technical>(.*?)</technical>", re.DOTALL)
CHANGELOG_PATTERN = re.compile(r"<changelog>(.*?)</changelog>", re.DOTALL)

OPENING_MARKERS = ("<technical>", "<changelog>")

BUG_MARKER = "🐛"
SPARKLE_MARKER = "✨"

# "feat(scope) - " style prefixes stripped from fallback entry titles
_TITLE_PREFIX_PATTERN = re.compile(r"^(feat|fix|refactor)\([^)]+\)\s*-\s*")


class EntryKind(str, Enum):
    """Kind of user-visible change."""

    FEATURE = "feature"
    FIX = "fix"
    IMPROVEMENT = "improvement"
    BREAKING = "breaking"

    def __str__(self) -> str:
        return self.value


class ChangelogEntry(BaseModel):
    """One classified, user-facing description of a change."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: EntryKind = Field(alias="type")
    title: str
    description: str


@dataclass(frozen=True)
class CommitSections:
    """Structured view of one commit message."""

    title: str
    description: str
    technical: str | None = None
    changelog: str | None = None


def parse_commit_message(message: str) -> CommitSections:
    """Split a commit message into title, description and tagged blocks.

    The first match of each ``<technical>`` / ``<changelog>`` pair is used.
    A marker without its closing tag leaves that section absent.

    Args:
        message: Full commit message text

    Returns:
        CommitSections with None for missing blocks
    """
    technical_match = TECHNICAL_PATTERN.search(message)
    changelog_match = CHANGELOG_PATTERN.search(message)

    lines = message.splitlines()
    title = ""
    title_index = len(lines)
    for index, line in enumerate(lines):
        if line.strip():
            title = line.strip()
            title_index = index
            break

    # Description runs from after the title up to the first recognized opening tag
    rest = "\n".join(lines[title_index + 1 :])
    cut_points = [
        m.start()
        for m in (TECHNICAL_PATTERN.search(rest), CHANGELOG_PATTERN.search(rest))
        if m is not None
    ]
    description = rest[: min(cut_points)] if cut_points else rest

    return CommitSections(
        title=title,
        description=description.strip(),
        technical=technical_match.group(1).strip() if technical_match else None,
        changelog=changelog_match.group(1).strip() if changelog_match else None,
    )


def classify_heading(heading: str) -> EntryKind:
    """Infer the entry kind from a changelog subsection heading.

    Priority: breaking, then fix, then feature; anything else is an
    improvement.
    """
    text = heading.lower()
    if "breaking" in text:
        return EntryKind.BREAKING
    if "fix" in text or BUG_MARKER in text:
        return EntryKind.FIX
    if "feature" in text or SPARKLE_MARKER in text:
        return EntryKind.FEATURE
    return EntryKind.IMPROVEMENT


def entry_title(text: str) -> str:
    """Short label: text before the first period, or the whole text."""
    head = text.split(".", 1)[0].strip()
    return head or text


def parse_changelog_section(changelog: str | None) -> list[ChangelogEntry]:
    """Turn a changelog block into typed entries.

    ``##`` lines open a subsection; ``-`` lines under it become entries.
    Bullets before the first heading are ignored.

    Args:
        changelog: Contents of a ``<changelog>`` block

    Returns:
        Entries in document order
    """
    if not changelog:
        return []

    entries: list[ChangelogEntry] = []
    kind: EntryKind | None = None

    for raw in changelog.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("##"):
            kind = classify_heading(line.lstrip("#").strip())
        elif line.startswith("-") and kind is not None:
            text = line[1:].strip()
            if not text:
                continue
            entries.append(ChangelogEntry(kind=kind, title=entry_title(text), description=text))

    return entries


def entry_from_title(title: str) -> ChangelogEntry:
    """Synthesize a single entry from a commit title.

    Used when a commit carries no changelog block.
    """
    if title.startswith("feat("):
        kind = EntryKind.FEATURE
    elif title.startswith("fix("):
        kind = EntryKind.FIX
    else:
        kind = EntryKind.IMPROVEMENT

    return ChangelogEntry(
        kind=kind,
        title=_TITLE_PREFIX_PATTERN.sub("", title),
        description=title,
    )


def entries_for_commit(commit: Commit) -> list[ChangelogEntry]:
    """Changelog entries contributed by one commit."""
    sections = parse_commit_message(commit.message)
    if sections.changelog is not None:
        return parse_changelog_section(sections.changelog)

    logger.debug("Commit %s has no changelog block, using title", commit.short_sha)
    return [entry_from_title(commit.title or sections.title)]


def collect_changes(commits: Iterable[Commit]) -> tuple[list[ChangelogEntry], str]:
    """Gather entries and technical notes from a batch of commits.

    Returns:
        Tuple of (entries in commit order, joined technical notes)
    """
    entries: list[ChangelogEntry] = []
    notes: list[str] = []

    for commit in commits:
        entries.extend(entries_for_commit(commit))
        technical = parse_commit_message(commit.message).technical
        if technical:
            notes.append(technical)

    return entries, "\n".join(notes).strip()


def get_breaking_changes(entries: Iterable[ChangelogEntry]) -> list[str]:
    """Descriptions of breaking entries."""
    return [e.description for e in entries if e.kind == EntryKind.BREAKING]


def group_entries_by_kind(entries: Iterable[ChangelogEntry]) -> dict[EntryKind, list[ChangelogEntry]]:
    """Group entries by kind, preserving order within each kind."""
    grouped: dict[EntryKind, list[ChangelogEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.kind, []).append(entry)
    return grouped
