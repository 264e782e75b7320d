"""Markdown rendering of the changelog history.

Renders VersionRecords as human-readable release notes, e.g. for a
CHANGELOG.md or a release description. Breaking changes are listed
first, then each entry kind in a fixed order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from release_ledger.core.commits import EntryKind, group_entries_by_kind

if TYPE_CHECKING:
    from release_ledger.core.history import ChangelogHistory, VersionRecord

KIND_LABELS: dict[EntryKind, str] = {
    EntryKind.FEATURE: "### ✨ Features",
    EntryKind.FIX: "### 🐛 Bug Fixes",
    EntryKind.IMPROVEMENT: "### ⚡ Improvements",
}


def render_record(record: VersionRecord, *, include_technical: bool = False) -> str:
    """Render one version as a markdown section.

    Args:
        record: Version to render
        include_technical: Append the technical notes section

    Returns:
        Markdown text
    """
    lines = [
        f"## [{record.version}] - {record.date.isoformat()}",
        "",
        f"_{record.title}_",
        "",
    ]

    if record.breaking_changes:
        lines.append("### ⚠️ Breaking Changes")
        lines.append("")
        lines.extend(f"- {description}" for description in record.breaking_changes)
        lines.append("")

    grouped = group_entries_by_kind(record.changes)
    for kind, label in KIND_LABELS.items():
        entries = grouped.get(kind, [])
        if entries:
            lines.append(label)
            lines.append("")
            lines.extend(f"- {entry.description}" for entry in entries)
            lines.append("")

    if include_technical and record.technical_notes:
        lines.append("### 🔧 Technical Notes")
        lines.append("")
        lines.append(record.technical_notes)
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def render_changelog(history: ChangelogHistory, *, title: str = "Changelog") -> str:
    """Render the whole history, most recent version first."""
    sections = [f"# {title}\n"]
    sections.extend(render_record(record) for record in history.versions)
    return "\n".join(sections)


def find_record(history: ChangelogHistory, version: str) -> VersionRecord | None:
    """Look up a record by its full version string."""
    return next((r for r in history.versions if r.version == version), None)
