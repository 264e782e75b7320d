"""Tests for commit message parsing and changelog classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from release_ledger.core.commits import (
    ChangelogEntry,
    EntryKind,
    classify_heading,
    collect_changes,
    entries_for_commit,
    entry_from_title,
    get_breaking_changes,
    group_entries_by_kind,
    parse_changelog_section,
    parse_commit_message,
)

if TYPE_CHECKING:
    from release_ledger.vcs.git import Commit
    from tests.conftest import CommitFactory


class TestParseCommitMessage:
    """Tests for parse_commit_message()."""

    def test_extracts_all_sections(self):
        """Title, description and both blocks are extracted."""
        message = (
            "feat(orders) - Split bills\n"
            "\n"
            "Lets waiters split a bill.\n"
            "\n"
            "<technical>\nAdded SplitService.\n</technical>\n"
            "\n"
            "<changelog>\n## Features\n- Split bills.\n</changelog>\n"
        )
        sections = parse_commit_message(message)

        assert sections.title == "feat(orders) - Split bills"
        assert sections.description == "Lets waiters split a bill."
        assert sections.technical == "Added SplitService."
        assert sections.changelog == "## Features\n- Split bills."

    def test_no_markers(self):
        """Plain messages have no sections."""
        sections = parse_commit_message("Update readme\n\nMore words here.")

        assert sections.title == "Update readme"
        assert sections.description == "More words here."
        assert sections.technical is None
        assert sections.changelog is None

    def test_unmatched_marker_is_absent(self):
        """An opening tag without closing tag yields no section."""
        sections = parse_commit_message("title\n<changelog>\n## Fixes\n- Something.\n")

        assert sections.changelog is None

    def test_markers_are_case_sensitive(self):
        """<Changelog> is not recognized."""
        sections = parse_commit_message("title\n<Changelog>\n- x\n</Changelog>")

        assert sections.changelog is None

    def test_first_match_is_used(self):
        """Only the first block of each kind is taken."""
        message = "t\n<technical>one</technical>\n<technical>two</technical>"

        assert parse_commit_message(message).technical == "one"

    def test_title_skips_leading_blank_lines(self):
        """The title is the first non-blank line."""
        assert parse_commit_message("\n\n  real title  \nbody").title == "real title"

    def test_description_stops_at_first_marker(self):
        """Description excludes everything from the first recognized block on."""
        message = "title\nintro\n<changelog>\n- a\n</changelog>\ntrailing"

        assert parse_commit_message(message).description == "intro"

    def test_empty_message(self):
        """Empty input degrades gracefully."""
        sections = parse_commit_message("")

        assert sections.title == ""
        assert sections.description == ""
        assert sections.technical is None


class TestClassifyHeading:
    """Tests for classify_heading()."""

    @pytest.mark.parametrize(
        ("heading", "kind"),
        [
            ("Breaking Changes", EntryKind.BREAKING),
            ("Breaking fixes", EntryKind.BREAKING),
            ("Bug Fixes", EntryKind.FIX),
            ("Fixed 🐛", EntryKind.FIX),
            ("🐛", EntryKind.FIX),
            ("New Features", EntryKind.FEATURE),
            ("✨ Novedades", EntryKind.FEATURE),
            ("Improvements", EntryKind.IMPROVEMENT),
            ("Misc", EntryKind.IMPROVEMENT),
            ("", EntryKind.IMPROVEMENT),
        ],
    )
    def test_priority(self, heading: str, kind: EntryKind):
        """Headings map to kinds in priority order."""
        assert classify_heading(heading) == kind

    def test_fix_beats_feature(self):
        """A heading mentioning both fix and feature is a fix."""
        assert classify_heading("Feature fixes") == EntryKind.FIX


class TestParseChangelogSection:
    """Tests for parse_changelog_section()."""

    def test_fixed_bug_example(self):
        """The canonical fix example yields exactly one entry."""
        entries = parse_changelog_section("## Fixed 🐛\n- Resolved crash on startup.")

        assert entries == [
            ChangelogEntry(
                kind=EntryKind.FIX,
                title="Resolved crash on startup",
                description="Resolved crash on startup.",
            )
        ]

    def test_fixed_bug_example_via_message(self):
        """The same example embedded in a full commit message."""
        message = "fix: crash\n\n<changelog>\n## Fixed 🐛\n- Resolved crash on startup.\n</changelog>"
        entries = parse_changelog_section(parse_commit_message(message).changelog)

        assert len(entries) == 1
        assert entries[0].kind == EntryKind.FIX
        assert entries[0].title == "Resolved crash on startup"

    def test_multiple_sections(self):
        """Each heading classifies its own bullets."""
        text = "## Features\n- A. More\n- B\n## Fixes\n- C.\n## Other\n- D"
        entries = parse_changelog_section(text)

        assert [(e.kind, e.title) for e in entries] == [
            (EntryKind.FEATURE, "A"),
            (EntryKind.FEATURE, "B"),
            (EntryKind.FIX, "C"),
            (EntryKind.IMPROVEMENT, "D"),
        ]

    def test_heading_without_bullets(self):
        """A heading with no bullets yields nothing."""
        entries = parse_changelog_section("## Features\n## Fixes\n- Only fix.")

        assert len(entries) == 1
        assert entries[0].kind == EntryKind.FIX

    def test_bullets_before_heading_ignored(self):
        """Bullets with no heading above them are dropped."""
        assert parse_changelog_section("- orphan\n## Fixes\n- kept") == [
            ChangelogEntry(kind=EntryKind.FIX, title="kept", description="kept")
        ]

    def test_non_bullet_lines_ignored(self):
        """Prose between bullets is ignored."""
        entries = parse_changelog_section("## Improvements\nsome prose\n  - indented bullet.  ")

        assert [e.description for e in entries] == ["indented bullet."]

    @pytest.mark.parametrize("text", [None, "", "   \n  "])
    def test_empty(self, text: str | None):
        """Empty input yields no entries."""
        assert parse_changelog_section(text) == []

    def test_title_without_period(self):
        """Lines without a period use the whole text as title."""
        entries = parse_changelog_section("## Improvements\n- Faster startup")

        assert entries[0].title == "Faster startup"

    def test_title_with_leading_period(self):
        """A line starting with a period falls back to the full text."""
        entries = parse_changelog_section("## Improvements\n- .env files are loaded")

        assert entries[0].title == ".env files are loaded"


class TestEntriesForCommit:
    """Tests for entries_for_commit() and title fallback."""

    def test_uses_changelog_block(self, feat_commit: Commit):
        """Commits with a changelog block use its entries."""
        entries = entries_for_commit(feat_commit)

        assert [e.kind for e in entries] == [EntryKind.FEATURE, EntryKind.IMPROVEMENT]

    @pytest.mark.parametrize(
        ("title", "kind", "short"),
        [
            ("feat(menu) - Allergen filter", EntryKind.FEATURE, "Allergen filter"),
            ("fix(printer) - Paper jam", EntryKind.FIX, "Paper jam"),
            ("refactor(core) - Tidy services", EntryKind.IMPROVEMENT, "Tidy services"),
            ("Update readme", EntryKind.IMPROVEMENT, "Update readme"),
            ("feat: no scope", EntryKind.IMPROVEMENT, "feat: no scope"),
        ],
    )
    def test_title_fallback(self, title: str, kind: EntryKind, short: str):
        """Without a changelog block the title is classified by prefix."""
        entry = entry_from_title(title)

        assert entry.kind == kind
        assert entry.title == short
        assert entry.description == title

    def test_commit_without_block(self, make_commit: CommitFactory):
        """A plain commit yields exactly one synthetic entry."""
        entries = entries_for_commit(make_commit("fix(db) - Lock timeout\n\nbody"))

        assert entries == [ChangelogEntry(kind=EntryKind.FIX, title="Lock timeout", description="fix(db) - Lock timeout")]

    def test_empty_block_yields_nothing(self, make_commit: CommitFactory):
        """An empty changelog block contributes no entries (no title fallback)."""
        assert entries_for_commit(make_commit("feat(x) - y\n<changelog></changelog>")) == []


class TestCollectChanges:
    """Tests for collect_changes()."""

    def test_collects_entries_and_notes(self, sample_commits: list[Commit]):
        """Entries are concatenated and technical notes joined."""
        entries, notes = collect_changes(sample_commits)

        assert len(entries) == 5
        assert notes == "Guarded PrinterService.init with a once-flag.\nAdded SplitService."

    def test_empty(self):
        """No commits, no changes."""
        assert collect_changes([]) == ([], "")


class TestEntryHelpers:
    """Tests for get_breaking_changes() and group_entries_by_kind()."""

    def test_get_breaking_changes(self, breaking_commit: Commit, fix_commit: Commit):
        """Only breaking descriptions are returned."""
        entries, _ = collect_changes([fix_commit, breaking_commit])

        assert get_breaking_changes(entries) == ["The /sync endpoint was removed. Use /v2/sync instead."]

    def test_group_by_kind(self, sample_commits: list[Commit]):
        """Entries are grouped by kind."""
        entries, _ = collect_changes(sample_commits)
        grouped = group_entries_by_kind(entries)

        assert len(grouped[EntryKind.FIX]) == 1
        assert len(grouped[EntryKind.FEATURE]) == 2
        assert len(grouped[EntryKind.IMPROVEMENT]) == 2

    def test_entry_serializes_kind_as_type(self):
        """Entries serialize their kind under the 'type' key."""
        entry = ChangelogEntry(kind=EntryKind.FEATURE, title="t", description="d")

        assert entry.model_dump(mode="json", by_alias=True) == {"type": "feature", "title": "t", "description": "d"}
