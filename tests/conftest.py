"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from release_ledger.vcs.git import Commit

BASE_DATE = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)

FIX_MESSAGE = """\
fix(printer) - Prevent crash on startup

The printer driver was initialised twice.

<technical>
Guarded PrinterService.init with a once-flag.
</technical>

<changelog>
## Fixed 🐛
- Resolved crash on startup.
</changelog>
"""

FEATURE_MESSAGE = """\
feat(orders) - Split bills by seat

<technical>
Added SplitService.
</technical>

<changelog>
## New Features ✨
- Bills can be split by seat. Works for open tables.
## Improvements
- Faster ticket printing.
</changelog>
"""

BREAKING_MESSAGE = """\
feat(api) - Replace sync endpoint

<changelog>
## Breaking Changes
- The /sync endpoint was removed. Use /v2/sync instead.
</changelog>
"""


CommitFactory = Callable[..., Commit]


@pytest.fixture
def make_commit() -> CommitFactory:
    """Factory for commits; ``days`` offsets the date from a fixed base."""
    counter = iter(range(1, 10_000))

    def _make(message: str = "chore: tidy up", *, days: float = 0, sha: str | None = None) -> Commit:
        number = next(counter)
        return Commit(
            sha=sha or f"{number:040x}",
            message=message,
            author_name="Test",
            author_email="test@test.com",
            date=BASE_DATE + timedelta(days=days),
        )

    return _make


@pytest.fixture
def fix_commit(make_commit: CommitFactory) -> Commit:
    return make_commit(FIX_MESSAGE, sha="fix123")


@pytest.fixture
def feat_commit(make_commit: CommitFactory) -> Commit:
    return make_commit(FEATURE_MESSAGE, sha="feat123")


@pytest.fixture
def breaking_commit(make_commit: CommitFactory) -> Commit:
    return make_commit(BREAKING_MESSAGE, sha="break123")


@pytest.fixture
def sample_commits(make_commit: CommitFactory) -> list[Commit]:
    """A mixed batch, oldest first."""
    return [
        make_commit(FIX_MESSAGE, days=0, sha="c1"),
        make_commit("feat(menu) - Allergen filter", days=1, sha="c2"),
        make_commit("docs: update readme", days=1, sha="c3"),
        make_commit(FEATURE_MESSAGE, days=2, sha="c4"),
    ]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Project tree with every default version target."""
    (tmp_path / "package.json").write_text('{\n  "name": "tpv",\n  "version": "0.0.0"\n}\n')
    tauri = tmp_path / "src-tauri"
    tauri.mkdir()
    (tauri / "tauri.conf.json").write_text('{\n  "productName": "tpv",\n  "version": "0.0.0"\n}\n')
    (tauri / "Cargo.toml").write_text(
        '[package]\nname = "tpv"\nversion = "0.0.0"  # keep\nedition = "2021"\n\n'
        '[dependencies]\nserde = { version = "1.0" }\n'
    )
    return tmp_path
