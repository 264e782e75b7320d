"""Git repository access via subprocess.

Only the read operations needed for release bookkeeping are exposed:
commit history with full message bodies, the current branch, and
working tree cleanliness.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from release_ledger.exceptions import GitError

logger = logging.getLogger(__name__)

# Unit/record separators keep multi-line bodies intact in one log call.
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%cI", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class Commit:
    """A read-only snapshot of one git commit."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def title(self) -> str:
        """First non-blank line of the message."""
        for line in self.message.splitlines():
            if line.strip():
                return line.strip()
        return ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def day(self) -> date:
        return self.date.date()


class GitRepository:
    """Thin wrapper around the git CLI for one working tree."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else Path.cwd()
        self._verify_repository()

    def _run(self, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise GitError("git is not installed or not in PATH") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {' '.join(args)} failed", stderr=e.stderr) from e
        return result.stdout

    def _verify_repository(self) -> None:
        try:
            self._run("rev-parse", "--git-dir")
        except GitError as e:
            # No stderr means git itself could not be started
            if e.stderr is None:
                raise
            raise GitError(f"Not a git repository: {self.path}", stderr=e.stderr) from e

    def get_commits(self, since: str | None = None) -> list[Commit]:
        """Get commits ordered oldest to newest.

        Args:
            since: Exclusive lower bound commit hash; None for full history

        Returns:
            List of commits with full message bodies
        """
        args = ["log", f"--pretty=format:{_LOG_FORMAT}", "--reverse"]
        if since:
            args.append(f"{since}..HEAD")

        try:
            output = self._run(*args)
        except GitError as e:
            # An empty repository has no HEAD yet
            if e.stderr and "does not have any commits" in e.stderr:
                return []
            raise

        commits = [_parse_record(record) for record in output.split(_RECORD_SEP)]
        commits = [c for c in commits if c is not None]
        logger.debug("Read %d commit(s) since %s", len(commits), since or "root")
        return commits

    def current_branch(self) -> str:
        return self._run("rev-parse", "--abbrev-ref", "HEAD").strip()

    def is_dirty(self) -> bool:
        """True if the working tree has uncommitted changes."""
        return bool(self._run("status", "--porcelain").strip())


def _parse_record(record: str) -> Commit | None:
    record = record.strip("\n")
    if not record.strip():
        return None

    sha, author_name, author_email, committed, message = record.split(_FIELD_SEP, 4)
    return Commit(
        sha=sha.strip(),
        message=message.strip(),
        author_name=author_name,
        author_email=author_email,
        date=datetime.fromisoformat(committed.strip()),
    )
