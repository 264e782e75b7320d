"""Exception hierarchy for release-ledger.

All errors raised by the library derive from ReleaseLedgerError so that
callers (and the CLI) can catch one type at the orchestration boundary.

Parsing anomalies inside commit messages are never raised; they degrade
to documented fallbacks instead.
"""

from __future__ import annotations


class ReleaseLedgerError(Exception):
    """Base class for all release-ledger errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# =============================================================================
# Version errors
# =============================================================================


class VersionError(ReleaseLedgerError):
    """Base class for version related errors."""


class InvalidVersionFormatError(VersionError):
    """A version string is not an optional prefix plus major.minor.patch."""

    def __init__(self, version: str, reason: str | None = None) -> None:
        message = f"Invalid version format: {version!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.version = version


class InvalidPrefixError(VersionError):
    """An explicitly requested channel prefix is not recognized."""

    def __init__(self, prefix: str, valid: list[str] | None = None) -> None:
        message = f"Invalid prefix: {prefix!r}"
        if valid:
            message = f"{message}. Valid: {', '.join(valid)}, or 'stable'"
        super().__init__(message)
        self.prefix = prefix


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(ReleaseLedgerError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """pyproject.toml could not be located."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


# =============================================================================
# Changelog / history errors
# =============================================================================


class ChangelogError(ReleaseLedgerError):
    """The persisted changelog history could not be read or written."""


# =============================================================================
# VCS errors
# =============================================================================


class GitError(ReleaseLedgerError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)
        self.stderr = stderr


# =============================================================================
# Project file errors
# =============================================================================


class ProjectError(ReleaseLedgerError):
    """A version-bearing project file could not be updated."""


class VersionNotFoundError(ProjectError):
    """No version field was found in a project file."""
