"""Version increment engine.

Computes the next version from the current one and a batch of changelog
entries. The computation is deterministic and side-effect free apart
from logging; persisting the result is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

from release_ledger.core.commits import EntryKind
from release_ledger.core.version import BumpType, Prefix, Version, maturity_of

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_ledger.core.commits import ChangelogEntry

logger = logging.getLogger(__name__)


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


# Sentinel for "no prefix override": keep the current channel.
# An explicit None means "force stable".
UNSET: Final = _Unset.UNSET


@dataclass(frozen=True)
class VersionBump:
    """Outcome of a version computation."""

    current: Version
    version: Version
    bump_type: BumpType
    detected_bump_type: BumpType
    forced: bool = False
    regression: bool = False

    @property
    def prefix_changed(self) -> bool:
        return self.current.prefix != self.version.prefix


def detect_bump(entries: Iterable[ChangelogEntry]) -> BumpType:
    """Detect the bump type implied by a batch of entries.

    Any breaking entry means MAJOR; otherwise any feature means MINOR;
    otherwise PATCH.
    """
    kinds = {entry.kind for entry in entries}
    if EntryKind.BREAKING in kinds:
        return BumpType.MAJOR
    if EntryKind.FEATURE in kinds:
        return BumpType.MINOR
    return BumpType.PATCH


def is_regression(current: Prefix | None, target: Prefix | None) -> bool:
    """True if moving from ``current`` to ``target`` lowers maturity."""
    return maturity_of(target) < maturity_of(current)


def _coerce_bump(bump_type: BumpType | str) -> BumpType:
    try:
        return BumpType(bump_type)
    except ValueError:
        # Unknown bump types leave the base untouched
        logger.warning("Unrecognized bump type %r, keeping base version", bump_type)
        return BumpType.INITIAL


def next_version(
    current: Version,
    entries: Iterable[ChangelogEntry],
    *,
    bump_type: BumpType | str | None = None,
    prefix: Prefix | str | None | _Unset = UNSET,
) -> VersionBump:
    """Compute the next version.

    Args:
        current: The current version
        entries: Changelog entries accumulated since the last cut
        bump_type: Forced bump type; wins over detection
        prefix: Channel override. UNSET keeps the current prefix,
            None or "stable" forces stable.

    Returns:
        VersionBump with the new version and both detected and applied
        bump types

    Raises:
        InvalidPrefixError: If the prefix override is not recognized
    """
    # Validate before computing anything
    target_prefix = current.prefix if prefix is UNSET else Prefix.parse(prefix)

    detected = detect_bump(entries)
    applied = detected if bump_type is None else _coerce_bump(bump_type)

    regression = False
    if prefix is not UNSET and is_regression(current.prefix, target_prefix):
        regression = True
        logger.warning(
            "Regressive prefix transition %s -> %s; this may confuse users about stability",
            current.prefix or "stable",
            target_prefix or "stable",
        )

    new_version = current.bump(applied).with_prefix(target_prefix)
    logger.debug(
        "Computed %s -> %s (detected %s, applied %s)",
        current,
        new_version,
        detected,
        applied,
    )

    return VersionBump(
        current=current,
        version=new_version,
        bump_type=applied,
        detected_bump_type=detected,
        forced=bump_type is not None,
        regression=regression,
    )
