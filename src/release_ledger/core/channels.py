"""Distribution channel mapping and per-target version projections.

Some consumers (Cargo, Tauri, most package managers) only accept strict
``major.minor.patch`` strings. The strict projection drops the channel
prefix; it is lossy and cannot be parsed back into the original version.
The full projection is the canonical string form and round-trips.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from release_ledger.core.version import Prefix, Version


class Channel(str, Enum):
    """Distribution channel for update metadata."""

    STABLE = "stable"
    BETA = "beta"
    DEV = "dev"

    def __str__(self) -> str:
        return self.value


_CHANNELS: dict[Prefix | None, Channel] = {
    None: Channel.STABLE,
    Prefix.ALPHA: Channel.BETA,
    Prefix.BETA: Channel.BETA,
    Prefix.PRE_ALPHA: Channel.DEV,
    Prefix.RC: Channel.DEV,
}


def channel_for(version: Version) -> Channel:
    """Map a version's prefix to its distribution channel."""
    return _CHANNELS[version.prefix]


def strict_version(version: Version) -> str:
    """Plain ``major.minor.patch``.

    Lossy: the prefix is dropped, so ``beta-1.2.0`` and ``1.2.0`` project
    to the same string.
    """
    return version.base_string


def full_version(version: Version) -> str:
    """Canonical string form, including the prefix."""
    return str(version)


@dataclass(frozen=True)
class VersionProjection:
    full: str
    strict: str
    channel: Channel


def project(version: Version) -> VersionProjection:
    """Every representation of a version that collaborators consume."""
    return VersionProjection(
        full=full_version(version),
        strict=strict_version(version),
        channel=channel_for(version),
    )
