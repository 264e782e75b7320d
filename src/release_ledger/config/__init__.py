"""Configuration management for release-ledger."""

from __future__ import annotations

from release_ledger.config.loader import load_config
from release_ledger.config.models import (
    GroupingConfig,
    ReleaseLedgerConfig,
    TargetFormat,
    VersionConfig,
    VersionTarget,
)

__all__ = [
    "GroupingConfig",
    "ReleaseLedgerConfig",
    "TargetFormat",
    "VersionConfig",
    "VersionTarget",
    "load_config",
]
