"""Version-bearing project files."""

from __future__ import annotations

from release_ledger.project.targets import (
    sync_targets,
    update_channel_manifest,
    update_json_version,
    update_toml_version,
)

__all__ = [
    "sync_targets",
    "update_channel_manifest",
    "update_json_version",
    "update_toml_version",
]
