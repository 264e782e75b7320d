"""Configuration models for release-ledger.

Configuration lives under ``[tool.release-ledger]`` in pyproject.toml::

    [tool.release-ledger]
    changelog_path = "changelog.json"
    channel_manifest = "versions.json"

    [tool.release-ledger.version]
    default_prefix = "beta"

    [[tool.release-ledger.targets]]
    path = "src-tauri/tauri.conf.json"
    format = "json"
    strict = true
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_ledger.core.version import Prefix, Version
from release_ledger.exceptions import ReleaseLedgerError


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TargetFormat(str, Enum):
    JSON = "json"
    TOML = "toml"


class VersionTarget(_StrictModel):
    """A file that records the current version."""

    path: Path
    format: TargetFormat = TargetFormat.JSON
    strict: bool = Field(default=False, description="Write major.minor.patch without prefix")
    required: bool = Field(default=False, description="Fail if the file is missing")


def _default_targets() -> list[VersionTarget]:
    return [
        VersionTarget(path=Path("package.json"), format=TargetFormat.JSON),
        VersionTarget(path=Path("src-tauri/tauri.conf.json"), format=TargetFormat.JSON, strict=True),
        VersionTarget(path=Path("src-tauri/Cargo.toml"), format=TargetFormat.TOML, strict=True),
    ]


class VersionConfig(_StrictModel):
    """Version computation settings."""

    initial_version: str = "0.1.0"
    default_prefix: str | None = Field(
        default=None,
        description="Channel prefix applied when none is given on the command line",
    )

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        try:
            Version.parse(value)
        except ReleaseLedgerError as e:
            raise ValueError(e.message) from e
        return value

    @field_validator("default_prefix")
    @classmethod
    def _check_default_prefix(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            Prefix.parse(value)
        except ReleaseLedgerError as e:
            raise ValueError(e.message) from e
        return value


class GroupingConfig(_StrictModel):
    """History bootstrap grouping thresholds."""

    max_gap_days: int = Field(default=7, ge=0)
    max_group_size: int = Field(default=10, ge=1)


class ReleaseLedgerConfig(_StrictModel):
    """Root configuration."""

    changelog_path: Path = Path("changelog.json")
    default_branch: str = "main"
    allow_dirty: bool = False
    channel_manifest: Path | None = None

    version: VersionConfig = Field(default_factory=VersionConfig)
    grouping: GroupingConfig = Field(default_factory=GroupingConfig)
    targets: list[VersionTarget] = Field(default_factory=_default_targets)
