"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from release_ledger.config.loader import (
    extract_release_ledger_config,
    find_pyproject_toml,
    load_config,
    load_pyproject_toml,
)
from release_ledger.config.models import (
    GroupingConfig,
    ReleaseLedgerConfig,
    TargetFormat,
    VersionConfig,
    VersionTarget,
)
from release_ledger.exceptions import ConfigNotFoundError, ConfigValidationError


class TestReleaseLedgerConfig:
    """Tests for ReleaseLedgerConfig model."""

    def test_default_config(self):
        """Default configuration has sensible values."""
        config = ReleaseLedgerConfig()

        assert config.changelog_path == Path("changelog.json")
        assert config.default_branch == "main"
        assert config.allow_dirty is False
        assert config.channel_manifest is None

    def test_nested_defaults(self):
        """Nested configurations have defaults."""
        config = ReleaseLedgerConfig()

        assert config.version.initial_version == "0.1.0"
        assert config.version.default_prefix is None
        assert config.grouping.max_gap_days == 7
        assert config.grouping.max_group_size == 10

    def test_default_targets(self):
        """The desktop app layout is targeted out of the box."""
        targets = {t.path.as_posix(): t for t in ReleaseLedgerConfig().targets}

        assert not targets["package.json"].strict
        assert targets["src-tauri/tauri.conf.json"].strict
        assert targets["src-tauri/Cargo.toml"].format == TargetFormat.TOML
        assert targets["src-tauri/Cargo.toml"].strict

    def test_unknown_keys_rejected(self):
        """Typos in configuration are errors."""
        with pytest.raises(ValidationError):
            ReleaseLedgerConfig.model_validate({"changelog": "x.json"})


class TestVersionConfig:
    """Tests for VersionConfig validators."""

    def test_valid_prefix(self):
        """Known prefixes are accepted."""
        assert VersionConfig(default_prefix="beta").default_prefix == "beta"

    def test_invalid_prefix(self):
        """Unknown prefixes are rejected at load time."""
        with pytest.raises(ValidationError, match="nightly"):
            VersionConfig(default_prefix="nightly")

    def test_invalid_initial_version(self):
        """The initial version must parse."""
        with pytest.raises(ValidationError, match="v1"):
            VersionConfig(initial_version="v1")

    def test_prefixed_initial_version(self):
        """A prefixed initial version is allowed."""
        assert VersionConfig(initial_version="pre-alpha-0.1.0").initial_version == "pre-alpha-0.1.0"


class TestGroupingConfig:
    """Tests for GroupingConfig bounds."""

    def test_group_size_must_be_positive(self):
        """A zero group size is rejected."""
        with pytest.raises(ValidationError):
            GroupingConfig(max_group_size=0)

    def test_negative_gap_rejected(self):
        """A negative gap is rejected."""
        with pytest.raises(ValidationError):
            GroupingConfig(max_gap_days=-1)


class TestVersionTarget:
    """Tests for VersionTarget."""

    def test_defaults(self):
        """Targets default to full JSON, optional."""
        target = VersionTarget(path=Path("app.json"))

        assert target.format == TargetFormat.JSON
        assert not target.strict
        assert not target.required

    def test_unknown_format(self):
        """Only json and toml are supported."""
        with pytest.raises(ValidationError):
            VersionTarget(path=Path("app.yaml"), format="yaml")


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_finds_in_current_dir(self, tmp_path: Path):
        """Finds pyproject.toml in the start directory."""
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")

        assert find_pyproject_toml(tmp_path) == (tmp_path / "pyproject.toml").resolve()

    def test_finds_in_parent(self, tmp_path: Path):
        """Walks up to a parent directory."""
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_pyproject_toml(nested) == (tmp_path / "pyproject.toml").resolve()


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_missing_file(self, tmp_path: Path):
        """Missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "pyproject.toml")

    def test_invalid_toml(self, tmp_path: Path):
        """Broken TOML raises ConfigValidationError."""
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool\nbroken = ")

        with pytest.raises(ConfigValidationError):
            load_pyproject_toml(path)


class TestExtractConfig:
    """Tests for extract_release_ledger_config()."""

    def test_present(self):
        """The tool table is returned."""
        data = {"tool": {"release-ledger": {"default_branch": "develop"}}}

        assert extract_release_ledger_config(data) == {"default_branch": "develop"}

    def test_absent(self):
        """Missing sections yield an empty dict."""
        assert extract_release_ledger_config({"project": {"name": "x"}}) == {}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_full_config(self, tmp_path: Path):
        """A complete section is parsed into models."""
        (tmp_path / "pyproject.toml").write_text(
            """
[tool.release-ledger]
changelog_path = "meta/changelog.json"
channel_manifest = "versions.json"
allow_dirty = true

[tool.release-ledger.version]
default_prefix = "beta"

[tool.release-ledger.grouping]
max_gap_days = 3

[[tool.release-ledger.targets]]
path = "src-tauri/Cargo.toml"
format = "toml"
strict = true
required = true
"""
        )
        config = load_config(tmp_path)

        assert config.changelog_path == Path("meta/changelog.json")
        assert config.channel_manifest == Path("versions.json")
        assert config.allow_dirty is True
        assert config.version.default_prefix == "beta"
        assert config.grouping.max_gap_days == 3
        assert config.grouping.max_group_size == 10
        assert len(config.targets) == 1
        assert config.targets[0].required

    def test_section_missing_uses_defaults(self, tmp_path: Path):
        """A pyproject without the section gives defaults."""
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")

        assert load_config(tmp_path) == ReleaseLedgerConfig()

    def test_invalid_values(self, tmp_path: Path):
        """Invalid values raise ConfigValidationError."""
        (tmp_path / "pyproject.toml").write_text('[tool.release-ledger.version]\ndefault_prefix = "gamma"\n')

        with pytest.raises(ConfigValidationError, match="release-ledger"):
            load_config(tmp_path)
