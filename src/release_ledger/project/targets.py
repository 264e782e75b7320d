"""Version synchronization across project files.

Each configured target records the current version in its own format.
Targets marked ``strict`` receive the strict ``major.minor.patch``
projection because their consumers (Cargo, Tauri) reject prefixes.

TOML files are updated with a targeted regex replacement so formatting
and comments are preserved; JSON files are rewritten with indent 2.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from release_ledger.config.models import TargetFormat
from release_ledger.core.channels import channel_for, full_version, strict_version
from release_ledger.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Iterable
    from pathlib import Path

    from release_ledger.config.models import VersionTarget
    from release_ledger.core.version import Version

logger = logging.getLogger(__name__)

_TOML_VERSION_PATTERN = re.compile(r'^(version\s*=\s*)["\'][^"\']*["\']', re.MULTILINE)


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ProjectError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ProjectError(f"Expected a JSON object in {path}")
    return data


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def update_json_version(path: Path, new_version: str) -> Path:
    """Set the top-level ``"version"`` key of a JSON file.

    Raises:
        ProjectError: If the file is missing or not a JSON object
    """
    if not path.is_file():
        raise ProjectError(f"Version file not found: {path}")

    data = _read_json(path)
    data["version"] = new_version
    _write_json(path, data)
    return path


def update_toml_version(path: Path, new_version: str) -> Path:
    """Replace the first ``version = "..."`` line of a TOML file.

    Raises:
        ProjectError: If the file does not exist
        VersionNotFoundError: If no version line is present
    """
    if not path.is_file():
        raise ProjectError(f"Version file not found: {path}")

    content = path.read_text(encoding="utf-8")
    new_content, count = _TOML_VERSION_PATTERN.subn(rf'\g<1>"{new_version}"', content, count=1)

    if count == 0:
        raise VersionNotFoundError(f"Could not find version pattern in {path}")

    path.write_text(new_content, encoding="utf-8")
    return path


def render_for_target(version: Version, target: VersionTarget) -> str:
    return strict_version(version) if target.strict else full_version(version)


def sync_targets(
    project_path: Path,
    version: Version,
    targets: Iterable[VersionTarget],
) -> list[tuple[Path, str]]:
    """Write ``version`` into every target file that exists.

    Required targets are checked before any file is written, so a missing
    one leaves every target untouched.

    Args:
        project_path: Project root the target paths are relative to
        version: Version to record
        targets: Configured targets

    Returns:
        ``(path, written_version)`` for every updated file

    Raises:
        ProjectError: If a required target is missing or an update fails
    """
    targets = list(targets)
    for target in targets:
        if target.required and not (project_path / target.path).is_file():
            raise ProjectError(f"Required version file not found: {project_path / target.path}")

    written: list[tuple[Path, str]] = []

    for target in targets:
        path = project_path / target.path
        if not path.is_file():
            logger.debug("Skipping missing target %s", path)
            continue

        value = render_for_target(version, target)
        if target.format == TargetFormat.TOML:
            update_toml_version(path, value)
        else:
            update_json_version(path, value)

        logger.info("Updated %s -> %s", path, value)
        written.append((path, value))

    return written


def _object_at(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.setdefault(key, {})
    if not isinstance(value, dict):
        raise ProjectError(f"Expected {key!r} to be a JSON object in {path}")
    return value


def update_channel_manifest(path: Path, version: Version, today: dt.date) -> str:
    """Record ``version`` on its distribution channel in an OTA manifest.

    Layout (``versions.json``)::

        {
          "frontend": {"version": "1.3.0", "lastUpdated": "2026-10-16"},
          "backend": {"version": "1.3.0", "lastUpdated": "2026-10-16"},
          "updateChannels": {
            "beta": {"frontend": "beta-1.3.0", "backend": "beta-1.3.0"}
          }
        }

    The components carry the strict version, the channel entries the full
    one. The manifest is created if it does not exist yet; other channels
    and unknown keys are left untouched.

    Returns:
        The channel the version was published to

    Raises:
        ProjectError: If the manifest cannot be read or has the wrong shape
    """
    channel = str(channel_for(version))
    data = _read_json(path) if path.is_file() else {}

    for component in ("frontend", "backend"):
        section = _object_at(data, component, path)
        section["version"] = strict_version(version)
        section["lastUpdated"] = today.isoformat()

    channels = _object_at(data, "updateChannels", path)
    entry = _object_at(channels, channel, path)
    entry["frontend"] = full_version(version)
    entry["backend"] = full_version(version)

    _write_json(path, data)
    logger.info("Published %s on %s channel in %s", version, channel, path)
    return channel
