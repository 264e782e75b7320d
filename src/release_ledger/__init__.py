"""release-ledger: commit-driven changelog and channel-aware versioning."""

from __future__ import annotations

__version__ = "0.1.0"
