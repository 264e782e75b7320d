"""Version parsing and manipulation.

Versions are ``major.minor.patch`` triples with an optional prerelease
channel prefix written in front of the base, e.g. ``beta-1.4.0``.
A version without a prefix is stable.

The channel prefixes form a closed enumeration with a fixed maturity
order::

    pre-alpha < alpha < beta < rc < stable
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from release_ledger.exceptions import InvalidPrefixError, InvalidVersionFormatError

_BASE_PATTERN = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")

STABLE_TOKENS = frozenset({"", "stable"})


class BumpType(str, Enum):
    """Magnitude of a version increment.

    INITIAL only appears on bootstrapped records; bumping by it leaves
    the base unchanged.
    """

    INITIAL = "initial"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    def __str__(self) -> str:
        return self.value


class Prefix(str, Enum):
    """Prerelease channel prefix, declared in maturity order."""

    PRE_ALPHA = "pre-alpha"
    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"

    def __str__(self) -> str:
        return self.value

    @property
    def maturity(self) -> int:
        """Position in the maturity order (lower is less mature)."""
        return _MATURITY_ORDER.index(self)

    @property
    def label(self) -> str:
        """Human readable label, e.g. ``Pre-alpha``."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str | Prefix | None) -> Prefix | None:
        """Parse a prefix token.

        ``None``, ``""`` and ``"stable"`` all mean stable and return None.

        Raises:
            InvalidPrefixError: If the token is not a known prefix
        """
        if value is None or isinstance(value, Prefix):
            return value

        token = value.strip().lower()
        if token in STABLE_TOKENS:
            return None

        try:
            return cls(token)
        except ValueError:
            raise InvalidPrefixError(value, valid=[p.value for p in cls]) from None


_MATURITY_ORDER: list[Prefix] = [Prefix.PRE_ALPHA, Prefix.ALPHA, Prefix.BETA, Prefix.RC]

# Stable sits above every prerelease channel.
STABLE_MATURITY = len(_MATURITY_ORDER)


def maturity_of(prefix: Prefix | None) -> int:
    """Maturity index of a prefix, treating None as stable."""
    return STABLE_MATURITY if prefix is None else prefix.maturity


# Longest token first so "pre-alpha-" is not mistaken for "alpha-".
_PREFIX_TOKENS = sorted((p.value for p in Prefix), key=len, reverse=True)


@dataclass(frozen=True)
class Version:
    """A release version with an optional channel prefix.

    Examples:
        >>> v = Version.parse("beta-1.2.3")
        >>> v.prefix, v.base
        (<Prefix.BETA: 'beta'>, (1, 2, 3))
        >>> str(v.bump(BumpType.MINOR))
        'beta-1.3.0'
    """

    major: int
    minor: int
    patch: int
    prefix: Prefix | None = None

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.patch):
            if part < 0:
                raise InvalidVersionFormatError(
                    f"{self.major}.{self.minor}.{self.patch}",
                    reason="components must be non-negative",
                )

    @classmethod
    def parse(cls, version_str: str) -> Version:
        """Parse a version string.

        Args:
            version_str: Version such as ``"1.2.3"`` or ``"rc-2.0.0"``

        Returns:
            Parsed Version

        Raises:
            InvalidVersionFormatError: If the base is not three
                dot-separated non-negative integers
        """
        text = version_str.strip()
        prefix: Prefix | None = None

        for token in _PREFIX_TOKENS:
            if text.startswith(f"{token}-"):
                prefix = Prefix(token)
                text = text[len(token) + 1 :]
                break

        match = _BASE_PATTERN.match(text)
        if not match:
            raise InvalidVersionFormatError(
                version_str, reason="expected [prefix-]major.minor.patch"
            )

        major, minor, patch = (int(g) for g in match.groups())
        return cls(major, minor, patch, prefix)

    def __str__(self) -> str:
        if self.prefix is None:
            return self.base_string
        return f"{self.prefix.value}-{self.base_string}"

    @property
    def base(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def base_string(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @property
    def is_stable(self) -> bool:
        return self.prefix is None

    @property
    def maturity(self) -> int:
        return maturity_of(self.prefix)

    def compare_base(self, other: Version) -> int:
        """Numerically compare bases, ignoring prefixes.

        Returns:
            -1, 0 or 1
        """
        if self.base < other.base:
            return -1
        if self.base > other.base:
            return 1
        return 0

    def bump(self, bump_type: BumpType | str) -> Version:
        """Return a new version with the base bumped; the prefix is kept.

        Unknown bump types (including INITIAL) leave the base unchanged.
        """
        try:
            bump = BumpType(bump_type)
        except ValueError:
            return self

        if bump == BumpType.MAJOR:
            return replace(self, major=self.major + 1, minor=0, patch=0)
        if bump == BumpType.MINOR:
            return replace(self, minor=self.minor + 1, patch=0)
        if bump == BumpType.PATCH:
            return replace(self, patch=self.patch + 1)
        return self

    def with_prefix(self, prefix: Prefix | str | None) -> Version:
        """Return a copy on another channel (None means stable)."""
        return replace(self, prefix=Prefix.parse(prefix))


def parse_version(version_str: str) -> Version:
    """Parse a version string (convenience wrapper around Version.parse)."""
    return Version.parse(version_str)
