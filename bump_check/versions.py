"""Version parsing and bumping utilities.

Package versions follow PEP 440 ("1.0.0rc1", "0.1.0.dev0", "1.2.3.post1"),
so they are parsed with packaging. The release segment is then handed to
semver for the bump arithmetic, padded with zeros when incomplete
(e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import semver
from packaging.version import InvalidVersion, Version

from .models import Decision

RELEASE_STRATEGIES: list[Decision] = [
    Decision.UNDECIDED,
    Decision.DECLINE,
    Decision.PATCH,
    Decision.MINOR,
    Decision.MAJOR,
    Decision.PRERELEASE,
]

# A prerelease can only move forward to another prerelease or be promoted.
PRERELEASE_STRATEGIES: list[Decision] = [
    Decision.UNDECIDED,
    Decision.DECLINE,
    Decision.PRERELEASE,
    Decision.MAJOR,
]

# Label used when a final release starts a new prerelease series
PRERELEASE_LABEL = "rc"


def parse_version(version_str: str) -> Version:
    """Parse a PEP 440 version string.

    Raises:
        InvalidVersion: If the string isn't a valid version.
    """
    return Version(version_str)


def is_valid_version(version_str: str) -> bool:
    try:
        parse_version(version_str)
    except InvalidVersion:
        return False
    return True


def is_prerelease(version_str: str) -> bool:
    """Whether the version is a pre- or development release ("1.0.0rc1")."""
    return parse_version(version_str).is_prerelease


def strategies_for(version_str: str) -> list[Decision]:
    """Return the strategies a user may pick for a package at this version."""
    if is_prerelease(version_str):
        return list(PRERELEASE_STRATEGIES)
    return list(RELEASE_STRATEGIES)


def _release(version: Version) -> semver.Version:
    """The release segment of `version` as a semver.Version.

    Segments past the third are dropped. Pre- and development releases keep
    a prerelease marker so that semver promotes them instead of skipping
    past the release they lead up to.
    """
    major, minor, patch = (*version.release, 0, 0)[:3]
    prerelease = PRERELEASE_LABEL if version.is_prerelease else None
    return semver.Version(major, minor, patch, prerelease=prerelease)


def _format(version: Version, release: semver.Version, suffix: str = "") -> str:
    epoch = f"{version.epoch}!" if version.epoch else ""
    return f"{epoch}{release.finalize_version()}{suffix}"


def next_version(version_str: str, decision: Decision) -> str:
    """Compute the version a package would be released at.

    Declining (or not deciding) keeps the current version.

    Examples:
        next_version("1.2.3", Decision.MINOR) → "1.3.0"
        next_version("1.2.3", Decision.PRERELEASE) → "1.2.4rc1"
        next_version("1.0.0rc1", Decision.PRERELEASE) → "1.0.0rc2"
        next_version("1.0.0rc1", Decision.MAJOR) → "1.0.0"
    """
    if decision in (Decision.UNDECIDED, Decision.DECLINE):
        return version_str

    version = parse_version(version_str)
    release = _release(version)

    if decision is not Decision.PRERELEASE:
        return _format(version, release.next_version(part=decision.value))

    if version.pre is not None:
        label, number = version.pre
        # "1.0.0rc1.dev0" comes before "1.0.0rc1"
        if version.dev is None:
            number += 1
        return _format(version, release, f"{label}{number}")
    if version.dev is not None:
        return _format(version, release, f".dev{version.dev + 1}")
    return _format(version, release.bump_patch(), f"{PRERELEASE_LABEL}1")
