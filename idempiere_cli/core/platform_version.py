"""Supported iDempiere platform targets.

Each target pins the Java release, Tycho version and base bundle version
used by generated poms and manifests. The set is closed: only the versions
listed in ``_SUPPORTED`` can be scaffolded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_RELEASE_BRANCH = re.compile(r"^release-(\d+)$")

LATEST_MAJOR = 13
STABLE_MAJOR = 12


class UnsupportedVersionError(ValueError):
    """Raised for an iDempiere major version the CLI cannot target."""


@dataclass(frozen=True)
class PlatformVersion:
    """One supported iDempiere release line."""

    major: int
    java_release: int
    java_se_version: str
    tycho_version: str
    bundle_version: str
    default_branch: str
    eclipse_repo_url: str

    @classmethod
    def of(cls, major: int) -> PlatformVersion:
        try:
            return _SUPPORTED[major]
        except KeyError:
            supported = ", ".join(str(m) for m in supported_majors())
            raise UnsupportedVersionError(
                f"Unsupported iDempiere version: {major}. Supported versions: {supported}"
            ) from None

    @classmethod
    def latest(cls) -> PlatformVersion:
        return _SUPPORTED[LATEST_MAJOR]

    @classmethod
    def stable(cls) -> PlatformVersion:
        return _SUPPORTED[STABLE_MAJOR]

    @classmethod
    def from_branch(cls, branch: str | None) -> PlatformVersion:
        """Map a source branch name to the platform it builds against.

        ``master``/``main`` track the newest release; ``release-N`` maps to N
        when supported. Anything else is treated as the stable line.
        """
        if not branch or branch in ("master", "main"):
            return cls.latest()
        match = _RELEASE_BRANCH.match(branch)
        if match:
            major = int(match.group(1))
            if major in _SUPPORTED:
                return _SUPPORTED[major]
        return cls.stable()

    @classmethod
    def from_java_release(cls, release: int) -> PlatformVersion | None:
        """Pick the newest platform whose Java release is satisfied by ``release``."""
        for version in sorted(_SUPPORTED.values(), key=lambda v: v.java_release, reverse=True):
            if release >= version.java_release:
                return version
        return None

    @classmethod
    def from_tycho_version(cls, tycho_version: str) -> PlatformVersion | None:
        """Platform whose poms pin exactly this Tycho version."""
        for version in _SUPPORTED.values():
            if version.tycho_version == tycho_version:
                return version
        return None

    def __str__(self) -> str:
        return str(self.major)


_SUPPORTED: dict[int, PlatformVersion] = {
    12: PlatformVersion(
        major=12,
        java_release=17,
        java_se_version="JavaSE-17",
        tycho_version="4.0.4",
        bundle_version="12.0.0",
        default_branch="release-12",
        eclipse_repo_url="https://download.eclipse.org/releases/2023-09/",
    ),
    13: PlatformVersion(
        major=13,
        java_release=21,
        java_se_version="JavaSE-21",
        tycho_version="4.0.8",
        bundle_version="13.0.0",
        default_branch="master",
        eclipse_repo_url="https://download.eclipse.org/releases/2024-09/",
    ),
}


def supported_majors() -> list[int]:
    """Return supported major versions, oldest first."""
    return sorted(_SUPPORTED)
