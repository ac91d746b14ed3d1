"""
Toolchain release selection: host platform and download URL.

Releases up to and including 0.6.2 were published on the legacy
download host under a target triple; later releases are GitHub
release assets named after the OS.
"""

from __future__ import annotations

import platform
import re
from typing import NamedTuple

from vessel.core.errors import UnsupportedPlatformError

LEGACY_THRESHOLD = (0, 6, 2)

LEGACY_URL = "https://download.dfinity.systems/motoko/{version}/{triple}/motoko-{version}.tar.gz"
RELEASE_URL = (
    "https://github.com/dfinity/motoko/releases/download/{version}/motoko-{os}-{version}.tar.gz"
)

_SEMVER_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:[-+][0-9A-Za-z.+-]*)?$")


class HostTarget(NamedTuple):
    """Names a platform goes by on the two download hosts."""

    triple: str
    os: str


_TARGETS = {
    "Linux": HostTarget("x86_64-linux", "linux64"),
    "Darwin": HostTarget("x86_64-darwin", "macos"),
}


def host_target(system: str | None = None) -> HostTarget:
    """The download target for this host (or for ``system``).

    Raises:
        UnsupportedPlatformError: On anything but Linux and macOS.
    """
    system = system or platform.system()
    target = _TARGETS.get(system)
    if target is None:
        raise UnsupportedPlatformError(
            "Installing the compiler is only supported on Linux or MacOS for now"
        )
    return target


def parse_semver(version: str) -> tuple[int, int, int] | None:
    """``major.minor.patch`` as integers, or None if ``version`` is not semver."""
    match = _SEMVER_RE.match(version)
    if match is None:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


def toolchain_url(version: str, target: HostTarget) -> str:
    """Download URL of the toolchain tarball for ``version`` on ``target``."""
    parsed = parse_semver(version)
    if parsed is not None and parsed > LEGACY_THRESHOLD:
        return RELEASE_URL.format(version=version, os=target.os)
    return LEGACY_URL.format(version=version, triple=target.triple)
