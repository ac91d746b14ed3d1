"""
Acquisition strategies: the ways a package's source tree can be fetched.

The acquirer tries an ordered list of strategies and stops at the
first one that succeeds. Each strategy works entirely inside the
staging directory it is given and returns the path of the finished
tree, which the acquirer then moves into the cache.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from vessel.adapters.base import Transport, VersionControl
from vessel.core.acquire.archive import single_root, unpack_tar_gz
from vessel.core.errors import NetworkError, SubprocessError
from vessel.core.models.package import Package

logger = logging.getLogger(__name__)

# Repos under these prefixes serve source tarballs at /archive/<tag>.tar.gz
ARCHIVE_HOSTS = ("https://github.com/",)


class AcquisitionStrategy(ABC):
    """One way of materializing a package's source tree."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label used in logs and error reports."""

    @abstractmethod
    def applies_to(self, package: Package) -> bool:
        """Whether this strategy can be attempted for ``package``."""

    @abstractmethod
    def fetch(self, package: Package, staging: Path) -> Path:
        """Fetch ``package`` below ``staging`` and return the tree's root.

        Raises:
            VesselError: Any subclass, describing why the fetch failed.
        """


def tarball_url(repo: str, version: str) -> str:
    """Source archive URL for ``version`` of a GitHub-hosted repo."""
    base = repo.rstrip("/").removesuffix(".git")
    return f"{base}/archive/{version}.tar.gz"


class TarballStrategy(AcquisitionStrategy):
    """Download and unpack the release tarball GitHub generates per tag."""

    def __init__(self, transport: Transport, hosts: tuple[str, ...] = ARCHIVE_HOSTS):
        self._transport = transport
        self._hosts = hosts

    @property
    def name(self) -> str:
        return "tarball"

    def applies_to(self, package: Package) -> bool:
        return package.repo.startswith(self._hosts)

    def fetch(self, package: Package, staging: Path) -> Path:
        url = tarball_url(package.repo, package.version)
        logger.info('Downloading tar-ball: "%s"', package.name)

        response = self._transport.fetch(url)
        if not response.ok:
            detail = response.error or response.text() or "No more details"
            raise NetworkError(
                f'Failed to download tarball for repo "{package.repo}" at version '
                f'"{package.version}", with "{response.status}"\n\nDetails: {detail}',
                status=response.status,
            )

        unpacked = staging / "unpacked"
        unpacked.mkdir()
        unpack_tar_gz(response.body, unpacked, source=package.repo)
        return single_root(unpacked, source=package.repo)


class CloneStrategy(AcquisitionStrategy):
    """Clone the repository and check out the exact version tag."""

    def __init__(self, vcs: VersionControl):
        self._vcs = vcs

    @property
    def name(self) -> str:
        return "clone"

    def applies_to(self, package: Package) -> bool:
        return True

    def fetch(self, package: Package, staging: Path) -> Path:
        logger.info('Cloning git repository: "%s"', package.name)
        repo_dir = staging / "repo"

        clone = self._vcs.clone(package.repo, repo_dir)
        if not clone.ok:
            raise SubprocessError(
                f"Failed to clone the repo at: {package.repo}\nwith:\n{clone.error}",
                diagnostics=clone.error,
            )

        checkout = self._vcs.checkout(repo_dir, package.version)
        if not checkout.ok:
            raise SubprocessError(
                f"Failed to checkout version {package.version} for the repo at: "
                f"{package.repo}\nwith:\n{checkout.error}",
                diagnostics=checkout.error,
            )
        return repo_dir
