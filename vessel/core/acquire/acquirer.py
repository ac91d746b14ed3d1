"""
Acquirer: fetch packages and toolchains into the on-disk cache.

Every operation is idempotent: a slot that already exists is a cache
hit and costs no network or subprocess call. ``force`` re-fetches a
package slot from scratch.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vessel.adapters.base import Transport, VersionControl
from vessel.core.acquire.archive import unpack_tar_gz
from vessel.core.acquire.cache import CacheLayout
from vessel.core.acquire.strategies import (
    AcquisitionStrategy,
    CloneStrategy,
    TarballStrategy,
)
from vessel.core.acquire.toolchain import HostTarget, host_target, toolchain_url
from vessel.core.errors import AcquisitionError, NetworkError, VesselError
from vessel.core.models.package import Package

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_EXTENSION = ".mo"


class Acquirer:
    """Materializes package versions and toolchains under a cache root."""

    def __init__(
        self,
        layout: CacheLayout,
        transport: Transport,
        vcs: VersionControl,
        strategies: list[AcquisitionStrategy] | None = None,
        target: HostTarget | None = None,
    ):
        self.layout = layout
        self._transport = transport
        self._strategies = strategies or [TarballStrategy(transport), CloneStrategy(vcs)]
        self._target = target

    # ── Packages ────────────────────────────────────────────────────

    def acquire(self, package: Package, force: bool = False) -> Path:
        """Make sure ``package`` is in the cache and return its sources dir.

        Raises:
            ValidationError: If the name or version is unsafe.
            FilesystemError: If the slot can't be removed or installed.
            AcquisitionError: If several strategies were tried and all failed.
            VesselError: The single strategy's error if only one applied.
        """
        slot = self.layout.package_slot(package.name, package.version)
        sources = self.layout.package_sources(package.name, package.version)

        if slot.exists():
            if not force:
                logger.debug('Package "%s" is already installed', package.name)
                return sources.absolute()
            self.layout.remove(slot)

        strategies = [s for s in self._strategies if s.applies_to(package)]
        failures: list[tuple[str, VesselError]] = []

        for strategy in strategies:
            with self.layout.staging() as staging:
                try:
                    tree = strategy.fetch(package, staging)
                except VesselError as e:
                    logger.warning(
                        'Fetching "%s" via %s failed: %s', package.name, strategy.name, e
                    )
                    failures.append((strategy.name, e))
                    continue
                self.layout.install(tree, slot)
            return sources.absolute()

        if len(failures) == 1:
            raise failures[0][1]
        raise AcquisitionError(package.name, failures)

    def package_sources(
        self, package: Package, extension: str = DEFAULT_SOURCE_EXTENSION
    ) -> list[Path]:
        """All source files of an acquired package, sorted."""
        sources = self.layout.package_sources(package.name, package.version).absolute()
        return sorted(path for path in sources.rglob(f"*{extension}") if path.is_file())

    # ── Toolchain ───────────────────────────────────────────────────

    def download_toolchain(self, version: str) -> Path:
        """Make sure the compiler binaries for ``version`` are cached.

        Returns the directory that holds the binaries.

        Raises:
            UnsupportedPlatformError: If the host is not Linux or macOS.
            NetworkError: If the download fails.
            ArchiveError: If the downloaded archive can't be unpacked.
        """
        slot = self.layout.toolchain_slot(version)
        if slot.exists():
            logger.debug("Compiler version %s is already installed", version)
            return slot.absolute()

        target = self._target or host_target()
        url = toolchain_url(version, target)
        logger.info("Downloading compiler version %s", version)

        response = self._transport.fetch(url)
        if not response.ok:
            detail = response.error or response.text() or "No more details"
            raise NetworkError(
                f"Failed to download Motoko binaries for version {version}, "
                f'with "{response.status}"\n\nDetails: {detail}',
                status=response.status,
            )

        with self.layout.staging() as staging:
            tree = staging / "bin"
            tree.mkdir()
            unpack_tar_gz(response.body, tree, source=url)
            self.layout.install(tree, slot)
        return slot.absolute()
