"""
Cache layout and atomic installation.

Layout under the cache root (``<project>/.vessel`` by default)::

    <name>/<version>/        one slot per package version
    <name>/<version>/src/    the package's sources
    .bin/<version>/          toolchain binaries
    .tmp/<random>/           private staging directories
    .sets/<digest>.yml       upstream package sets (see config.package_set)

Every fetch happens inside a staging directory and is exposed under
its final name with a single rename, so a slot is either absent or
complete. There is no cross-process lock: if two invocations fetch
the same slot concurrently, the first rename wins and the other copy
is discarded.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from vessel.core.acquire.validation import validate_name, validate_version
from vessel.core.errors import FilesystemError

logger = logging.getLogger(__name__)

SOURCE_SUBDIR = "src"
BIN_DIR = ".bin"
TMP_DIR = ".tmp"


class CacheLayout:
    """Computes cache paths from (sanitized) names and versions."""

    def __init__(self, root: Path):
        self.root = root

    def package_slot(self, name: str, version: str) -> Path:
        return self.root / validate_name(name) / validate_version(version)

    def package_sources(self, name: str, version: str) -> Path:
        return self.package_slot(name, version) / SOURCE_SUBDIR

    def toolchain_slot(self, version: str) -> Path:
        return self.root / BIN_DIR / validate_version(version)

    @property
    def staging_root(self) -> Path:
        return self.root / TMP_DIR

    @contextmanager
    def staging(self) -> Iterator[Path]:
        """A fresh private directory, removed again on exit."""
        _mkdir(self.staging_root)
        try:
            tmp = Path(tempfile.mkdtemp(dir=self.staging_root))
        except OSError as e:
            raise FilesystemError(
                f"Failed to create a staging directory in {self.staging_root}: {e}"
            ) from e
        try:
            yield tmp
        finally:
            shutil.rmtree(tmp, ignore_errors=True)

    def install(self, tree: Path, slot: Path) -> Path:
        """Move a fully fetched ``tree`` to ``slot`` in one rename.

        Returns ``slot``. If another process installed the slot first,
        its copy is kept and ``tree`` is left for staging cleanup.
        """
        _mkdir(slot.parent)
        try:
            tree.rename(slot)
        except OSError as e:
            if slot.is_dir():
                logger.debug("%s was installed concurrently, discarding our copy", slot)
                return slot
            raise FilesystemError(f"Failed to move {tree} to {slot}: {e}") from e
        logger.debug("Installed %s", slot)
        return slot

    def remove(self, slot: Path) -> None:
        """Delete a slot and everything in it."""
        logger.debug("Removing %s", slot)
        try:
            shutil.rmtree(slot)
        except FileNotFoundError:
            return
        except OSError as e:
            raise FilesystemError(f"Failed to remove {slot}: {e}") from e


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create the directory at {path}: {e}") from e
