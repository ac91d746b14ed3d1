"""
Tarball handling for downloaded packages and toolchains.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from pathlib import Path

from vessel.core.errors import ArchiveError

logger = logging.getLogger(__name__)


def unpack_tar_gz(data: bytes, dest: Path, source: str) -> None:
    """Extract a gzipped tarball held in memory into ``dest``.

    Members that would land outside ``dest`` (absolute paths, ``..``
    components, links pointing outside) are refused by tarfile's
    ``data`` filter.

    Raises:
        ArchiveError: If the data is not a valid gzipped tarball or a
            member is refused.
    """
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
            tar.extractall(dest, filter="data")
    except (tarfile.TarError, EOFError, zlib.error) as e:
        raise ArchiveError(f"Failed to unpack tarball for {source}: {e}") from e


def single_root(directory: Path, source: str) -> Path:
    """The only entry in ``directory``, which must be a directory.

    Raises:
        ArchiveError: If there are no entries, several entries, or the
            only entry is not a directory.
    """
    entries = sorted(directory.iterdir())
    if not entries:
        raise ArchiveError(f"Unpacked an empty tarball for {source}")
    if len(entries) > 1:
        names = ", ".join(entry.name for entry in entries)
        raise ArchiveError(
            f"Expected the tarball for {source} to contain a single directory, found: {names}"
        )
    root = entries[0]
    if not root.is_dir() or root.is_symlink():
        raise ArchiveError(f"Failed to unpack tarball for {source}: {root.name} is not a directory")
    return root
