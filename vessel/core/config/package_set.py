"""
Package set loader: turns package-set.yml into a PackageCatalog.

The file is either a plain list of packages or a mapping::

    upstream:
      url: https://example.org/releases/download/v1/package-set.yml
      hash: sha256:<hex digest of the file's bytes>
    packages: []
    additions: []
    overrides: []

The effective package list is upstream + packages + additions +
overrides; when a name appears twice the later entry wins. Upstream
sets are verified against their pinned hash and cached by digest under
``<cache-dir>/.sets`` so they are only downloaded once.
"""

from __future__ import annotations

import hashlib
import logging
import re
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vessel.adapters.base import Transport
from vessel.core.config.loader import parse_yaml, read_yaml
from vessel.core.errors import ConfigError, FilesystemError, NetworkError
from vessel.core.models.catalog import PackageCatalog
from vessel.core.models.package import Package

logger = logging.getLogger(__name__)

SETS_DIR = ".sets"

_HASH_RE = re.compile(r"^sha256:([0-9a-f]{64})$")


def content_hash(data: bytes) -> str:
    """Integrity hash in the ``sha256:<hex>`` form used for pinning."""
    return "sha256:" + hashlib.sha256(data).hexdigest()


class Upstream(BaseModel):
    """A pinned reference to a remote package set."""

    model_config = ConfigDict(extra="forbid")

    url: str
    hash: str

    @field_validator("hash")
    @classmethod
    def _check_hash(cls, value: str) -> str:
        value = value.strip().lower()
        if not _HASH_RE.match(value):
            raise ValueError("hash must look like 'sha256:<64 hex digits>'")
        return value

    @property
    def digest(self) -> str:
        return self.hash.split(":", 1)[1]


class PackageSetFile(BaseModel):
    """Schema of the mapping form of a package set file."""

    model_config = ConfigDict(extra="forbid")

    upstream: Upstream | None = None
    packages: list[Package] = Field(default_factory=list)
    additions: list[Package] = Field(default_factory=list)
    overrides: list[Package] = Field(default_factory=list)


def load_package_set(
    path: Path,
    transport: Transport | None = None,
    cache_dir: Path | None = None,
) -> PackageCatalog:
    """Load a package set file and every upstream it references.

    Args:
        path: The package set file.
        transport: Used to download upstream sets. Required only if
            the file (or an upstream) references one that is not cached.
        cache_dir: The vessel cache directory; upstream sets are cached
            in its ``.sets`` subdirectory.

    Raises:
        ConfigError: If a file is missing or invalid, or an upstream
            does not match its pinned hash.
        NetworkError: If an upstream cannot be downloaded.
    """
    logger.debug("Loading package set from %s", path)
    data = read_yaml(path)
    packages = _resolve(data, str(path), transport, cache_dir)
    catalog = PackageCatalog(packages)
    for name, missing in catalog.missing_dependencies().items():
        logger.warning(
            'Package "%s" depends on %s, which %s not in the package set',
            name,
            ", ".join(f'"{dep}"' for dep in missing),
            "is" if len(missing) == 1 else "are",
        )
    logger.info("Loaded package set with %d packages", len(catalog))
    return catalog


def parse_package_set(data: Any, source: str) -> PackageSetFile:
    """Validate one parsed package set document, in list or mapping form.

    Upstream references are checked for shape only, not fetched.

    Raises:
        ConfigError: If the document is not a valid package set.
    """
    if data is None:
        return PackageSetFile()

    if isinstance(data, list):
        data = {"packages": data}
    elif not isinstance(data, dict):
        raise ConfigError(
            f"Expected a YAML list or mapping in {source}, got {type(data).__name__}"
        )

    try:
        return PackageSetFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Failed to parse the package set {source}: {e}") from e


def validate_package_set(raw: bytes, source: str) -> PackageSetFile:
    """Parse and validate the raw bytes of a package set file."""
    return parse_package_set(parse_yaml(raw.decode("utf-8", errors="replace"), source), source)


def cache_upstream(cache_dir: Path, upstream: Upstream, data: bytes) -> Path:
    """Store ``data`` as the cached copy of ``upstream``.

    Raises:
        ConfigError: If ``data`` does not match the pinned hash.
        FilesystemError: If the cache file can't be written.
    """
    actual = content_hash(data)
    if actual != upstream.hash:
        raise ConfigError(
            f"Hash mismatch for upstream package set {upstream.url}: "
            f"expected {upstream.hash}, got {actual}"
        )
    path = _cache_path(cache_dir, upstream)
    _write_atomic(path, data)
    return path


def _cache_path(cache_dir: Path, upstream: Upstream) -> Path:
    return cache_dir / SETS_DIR / f"{upstream.digest}.yml"


def _resolve(
    data: Any,
    source: str,
    transport: Transport | None,
    cache_dir: Path | None,
) -> list[Package]:
    """Flatten one parsed package set document into a package list."""
    document = parse_package_set(data, source)

    packages: list[Package] = []
    if document.upstream is not None:
        packages.extend(_load_upstream(document.upstream, transport, cache_dir))
    packages.extend(document.packages)
    packages.extend(document.additions)
    packages.extend(document.overrides)
    return packages


def _load_upstream(
    upstream: Upstream,
    transport: Transport | None,
    cache_dir: Path | None,
) -> list[Package]:
    """Fetch (or reuse from cache) and verify an upstream package set."""
    cached = _cache_path(cache_dir, upstream) if cache_dir else None

    if cached is not None and cached.is_file():
        data = cached.read_bytes()
        if content_hash(data) == upstream.hash:
            logger.debug("Using cached upstream package set %s", cached)
            document = parse_yaml(data.decode("utf-8"), upstream.url)
            return _resolve(document, upstream.url, transport, cache_dir)
        logger.warning("Cached upstream package set %s is corrupt, downloading again", cached)

    if transport is None:
        raise ConfigError(f"Cannot download the upstream package set {upstream.url}")

    logger.info("Downloading upstream package set %s", upstream.url)
    response = transport.fetch(upstream.url)
    if not response.ok:
        detail = response.error or response.text() or "No more details"
        raise NetworkError(
            f"Failed to download the upstream package set {upstream.url}, "
            f'with "{response.status}"\n\nDetails: {detail}',
            status=response.status,
        )

    actual = content_hash(response.body)
    if actual != upstream.hash:
        raise ConfigError(
            f"Hash mismatch for upstream package set {upstream.url}: "
            f"expected {upstream.hash}, got {actual}"
        )
    if cached is not None:
        _write_atomic(cached, response.body)

    document = parse_yaml(response.text(), upstream.url)
    return _resolve(document, upstream.url, transport, cache_dir)


def _write_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp file and rename."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".set_", suffix=".tmp")
    except OSError as e:
        raise FilesystemError(f"Failed to cache the upstream package set at {path}: {e}") from e
    tmp = Path(tmp_path)
    try:
        with open(fd, "wb") as handle:
            handle.write(data)
        tmp.replace(path)
        logger.debug("Cached upstream package set at %s", path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise FilesystemError(f"Failed to cache the upstream package set at {path}: {e}") from e
