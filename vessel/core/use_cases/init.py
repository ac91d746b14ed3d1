"""
Init use case: scaffold vessel.yml and package-set.yml in a directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from vessel.adapters.base import Transport
from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.core.config.loader import DEFAULT_PACKAGE_SET_FILE, MANIFEST_FILE
from vessel.core.config.package_set import (
    Upstream,
    cache_upstream,
    content_hash,
    validate_package_set,
)
from vessel.core.config.settings import Settings, load_settings
from vessel.core.errors import ConfigError, FilesystemError, VesselError
from vessel.core.services.releases import (
    FALLBACK_PACKAGE_SET,
    FALLBACK_PACKAGE_SET_URL,
    download_latest_package_set,
)

logger = logging.getLogger(__name__)

MANIFEST_TEMPLATE = """\
dependencies: [base, matchers]
compiler: null
"""

PACKAGE_SET_TEMPLATE = """\
upstream:
  url: {url}
  hash: {hash}

# Packages that are not part of the upstream set go here, e.g.
#
#   - name: mypackage
#     repo: https://github.com/me/mypackage
#     version: v1.0.0
#     dependencies: [base]
additions: []

# Entries here replace the upstream package of the same name, e.g. to
# pin a different version or point at a fork:
#
#   - name: base
#     repo: https://github.com/me/motoko-base
#     version: my-branch
#     dependencies: []
overrides: []
"""


@dataclass
class InitResult:
    """Files written by init and the package set they pin."""

    manifest_path: Path | None = None
    package_set_path: Path | None = None
    upstream_url: str = ""
    upstream_hash: str = ""
    used_fallback: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "manifest": str(self.manifest_path),
            "package_set": str(self.package_set_path),
            "upstream": {"url": self.upstream_url, "hash": self.upstream_hash},
            "used_fallback": self.used_fallback,
        }


def init_project(directory: Path, transport: Transport, settings: Settings) -> InitResult:
    """Write a starter manifest and package set into ``directory``.

    The newest package-set release is pinned when it can be fetched and
    parses as a package set; otherwise a built-in set is used and a
    warning logged. Either way the pinned file is stored in the upstream
    cache, so a following install needs no download to resolve it.

    Raises:
        ConfigError: If either file already exists.
        FilesystemError: If the files can't be written.
    """
    manifest_path = directory / MANIFEST_FILE
    package_set_path = directory / DEFAULT_PACKAGE_SET_FILE
    for path in (package_set_path, manifest_path):
        if path.exists():
            raise ConfigError(f"Failed to initialize, found an existing {path.name} file")

    result = InitResult(manifest_path=manifest_path, package_set_path=package_set_path)
    try:
        url, data = download_latest_package_set(transport, settings)
        validate_package_set(data, url)
    except VesselError as e:
        logger.warning("Failed to fetch the latest package set, using a known release: %s", e)
        url, data = FALLBACK_PACKAGE_SET_URL, FALLBACK_PACKAGE_SET.encode("utf-8")
        result.used_fallback = True

    upstream = Upstream(url=url, hash=content_hash(data))
    result.upstream_url, result.upstream_hash = upstream.url, upstream.hash
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create {directory}: {e}") from e
    cache_upstream(directory / settings.cache_dir, upstream, data)

    contents = PACKAGE_SET_TEMPLATE.format(url=upstream.url, hash=upstream.hash)
    try:
        package_set_path.write_text(contents, encoding="utf-8")
        manifest_path.write_text(MANIFEST_TEMPLATE, encoding="utf-8")
    except OSError as e:
        raise FilesystemError(f"Failed to write the project files in {directory}: {e}") from e

    logger.info("Created %s and %s", manifest_path.name, package_set_path.name)
    return result


def run_init(
    directory: Path | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> InitResult:
    """Scaffold a new project in ``directory`` (default: cwd)."""
    try:
        settings = settings or load_settings()
        registry = registry or default_registry(settings)
        return init_project(directory or Path.cwd(), registry.transport, settings)
    except VesselError as e:
        return InitResult(error=str(e))
