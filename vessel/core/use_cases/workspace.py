"""
Workspace: a loaded project ready to install packages and toolchains.

Bundles the project context, the package catalog, the manifest (when
the project has one), and an Acquirer rooted at the project's cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.core.acquire.acquirer import Acquirer
from vessel.core.acquire.cache import CacheLayout
from vessel.core.config.loader import DEFAULT_PACKAGE_SET_FILE, MANIFEST_FILE, load_manifest
from vessel.core.config.package_set import load_package_set
from vessel.core.config.settings import Settings, load_settings
from vessel.core.context import ProjectContext
from vessel.core.errors import ConfigError
from vessel.core.models.catalog import PackageCatalog
from vessel.core.models.package import Manifest

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    """Everything an install or verify run needs about one project."""

    context: ProjectContext
    settings: Settings
    catalog: PackageCatalog
    acquirer: Acquirer
    manifest: Manifest | None = None

    @classmethod
    def open(
        cls,
        context: ProjectContext,
        package_set_path: Path | str = DEFAULT_PACKAGE_SET_FILE,
        settings: Settings | None = None,
        registry: AdapterRegistry | None = None,
    ) -> Workspace:
        """Load the package set and manifest of the project at ``context.root``.

        Raises:
            ConfigError: If the package set or manifest is missing or invalid.
            NetworkError: If an upstream package set can't be downloaded.
        """
        settings = settings or load_settings()
        registry = registry or default_registry(settings)

        cache_root = context.resolve(settings.cache_dir)
        catalog = load_package_set(
            context.resolve(package_set_path),
            transport=registry.transport,
            cache_dir=cache_root,
        )
        manifest = load_manifest(context.manifest_path) if context.manifest_path else None

        acquirer = Acquirer(CacheLayout(cache_root), registry.transport, registry.vcs)
        return cls(
            context=context,
            settings=settings,
            catalog=catalog,
            acquirer=acquirer,
            manifest=manifest,
        )

    def require_manifest(self) -> Manifest:
        if self.manifest is None:
            raise ConfigError(f"No {MANIFEST_FILE} file found in {self.context.root}")
        return self.manifest

    def install_packages(self, force: bool = False) -> list[tuple[str, Path]]:
        """Install the manifest's dependencies and everything they need.

        Returns ``(name, sources path)`` pairs sorted by name, with paths
        valid relative to the caller's directory.
        """
        manifest = self.require_manifest()
        packages = self.catalog.transitive_deps(manifest.dependencies)

        logger.info("Installing %d packages", len(packages))
        installed = []
        for package in packages:
            path = self.acquirer.acquire(package, force=force)
            installed.append((package.name, self.context.caller_path(path)))
        logger.info("Installation complete.")
        return installed

    def install_toolchain(self) -> Path:
        """Install the compiler pinned in the manifest and return its bin dir.

        Raises:
            ConfigError: If the manifest pins no compiler.
        """
        manifest = self.require_manifest()
        if not manifest.compiler:
            raise ConfigError(f"No compiler version was specified in {MANIFEST_FILE}")
        path = self.acquirer.download_toolchain(manifest.compiler)
        return self.context.caller_path(path)


def open_workspace(
    start: Path | None,
    package_set: Path | str | None,
    settings: Settings,
    registry: AdapterRegistry,
    require_manifest: bool = True,
) -> Workspace:
    """Discover the project from ``start`` and open its workspace."""
    context = ProjectContext.discover(start, require_manifest=require_manifest)
    logger.debug("Project root: %s (nested %d)", context.root, context.nested)
    return Workspace.open(
        context,
        package_set_path=package_set or DEFAULT_PACKAGE_SET_FILE,
        settings=settings,
        registry=registry,
    )
