"""
Install use cases: fetch a project's dependencies and list build flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.core.config.settings import Settings, load_settings
from vessel.core.errors import VesselError
from vessel.core.use_cases.workspace import open_workspace

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of installing a project's dependencies."""

    packages: list[tuple[str, Path]] = field(default_factory=list)
    error: str | None = None

    @property
    def flags(self) -> str:
        """Compiler flags: ``--package <name> <path>`` per package."""
        return " ".join(f"--package {name} {path}" for name, path in self.packages)

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {"packages": {name: str(path) for name, path in self.packages}}


def run_install(
    force: bool = False,
    start: Path | None = None,
    package_set: Path | str | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> InstallResult:
    """Install every package the project's manifest depends on.

    Args:
        force: Re-fetch packages that are already cached.
        start: Directory to look for the project from (default: cwd).
        package_set: Package set file, relative to the project root.
        settings: Runtime settings (default: from the environment).
        registry: Adapters to use (default: the real ones).

    Returns:
        InstallResult with the installed packages or an error.
    """
    result = InstallResult()
    try:
        settings = settings or load_settings()
        registry = registry or default_registry(settings)
        workspace = open_workspace(start, package_set, settings, registry)
        result.packages = workspace.install_packages(force=force)
    except VesselError as e:
        result.error = str(e)
    return result


def run_sources(
    start: Path | None = None,
    package_set: Path | str | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> InstallResult:
    """Install the project's packages and report them as compiler flags."""
    return run_install(
        force=False,
        start=start,
        package_set=package_set,
        settings=settings,
        registry=registry,
    )
