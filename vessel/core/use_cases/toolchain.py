"""
Toolchain use case: install the compiler version pinned in vessel.yml.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.core.config.settings import Settings, load_settings
from vessel.core.errors import VesselError
from vessel.core.use_cases.workspace import open_workspace


@dataclass
class ToolchainResult:
    """Where the compiler binaries were installed."""

    path: Path | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {"path": str(self.path)}


def run_install_toolchain(
    start: Path | None = None,
    package_set: Path | str | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> ToolchainResult:
    """Install the pinned compiler and return the directory holding it."""
    result = ToolchainResult()
    try:
        settings = settings or load_settings()
        registry = registry or default_registry(settings)
        workspace = open_workspace(start, package_set, settings, registry)
        result.path = workspace.install_toolchain()
    except VesselError as e:
        result.error = str(e)
    return result
