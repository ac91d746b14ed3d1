"""
Upgrade-set use case: pin the latest (or a given) package-set release.
"""

from __future__ import annotations

from dataclasses import dataclass

from vessel.adapters.base import Transport
from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.core.config.settings import Settings, load_settings
from vessel.core.errors import VesselError
from vessel.core.services.releases import fetch_latest_tag, fetch_package_set


@dataclass
class UpgradeSetResult:
    """The pinned release, ready to paste into a package set file."""

    tag: str = ""
    url: str = ""
    hash: str = ""
    error: str | None = None

    @property
    def snippet(self) -> str:
        return f"upstream:\n  url: {self.url}\n  hash: {self.hash}\n"

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {"tag": self.tag, "url": self.url, "hash": self.hash}


def upgrade_set(
    transport: Transport, settings: Settings, tag: str | None = None
) -> tuple[str, str, str]:
    """``(tag, url, hash)`` of the release ``tag``, or of the newest one."""
    tag = tag or fetch_latest_tag(transport, settings)
    url, digest = fetch_package_set(tag, transport, settings)
    return tag, url, digest


def run_upgrade_set(
    tag: str | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> UpgradeSetResult:
    result = UpgradeSetResult()
    try:
        settings = settings or load_settings()
        registry = registry or default_registry(settings)
        result.tag, result.url, result.hash = upgrade_set(registry.transport, settings, tag)
    except VesselError as e:
        result.error = str(e)
    return result
