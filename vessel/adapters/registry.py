"""
Adapter registry: central lookup for all adapters.

The core never constructs adapters itself. Use cases receive a
registry (the CLI builds the default one, tests build one full of
mocks) and pull the transport, version control, and process runner
out of it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from vessel.adapters.base import Adapter, ProcessRunner, Transport, VersionControl
from vessel.core.errors import ConfigError

if TYPE_CHECKING:
    from vessel.core.config.settings import Settings

logger = logging.getLogger(__name__)

_A = TypeVar("_A", bound=Adapter)


class AdapterRegistry:
    """Central registry for adapters, keyed by adapter name."""

    def __init__(self, adapters: list[Adapter] | None = None):
        self._adapters: dict[str, Adapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: Adapter) -> None:
        """Register an adapter, replacing any adapter with the same name."""
        name = adapter.name
        if name in self._adapters:
            logger.debug("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def unregister(self, name: str) -> None:
        """Remove an adapter from the registry."""
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        """Look up an adapter by name."""
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._adapters.keys())

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of all registered adapters."""
        status = {}
        for name, adapter in self._adapters.items():
            status[name] = {
                "name": name,
                "available": adapter.is_available(),
                "type": adapter.__class__.__name__,
            }
        return status

    @property
    def transport(self) -> Transport:
        return self._require("http", Transport)

    @property
    def vcs(self) -> VersionControl:
        return self._require("git", VersionControl)

    @property
    def runner(self) -> ProcessRunner:
        return self._require("process", ProcessRunner)

    def _require(self, name: str, kind: type[_A]) -> _A:
        adapter = self._adapters.get(name)
        if adapter is None:
            raise ConfigError(f"No adapter registered for '{name}'")
        if not isinstance(adapter, kind):
            raise ConfigError(
                f"Adapter '{name}' is a {adapter.__class__.__name__}, expected {kind.__name__}"
            )
        return adapter


def default_registry(settings: Settings) -> AdapterRegistry:
    """Registry wired with the real network, git, and process adapters."""
    from vessel.adapters.http.transport import UrllibTransport
    from vessel.adapters.shell.command import SubprocessRunner
    from vessel.adapters.vcs.git import GitAdapter

    return AdapterRegistry(
        [
            UrllibTransport(timeout=settings.http_timeout, user_agent=settings.user_agent),
            GitAdapter(timeout=settings.git_timeout),
            SubprocessRunner(default_timeout=settings.checker_timeout),
        ]
    )
