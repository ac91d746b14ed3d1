"""Adapters: bindings for the network, git, and external processes.

Public re-exports for convenient access.
"""

from vessel.adapters.base import (
    Adapter,
    HttpResponse,
    ProcessRunner,
    Transport,
    VersionControl,
)
from vessel.adapters.mock import MockRunner, MockTransport, MockVersionControl
from vessel.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "HttpResponse",
    "MockRunner",
    "MockTransport",
    "MockVersionControl",
    "ProcessRunner",
    "Transport",
    "VersionControl",
    "default_registry",
]
