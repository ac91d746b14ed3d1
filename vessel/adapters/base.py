"""
Adapter base: the protocol contract between the core and external tools.

The core only talks to the network, git, and the checker through the
capabilities defined here. Every capability is injectable, which is
how tests swap in the doubles from ``vessel.adapters.mock``.

Adapters NEVER raise for an operational failure. A transport returns
an ``HttpResponse`` with ``status=0`` when the connection fails, and
command adapters return a failed ``Receipt``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, Field

from vessel.core.models.receipt import Receipt


class HttpResponse(BaseModel):
    """Status and body of one HTTP request.

    ``status`` is 0 when no response was received at all, in which
    case ``error`` describes what went wrong.
    """

    url: str
    status: int = 0
    body: bytes = b""
    headers: dict[str, str] = Field(default_factory=dict)
    error: str = ""

    @property
    def ok(self) -> bool:
        """Whether the server answered with a 2xx status."""
        return 200 <= self.status < 300

    def text(self) -> str:
        """Body decoded as UTF-8, with undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")


class Adapter(ABC):
    """Abstract base class for all adapters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'http', 'git', 'process')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class Transport(Adapter):
    """Fetch bytes over HTTP(S)."""

    @abstractmethod
    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        """GET ``url`` and return the response. Must never raise."""


class VersionControl(Adapter):
    """Clone repositories and check out exact refs."""

    @abstractmethod
    def clone(self, repo: str, dest: Path) -> Receipt:
        """Clone ``repo`` into the (not yet existing) directory ``dest``."""

    @abstractmethod
    def checkout(self, repo_dir: Path, ref: str) -> Receipt:
        """Check out ``ref`` in ``repo_dir`` as a detached HEAD."""


class ProcessRunner(Adapter):
    """Run an external program and capture its output."""

    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> Receipt:
        """Run ``argv`` to completion. Must never raise."""
