"""
Shared test fixtures and helpers.
"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from vessel.adapters.mock import MockRunner, MockTransport, MockVersionControl
from vessel.adapters.registry import AdapterRegistry
from vessel.core.acquire.acquirer import Acquirer
from vessel.core.acquire.cache import CacheLayout
from vessel.core.config.settings import Settings
from vessel.core.models.package import Package


def make_package(name: str, deps: list[str] | None = None, repo: str | None = None,
                 version: str = "v1.0.0") -> Package:
    """A package cloned from a non-GitHub host unless ``repo`` says otherwise."""
    return Package(
        name=name,
        repo=repo or f"https://git.example.com/{name}.git",
        version=version,
        dependencies=deps or [],
    )


def make_tarball(files: dict[str, str]) -> bytes:
    """A gzipped tarball holding ``files`` (archive path to text content)."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for path, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(path)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def vcs() -> MockVersionControl:
    return MockVersionControl()


@pytest.fixture
def runner() -> MockRunner:
    return MockRunner()


@pytest.fixture
def registry(transport, vcs, runner) -> AdapterRegistry:
    return AdapterRegistry([transport, vcs, runner])


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def layout(tmp_path: Path) -> CacheLayout:
    return CacheLayout(tmp_path / ".vessel")


@pytest.fixture
def acquirer(layout, transport, vcs) -> Acquirer:
    return Acquirer(layout, transport, vcs)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project depending on ``app``, which depends on ``base``."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "vessel.yml").write_text("dependencies: [app]\ncompiler: null\n")
    (root / "package-set.yml").write_text(
        "- name: base\n"
        "  repo: https://git.example.com/base.git\n"
        "  version: v1.0.0\n"
        "  dependencies: []\n"
        "- name: app\n"
        "  repo: https://git.example.com/app.git\n"
        "  version: v2.0.0\n"
        "  dependencies: [base]\n"
    )
    return root


@pytest.fixture
def project_vcs(vcs) -> MockVersionControl:
    """Version control that can clone every package of ``project``."""
    vcs.add_repo("https://git.example.com/base.git", {"src/Base.mo": "module {}"})
    vcs.add_repo("https://git.example.com/app.git", {"src/App.mo": "import Base \"mo:base\";"})
    return vcs
