"""
Tests for project root discovery and caller-relative paths.
"""

from pathlib import Path

import pytest

from vessel.core.context import ProjectContext
from vessel.core.errors import ConfigError


class TestDiscover:
    def test_manifest_in_start_dir(self, tmp_path: Path):
        (tmp_path / "vessel.yml").write_text("")
        context = ProjectContext.discover(tmp_path)
        assert context.root == tmp_path.resolve()
        assert context.nested == 0
        assert context.manifest_path == tmp_path.resolve() / "vessel.yml"

    def test_nested(self, tmp_path: Path):
        (tmp_path / "vessel.yml").write_text("")
        start = tmp_path / "src" / "lib"
        start.mkdir(parents=True)

        context = ProjectContext.discover(start)

        assert context.root == tmp_path.resolve()
        assert context.nested == 2

    def test_yaml_extension(self, tmp_path: Path):
        (tmp_path / "vessel.yaml").write_text("")
        assert ProjectContext.discover(tmp_path).manifest_path.name == "vessel.yaml"

    def test_no_manifest(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Could not find"):
            ProjectContext.discover(tmp_path)

    def test_no_manifest_allowed(self, tmp_path: Path):
        context = ProjectContext.discover(tmp_path, require_manifest=False)
        assert context.root == tmp_path.resolve()
        assert context.nested == 0
        assert context.manifest_path is None


class TestPaths:
    def test_resolve_relative(self, tmp_path: Path):
        context = ProjectContext(root=tmp_path)
        assert context.resolve("package-set.yml") == tmp_path / "package-set.yml"

    def test_resolve_absolute(self, tmp_path: Path):
        context = ProjectContext(root=tmp_path)
        assert context.resolve("/etc/set.yml") == Path("/etc/set.yml")

    def test_caller_path_at_root(self, tmp_path: Path):
        context = ProjectContext(root=tmp_path)
        path = tmp_path / ".vessel" / "base" / "v1" / "src"
        assert context.caller_path(path) == Path(".vessel/base/v1/src")

    def test_caller_path_nested(self, tmp_path: Path):
        context = ProjectContext(root=tmp_path, nested=2)
        path = tmp_path / ".vessel" / "base" / "v1" / "src"
        assert context.caller_path(path) == Path("../../.vessel/base/v1/src")

    def test_caller_path_outside_project(self, tmp_path: Path):
        context = ProjectContext(root=tmp_path / "project", nested=1)
        path = tmp_path / "cache" / "base"
        assert context.caller_path(path) == path
