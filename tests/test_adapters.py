"""
Tests for adapters: registry, mocks, the subprocess runner, and git.
"""

import sys
from pathlib import Path

import pytest

from vessel.adapters.base import HttpResponse
from vessel.adapters.http.transport import UrllibTransport
from vessel.adapters.mock import MockRunner, MockTransport, MockVersionControl
from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.adapters.shell.command import SubprocessRunner
from vessel.adapters.vcs.git import GitAdapter
from vessel.core.config.settings import Settings
from vessel.core.errors import ConfigError

# ── Registry ─────────────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_typed_accessors(self, registry, transport, vcs, runner):
        assert registry.transport is transport
        assert registry.vcs is vcs
        assert registry.runner is runner

    def test_missing_adapter(self):
        with pytest.raises(ConfigError, match="'git'"):
            AdapterRegistry([MockTransport()]).vcs

    def test_wrong_type(self):
        registry = AdapterRegistry()
        registry._adapters["http"] = MockRunner()
        with pytest.raises(ConfigError, match="expected Transport"):
            registry.transport

    def test_register_replaces(self):
        first, second = MockTransport(), MockTransport()
        registry = AdapterRegistry([first])
        registry.register(second)
        assert registry.transport is second
        assert registry.list_adapters() == ["http"]

    def test_unregister(self, registry):
        registry.unregister("git")
        assert registry.get("git") is None
        assert registry.list_adapters() == ["http", "process"]

    def test_status(self):
        registry = AdapterRegistry([MockTransport(available=False)])
        assert registry.adapter_status() == {
            "http": {"name": "http", "available": False, "type": "MockTransport"}
        }

    def test_default_registry(self):
        registry = default_registry(Settings(http_timeout=5))
        assert isinstance(registry.transport, UrllibTransport)
        assert isinstance(registry.vcs, GitAdapter)
        assert isinstance(registry.runner, SubprocessRunner)


# ── Mocks ────────────────────────────────────────────────────────────


class TestMocks:
    def test_transport_canned_and_unknown(self):
        transport = MockTransport()
        transport.set_response("https://a", "hello")

        assert transport.fetch("https://a").text() == "hello"
        assert transport.fetch("https://b").status == 404
        assert transport.urls == ["https://a", "https://b"]

    def test_transport_unreachable(self):
        transport = MockTransport()
        transport.set_unreachable("https://a")
        response = transport.fetch("https://a")
        assert response.status == 0
        assert not response.ok

    def test_vcs_clone_writes_tree(self, tmp_path: Path):
        vcs = MockVersionControl({"repo": {"src/A.mo": "module {}"}})
        receipt = vcs.clone("repo", tmp_path / "clone")
        assert receipt.ok
        assert (tmp_path / "clone" / "src" / "A.mo").read_text() == "module {}"

    def test_vcs_unknown_repo(self, tmp_path: Path):
        receipt = MockVersionControl().clone("nope", tmp_path / "clone")
        assert receipt.failed
        assert receipt.return_code == 128

    def test_runner_rules(self):
        runner = MockRunner()
        runner.fail_when(lambda argv: "bad" in argv, error="nope", return_code=2)

        assert runner.run(["moc", "good"]).ok
        failed = runner.run(["moc", "bad"])
        assert failed.failed
        assert failed.return_code == 2
        assert runner.call_count == 2


class TestHttpResponse:
    def test_ok_range(self):
        assert HttpResponse(url="u", status=204).ok
        assert not HttpResponse(url="u", status=302).ok
        assert not HttpResponse(url="u").ok

    def test_text_replaces_bad_bytes(self):
        assert HttpResponse(url="u", body=b"a\xffb").text() == "a�b"


# ── Subprocess runner ────────────────────────────────────────────────


class TestSubprocessRunner:
    def test_success_captures_streams(self):
        receipt = SubprocessRunner().run(
            [sys.executable, "-c", "import sys; print('out'); print('warn', file=sys.stderr)"]
        )
        assert receipt.ok
        assert receipt.output.strip() == "out"
        assert receipt.error.strip() == "warn"
        assert receipt.return_code == 0

    def test_nonzero_exit(self):
        receipt = SubprocessRunner().run([sys.executable, "-c", "raise SystemExit(3)"])
        assert receipt.failed
        assert receipt.return_code == 3
        assert "exited with code 3" in receipt.error

    def test_missing_executable(self):
        receipt = SubprocessRunner().run(["/nonexistent/moc", "--check"])
        assert receipt.failed
        assert "Failed to run" in receipt.error

    def test_timeout(self):
        receipt = SubprocessRunner(default_timeout=0.1).run(
            [sys.executable, "-c", "import time; time.sleep(5)"]
        )
        assert receipt.failed
        assert "timed out" in receipt.error

    def test_cwd(self, tmp_path: Path):
        receipt = SubprocessRunner().run(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert Path(receipt.output.strip()).resolve() == tmp_path.resolve()


# ── Git ──────────────────────────────────────────────────────────────


class TestGitAdapter:
    def test_clone_argv(self, tmp_path: Path):
        runner = MockRunner()
        git = GitAdapter(runner=runner)

        receipt = git.clone("https://example.com/r.git", tmp_path / "repo")

        assert receipt.adapter == "git"
        assert receipt.operation == "clone"
        assert runner.call_log == [
            ["git", "clone", "--quiet", "--", "https://example.com/r.git", str(tmp_path / "repo")]
        ]

    def test_clone_repo_never_read_as_option(self, tmp_path: Path):
        runner = MockRunner()
        GitAdapter(runner=runner).clone("--upload-pack=evil", tmp_path / "repo")

        argv = runner.call_log[0]
        assert argv.index("--") < argv.index("--upload-pack=evil")

    def test_checkout_detaches(self, tmp_path: Path):
        runner = MockRunner()
        GitAdapter(runner=runner).checkout(tmp_path, "v1.0.0")
        assert runner.call_log == [
            ["git", "-c", "advice.detachedHead=false", "checkout", "--quiet", "--detach", "v1.0.0"]
        ]

    def test_failure_passes_stderr(self, tmp_path: Path):
        runner = MockRunner()
        runner.fail_when(lambda argv: True, error="fatal: not found", return_code=128)

        receipt = GitAdapter(runner=runner).clone("r", tmp_path / "repo")

        assert receipt.failed
        assert receipt.error == "fatal: not found"
        assert receipt.adapter == "git"
