"""
Mock adapters: test doubles for every capability.

Each double records what it was asked to do so tests can assert on
call counts (e.g. that a cached package is not fetched twice) and can
be configured to fail for specific inputs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from vessel.adapters.base import HttpResponse, ProcessRunner, Transport, VersionControl
from vessel.core.models.receipt import Receipt


class MockTransport(Transport):
    """Serves canned responses by URL. Unknown URLs answer 404."""

    def __init__(self, available: bool = True):
        self._available = available
        self._responses: dict[str, HttpResponse] = {}
        self._call_log: list[tuple[str, dict[str, str]]] = []

    @property
    def name(self) -> str:
        return "http"

    @property
    def call_log(self) -> list[tuple[str, dict[str, str]]]:
        """Every (url, headers) pair this mock has been asked for."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self._call_log]

    def is_available(self) -> bool:
        return self._available

    def set_response(self, url: str, body: bytes | str = b"", status: int = 200) -> None:
        """Serve ``body`` with ``status`` for ``url``."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._responses[url] = HttpResponse(url=url, status=status, body=body)

    def set_unreachable(self, url: str, error: str = "Connection refused") -> None:
        """Make ``url`` fail without any response."""
        self._responses[url] = HttpResponse(url=url, status=0, error=error)

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        self._call_log.append((url, dict(headers or {})))
        if url in self._responses:
            return self._responses[url]
        return HttpResponse(url=url, status=404, body=b"Not Found", error="Not Found")

    def reset(self) -> None:
        """Clear call log and canned responses."""
        self._call_log.clear()
        self._responses.clear()


class MockVersionControl(VersionControl):
    """Clones by writing a fixed file tree instead of talking to a remote.

    ``trees`` maps a repo URL to ``{relative path: content}``. Repos
    without a tree fail to clone, as do refs registered with
    ``set_checkout_failure``.
    """

    def __init__(self, trees: Mapping[str, Mapping[str, str]] | None = None):
        self._trees: dict[str, dict[str, str]] = {
            repo: dict(files) for repo, files in (trees or {}).items()
        }
        self._checkout_failures: dict[str, str] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "git"

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """Every (operation, target) pair, e.g. ("clone", repo)."""
        return self._call_log

    def calls(self, operation: str) -> list[str]:
        return [target for op, target in self._call_log if op == operation]

    def is_available(self) -> bool:
        return True

    def add_repo(self, repo: str, files: Mapping[str, str]) -> None:
        self._trees[repo] = dict(files)

    def set_checkout_failure(self, ref: str, error: str = "pathspec did not match") -> None:
        self._checkout_failures[ref] = error

    def clone(self, repo: str, dest: Path) -> Receipt:
        self._call_log.append(("clone", repo))
        if repo not in self._trees:
            return Receipt.failure(
                adapter=self.name,
                operation="clone",
                error=f"fatal: repository '{repo}' not found",
                return_code=128,
            )
        dest.mkdir(parents=True)
        for rel_path, content in self._trees[repo].items():
            target = dest / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return Receipt.success(adapter=self.name, operation="clone", return_code=0)

    def checkout(self, repo_dir: Path, ref: str) -> Receipt:
        self._call_log.append(("checkout", ref))
        if ref in self._checkout_failures:
            return Receipt.failure(
                adapter=self.name,
                operation="checkout",
                error=f"error: {self._checkout_failures[ref]}",
                return_code=1,
            )
        return Receipt.success(adapter=self.name, operation="checkout", return_code=0)


class MockRunner(ProcessRunner):
    """Records every command and succeeds unless told otherwise."""

    def __init__(self, default_stderr: str = ""):
        self._default_stderr = default_stderr
        self._rules: list[tuple[Callable[[list[str]], bool], Receipt]] = []
        self._call_log: list[list[str]] = []

    @property
    def name(self) -> str:
        return "process"

    @property
    def call_log(self) -> list[list[str]]:
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return True

    def fail_when(
        self,
        predicate: Callable[[list[str]], bool],
        error: str = "Mock failure",
        return_code: int = 1,
    ) -> None:
        """Fail every command whose argv matches ``predicate``."""
        self._rules.append(
            (
                predicate,
                Receipt.failure(
                    adapter=self.name,
                    operation="mock",
                    error=error,
                    return_code=return_code,
                ),
            )
        )

    def run(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> Receipt:
        args = [str(a) for a in argv]
        self._call_log.append(args)
        for predicate, receipt in self._rules:
            if predicate(args):
                return receipt
        return Receipt.success(
            adapter=self.name,
            operation=args[0] if args else "",
            error=self._default_stderr,
            return_code=0,
        )

    def reset(self) -> None:
        self._call_log.clear()
        self._rules.clear()
