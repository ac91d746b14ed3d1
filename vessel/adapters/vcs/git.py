"""
Git adapter: clone and checkout through the git CLI.

Only the two operations the acquirer needs are exposed. Checkouts
always detach HEAD so no local branch is created or tracked.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from vessel.adapters.base import ProcessRunner, VersionControl
from vessel.adapters.shell.command import SubprocessRunner
from vessel.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(VersionControl):
    """Version control operations backed by ``git``."""

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        timeout: float | None = None,
        executable: str = "git",
    ):
        self._runner = runner or SubprocessRunner()
        self._timeout = timeout
        self._executable = executable

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def clone(self, repo: str, dest: Path) -> Receipt:
        logger.debug("Cloning %s into %s", repo, dest)
        return self._git(
            ["clone", "--quiet", "--", repo, str(dest)], cwd=dest.parent, operation="clone"
        )

    def checkout(self, repo_dir: Path, ref: str) -> Receipt:
        logger.debug("Checking out %s in %s", ref, repo_dir)
        return self._git(
            ["-c", "advice.detachedHead=false", "checkout", "--quiet", "--detach", ref],
            cwd=repo_dir,
            operation="checkout",
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: Path, operation: str) -> Receipt:
        """Run a git command and relabel the receipt with this adapter."""
        receipt = self._runner.run([self._executable, *args], cwd=cwd, timeout=self._timeout)
        return receipt.model_copy(update={"adapter": self.name, "operation": operation})
