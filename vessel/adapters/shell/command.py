"""
Process adapter: run external programs and capture their output.

This is the most fundamental adapter: it runs a command and turns the
outcome into a Receipt. The git adapter and the checker invocation
are both built on top of it.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from vessel.adapters.base import ProcessRunner
from vessel.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """Execute commands without a shell and capture stdout/stderr."""

    def __init__(self, default_timeout: float | None = None):
        self._default_timeout = default_timeout

    @property
    def name(self) -> str:
        return "process"

    def is_available(self) -> bool:
        return True

    def run(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> Receipt:
        args = [str(a) for a in argv]
        command = shlex.join(args)
        timeout = timeout if timeout is not None else self._default_timeout

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                operation=args[0],
                error=f"Command timed out after {timeout}s: {command}",
                metadata={"command": command, "timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                operation=args[0],
                error=f"Failed to run {command}: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                operation=args[0],
                output=result.stdout,
                error=result.stderr,
                return_code=0,
                duration_ms=elapsed_ms,
                metadata={"command": command},
            )
        return Receipt.failure(
            adapter=self.name,
            operation=args[0],
            error=result.stderr or f"Command exited with code {result.returncode}",
            output=result.stdout,
            return_code=result.returncode,
            duration_ms=elapsed_ms,
            metadata={"command": command},
        )
