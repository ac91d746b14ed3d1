"""
Verify use case: check one package, or the whole package set, with the
compiler.

Needs a package set but no manifest, so it also works inside a
package-set repository.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from vessel.adapters.registry import AdapterRegistry, default_registry
from vessel.core.config.settings import Settings, load_settings
from vessel.core.engine.verifier import DEFAULT_CHECKER, VerificationReport, Verifier
from vessel.core.errors import ConfigError, VerificationError, VesselError
from vessel.core.use_cases.workspace import Workspace, open_workspace

logger = logging.getLogger(__name__)


@dataclass
class VerifyResult:
    """Result of a verify run."""

    package: str | None = None
    checked: list[str] = field(default_factory=list)
    warnings: dict[str, str] = field(default_factory=dict)
    report: VerificationReport | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        if self.report is not None:
            result["report"] = self.report.to_dict()
        else:
            result["checked"] = list(self.checked)
        return result


def resolve_checker(workspace: Workspace, version: str | None, moc: str | None) -> str:
    """Pick the checker binary from ``--version`` / ``--moc``.

    Raises:
        ConfigError: If both are given.
    """
    if version and moc:
        raise ConfigError("The --moc and --version options are mutually exclusive")
    if moc:
        return moc
    if version:
        return str(workspace.acquirer.download_toolchain(version) / DEFAULT_CHECKER)
    return DEFAULT_CHECKER


def run_verify(
    package: str | None = None,
    version: str | None = None,
    moc: str | None = None,
    moc_args: str | None = None,
    start: Path | None = None,
    package_set: Path | str | None = None,
    settings: Settings | None = None,
    registry: AdapterRegistry | None = None,
) -> VerifyResult:
    """Verify ``package``, or every package in the set if it is None.

    Args:
        package: A single package to verify.
        version: Compiler version to download and verify with.
        moc: Path of the checker binary to use instead.
        moc_args: Extra checker arguments, split like a shell would.
        start: Directory to look for the project from (default: cwd).
        package_set: Package set file, relative to the project root.
        settings: Runtime settings (default: from the environment).
        registry: Adapters to use (default: the real ones).
    """
    result = VerifyResult(package=package)
    try:
        if version and moc:
            raise ConfigError("The --moc and --version options are mutually exclusive")
        try:
            extra_args = shlex.split(moc_args or "")
        except ValueError as e:
            raise ConfigError(f"Invalid --moc-args: {e}") from e

        settings = settings or load_settings()
        registry = registry or default_registry(settings)
        workspace = open_workspace(
            start, package_set, settings, registry, require_manifest=False
        )
        checker = resolve_checker(workspace, version, moc)

        verifier = Verifier(
            workspace.catalog,
            workspace.acquirer,
            registry.runner,
            checker=checker,
            extra_args=extra_args,
        )

        if package is not None:
            outcome = verifier.verify_package(package)
            result.checked = [outcome.name]
            if outcome.warnings:
                result.warnings[outcome.name] = outcome.warnings
        else:
            result.report = verifier.verify_all()
            result.checked = list(result.report.checked)
            result.warnings = dict(result.report.warnings)

    except VerificationError as e:
        result.report = e.report
        result.checked = list(e.report.checked)
        result.error = str(e)
    except VesselError as e:
        result.error = str(e)
    return result
