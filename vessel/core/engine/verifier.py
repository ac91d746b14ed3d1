"""
Verification: run the external checker over packages of the package set.

``verify_package`` checks one package against its transitive
dependencies. ``verify_all`` walks the whole catalog in dependency
order, skipping any package whose direct dependency already failed,
and only raises once everything has been looked at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from vessel.adapters.base import ProcessRunner
from vessel.core.acquire.acquirer import Acquirer
from vessel.core.errors import PackageVerificationError, VerificationError, VesselError
from vessel.core.models.catalog import PackageCatalog

logger = logging.getLogger(__name__)

DEFAULT_CHECKER = "moc"


@dataclass
class VerificationResult:
    """A package the checker accepted."""

    name: str
    warnings: str = ""


@dataclass
class VerificationReport:
    """Outcome of a ``verify_all`` run."""

    checked: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: dict[str, VesselError] = field(default_factory=dict)
    warnings: dict[str, str] = field(default_factory=dict)

    @property
    def failed_names(self) -> list[str]:
        return list(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "checked": list(self.checked),
            "skipped": list(self.skipped),
            "failures": {name: str(error) for name, error in self.failures.items()},
            "warnings": dict(self.warnings),
        }


class SkippedPackage(VesselError):
    """A package was not checked because a dependency failed."""

    def __init__(self, name: str, dependency: str):
        self.name = name
        self.dependency = dependency
        super().__init__(f'Skipped "{name}": dependency "{dependency}" failed verification')


class Verifier:
    """Checks packages with an external checker binary."""

    def __init__(
        self,
        catalog: PackageCatalog,
        acquirer: Acquirer,
        runner: ProcessRunner,
        checker: str = DEFAULT_CHECKER,
        extra_args: list[str] | None = None,
    ):
        self.catalog = catalog
        self.acquirer = acquirer
        self.runner = runner
        self.checker = checker
        self.extra_args = list(extra_args or [])

    def build_argv(self, name: str) -> list[str]:
        """Acquire ``name`` and its dependencies and build the checker command."""
        package = self.catalog.get(name)
        self.acquirer.acquire(package)

        argv = [self.checker, "--check", *self.extra_args]
        for dep in self.catalog.transitive_deps(package.dependencies):
            path = self.acquirer.acquire(dep)
            argv.extend(["--package", dep.name, str(path)])
        argv.extend(str(source) for source in self.acquirer.package_sources(package))
        return argv

    def verify_package(self, name: str) -> VerificationResult:
        """Check a single package.

        Raises:
            UnknownPackageError: If ``name`` (or a dependency) isn't in the catalog.
            PackageVerificationError: If the checker exits non-zero.
            VesselError: If acquiring the package or a dependency fails.
        """
        argv = self.build_argv(name)
        logger.debug("Running %s", argv)

        receipt = self.runner.run(argv)
        if not receipt.ok:
            raise PackageVerificationError(name, receipt.error)

        if receipt.error:
            logger.info('Verified "%s" with output:\n%s', name, receipt.error)
        else:
            logger.info('Verified "%s"', name)
        return VerificationResult(name=name, warnings=receipt.error)

    def verify_all(self) -> VerificationReport:
        """Check every package in the catalog, in dependency order.

        Raises:
            CycleError: If the package set has a dependency cycle.
            UnknownPackageError: If a dependency is missing from the catalog.
            VerificationError: If any package failed or was skipped; the
                error carries the full report.
        """
        report = VerificationReport()

        for package in self.catalog.topo_sorted():
            failed_dep = next(
                (dep for dep in package.dependencies if dep in report.failures), None
            )
            if failed_dep is not None:
                logger.warning(
                    'Skipping "%s" because its dependency "%s" failed', package.name, failed_dep
                )
                report.skipped.append(package.name)
                report.failures[package.name] = SkippedPackage(package.name, failed_dep)
                continue

            try:
                result = self.verify_package(package.name)
            except VesselError as e:
                report.failures[package.name] = e
                continue
            report.checked.append(package.name)
            if result.warnings:
                report.warnings[package.name] = result.warnings

        if report.ok:
            return report

        for error in reversed(list(report.failures.values())):
            logger.error("%s", error)
        raise VerificationError(report)
