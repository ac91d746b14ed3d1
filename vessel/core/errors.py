"""
Error kinds: every failure the core can surface to a caller.

All errors derive from ``VesselError`` so use cases can catch the whole
family in one place and turn it into a user-facing message. Anything
that is not a ``VesselError`` is a bug and is allowed to propagate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vessel.core.engine.verifier import VerificationReport


class VesselError(Exception):
    """Base class for all vessel errors."""


class ConfigError(VesselError):
    """Missing or invalid package set, manifest, or settings."""


class UnknownPackageError(VesselError):
    """A package name is not present in the package set."""

    def __init__(self, name: str, required_by: str | None = None):
        self.name = name
        self.required_by = required_by
        if required_by:
            message = (
                f'The package "{name}" (required by "{required_by}") '
                "does not exist in the package set"
            )
        else:
            message = f'The package "{name}" does not exist in the package set'
        super().__init__(message)


class CycleError(VesselError):
    """The package set contains a dependency cycle."""

    def __init__(self, members: list[str]):
        self.members = members
        super().__init__(
            "The package set contains a dependency cycle: " + " -> ".join(members)
        )


class ValidationError(VesselError):
    """An untrusted name or version string is unsafe to use as a path."""


class NetworkError(VesselError):
    """A download failed or returned a non-success status."""

    def __init__(self, message: str, status: int = 0):
        self.status = status
        super().__init__(message)


class ArchiveError(VesselError):
    """A downloaded archive is corrupt, empty, or has an unexpected shape."""


class SubprocessError(VesselError):
    """An external command exited with a non-zero status."""

    def __init__(self, message: str, diagnostics: str = ""):
        self.diagnostics = diagnostics
        super().__init__(message)


class PackageVerificationError(SubprocessError):
    """The checker rejected a package."""

    def __init__(self, name: str, diagnostics: str):
        self.name = name
        super().__init__(f'Failed to verify "{name}" with:\n{diagnostics}', diagnostics)


class FilesystemError(VesselError):
    """Creating, renaming, or removing a cache directory failed."""


class UnsupportedPlatformError(VesselError):
    """Toolchain binaries are not published for the host platform."""


class AcquisitionError(VesselError):
    """Every acquisition strategy for a package failed."""

    def __init__(self, package: str, failures: list[tuple[str, VesselError]]):
        self.package = package
        self.failures = failures
        details = "\n".join(f"  {strategy}: {error}" for strategy, error in failures)
        super().__init__(f'Failed to acquire "{package}":\n{details}')


class VerificationError(VesselError):
    """One or more packages failed verification."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Failed to verify: {report.failed_names}")
