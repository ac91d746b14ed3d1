"""
Project context: which project we are operating on, and from where.

The root is discovered once at startup by walking up from the
caller's directory to the nearest manifest, then passed explicitly to
everything that needs it. The process working directory is never
changed.

When the manifest is found above the caller's directory, paths
handed back to the caller are rewritten with one ``..`` per level so
they stay valid relative to where the command was run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from vessel.core.errors import ConfigError

MANIFEST_FILES = ("vessel.yml", "vessel.yaml")


@dataclass(frozen=True)
class ProjectContext:
    """Project root plus how far below it the caller was."""

    root: Path
    nested: int = 0
    manifest_path: Path | None = None

    @classmethod
    def discover(cls, start: Path | None = None, require_manifest: bool = True) -> ProjectContext:
        """Find the nearest directory at or above ``start`` holding a manifest.

        Args:
            start: Directory to start searching from (default: cwd).
            require_manifest: If False, fall back to ``start`` itself
                when no manifest exists anywhere above it.

        Raises:
            ConfigError: If no manifest is found and one is required.
        """
        origin = (start or Path.cwd()).resolve()

        for depth, directory in enumerate([origin, *origin.parents]):
            for filename in MANIFEST_FILES:
                candidate = directory / filename
                if candidate.is_file():
                    return cls(root=directory, nested=depth, manifest_path=candidate)

        if require_manifest:
            raise ConfigError(
                f"Could not find a {' or '.join(repr(f) for f in MANIFEST_FILES)} "
                "file in this directory or a parent one."
            )
        return cls(root=origin, nested=0, manifest_path=None)

    def resolve(self, path: Path | str) -> Path:
        """Interpret ``path`` relative to the project root."""
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    def caller_path(self, path: Path) -> Path:
        """Rewrite ``path`` so it is valid from the caller's directory.

        Paths inside the project become root-relative and get one
        ``..`` prefix per nesting level. Paths outside the project
        (e.g. an absolute cache directory) are returned unchanged.
        """
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return path
        if self.nested == 0:
            return relative
        return Path(*[os.pardir] * self.nested) / relative
