"""
Configuration loader: reads vessel.yml and package-set.yml.

Reads YAML, validates against Pydantic schemas, and returns typed
domain objects. Every failure along the way (missing file, unreadable
file, bad YAML, schema mismatch) is reported as a ``ConfigError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vessel.core.errors import ConfigError
from vessel.core.models.package import Manifest

logger = logging.getLogger(__name__)

# Default config filenames
MANIFEST_FILE = "vessel.yml"
DEFAULT_PACKAGE_SET_FILE = "package-set.yml"


def read_yaml(path: Path) -> Any:
    """Read and parse a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable, or not valid YAML.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    return parse_yaml(raw, source=str(path))


def parse_yaml(raw: str, source: str) -> Any:
    """Parse YAML text, naming ``source`` in any error."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {source}: {e}") from e


def load_manifest(path: Path) -> Manifest:
    """Load and validate a project manifest.

    An empty file is a manifest with no dependencies and no compiler pin.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    logger.debug("Loading manifest from %s", path)
    data = read_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Failed to parse the {path.name} file: {e}") from e

    logger.debug(
        "Loaded manifest with %d direct dependencies (compiler=%s)",
        len(manifest.dependencies),
        manifest.compiler,
    )
    return manifest
