"""
Runtime settings read from ``VESSEL_*`` environment variables.

Everything has a default, so an empty environment is valid. Invalid
values (e.g. a non-numeric timeout) are reported as ``ConfigError``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ValidationError

from vessel.core.errors import ConfigError

ENV_PREFIX = "VESSEL_"


class Settings(BaseModel):
    """Process-wide knobs that are not part of any project file."""

    cache_dir: str = ".vessel"            # relative to the project root unless absolute
    http_timeout: float = 60.0
    git_timeout: float | None = None
    checker_timeout: float | None = None
    user_agent: str = "vessel"
    package_set_repo: str = "dfinity/vessel-package-set"
    package_set_asset: str = "package-set.yml"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read from (default: ``os.environ``).

    Raises:
        ConfigError: If a variable holds a value of the wrong type.
    """
    env = os.environ if environ is None else environ
    values = {}
    for field in Settings.model_fields:
        raw = env.get(ENV_PREFIX + field.upper())
        if raw is not None and raw.strip():
            values[field] = raw.strip()

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid {ENV_PREFIX}* environment settings: {e}") from e
