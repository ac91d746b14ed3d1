"""
Name and version sanitization.

Package names and versions come from package set files, which may be
fetched from the network. They are used as directory names inside the
cache, so anything that could escape the cache directory or be read
as a command-line flag is rejected outright.
"""

from __future__ import annotations

import re

from vessel.core.errors import ValidationError

_DIRNAME_RE = re.compile(r"[A-Za-z0-9._-]+")


def is_valid_dirname(value: str) -> bool:
    """Whether ``value`` is safe to use as a single path component.

    Accepts only ASCII letters, digits, ``.``, ``_`` and ``-``; rejects
    the empty string, strings made only of dots, and strings starting
    with ``-``.
    """
    return (
        _DIRNAME_RE.fullmatch(value) is not None
        and value.strip(".") != ""
        and not value.startswith("-")
    )


def validate_name(name: str) -> str:
    """Return ``name`` unchanged if it is a safe package name."""
    if not is_valid_dirname(name):
        raise ValidationError(f"Invalid package name: `{name}`")
    return name


def validate_version(version: str) -> str:
    """Return ``version`` unchanged if it is a safe version string."""
    if not is_valid_dirname(version):
        raise ValidationError(f"Invalid version string: `{version}`")
    return version
