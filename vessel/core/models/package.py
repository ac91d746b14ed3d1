"""
Package and manifest models.

Both are loaded from YAML once per invocation and never mutated
afterwards. Field names match the keys used in ``package-set.yml``
and ``vessel.yml``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """A single entry of the package set.

    ``repo`` is a git remote (or a GitHub URL, which enables tarball
    downloads) and ``version`` is the exact tag to check out.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    repo: str
    version: str
    dependencies: list[str] = Field(default_factory=list)


class Manifest(BaseModel):
    """A project's direct dependencies and optional compiler pin."""

    model_config = ConfigDict(frozen=True)

    compiler: str | None = None
    dependencies: list[str] = Field(default_factory=list)
