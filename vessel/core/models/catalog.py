"""
Package catalog: the full package set as an in-memory graph.

No I/O happens here. Package records are kept in one mapping and the
dependency edges in a separate adjacency mapping, so the resolution
algorithms below work purely on names and only look records up at the
end.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from graphlib import CycleError as _GraphCycleError
from graphlib import TopologicalSorter

from vessel.core.errors import CycleError, UnknownPackageError
from vessel.core.models.package import Package

logger = logging.getLogger(__name__)


class PackageCatalog:
    """Read-only view over every known package and its dependencies."""

    def __init__(self, packages: Iterable[Package] = ()):
        self._packages: dict[str, Package] = {}
        for package in packages:
            if package.name in self._packages:
                logger.debug("Package '%s' overridden by a later entry", package.name)
            self._packages[package.name] = package
        self._edges: dict[str, tuple[str, ...]] = {
            name: tuple(package.dependencies) for name, package in self._packages.items()
        }

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[Package]:
        for name in self.names:
            yield self._packages[name]

    @property
    def names(self) -> list[str]:
        """All package names, sorted."""
        return sorted(self._packages)

    def find(self, name: str) -> Package | None:
        """Look up a package by name."""
        return self._packages.get(name)

    def get(self, name: str) -> Package:
        """Look up a package by name, raising if it is unknown."""
        package = self._packages.get(name)
        if package is None:
            raise UnknownPackageError(name)
        return package

    def missing_dependencies(self) -> dict[str, list[str]]:
        """Map each package to the dependency names absent from the catalog."""
        missing: dict[str, list[str]] = {}
        for name in self.names:
            absent = [dep for dep in self._edges[name] if dep not in self._packages]
            if absent:
                missing[name] = absent
        return missing

    def transitive_deps(self, entry_points: Iterable[str]) -> list[Package]:
        """Entry points plus every package reachable from them, sorted by name.

        The order is for reproducible listings only. It is NOT a safe
        build order; use ``topo_sorted`` for that.

        Raises:
            UnknownPackageError: If any reachable name is not in the catalog.
        """
        found: set[str] = set()
        todo: list[tuple[str, str | None]] = [(name, None) for name in entry_points]

        while todo:
            name, required_by = todo.pop()
            if name in found:
                continue
            if name not in self._edges:
                raise UnknownPackageError(name, required_by=required_by)
            found.add(name)
            todo.extend((dep, name) for dep in self._edges[name])

        return [self._packages[name] for name in sorted(found)]

    def topo_sorted(self) -> list[Package]:
        """Every package, each one after all of its dependencies.

        Raises:
            UnknownPackageError: If a dependency is not in the catalog.
            CycleError: If the dependency graph is not acyclic.
        """
        sorter: TopologicalSorter[str] = TopologicalSorter()
        for name in self.names:
            for dep in self._edges[name]:
                if dep not in self._packages:
                    raise UnknownPackageError(dep, required_by=name)
            sorter.add(name, *sorted(self._edges[name]))

        try:
            ordered = list(sorter.static_order())
        except _GraphCycleError as e:
            raise CycleError(list(e.args[1])) from e

        if len(ordered) != len(self._packages):
            raise CycleError(sorted(set(self._packages) - set(ordered)))

        return [self._packages[name] for name in ordered]
