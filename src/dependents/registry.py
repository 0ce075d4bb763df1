"""Package registries: the universe of packages that dependents are searched in."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

from .graph import DependentsGraph
from .models import DEFAULT_NAMESPACE, NAMESPACE_SEPARATOR, Package

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from .models import Dependency

logger = logging.getLogger(__name__)


class PackageRegistry(ABC):
    """An abstract base class for a collection of known packages."""

    def __init__(self) -> None:
        """Initialize package registry."""
        self._entries: int = 0
        self._reverse_graph: DependentsGraph | None = None

    def open(self) -> None:  # noqa: B027
        """Open the registry."""

    def close(self) -> None:  # noqa: B027
        """Close the registry."""

    def __enter__(self) -> Self:
        """Enter context manager."""
        if self._entries == 0:
            self.open()
        self._entries += 1
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object) -> None:
        """Exit context manager."""
        self._entries -= 1
        if self._entries == 0:
            self.close()

    @abstractmethod
    def all_packages(self) -> Iterable[Package]:
        """Return every known package."""
        raise NotImplementedError

    @abstractmethod
    def get(self, full_name: str) -> Package | None:
        """Return the package with exactly this full name, or None."""
        raise NotImplementedError

    def packages_named(self, name: str) -> list[Package]:
        """Return every package with this bare name, in any namespace."""
        return [package for package in self.all_packages() if package.name == name]

    def installed_packages(self) -> Iterable[Package]:
        """Return every package with at least one installed version."""
        return [package for package in self.all_packages() if package.any_version_installed]

    def __iter__(self) -> Iterator[Package]:
        """Iterate over every known package."""
        yield from self.all_packages()

    def __contains__(self, package: Package) -> bool:
        """Check if package is known to this registry."""
        return self.get(package.full_name) is not None

    def _get_qualified(self, reference: str) -> Package | None:
        namespace, name = reference.rsplit(NAMESPACE_SEPARATOR, 1)
        if namespace == DEFAULT_NAMESPACE:
            return self.get(name)
        return self.get(reference)

    def resolve(self, name: str) -> Package | None:
        """Resolve a query name to a package.

        Qualified names must match a package's full name. Bare names prefer the package of the default
        namespace and otherwise resolve to the only package of that name in any other namespace.

        Returns:
            The package, or None if the name is unknown or ambiguous

        """
        if NAMESPACE_SEPARATOR in name:
            return self._get_qualified(name)
        package = self.get(name)
        if package is not None:
            return package
        candidates = self.packages_named(name)
        if len(candidates) > 1:
            logger.debug(
                "%s is ambiguous: it could be any of %s", name, ", ".join(sorted(c.full_name for c in candidates))
            )
            return None
        if candidates:
            return candidates[0]
        return None

    def resolve_qualified_name(self, reference: str) -> str | None:
        """Resolve a namespace-qualified reference to a canonical full name.

        Returns:
            The full name, or None when the namespace or the package is not available locally

        """
        package = self._get_qualified(reference)
        if package is None:
            return None
        return package.full_name

    def resolve_dependency(self, dependency: Dependency) -> Package | None:
        """Resolve the package a dependency edge refers to, or None."""
        return self.resolve(dependency.reference)

    def matching_packages(self, dependency: Dependency) -> list[Package]:
        """Return every known package that a dependency edge matches by name."""
        if dependency.is_qualified:
            package = self.resolve_dependency(dependency)
            return [] if package is None else [package]
        return self.packages_named(dependency.reference)

    def reverse_dependents(self, package: Package) -> frozenset[Package]:
        """Return the installed packages whose default-policy dependency edges reference ``package``."""
        if self._reverse_graph is None:
            self._reverse_graph = DependentsGraph.from_packages(self.installed_packages(), self)
        return self._reverse_graph.dependents_of(package)


class InMemoryPackageRegistry(PackageRegistry):
    """A registry of packages held in memory."""

    def __init__(
        self,
        packages: Iterable[Package] = (),
        reverse_index: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        """Initialize in-memory package registry.

        Args:
            packages: The known packages
            reverse_index: An optional precomputed mapping from a package's full name to the full names of its
                installed dependents. If omitted, it is computed from the packages on first use.

        """
        super().__init__()
        self._packages: dict[str, Package] = {}
        self._by_name: dict[str, list[Package]] = defaultdict(list)
        self._reverse_index: dict[str, frozenset[str]] | None = None
        if reverse_index is not None:
            self._reverse_index = {name: frozenset(dependents) for name, dependents in reverse_index.items()}
        self.extend(packages)

    def __len__(self) -> int:
        """Return the number of packages in the registry."""
        return len(self._packages)

    def all_packages(self) -> Iterable[Package]:
        """Return every known package."""
        return self._packages.values()

    def get(self, full_name: str) -> Package | None:
        """Return the package with exactly this full name, or None."""
        return self._packages.get(full_name)

    def packages_named(self, name: str) -> list[Package]:
        """Return every package with this bare name, in any namespace."""
        return list(self._by_name.get(name, ()))

    def add(self, package: Package) -> None:
        """Add a package to the registry, replacing any package with the same full name."""
        existing = self._packages.get(package.full_name)
        if existing is not None:
            self._by_name[existing.name].remove(existing)
        self._packages[package.full_name] = package
        self._by_name[package.name].append(package)
        self._reverse_graph = None

    def extend(self, packages: Iterable[Package]) -> None:
        """Add multiple packages to the registry."""
        for package in packages:
            self.add(package)

    def reverse_dependents(self, package: Package) -> frozenset[Package]:
        """Return the installed dependents of ``package``, from the precomputed index if there is one."""
        if self._reverse_index is None:
            return super().reverse_dependents(package)
        dependents = set()
        for full_name in self._reverse_index.get(package.full_name, ()):
            dependent = self.get(full_name)
            if dependent is None:
                logger.debug("reverse index of %s names unknown package %s", package.full_name, full_name)
                continue
            dependents.add(dependent)
        return frozenset(dependents)

    @classmethod
    def from_obj(cls, obj: Mapping[str, Any] | list[Any]) -> InMemoryPackageRegistry:
        """Create a registry from a registry document: a list of packages, or an object with a ``packages`` list."""
        if isinstance(obj, list):
            entries = obj
        else:
            if "packages" not in obj or not isinstance(obj["packages"], list):
                msg = "A registry document must contain a `packages` list"
                raise ValueError(msg)
            entries = obj["packages"]
        return cls(Package.from_obj(entry) for entry in entries)

    @classmethod
    def from_json(cls, path: str | Path) -> InMemoryPackageRegistry:
        """Load a registry from a JSON file."""
        with Path(path).open() as f:
            try:
                obj = json.load(f)
            except json.JSONDecodeError as e:
                msg = f"{path} is not a valid registry file: {e!s}"
                raise ValueError(msg) from e
        return cls.from_obj(obj)

    def __str__(self) -> str:
        """Return string representation of the registry."""
        return "[" + ",".join(sorted(self._packages)) + "]"
