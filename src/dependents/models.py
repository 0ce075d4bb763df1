"""Core data models for dependent resolution."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from semantic_version import Version

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

NAMESPACE_SEPARATOR = "/"

DEFAULT_NAMESPACE = "core"
"""The namespace alias of packages provided by the default source."""


class DependencyKind(str, Enum):
    """Why a package declares a dependency."""

    required = "required"
    build = "build"
    test = "test"
    optional = "optional"
    recommended = "recommended"


def version_sort_key(version: str) -> tuple[int, Version | None, str]:
    """Sort key for installed version strings.

    Versions that `semantic_version` can make sense of sort semantically and before any that it can not,
    such as `HEAD-abc1234` or `latest`, which sort by their text.
    """
    try:
        return 0, Version.coerce(version), version
    except ValueError:
        return 1, None, version


class Dependency:
    """A directed reference from a package to another package, annotated with a kind."""

    def __init__(self, reference: str, kind: DependencyKind | str = DependencyKind.required) -> None:
        """Initialize a dependency.

        Args:
            reference: Name of the referenced package, optionally namespace-qualified (``namespace/name``)
            kind: The dependency kind

        """
        if not reference or reference.endswith(NAMESPACE_SEPARATOR):
            msg = f"Invalid dependency reference {reference!r}"
            raise ValueError(msg)
        self.reference: str = reference
        self.kind: DependencyKind = DependencyKind(kind)

    @property
    def is_qualified(self) -> bool:
        """Whether the reference names an explicit namespace."""
        return NAMESPACE_SEPARATOR in self.reference

    @property
    def name(self) -> str:
        """The bare name of the referenced package."""
        return self.reference.rsplit(NAMESPACE_SEPARATOR, 1)[-1]

    @property
    def namespace(self) -> str | None:
        """The namespace of a qualified reference, or None."""
        if not self.is_qualified:
            return None
        return self.reference.rsplit(NAMESPACE_SEPARATOR, 1)[0]

    @classmethod
    def from_string(cls, description: str) -> Dependency:
        """Create a dependency from a string description.

        For example:
            openssl
            pkg-config:build
            someuser/tools/libfoo:optional

        """
        reference, _, kind = description.partition(":")
        try:
            return cls(reference.strip(), kind.strip() or DependencyKind.required)
        except ValueError as e:
            msg = f"Can not parse dependency description <{description}>"
            raise ValueError(msg) from e

    def __str__(self) -> str:
        """Return string representation of the dependency."""
        if self.kind is DependencyKind.required:
            return self.reference
        return f"{self.reference}:{self.kind.value}"

    def __repr__(self) -> str:
        """Return the representation of the dependency."""
        return f"{self.__class__.__name__}({self.reference!r}, {self.kind.value!r})"

    def __eq__(self, other: object) -> bool:
        """Check equality with another dependency."""
        return isinstance(other, Dependency) and self.reference == other.reference and self.kind == other.kind

    def __hash__(self) -> int:
        """Compute hash for dependency."""
        return hash((self.reference, self.kind))

    def __lt__(self, other: object) -> bool:
        """Compare dependencies for sorting."""
        if not isinstance(other, Dependency):
            msg = "Need a Dependency"
            raise TypeError(msg)
        return (self.reference, self.kind.value) < (other.reference, other.kind.value)


class Package:
    """A unit in the dependency graph: a name, an optional namespace, and its declared dependencies."""

    def __init__(
        self,
        name: str,
        namespace: str | None = None,
        dependencies: Iterable[Dependency] = (),
        installed_versions: Iterable[str] = (),
    ) -> None:
        """Initialize a package.

        Args:
            name: Bare package name
            namespace: Namespace of a package sourced from a non-default provider, or None
            dependencies: Declared dependency edges, in declaration order
            installed_versions: Versions of this package currently installed, as the package manager spells them

        """
        if not name or NAMESPACE_SEPARATOR in name:
            msg = f"Invalid package name {name!r}"
            raise ValueError(msg)
        if namespace == DEFAULT_NAMESPACE:
            namespace = None
        self.name: str = name
        self.namespace: str | None = namespace or None
        self.dependencies: tuple[Dependency, ...] = tuple(dependencies)
        self.installed_versions: tuple[str, ...] = tuple(str(v) for v in installed_versions)

    @property
    def full_name(self) -> str:
        """The package name, qualified with its namespace when it has one."""
        if self.namespace is None:
            return self.name
        return f"{self.namespace}{NAMESPACE_SEPARATOR}{self.name}"

    @property
    def any_version_installed(self) -> bool:
        """Whether at least one version of this package is installed."""
        return bool(self.installed_versions)

    @classmethod
    def from_obj(cls, obj: Mapping[str, Any]) -> Package:
        """Create a package from its dictionary representation.

        ``dependencies`` may either be a list of ``{"name": ..., "kind": ...}`` objects (or plain
        dependency description strings), or a mapping from reference to kind.
        """
        try:
            raw_deps = obj.get("dependencies", ())
            if isinstance(raw_deps, dict):
                dependencies = [Dependency(reference, kind) for reference, kind in raw_deps.items()]
            else:
                dependencies = [
                    Dependency.from_string(dep)
                    if isinstance(dep, str)
                    else Dependency(dep["name"], dep.get("kind", DependencyKind.required))
                    for dep in raw_deps
                ]
            installed = obj.get("installed", ())
            if isinstance(installed, str):
                msg = "`installed` must be a list of versions"
                raise TypeError(msg)  # noqa: TRY301
            return cls(
                name=obj["name"],
                namespace=obj.get("namespace"),
                dependencies=dependencies,
                installed_versions=installed,
            )
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Invalid package description: {obj!r}"
            raise ValueError(msg) from e

    def to_obj(self) -> dict[str, Any]:
        """Convert package to dictionary representation."""
        ret: dict[str, Any] = {
            "name": self.name,
            "dependencies": [{"name": dep.reference, "kind": dep.kind.value} for dep in self.dependencies],
            "installed": list(self.installed_versions),
        }
        if self.namespace is not None:
            ret["namespace"] = self.namespace
        return ret

    def dumps(self) -> str:
        """Serialize package to JSON string."""
        return json.dumps(self.to_obj())

    def __str__(self) -> str:
        """Get string representation of package."""
        return self.full_name

    def __repr__(self) -> str:
        """Get the representation of the package."""
        return f"{self.__class__.__name__}({self.full_name!r})"

    def __eq__(self, other: object) -> bool:
        """Packages are identified by their full name."""
        return isinstance(other, Package) and other.full_name == self.full_name

    def __hash__(self) -> int:
        """Compute hash for package."""
        return hash(self.full_name)

    def __lt__(self, other: object) -> bool:
        """Compare packages for sorting."""
        if not isinstance(other, Package):
            msg = "Need a Package"
            raise TypeError(msg)
        return self.full_name < other.full_name


@dataclass(frozen=True)
class Placeholder:
    """Stand-in for a query target that the registry could not resolve.

    It carries nothing but the name it was queried by.
    """

    name: str

    @property
    def full_name(self) -> str:
        """A placeholder has no namespace, so its full name is the queried name."""
        return self.name

    def __str__(self) -> str:
        """Get string representation of the placeholder."""
        return self.name


Target = Package | Placeholder
