from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

import pytest

from dependents.models import Dependency, Package
from dependents.registry import InMemoryPackageRegistry

RegistryFactory = Callable[..., InMemoryPackageRegistry]


def build_registry(
    graph: Mapping[str, Iterable[str]],
    installed: Iterable[str] = (),
    reverse_index: Mapping[str, Iterable[str]] | None = None,
) -> InMemoryPackageRegistry:
    """Build a registry from a mapping of full package names to dependency descriptions like ``"zlib:build"``."""
    installed = set(installed)
    packages = []
    for full_name, deps in graph.items():
        namespace, _, name = full_name.rpartition("/")
        packages.append(
            Package(
                name=name,
                namespace=namespace or None,
                dependencies=[Dependency.from_string(dep) for dep in deps],
                installed_versions=["1.0.0"] if full_name in installed else (),
            )
        )
    return InMemoryPackageRegistry(packages, reverse_index=reverse_index)


@pytest.fixture
def make_registry() -> RegistryFactory:
    return build_registry
