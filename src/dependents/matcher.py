"""Matching dependency references against query targets."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Dependency, Target
    from .registry import PackageRegistry


def matches(dependency: Dependency, target: Target, registry: PackageRegistry) -> bool:
    """Check whether a dependency edge refers to the target.

    A namespace-qualified reference is resolved through the registry and compared by full name. A qualified
    reference whose namespace is not available locally never matches. Bare references are compared by bare name.
    """
    if dependency.is_qualified:
        full_name = registry.resolve_qualified_name(dependency.reference)
        if full_name is None:
            return False
        return full_name == target.full_name
    return dependency.reference == target.name
