"""Expansion of a package's dependency edges, one level deep or transitively."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Placeholder

if TYPE_CHECKING:
    from .models import Dependency, Target
    from .policy import FilterPolicy
    from .registry import PackageRegistry

logger = logging.getLogger(__name__)


def expand(
    package: Target,
    policy: FilterPolicy,
    registry: PackageRegistry,
    *,
    recursive: bool = False,
) -> frozenset[Dependency]:
    """Return the dependency edges of ``package`` that count under ``policy``.

    If ``recursive`` is True, this is the transitive closure: the edges of every package reachable through
    edges that pass the policy. An edge that fails the policy is neither counted nor followed. Edges whose
    reference does not resolve to a known package are counted but cannot be followed.

    Args:
        package: The package to expand
        policy: Which dependency kinds count
        registry: Registry used to resolve dependency references while recursing
        recursive: Whether to expand transitively

    Returns:
        The counted edges, without duplicates

    """
    if isinstance(package, Placeholder):
        return frozenset()
    if not recursive:
        return frozenset(policy.filter(package.dependencies))

    # qualified edges are keyed by the full name they resolve to and bare edges by their reference,
    # since that is all the name matcher looks at
    edges: dict[tuple[bool, str, str], Dependency] = {}
    visited: set[str] = {package.full_name}
    stack = [package]
    while stack:
        current = stack.pop()
        for dep in policy.filter(current.dependencies):
            resolved = registry.resolve_dependency(dep)
            if dep.is_qualified and resolved is not None:
                key = (True, resolved.full_name, dep.kind.value)
            else:
                key = (False, dep.reference, dep.kind.value)
            edges.setdefault(key, dep)
            if resolved is None:
                logger.debug("%s: cannot follow unresolvable dependency %s", current.full_name, dep)
            elif resolved.full_name not in visited:
                visited.add(resolved.full_name)
                stack.append(resolved)
    return frozenset(edges.values())
