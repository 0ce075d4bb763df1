"""Dependency graph implementation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import networkx as nx

from .policy import DEFAULT_POLICY

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import Package
    from .policy import FilterPolicy
    from .registry import PackageRegistry

logger = logging.getLogger(__name__)


class DependentsGraph(nx.DiGraph):
    """A directed graph with an edge from every package to each package it depends on.

    Only edges that count under the graph's policy and that resolve to a package in the registry are added.
    """

    def __init__(self, *args: object, policy: FilterPolicy = DEFAULT_POLICY, **kwargs: object) -> None:
        """Initialize the graph."""
        super().__init__(*args, **kwargs)
        self.policy: FilterPolicy = policy

    @classmethod
    def from_packages(
        cls,
        packages: Iterable[Package],
        registry: PackageRegistry,
        policy: FilterPolicy = DEFAULT_POLICY,
    ) -> DependentsGraph:
        """Build the graph of the given packages.

        Args:
            packages: The packages whose dependency edges become graph edges
            registry: Registry used to resolve dependency references
            policy: Which dependency kinds become edges

        """
        graph = cls(policy=policy)
        for package in packages:
            graph.add_node(package)
            for dep in policy.filter(package.dependencies):
                matched = registry.matching_packages(dep)
                if not matched:
                    logger.debug("%s: ignoring unresolvable dependency %s", package.full_name, dep)
                for dependency in matched:
                    graph.add_edge(package, dependency, dependency=dep)
        return graph

    def dependents_of(self, package: Package) -> frozenset[Package]:
        """Return the packages in the graph with an edge to ``package``."""
        if package not in self:
            return frozenset()
        return frozenset(self.predecessors(package))

