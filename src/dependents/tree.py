"""Rendering dependents as a tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from .models import Package, Target
    from .resolver import DependentsResolver

CIRCULAR_MARKER = " (CIRCULAR DEPENDENT)"

MID_BRANCH = "├──"
LAST_BRANCH = "└──"
MID_INDENT = "│   "
LAST_INDENT = "    "


@dataclass
class TreeNode:
    """A dependent in the tree, and the dependents of that dependent."""

    package: Package
    circular: bool = False
    children: list[TreeNode] = field(default_factory=list)


def build_dependents_tree(
    targets: Sequence[Target],
    resolver: DependentsResolver,
    *,
    recursive: bool = False,
    ancestors: tuple[frozenset[str], ...] = (),
) -> list[TreeNode]:
    """Build the tree of packages that directly depend on all of ``targets``.

    Every level is a one-level-deep query; ``recursive`` only decides whether levels below the first are built.
    A dependent whose name is already on the path from the root is marked circular and not descended into.

    Args:
        targets: The frontier to find direct dependents of
        resolver: Resolver used for each level
        recursive: Whether to build levels below the first
        ancestors: The names of the frontiers above this one

    Returns:
        The nodes of this level, in candidate pool order

    """
    ancestors = (*ancestors, frozenset(target.name for target in targets))
    nodes: list[TreeNode] = []
    for dependent in resolver.resolve_sorted(targets, recursive=False):
        node = TreeNode(dependent, circular=any(dependent.name in names for names in ancestors))
        if recursive and not node.circular:
            node.children = build_dependents_tree([dependent], resolver, recursive=True, ancestors=ancestors)
        nodes.append(node)
    return nodes


def _render_level(nodes: Sequence[TreeNode], prefix: str) -> Iterator[str]:
    last = len(nodes) - 1
    for i, node in enumerate(nodes):
        branch, indent = (LAST_BRANCH, LAST_INDENT) if i == last else (MID_BRANCH, MID_INDENT)
        line = f"{prefix}{branch} {node.package.full_name}"
        if node.circular:
            line += CIRCULAR_MARKER
        yield line
        yield from _render_level(node.children, prefix + indent)


def render_tree(targets: Sequence[Target], nodes: Sequence[TreeNode]) -> Iterator[str]:
    """Yield the lines of a rendered tree: one root line per target followed by the indented dependents."""
    for target in targets:
        yield target.full_name
    yield from _render_level(nodes, "")


def dependents_tree(
    targets: Sequence[Target],
    resolver: DependentsResolver,
    *,
    recursive: bool = False,
) -> Iterator[str]:
    """Build and render the dependents tree of ``targets``, which are listed in name order."""
    targets = sorted(targets, key=lambda target: target.name)
    yield from render_tree(targets, build_dependents_tree(targets, resolver, recursive=recursive))
