"""The `dependents` APIs."""

__version__ = "0.1.0"

from .models import Dependency, DependencyKind, Package, Placeholder, Target
from .policy import FilterPolicy, can_use_reverse_index
from .registry import InMemoryPackageRegistry, PackageRegistry
from .resolver import DependentsResolver, InconsistentResultError, check_consistency, resolve_targets
from .tree import TreeNode, build_dependents_tree, dependents_tree, render_tree

__all__ = [
    "Dependency",
    "DependencyKind",
    "DependentsResolver",
    "FilterPolicy",
    "InMemoryPackageRegistry",
    "InconsistentResultError",
    "Package",
    "PackageRegistry",
    "Placeholder",
    "Target",
    "TreeNode",
    "build_dependents_tree",
    "can_use_reverse_index",
    "check_consistency",
    "dependents_tree",
    "render_tree",
    "resolve_targets",
]
