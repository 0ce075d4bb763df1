"""Finding the packages that depend on every one of a set of target packages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tqdm import tqdm

from .expander import expand
from .matcher import matches
from .models import Placeholder
from .policy import DEFAULT_POLICY, can_use_reverse_index

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import Package, Target
    from .policy import FilterPolicy
    from .registry import PackageRegistry

logger = logging.getLogger(__name__)


class InconsistentResultError(ValueError):
    """Raised when a target that could not be resolved nonetheless has dependents."""


def resolve_targets(registry: PackageRegistry, names: Iterable[str]) -> list[Target]:
    """Resolve query names to packages, substituting a `Placeholder` for every name the registry does not know."""
    targets: list[Target] = []
    for name in names:
        package = registry.resolve(name)
        if package is None:
            logger.warning("No available package with the name %s", name)
            targets.append(Placeholder(name))
        else:
            targets.append(package)
    return targets


def check_consistency(targets: Sequence[Target], dependents: Iterable[Package]) -> None:
    """Raise `InconsistentResultError` if an unresolved target has dependents.

    A placeholder has no real identity for other packages to depend on, so any dependent found for it is the
    result of a naming collision or a stale reference.
    """
    missing = [target.name for target in targets if isinstance(target, Placeholder)]
    if missing and any(True for _ in dependents):
        msg = f"Missing packages should not have dependents! ({', '.join(missing)})"
        raise InconsistentResultError(msg)


class DependentsResolver:
    """Finds the packages whose dependencies include all of a set of targets."""

    def __init__(
        self,
        registry: PackageRegistry,
        policy: FilterPolicy = DEFAULT_POLICY,
        *,
        installed_only: bool = False,
        use_reverse_index: bool = False,
        progress: bool = False,
    ) -> None:
        """Initialize the resolver.

        Args:
            registry: The universe of packages
            policy: Which dependency kinds count
            installed_only: Only consider installed packages as dependents
            use_reverse_index: Answer queries from the registry's reverse-dependents index instead of scanning
                every candidate. Only correct for direct, default-policy, installed-only queries; see
                `can_use_reverse_index`. Queries the index can not answer fall back to scanning.
            progress: Show a progress bar while scanning candidates

        """
        self.registry: PackageRegistry = registry
        self.policy: FilterPolicy = policy
        self.installed_only: bool = installed_only
        self.use_reverse_index: bool = use_reverse_index
        self.progress: bool = progress
        self._candidates: list[Package] | None = None

    @property
    def candidates(self) -> list[Package]:
        """The pool of potential dependents, ordered by full name."""
        if self._candidates is None:
            if self.installed_only:
                pool = self.registry.installed_packages()
            else:
                pool = self.registry.all_packages()
            self._candidates = sorted(pool)
        return self._candidates

    def resolve(self, targets: Sequence[Target], *, recursive: bool = False) -> set[Package]:
        """Return the packages that depend on every one of ``targets``.

        Args:
            targets: The packages to find dependents of
            recursive: Also count dependencies of dependencies

        """
        if not targets:
            msg = "At least one target is required"
            raise ValueError(msg)
        if self.use_reverse_index:
            if can_use_reverse_index(
                self.policy,
                installed_only=self.installed_only,
                tree=False,
                recursive=recursive,
                targets=targets,
            ):
                return self._resolve_from_reverse_index(targets)  # type: ignore[arg-type]
            logger.debug("The reverse-dependents index can not answer this query; scanning instead")
        return self._resolve_by_scan(targets, recursive=recursive)

    def resolve_sorted(self, targets: Sequence[Target], *, recursive: bool = False) -> list[Package]:
        """Return the dependents of ``targets`` ordered by full name."""
        return sorted(self.resolve(targets, recursive=recursive))

    def _resolve_from_reverse_index(self, targets: Sequence[Package]) -> set[Package]:
        dependents: set[Package] | None = None
        for target in targets:
            target_dependents = self.registry.reverse_dependents(target)
            if dependents is None:
                dependents = set(target_dependents)
            else:
                dependents &= target_dependents
        # the index may be stale, so re-check that the dependents are still installed
        return {package for package in dependents or () if package.any_version_installed}

    def _resolve_by_scan(self, targets: Sequence[Target], *, recursive: bool) -> set[Package]:
        dependents: set[Package] = set()
        names = ", ".join(target.full_name for target in targets)
        for candidate in tqdm(
            self.candidates,
            desc=f"finding dependents of {names}",
            leave=False,
            unit=" packages",
            disable=not self.progress,
        ):
            dependencies = expand(candidate, self.policy, self.registry, recursive=recursive)
            if all(any(matches(dep, target, self.registry) for dep in dependencies) for target in targets):
                dependents.add(candidate)
        return dependents
