"""Dependency-kind filtering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import DependencyKind, Placeholder

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from .config import Settings
    from .models import Dependency, Target


@dataclass(frozen=True)
class FilterPolicy:
    """Decides which dependency kinds count when looking for dependents.

    By default only ``required`` and ``recommended`` edges count.
    """

    include_build: bool = False
    include_test: bool = False
    include_optional: bool = False
    skip_recommended: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> FilterPolicy:
        """Build a policy from the command-line settings."""
        return cls(
            include_build=settings.include_build,
            include_test=settings.include_test,
            include_optional=settings.include_optional,
            skip_recommended=settings.skip_recommended,
        )

    @property
    def is_default(self) -> bool:
        """Whether no dependency-kind override is in effect."""
        return not (self.include_build or self.include_test or self.include_optional or self.skip_recommended)

    def counts(self, kind: DependencyKind) -> bool:
        """Return whether an edge of the given kind counts under this policy."""
        if kind is DependencyKind.required:
            return True
        if kind is DependencyKind.build:
            return self.include_build
        if kind is DependencyKind.test:
            return self.include_test
        if kind is DependencyKind.optional:
            return self.include_optional
        if kind is DependencyKind.recommended:
            return not self.skip_recommended
        msg = f"Unknown dependency kind {kind!r}"
        raise ValueError(msg)

    def filter(self, dependencies: Iterable[Dependency]) -> Iterator[Dependency]:
        """Yield only the dependencies that count under this policy."""
        return (dep for dep in dependencies if self.counts(dep.kind))


DEFAULT_POLICY = FilterPolicy()


def can_use_reverse_index(
    policy: FilterPolicy,
    *,
    installed_only: bool,
    tree: bool,
    recursive: bool,
    targets: Sequence[Target],
) -> bool:
    """Return whether the precomputed reverse-dependents index can answer a query.

    The index only records direct, default-policy dependents among installed packages, so it is
    only usable for exactly that kind of query, and only when every target is a real package.
    """
    return (
        installed_only
        and not tree
        and not recursive
        and policy.is_default
        and not any(isinstance(target, Placeholder) for target in targets)
    )
