"""Command-line interface for dependents."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy.exc import OperationalError

from .config import Settings
from .db import DBPackageRegistry
from .dependents import version
from .formatter import columns
from .logger import setup_logger
from .policy import FilterPolicy, can_use_reverse_index
from .registry import InMemoryPackageRegistry, PackageRegistry
from .resolver import DependentsResolver, InconsistentResultError, check_consistency, resolve_targets
from .tree import dependents_tree

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


def open_registry(settings: Settings) -> PackageRegistry:
    """Return the registry selected by the settings: a JSON registry file, or the package database."""
    if settings.registry is not None:
        return InMemoryPackageRegistry.from_json(settings.registry)
    return DBPackageRegistry(settings.database)


def run_query(settings: Settings, registry: PackageRegistry, output_write: Callable[[str], object]) -> int:
    """Find and print the dependents of the packages named in the settings.

    Returns:
        The process exit status

    """
    targets = resolve_targets(registry, settings.names)
    policy = FilterPolicy.from_settings(settings)
    resolver = DependentsResolver(
        registry,
        policy,
        installed_only=settings.installed,
        use_reverse_index=can_use_reverse_index(
            policy,
            installed_only=settings.installed,
            tree=settings.tree,
            recursive=settings.recursive,
            targets=targets,
        ),
        progress=settings.progress,
    )

    if settings.tree:
        for line in dependents_tree(targets, resolver, recursive=settings.recursive):
            output_write(f"{line}\n")
        return 0

    dependents = resolver.resolve_sorted(targets, recursive=settings.recursive)
    if not dependents:
        return 0
    try:
        check_consistency(targets, dependents)
    except InconsistentResultError as e:
        logger.error("%s", e)  # noqa: TRY400
        return 1
    output_write(columns([package.full_name for package in dependents]))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the `dependents` command.

    Args:
        argv: Command-line arguments; defaults to `sys.argv`

    Returns:
        The process exit status

    """
    try:
        settings = Settings(_cli_parse_args=True if argv is None else list(argv))  # type: ignore[call-arg]
    except ValidationError as e:
        setup_logger("warning")
        logger.error("%s", e)  # noqa: TRY400
        return 2
    setup_logger(settings.log_level)
    logger.debug("Starting dependents %s with settings: %s", version(), settings)

    if settings.devel:
        logger.warning("`dependents --devel` is deprecated")
    if settings.HEAD:
        logger.warning("`dependents --HEAD` is deprecated")

    try:
        registry = open_registry(settings)
    except (OSError, ValueError) as e:
        logger.error("Can not load the package registry: %s", e)  # noqa: TRY400
        return 1

    try:
        with registry:
            if settings.load is not None and isinstance(registry, DBPackageRegistry):
                try:
                    to_load = InMemoryPackageRegistry.from_json(settings.load)
                except (OSError, ValueError) as e:
                    logger.error("Can not load %s: %s", settings.load, e)  # noqa: TRY400
                    return 1
                registry.extend(to_load.all_packages())
                registry.reindex()
                logger.info("Loaded %d packages into %s", len(to_load), settings.database)
            return run_query(settings, registry, sys.stdout.write)
    except OperationalError as e:
        logger.error(  # noqa: TRY400
            "Database error: %r\n\nIf you remove %s and try again, the database will be rebuilt from scratch.",
            e,
            settings.database,
        )
        return 1
