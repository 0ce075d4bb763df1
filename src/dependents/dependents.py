"""Version and application directory utilities for dependents."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as meta_version

from platformdirs import PlatformDirs

APP_DIRS = PlatformDirs("dependents", "dependents")


def version() -> str:
    """Get the installed version of dependents, or "unknown" when running from a source checkout."""
    try:
        return meta_version("dependents")
    except PackageNotFoundError:
        return "unknown"
