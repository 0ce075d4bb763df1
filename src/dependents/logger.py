"""Functions for logging."""

import logging
import sys


def setup_logger(level: str) -> None:
    """Configure the root logger so all modules log to stderr.

    Query results are written to stdout by the CLI, so diagnostics must never share that stream.
    """
    level_value = getattr(logging, level.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(handler)
