"""Logging setup for wgraph.

Every module logger sits under the ``wgraph`` logger, which carries a single
package handler. The handler writes to stderr so that stdout stays reserved
for command output, including ``--json`` event lines.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "wgraph"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handler installed on the package logger; None until the first setup
_package_handler: Optional[logging.Handler] = None


def setup_root_logger(
    level: int = logging.INFO,
    handler: Optional[logging.Handler] = None,
    format_string: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Install the package handler on the ``wgraph`` logger.

    Without ``handler`` this only acts the first time. Passing a handler
    replaces the installed one, so output can be redirected at any point.

    Args:
        level: Level for the package logger.
        handler: Replacement handler (defaults to a stderr stream handler).
        format_string: Format applied to the handler.

    Returns:
        The ``wgraph`` logger.
    """
    global _package_handler

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if handler is None and _package_handler is not None:
        return package_logger

    if _package_handler is not None:
        package_logger.removeHandler(_package_handler)
    _package_handler = handler or logging.StreamHandler(sys.stderr)
    _package_handler.setFormatter(logging.Formatter(format_string))
    package_logger.addHandler(_package_handler)
    package_logger.setLevel(level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger that inherits the package configuration.

    Args:
        name: Logger name, normally ``__name__`` of a ``wgraph`` module.
    """
    setup_root_logger()
    return logging.getLogger(name)


def set_global_log_level(level: int) -> None:
    """Set the level of the package logger and its handler."""
    package_logger = setup_root_logger()
    package_logger.setLevel(level)
    if _package_handler is not None:
        _package_handler.setLevel(level)


def level_for_flags(verbose: bool = False, quiet: bool = False) -> int:
    """Map the CLI's ``--verbose`` / ``--quiet`` flags to a level.

    ``verbose`` wins when both are set.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO
