"""
Logging configuration.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are installed here, by the CLI, so that log output goes to stderr and
never mixes with a report written to stdout.
"""

import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: Union[int, str] = logging.WARNING) -> None:
    """
    Configure the ``proto_diff`` logger hierarchy.

    Args:
        level: Logging level name or number
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    package_logger = logging.getLogger("proto_diff")
    package_logger.handlers = [handler]
    package_logger.setLevel(level)
    package_logger.propagate = False
