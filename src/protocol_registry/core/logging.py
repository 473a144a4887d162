"""Logging setup.

The package logs through loguru and is disabled on import, so embedding
applications see nothing unless they opt in. configure_logging() installs
a console sink (and optionally a file sink) and enables the package.

Modules bind a `component` extra, shown in the console format.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

PACKAGE_NAME = "protocol_registry"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "{message}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {message}"


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Install log sinks and enable package logging.

    Args:
        level: Minimum level for all sinks.
        log_file: Optional path of a plain-text log file.
    """
    # Remove default handler
    logger.remove()
    logger.configure(extra={"component": "-"})

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper())

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(path, format=FILE_FORMAT, level=level.upper())

    logger.enable(PACKAGE_NAME)


def disable_logging() -> None:
    """Silence package logging again."""
    logger.disable(PACKAGE_NAME)
