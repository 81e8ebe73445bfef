"""Logging setup for the CLI and the daemon.

Everything logs under the ``hadithmaster`` namespace. The CLI keeps the
terminal quiet (warnings only) and optionally mirrors everything to a file;
the daemon has no terminal and logs to its own file only.
"""

import logging
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

NAMESPACE = "hadithmaster"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Client libraries that log every request at INFO/DEBUG
NOISY_LOGGERS = ("google", "grpc", "urllib3", "apscheduler")


def setup_logging(
    level: LogLevel = "INFO",
    log_file: Path | None = None,
    console_level: LogLevel | None = "WARNING",
) -> logging.Logger:
    """Configure the hadithmaster logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Level of the hadithmaster logger
        log_file: Also write records at ``level`` and above to this file
        console_level: Level for stderr output, None for no console output

    Returns:
        The configured namespace logger
    """
    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(getattr(logging, level))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_level is not None:
        console_handler = RichHandler(
            console=Console(stderr=True),
            level=getattr(logging, console_level),
            show_time=False,
            show_path=False,
        )
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
