"""Logging configuration for result tracking tools."""

from __future__ import annotations

import logging
import os


def setup_logging(
    logger_name: str = "worktrace",
    log_file: str | os.PathLike[str] | None = None,
    verbose: bool = False,
    level: str | None = None,
) -> logging.Logger:
    """
    Configure dual-handler logging (console + optional file).

    Args:
        logger_name: Logger to configure; "worktrace" covers every module
        log_file: Path to a log file that receives DEBUG and above
        verbose: Enable DEBUG level on the console (default INFO)
        level: Explicit console level name, overrides `verbose`

    Returns:
        Configured logger instance
    """
    if level is not None:
        console_level = logging.getLevelNamesMapping()[level.upper()]
    else:
        console_level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    # Re-running setup must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter("%(levelname)-8s | %(name)s | %(message)s")
    )
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    # Suppress noisy 3rd party loggers
    for noisy in ["asyncio", "markdown_it"]:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
