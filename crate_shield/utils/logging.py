"""Logging utilities for crate-shield."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


class CrateShieldLogger:
    """Thin wrapper around a stdlib logger with a rich console handler."""

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        """Initialize the logger.

        Args:
            name: Logger name
            level: Level used when the logger has none set yet
        """
        self.logger = logging.getLogger(name)
        if self.logger.level == logging.NOTSET:
            self.logger.setLevel(level)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Attach a rich handler writing to stderr, once per logger."""
        if any(isinstance(handler, RichHandler) for handler in self.logger.handlers):
            return

        console = Console(stderr=True, theme=Theme({
            "info": "cyan",
            "warning": "yellow",
            "error": "red",
            "critical": "red bold",
            "debug": "dim",
        }))

        handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s", datefmt="[%X]"))

        self.logger.addHandler(handler)
        self.logger.propagate = False

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(msg, extra=kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(msg, extra=kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(msg, extra=kwargs)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(msg, extra=kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log critical message."""
        self.logger.critical(msg, extra=kwargs)


def _has_file_handler(logger: logging.Logger, log_file: Path) -> bool:
    target = os.path.abspath(log_file)
    return any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == target
        for handler in logger.handlers
    )


LOGGER_NAMES = (
    "AdvisoryDatabase",
    "VulnerabilityMatcher",
    "AdvisorySource",
    "CargoLockParser",
    "JSONFormatter",
    "TextFormatter",
    "CLI",
    "Performance",
)


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    verbose: bool = False
) -> None:
    """Setup logging configuration for crate-shield.

    Args:
        level: Logging level for crate-shield loggers
        log_file: Optional log file path
        verbose: Enable debug logging (overrides ``level``)
    """
    if verbose:
        level = logging.DEBUG

    # basicConfig is a no-op once the root logger has handlers
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[
                logging.StreamHandler(sys.stderr),
                *([logging.FileHandler(log_file)] if log_file else [])
            ]
        )

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if log_file and not _has_file_handler(logger, log_file):
            logger.addHandler(logging.FileHandler(log_file))


def get_logger(name: str) -> CrateShieldLogger:
    """Get a crate-shield logger instance.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return CrateShieldLogger(name)
