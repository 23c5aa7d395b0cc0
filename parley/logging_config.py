"""Logging configuration using Loguru.

Provides structured logging with:
- Console output for development
- File rotation for production
- Truncated transcript text in logs (meeting content stays out of log files)
"""

import sys
from pathlib import Path

from loguru import logger

PREVIEW_CHARS = 120


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_file: bool = True,
) -> None:
    """Configure application logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files
        enable_file: Whether to enable file logging
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    if enable_file:
        log_path = Path(log_dir)
        log_path.mkdir(exist_ok=True)

        logger.add(
            log_path / "parley_{time:YYYY-MM-DD}.log",
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} | "
                "{message}"
            ),
            level=level,
            rotation="100 MB",
            retention="30 days",
            compression="gz",
            backtrace=True,
            diagnose=False,  # No locals in files
        )

        # Error-only log for quick debugging
        logger.add(
            log_path / "errors_{time:YYYY-MM-DD}.log",
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} | "
                "{message}\n{exception}"
            ),
            level="ERROR",
            rotation="50 MB",
            retention="90 days",
            compression="gz",
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Logging initialized at {level} level")


def get_logger(name: str) -> "logger":
    """Get a logger instance with the given name.

    Usage:
        from parley.logging_config import get_logger
        logger = get_logger(__name__)
        logger.info("Message")
    """
    return logger.bind(name=name)


def preview_text(text: str | None, limit: int = PREVIEW_CHARS) -> str:
    """Shorten spoken text before it goes into a log line."""
    if not text:
        return ""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
