"""Centralized logging configuration using loguru.

Provides:
- Configurable log levels from Settings
- CLI flag override (--verbose/--quiet)
- Standard library interception (httpx, used by githubkit)
- Structured context binding for repository/commit tracking
- Optional file rotation logging
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_configured = False

_CONSOLE_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Handler to intercept standard library logging and route to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Route stdlib log record to loguru."""
        from types import FrameType

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        # Find caller from where originated the logged message
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame is not None:
            if frame.f_code.co_filename != logging.__file__:
                break
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure logging for the application.

    Args:
        level: Base log level from config
        verbose: If True, use DEBUG level (overrides level)
        quiet: If True, use WARNING level (overrides level)
        log_file: Optional path for file logging with rotation
        rotation: When to rotate log file (e.g., "10 MB", "1 day")
        retention: How long to keep rotated logs
        serialize: If True, output JSON format (useful for file logs)

    Returns:
        Configured logger instance

    Note:
        verbose takes precedence over quiet if both are True.
    """
    global _configured

    effective_level: LogLevel
    if verbose:
        effective_level = "DEBUG"
    elif quiet:
        effective_level = "WARNING"
    else:
        effective_level = level

    logger.remove()

    logger.add(
        sys.stderr,
        level=effective_level,
        format=_CONSOLE_FORMAT,
        colorize=True,
        backtrace=True,
        diagnose=False,
        filter=lambda record: "name" in record["extra"],
    )

    # Fallback handler for logs without 'name' extra (e.g., from intercepted stdlib)
    logger.add(
        sys.stderr,
        level=effective_level,
        format=(
            "<dim>{time:HH:mm:ss}</dim> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=False,
        filter=lambda record: "name" not in record["extra"],
    )

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",  # Always capture everything to file
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{extra[name]}:{function}:{line} | "
                "{extra} | "
                "{message}"
            ),
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
            filter=lambda record: "name" in record["extra"],
        )

    _intercept_stdlib_logging(effective_level)

    _configured = True
    return logger


def _intercept_stdlib_logging(level: LogLevel) -> None:
    """Route stdlib loggers (httpx/httpcore under githubkit) through loguru."""
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # httpx: generally quiet unless DEBUG
    httpx_level = logging.DEBUG if level in ("TRACE", "DEBUG") else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_level)
    logging.getLogger("httpcore").setLevel(httpx_level)


def get_logger(name: str) -> Logger:
    """Get a logger with the given name bound as context.

    Usage:
        from repoverse.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Syncing {repo}", repo="acme/models")

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance with name bound
    """
    return logger.bind(name=name)


def bind_repo(owner: str, repo: str) -> Logger:
    """Bind target repository context to logger."""
    return logger.bind(name="sync", repo=f"{owner}/{repo}")


def bind_commit(owner: str, repo: str, sha: str) -> Logger:
    """Bind repository and commit context to logger.

    Args:
        owner: Repository owner
        repo: Repository name
        sha: Commit SHA (abbreviated in the bound context)

    Returns:
        Logger with repo and commit context bound
    """
    return logger.bind(name="sync", repo=f"{owner}/{repo}", commit=sha[:7])


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured


def reset_logging() -> None:
    """Reset logging state (primarily for testing)."""
    global _configured
    logger.remove()
    _configured = False
