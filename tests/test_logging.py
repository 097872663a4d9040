"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from loguru import logger

from repoverse.logging import (
    bind_commit,
    bind_repo,
    get_logger,
    is_configured,
    reset_logging,
    setup_logging,
)


def _capture(messages: list[str], **kwargs) -> int:
    return logger.add(lambda msg: messages.append(str(msg)), **kwargs)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default_level(self) -> None:
        """Test default INFO level setup."""
        setup_logging(level="INFO")
        assert is_configured()

    def test_setup_logging_verbose_overrides_level(self) -> None:
        """Test that verbose flag sets DEBUG level."""
        messages: list[str] = []
        setup_logging(level="WARNING", verbose=True)

        handler_id = _capture(messages)
        try:
            logger.bind(name="test").debug("debug message")
            assert any("debug message" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_setup_logging_verbose_takes_precedence(self) -> None:
        """Test verbose takes precedence over quiet when both set."""
        messages: list[str] = []
        setup_logging(level="INFO", verbose=True, quiet=True)

        handler_id = _capture(messages)
        try:
            logger.bind(name="test").debug("debug message")
            assert any("debug message" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        """Test file logging setup."""
        log_file = tmp_path / "repoverse.log"
        setup_logging(level="INFO", log_file=log_file)

        logger.bind(name="test").info("Synced acme/app")
        logger.complete()

        assert log_file.exists()
        assert "Synced acme/app" in log_file.read_text()

    def test_setup_logging_sets_configured_flag(self) -> None:
        """Test that setup_logging sets the configured flag."""
        assert not is_configured()
        setup_logging(level="INFO")
        assert is_configured()


class TestInterceptHandler:
    """Tests for stdlib logging interception."""

    def test_intercept_stdlib_logging(self) -> None:
        """Test that stdlib logging is routed to loguru."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = _capture(messages)
        try:
            logging.getLogger("test_stdlib_intercept").warning("Hello from stdlib")
            assert any("Hello from stdlib" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_httpx_quiet_at_info(self) -> None:
        """httpx request logs are suppressed unless DEBUG."""
        setup_logging(level="INFO")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_httpx_verbose_at_debug(self) -> None:
        """httpx request logs are shown at DEBUG."""
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.DEBUG


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_binds_name(self) -> None:
        """Test that get_logger binds the module name."""
        messages: list[str] = []
        setup_logging(level="DEBUG")

        handler_id = _capture(messages, format="{extra} | {message}")
        try:
            get_logger("repoverse.sync.engine").info("Test message")
            assert any("repoverse.sync.engine" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_keyword_arguments_are_formatted(self) -> None:
        """Messages use brace placeholders filled from keyword arguments."""
        messages: list[str] = []
        handler_id = _capture(messages, format="{message}")
        try:
            get_logger("test").info("Syncing {count} commit(s)", count=4)
            assert messages[0].strip() == "Syncing 4 commit(s)"
        finally:
            logger.remove(handler_id)


class TestContextBinding:
    """Tests for context binding helpers."""

    def test_bind_repo(self) -> None:
        """Test bind_repo adds repo context."""
        messages: list[str] = []
        handler_id = _capture(messages, format="{extra} | {message}")
        try:
            bind_repo("acme", "app").info("Test repo message")
            assert any("acme/app" in msg for msg in messages)
        finally:
            logger.remove(handler_id)

    def test_bind_commit_abbreviates_sha(self) -> None:
        """Test bind_commit adds repo and short commit context."""
        messages: list[str] = []
        handler_id = _capture(messages, format="{extra[repo]} {extra[commit]} | {message}")
        try:
            bind_commit("acme", "models", "1234567890abcdef").info("Cached")
            assert messages[0].startswith("acme/models 1234567 |")
        finally:
            logger.remove(handler_id)


class TestLogLevels:
    """Tests for log level handling."""

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_log_level_accepted(self, level: str) -> None:
        """Test that various log levels are accepted."""
        setup_logging(level=level)  # type: ignore[arg-type]
        assert is_configured()


class TestResetLogging:
    """Tests for reset_logging function."""

    def test_reset_logging_clears_configured(self) -> None:
        """Test that reset_logging clears the configured flag."""
        setup_logging(level="INFO")
        assert is_configured()

        reset_logging()
        assert not is_configured()
