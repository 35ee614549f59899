"""Tests for the application logger utility."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger singleton and logging state between tests."""
    import deepflow.utils.logger as logger_mod

    original = logger_mod._logger
    original_handlers = list(logging.getLogger("deepflow").handlers)
    logger_mod._logger = None
    logging.getLogger("deepflow").handlers.clear()

    yield

    for handler in logging.getLogger("deepflow").handlers:
        handler.close()
    logging.getLogger("deepflow").handlers[:] = original_handlers
    logger_mod._logger = original


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from deepflow.utils.logger import get_logger

        logger = get_logger()

    assert (tmp_path / "deepflow.log").exists()
    assert isinstance(logger, logging.Logger)


def test_get_logger_returns_singleton(tmp_path):
    """Repeated calls return the same logger instance."""
    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from deepflow.utils.logger import get_logger

        assert get_logger() is get_logger()


def test_named_logger_is_child(tmp_path):
    """A name gives a child of the application logger."""
    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from deepflow.utils.logger import get_logger

        child = get_logger("focus.engine")

    assert child.name == "deepflow.focus.engine"


def test_child_messages_reach_file(tmp_path):
    """Messages from child loggers appear in the log file."""
    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from deepflow.utils.logger import get_logger

        root = get_logger()
        get_logger("focus.history").warning("hello from test")

    for handler in root.handlers:
        handler.flush()

    content = (tmp_path / "deepflow.log").read_text()
    assert "hello from test" in content
    assert "[deepflow.focus.history]" in content


def test_get_logger_creates_parent_dirs(tmp_path):
    """Logger creates nested directories if they do not exist."""
    nested = tmp_path / "a" / "b" / "c"
    with patch("deepflow.utils.logger.user_log_dir", return_value=str(nested)):
        from deepflow.utils.logger import get_logger

        get_logger()

    assert nested.is_dir()


def test_logger_does_not_propagate(tmp_path):
    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from deepflow.utils.logger import get_logger

        assert get_logger().propagate is False


def test_file_handler_added_alongside_other_handlers(tmp_path):
    """A handler attached by someone else does not stop file logging."""
    foreign = logging.StreamHandler()
    logging.getLogger("deepflow").addHandler(foreign)

    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from deepflow.utils.logger import get_logger

        logger = get_logger()
        logger.info("written to file")

    for handler in logger.handlers:
        handler.flush()

    assert foreign in logger.handlers
    assert "written to file" in (tmp_path / "deepflow.log").read_text()


def test_file_handler_not_duplicated(tmp_path):
    """Re-initializing keeps a single rotating file handler."""
    import logging.handlers

    import deepflow.utils.logger as logger_mod

    with patch("deepflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        logger_mod.get_logger()
        logger_mod._logger = None
        logger = logger_mod.get_logger()

    rotating = [
        h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(rotating) == 1
