import logging
from logging.handlers import RotatingFileHandler

import pytest

from sbcpanel.log import get_logger, init_logging


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_messages_reach_the_log_file(tmp_path):
    log_file = tmp_path / "logs" / "sbc.log"
    init_logging(log_file)
    get_logger().info("Application started")
    for handler in get_logger().handlers:
        handler.flush()
    assert "Application started" in log_file.read_text(encoding="utf-8")


def test_logger_runs_at_debug_level(tmp_path):
    init_logging(tmp_path / "sbc.log")
    assert get_logger().level == logging.DEBUG


def test_file_handler_rotates_at_five_megabytes(tmp_path):
    init_logging(tmp_path / "sbc.log")
    rotating = [h for h in get_logger().handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].maxBytes == 1024 * 1024 * 5
    assert rotating[0].backupCount == 3


def test_reinitialising_does_not_duplicate_handlers(tmp_path):
    init_logging(tmp_path / "sbc.log")
    first = len(get_logger().handlers)
    init_logging(tmp_path / "sbc.log")
    assert len(get_logger().handlers) == first == 2


def test_failure_is_reported_on_stderr(tmp_path, capsys):
    init_logging(tmp_path)  # a directory cannot be opened as a log file
    assert "Log initialization failed" in capsys.readouterr().err
    assert get_logger().handlers == []


def test_get_logger_returns_the_configured_logger(tmp_path):
    before = get_logger()
    init_logging(tmp_path / "sbc.log")
    after = get_logger()
    assert after is before
    assert len(after.handlers) == 2