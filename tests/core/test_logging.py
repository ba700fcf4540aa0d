"""Tests for the queue-backed logging setup."""
from __future__ import annotations

import logging
from logging.handlers import QueueHandler

from bizbooks.core.log import LOG_FILE_NAME, get_logger, init_logging, log_context, shutdown_logging


def _queue_handlers() -> list[logging.Handler]:
    return [handler for handler in logging.getLogger().handlers if isinstance(handler, QueueHandler)]


def test_log_dir_receives_records_with_bound_context(tmp_path) -> None:
    init_logging(level="DEBUG", log_dir=tmp_path)
    token = log_context.bind(request_id="req-42", user_id=7)
    try:
        get_logger("bizbooks.ledger").info("Transfer posted")
    finally:
        log_context.reset(token)
    get_logger("bizbooks.ledger").debug("Outside request")
    shutdown_logging()

    lines = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8").splitlines()
    assert "| INFO     | bizbooks.ledger | " in lines[0]
    assert lines[0].endswith("request_id=req-42 user_id=7 Transfer posted")
    assert "| DEBUG    | bizbooks.ledger | " in lines[1]
    assert "req-42" not in lines[1]


def test_records_below_configured_level_are_dropped(tmp_path) -> None:
    init_logging(level="warning", log_dir=tmp_path)
    logger = get_logger("bizbooks.ledger")
    logger.info("quiet")
    logger.warning("loud")
    shutdown_logging()

    contents = (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "quiet" not in contents
    assert "loud" in contents


def test_reinitialising_replaces_the_queue_handler(tmp_path) -> None:
    init_logging(level="INFO")
    init_logging(level="INFO")
    assert len(_queue_handlers()) == 1

    init_logging(level="DEBUG", log_dir=tmp_path)
    assert len(_queue_handlers()) == 1

    shutdown_logging()
    assert _queue_handlers() == []
